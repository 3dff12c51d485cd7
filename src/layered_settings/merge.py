from __future__ import annotations

import copy
import logging
import os
from typing import Any, Mapping, Optional, Sequence

from layered_settings.interfaces import ConfigSource

logger = logging.getLogger(__name__)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a new tree with `override` layered on top of `base`.

    Mappings present on both sides merge key by key; any other value (scalar, list, or a
    mapping replacing a non-mapping) is taken from `override` as a whole. Neither input
    is mutated.
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        existing = result.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            result[key] = deep_merge(existing, value)
            continue
        result[key] = copy.deepcopy(value)
    return result


def align_keys(override: Mapping[str, Any], base: Mapping[str, Any]) -> dict[str, Any]:
    """
    Rename keys of `override` to the spelling used in `base` when they differ only in case.

    An exact match always wins over a case-insensitive one.
    """
    folded: dict[str, Any] = {}
    for key in base:
        if isinstance(key, str):
            folded.setdefault(key.lower(), key)

    result: dict[str, Any] = {}
    for key, value in override.items():
        target = key
        if key not in base and isinstance(key, str):
            target = folded.get(key.lower(), key)
        existing = base.get(target)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            value = align_keys(value, existing)
        result[target] = value
    return result


def merge(sources: Sequence[ConfigSource], environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Load every source in order and fold it into one tree. The first failure aborts."""
    env = os.environ if environ is None else environ
    tree: dict[str, Any] = {}
    for source in sources:
        partial = source.load(env)
        if source.fold_case:
            partial = align_keys(partial, tree)
        logger.debug("config.source_merged source=%s keys=%d", source.describe(), len(partial))
        tree = deep_merge(tree, partial)
    return tree

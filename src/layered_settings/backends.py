from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

import yaml

from layered_settings.errors import ConfigError, ParseError

YAML_SUFFIXES = frozenset({"", ".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})


def find_config_file(stem: Path, extensions: Sequence[str]) -> Optional[Tuple[Path, str]]:
    """
    Locate the file for `stem`, e.g. configuration/base.

    The bare stem is tried first, then `stem + ext` for each extension in order.
    Returns the path together with the extension that matched ("" for the bare stem).
    """
    if stem.is_file():
        return stem, ""
    for ext in extensions:
        candidate = stem.with_name(stem.name + ext)
        if candidate.is_file():
            return candidate, ext
    return None


def _parse_yaml(raw: str, source: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        raise ParseError(f"Invalid YAML: {e.problem or e}", source=source, line=line, column=column) from e
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}", source=source) from e


def _parse_json(raw: str, source: str) -> Any:
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg}", source=source, line=e.lineno, column=e.colno) from e


def read_config_file(path: Path, extension: Optional[str] = None) -> dict[str, Any]:
    """
    Parse a YAML or JSON file into a mapping. An empty file is an empty mapping.

    `extension` selects the format; it defaults to the path suffix. A bare file (no
    extension) is read as YAML even when its name contains dots, e.g. `eu.prod`.
    """
    source = str(path)
    suffix = (path.suffix if extension is None else extension).lower()
    if suffix in JSON_SUFFIXES:
        parse = _parse_json
    elif suffix in YAML_SUFFIXES:
        parse = _parse_yaml
    else:
        raise ParseError(f"Unsupported configuration format: {suffix}", source=source)

    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Config file is not valid UTF-8: {e.reason}", source=source) from e
    except OSError as e:
        raise ConfigError(f"Unable to read config file: {e.strerror or e}", source=source) from e

    data = parse(raw, source)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(f"Top-level value must be a mapping, got: {type(data).__name__}", source=source)
    return data

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from dotenv import dotenv_values

from layered_settings.decode import decode
from layered_settings.environment import check_environment, current_environment
from layered_settings.merge import merge
from layered_settings.profile import DEFAULT_PROFILE, ConfigProfile, profile_for
from layered_settings.sources import SourceDescriptor, build_sources, resolve_base_dir

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _effective_environ(
    profile: ConfigProfile,
    base_dir: Union[str, Path, None],
    environ: Optional[Mapping[str, str]],
) -> Mapping[str, str]:
    env = os.environ if environ is None else environ
    if profile.dotenv_path is None:
        return env

    dotenv_path = Path(profile.dotenv_path)
    if not dotenv_path.is_absolute():
        dotenv_path = resolve_base_dir(base_dir) / dotenv_path
    if not dotenv_path.exists():
        logger.debug("config.dotenv_missing path=%s", dotenv_path)
        return env

    # Real environment variables take precedence over .env entries.
    values = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
    logger.debug("config.dotenv_loaded path=%s count=%d", dotenv_path, len(values))
    return {**values, **env}


class LayeredConfigLoader:
    """
    Resolves configuration as base file -> environment file -> environment variables.

    Nothing is cached: every call re-reads the process environment and the files.
    """

    def __init__(
        self,
        profile: ConfigProfile = DEFAULT_PROFILE,
        *,
        base_dir: Union[str, Path, None] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.profile = profile
        self.base_dir = base_dir
        self._environ = environ

    def _environ_snapshot(self) -> Mapping[str, str]:
        return _effective_environ(self.profile, self.base_dir, self._environ)

    def environment(self) -> str:
        return self._environment(self._environ_snapshot())

    def _environment(self, environ: Mapping[str, str]) -> str:
        return check_environment(self.profile, current_environment(self.profile, environ))

    def sources(self) -> list[SourceDescriptor]:
        return build_sources(self.profile, self.environment(), self.base_dir)

    def load_tree(self) -> dict[str, Any]:
        environ = self._environ_snapshot()
        environment = self._environment(environ)
        sources = build_sources(self.profile, environment, self.base_dir)
        return merge(sources, environ)

    def load(self, settings_type: Type[T]) -> T:
        return decode(settings_type, self.load_tree())


def resolve_tree(
    profile: ConfigProfile = DEFAULT_PROFILE,
    *,
    base_dir: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
    return LayeredConfigLoader(profile, base_dir=base_dir, environ=environ).load_tree()


def parse_configuration(
    settings_type: Type[T],
    *,
    profile: Optional[ConfigProfile] = None,
    base_dir: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> T:
    """
    Load settings of type `settings_type` from the layered sources.

    `profile` defaults to `settings_type.config_profile` when the type defines one.
    Raises a `ConfigError` subclass on the first failure; no partial settings are returned.
    """
    if profile is None:
        profile = profile_for(settings_type)
    loader = LayeredConfigLoader(profile, base_dir=base_dir, environ=environ)
    return loader.load(settings_type)

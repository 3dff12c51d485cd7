from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Mapping, Optional

from layered_settings.errors import UnsupportedEnvironmentError
from layered_settings.profile import DEFAULT_PROFILE, ConfigProfile

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """The standard deployment stages. Profiles may accept other tokens too."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"

    def as_str(self) -> str:
        return self.value


STANDARD_ENVIRONMENTS = tuple(env.value for env in Environment)


def normalize_environment(value: str) -> str:
    return value.strip().lower()


def current_environment(
    profile: ConfigProfile = DEFAULT_PROFILE,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Return the active environment name.

    Reads `profile.environment_variable`; an unset or blank value falls back to
    `profile.default_environment`. The result is always stripped and lower-cased so the
    name that selects the environment file is the name that gets logged.
    """
    env = os.environ if environ is None else environ
    raw = env.get(profile.environment_variable)
    if raw is None or not raw.strip():
        raw = profile.default_environment
    environment = normalize_environment(raw)
    logger.info(
        "config.environment_detected variable=%s environment=%s",
        profile.environment_variable,
        environment,
    )
    return environment


def validate_environment_name(environment: str) -> str:
    """Reject names that would resolve outside the configuration directory."""
    separators = {"/", "\\", os.sep, os.altsep} - {None}
    if environment in (".", ".."):
        raise UnsupportedEnvironmentError(environment, reason="relative path components are not allowed")
    if any(sep in environment for sep in separators) or "\x00" in environment:
        raise UnsupportedEnvironmentError(environment, reason="path separators and NUL bytes are not allowed")
    return environment


def check_environment(profile: ConfigProfile, environment: str) -> str:
    validate_environment_name(environment)
    if profile.allowed_environments is None:
        return environment
    allowed = tuple(normalize_environment(name) for name in profile.allowed_environments)
    if environment not in allowed:
        raise UnsupportedEnvironmentError(environment, allowed)
    return environment

"""Layered configuration: base file, environment file, then environment variable overrides."""

from layered_settings.decode import decode
from layered_settings.environment import (
    STANDARD_ENVIRONMENTS,
    Environment,
    check_environment,
    current_environment,
    validate_environment_name,
)
from layered_settings.errors import (
    ConfigError,
    DecodeError,
    EnvironmentResolutionError,
    ParseError,
    SourceNotFoundError,
    UnsupportedEnvironmentError,
)
from layered_settings.loader import LayeredConfigLoader, parse_configuration, resolve_tree
from layered_settings.merge import align_keys, deep_merge, merge
from layered_settings.profile import DEFAULT_PROFILE, ConfigProfile, profile_for
from layered_settings.sources import EnvironmentSource, FileSource, build_sources

__all__ = [
    "ConfigError",
    "ConfigProfile",
    "DEFAULT_PROFILE",
    "DecodeError",
    "Environment",
    "EnvironmentResolutionError",
    "EnvironmentSource",
    "FileSource",
    "LayeredConfigLoader",
    "ParseError",
    "STANDARD_ENVIRONMENTS",
    "SourceNotFoundError",
    "UnsupportedEnvironmentError",
    "align_keys",
    "build_sources",
    "check_environment",
    "current_environment",
    "decode",
    "deep_merge",
    "merge",
    "parse_configuration",
    "profile_for",
    "resolve_tree",
    "validate_environment_name",
]

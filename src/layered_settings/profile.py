from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class ConfigProfile:
    """
    Knobs governing how one settings type is resolved.

    Attach an instance to a settings class as `config_profile` to override the defaults
    for that type; every resolution of the type then uses the same profile.
    """

    # Environment variable overrides, e.g. APP__APPLICATION__PORT
    prefix: str = "APP"
    separator: str = "__"

    # Files live in <base_dir>/<configuration_dir>/{base,<environment>}.<ext>
    configuration_dir: str = "configuration"
    file_extensions: Tuple[str, ...] = (".yaml", ".yml", ".json")

    # Environment detection
    default_environment: str = "dev"
    environment_variable: str = "APP_ENVIRONMENT"
    allowed_environments: Optional[Tuple[str, ...]] = None

    # Whether <environment>.<ext> must exist
    environment_file_required: bool = True

    # Split override values into lists (all keys, or only `list_keys` when given)
    list_separator: Optional[str] = None
    list_keys: Tuple[str, ...] = ()

    dotenv_path: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("prefix", "separator", "configuration_dir", "default_environment", "environment_variable"):
            if not getattr(self, name):
                raise ValueError(f"ConfigProfile.{name} must not be empty")
        if self.list_separator == "":
            raise ValueError("ConfigProfile.list_separator must not be empty")
        for ext in self.file_extensions:
            if not ext.startswith("."):
                raise ValueError(f"File extensions must start with '.', got: {ext!r}")


DEFAULT_PROFILE = ConfigProfile()


def profile_for(settings_type: type) -> ConfigProfile:
    """Return the profile attached to `settings_type`, or the default one."""
    profile = getattr(settings_type, "config_profile", None)
    if profile is None:
        return DEFAULT_PROFILE
    if not isinstance(profile, ConfigProfile):
        raise TypeError(
            f"{settings_type.__name__}.config_profile must be a ConfigProfile, got: {type(profile).__name__}"
        )
    return profile

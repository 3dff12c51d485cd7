from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Mapping, MutableMapping, Optional, Sequence, Tuple, Union

from layered_settings.backends import find_config_file, read_config_file
from layered_settings.environment import validate_environment_name
from layered_settings.errors import EnvironmentResolutionError, ParseError, SourceNotFoundError
from layered_settings.profile import ConfigProfile

logger = logging.getLogger(__name__)

BASE_FILE_NAME = "base"


@dataclass(frozen=True, slots=True)
class FileSource:
    fold_case: ClassVar[bool] = False

    stem: Path
    required: bool = True
    extensions: Tuple[str, ...] = (".yaml", ".yml", ".json")

    def describe(self) -> str:
        kind = "required" if self.required else "optional"
        return f"file:{self.stem} ({kind})"

    def locate(self) -> Optional[Tuple[Path, str]]:
        return find_config_file(self.stem, self.extensions)

    def load(self, environ: Mapping[str, str]) -> dict[str, Any]:
        found = self.locate()
        if found is None:
            if self.required:
                tried = ", ".join(self.stem.name + ext for ext in ("", *self.extensions))
                raise SourceNotFoundError(
                    f"Config file not found: {self.stem} (tried {tried})",
                    source=self.describe(),
                )
            logger.debug("config.source_skipped source=%s", self.describe())
            return {}
        path, extension = found
        return read_config_file(path, extension)


def _env_var_name_to_segments(name: str, marker_len: int, separator: str) -> Sequence[str]:
    remainder = name[marker_len:]
    parts = remainder.split(separator)
    if not all(parts):
        return []
    return [p.lower() for p in parts]


def _set_path(tree: MutableMapping[str, Any], segments: Sequence[str], value: Any, *, var_name: str, source: str) -> None:
    cur = tree
    for segment in segments[:-1]:
        next_value = cur.setdefault(segment, {})
        if not isinstance(next_value, dict):
            raise ParseError(
                f"Environment variable {var_name} nests under '{segment}', which another variable sets to a value",
                source=source,
            )
        cur = next_value
    leaf = segments[-1]
    if isinstance(cur.get(leaf), dict):
        raise ParseError(
            f"Environment variable {var_name} sets '{'.'.join(segments)}', which other variables use as a mapping",
            source=source,
        )
    cur[leaf] = value


@dataclass(frozen=True, slots=True)
class EnvironmentSource:
    """
    Overrides taken from process environment variables.

    A variable matches when its name starts with `prefix + separator`, compared
    case-insensitively. The rest of the name is lower-cased and split on `separator`
    into a key path, so APP__APPLICATION__PORT sets `application.port`. When merged,
    each segment is matched case-insensitively against keys the files already define,
    so APP__POOL__MAXCONNECTIONS overrides `pool.maxConnections`. Values are kept as
    strings; type coercion happens when the tree is decoded.
    """

    fold_case: ClassVar[bool] = True

    prefix: str = "APP"
    separator: str = "__"
    list_separator: Optional[str] = None
    list_keys: Tuple[str, ...] = ()

    def describe(self) -> str:
        return f"env:{self.prefix}{self.separator}*"

    def _split_value(self, dotted: str, value: str) -> Union[str, list[str]]:
        if self.list_separator is None:
            return value
        if self.list_keys and dotted not in self.list_keys:
            return value
        if not value:
            return []
        return [item.strip() for item in value.split(self.list_separator)]

    def load(self, environ: Mapping[str, str]) -> dict[str, Any]:
        marker = (self.prefix + self.separator).lower()
        source = self.describe()
        tree: dict[str, Any] = {}
        for name in sorted(environ):
            if not name.lower().startswith(marker):
                continue
            segments = _env_var_name_to_segments(name, len(marker), self.separator)
            if not segments:
                logger.debug("config.env_var_ignored name=%s", name)
                continue
            dotted = ".".join(segments)
            _set_path(tree, segments, self._split_value(dotted, environ[name]), var_name=name, source=source)
        return tree


SourceDescriptor = Union[FileSource, EnvironmentSource]


def resolve_base_dir(base_dir: Union[str, Path, None] = None) -> Path:
    try:
        if base_dir is None:
            return Path.cwd()
        return Path(base_dir).absolute()
    except OSError as e:
        raise EnvironmentResolutionError(f"Failed to determine the current directory: {e}") from e


def build_sources(
    profile: ConfigProfile,
    environment: str,
    base_dir: Union[str, Path, None] = None,
) -> list[SourceDescriptor]:
    """Return the source chain for `environment`, lowest precedence first."""
    validate_environment_name(environment)
    configuration_directory = resolve_base_dir(base_dir) / profile.configuration_dir
    return [
        FileSource(
            configuration_directory / BASE_FILE_NAME,
            required=True,
            extensions=profile.file_extensions,
        ),
        FileSource(
            configuration_directory / environment,
            required=profile.environment_file_required,
            extensions=profile.file_extensions,
        ),
        EnvironmentSource(
            prefix=profile.prefix,
            separator=profile.separator,
            list_separator=profile.list_separator,
            list_keys=profile.list_keys,
        ),
    ]

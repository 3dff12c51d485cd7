from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, Type, TypeVar

T = TypeVar("T")


class ConfigSource(Protocol):
    """One layer of the source chain. Later layers take precedence over earlier ones."""

    # When true, keys of this layer match existing keys regardless of case.
    fold_case: bool

    def describe(self) -> str:
        """Return a short label used in logs and error messages."""

    def load(self, environ: Mapping[str, str]) -> dict[str, Any]:
        """
        Return this layer's partial tree.

        Implementations raise `SourceNotFoundError` when a required layer is absent and
        return an empty mapping when an optional one is.
        """


class ConfigLoader(Protocol):
    def environment(self) -> str:
        """Return the detected environment name."""

    def sources(self) -> Sequence[ConfigSource]:
        """Return the ordered source chain, lowest precedence first."""

    def load_tree(self) -> dict[str, Any]:
        """Return the merged, undecoded configuration tree."""

    def load(self, settings_type: Type[T]) -> T:
        """Resolve and decode the configuration into `settings_type`."""

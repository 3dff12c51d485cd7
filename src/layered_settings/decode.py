from __future__ import annotations

from typing import Any, Mapping, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from layered_settings.errors import DecodeError

T = TypeVar("T")


def _dotted(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def decode(settings_type: Type[T], tree: Mapping[str, Any]) -> T:
    """
    Validate the merged tree into `settings_type`.

    Anything pydantic can validate works as a target: models, dataclasses, TypedDicts.
    Lax coercion applies, so "80" fills an int field and "true" a bool field.
    """
    try:
        adapter = TypeAdapter(settings_type)
        return adapter.validate_python(dict(tree))
    except ValidationError as exc:
        errors = [(_dotted(err["loc"]), err["msg"]) for err in exc.errors()]
        details = "; ".join(f"{path}: {msg}" for path, msg in errors)
        name = getattr(settings_type, "__name__", repr(settings_type))
        raise DecodeError(
            f"Failed to decode configuration into {name}: {details}",
            field_path=errors[0][0] if errors else "<root>",
            errors=errors,
        ) from exc

"""Input helpers for exposing dataclass-typed operations as MCP tools."""

from __future__ import annotations

import inspect
import types
from collections.abc import Mapping
from dataclasses import MISSING, fields, is_dataclass
from typing import Any, TypeVar, Union, cast, get_args, get_origin, get_type_hints

PayloadT = TypeVar("PayloadT")


def normalize_optional(annotation: Any) -> Any:
    """Unwrap `T | None` to `T`; other annotations pass through."""

    origin = get_origin(annotation)
    if origin is types.UnionType or origin is Union:
        non_none_args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(non_none_args) == 1:
            return non_none_args[0]
    return annotation


def coerce_scalar(annotation: Any, value: object) -> object:
    normalized = normalize_optional(annotation)
    if value is None:
        return None
    if normalized is str:
        return str(value)
    if normalized is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    return value


def coerce_input_payload(payload_type: type[PayloadT], raw_input: object) -> PayloadT:
    """Build a typed input dataclass from an untyped tool-call mapping."""

    if raw_input is None:
        data: dict[str, object] = {}
    elif isinstance(raw_input, Mapping):
        data = {
            str(key): item for key, item in cast("Mapping[object, object]", raw_input).items()
        }
    else:
        raise TypeError(f"Tool input must be an object, got {type(raw_input).__name__}")

    hints = get_type_hints(payload_type)
    kwargs: dict[str, object] = {}
    for field in fields(cast("Any", payload_type)):
        if field.name in data:
            kwargs[field.name] = coerce_scalar(hints[field.name], data[field.name])
        elif field.default is MISSING:
            raise TypeError(f"Missing required field '{field.name}'")

    return payload_type(**kwargs)


def signature_from_dataclass(payload_type: type[object]) -> inspect.Signature:
    """Callable signature matching dataclass fields, used for FastMCP schemas."""

    if not is_dataclass(payload_type):
        return inspect.Signature(parameters=[])

    hints = get_type_hints(payload_type)
    parameters = [
        inspect.Parameter(
            name=field.name,
            kind=inspect.Parameter.KEYWORD_ONLY,
            default=inspect.Parameter.empty if field.default is MISSING else field.default,
            annotation=hints.get(field.name, field.type),
        )
        for field in fields(payload_type)
    ]
    return inspect.Signature(parameters=parameters)

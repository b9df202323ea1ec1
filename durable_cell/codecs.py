from __future__ import annotations

from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import DecodeError, EncodeError
from .interfaces import Codec

T = TypeVar("T")


class JsonCodec(Codec[T]):
    """
    JSON codec driven by a pydantic TypeAdapter, so any type pydantic can
    validate (models, dataclasses, TypedDicts, containers, scalars) round-trips.

    Values that do not match `value_type` are rejected on encode rather than
    serialized with a warning.
    """

    def __init__(self, value_type: Any = Any, *, indent: int | None = 2):
        self._value_type = value_type
        self._adapter: TypeAdapter[T] = TypeAdapter(value_type)
        self._indent = indent

    @property
    def value_type(self) -> Any:
        return self._value_type

    def encode(self, value: T) -> bytes:
        try:
            data = self._adapter.dump_json(value, indent=self._indent, warnings="error")
        except (ValueError, TypeError) as exc:
            raise EncodeError(f"cannot encode {type(value).__name__} as JSON: {exc}") from exc
        return data + b"\n" if self._indent is not None else data

    def decode(self, data: bytes) -> T:
        try:
            return self._adapter.validate_json(data)
        except ValidationError as exc:
            raise DecodeError(f"stored JSON does not match {self._value_type!r}: {exc}") from exc

    def __repr__(self) -> str:
        return f"JsonCodec({self._value_type!r}, indent={self._indent!r})"

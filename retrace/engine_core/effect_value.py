"""
Effect Value - Type-erased wrapper around a recorded result.

A value is stored as plain JSON data so the effect tree can be written out
as a document and read back. Decoding asks for a concrete Python type
again; pydantic validates the stored JSON against that type in strict
mode, which is the only type check that happens at replay time.

    value = EffectValue.encode(["Drew Mox Awesome"])
    value.decode(list[str])   # ["Drew Mox Awesome"]
    value.decode(int)         # raises DecodeError
"""

from __future__ import annotations
import math
from typing import Any

from pydantic import ConfigDict, JsonValue, RootModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from .errors import DecodeError, EncodeError


_adapters: dict[Any, TypeAdapter] = {}


def type_adapter(tp: Any) -> TypeAdapter:
    """Get a (cached) TypeAdapter for a result type."""
    try:
        adapter = _adapters.get(tp)
    except TypeError:
        # Unhashable type expressions are rare; build them every time
        return TypeAdapter(tp)
    if adapter is None:
        adapter = _adapters[tp] = TypeAdapter(tp)
    return adapter


def type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


class EffectValue(RootModel[JsonValue]):
    """
    Serialized result of one completed call.

    Serializes transparently: inside an effect tree document the result
    appears as its own JSON, without a wrapper object.
    """
    model_config = ConfigDict(frozen=True)

    @classmethod
    def encode(cls, value: Any) -> EffectValue:
        """
        Serialize a result value.

        Raises EncodeError if the value has no JSON representation. That
        includes NaN and infinities, which JSON mode would turn into null.
        """
        adapter = type_adapter(Any)
        try:
            serialized = adapter.dump_python(value, mode="json")
            plain = adapter.dump_python(value)
        except PydanticSerializationError as exc:
            raise EncodeError(
                f"Cannot serialize result of type {type(value).__name__}: {exc}"
            ) from exc
        if _has_non_finite(plain):
            raise EncodeError(
                f"Cannot serialize result of type {type(value).__name__}: "
                "contains a non-finite float"
            )
        return cls(serialized)

    def decode(self, returns: Any = Any) -> Any:
        """
        Decode the stored value as `returns`.

        Raises DecodeError if the stored JSON does not have the shape of
        `returns`. Decoding as Any hands back the raw JSON data.
        """
        try:
            return type_adapter(returns).validate_json(to_json(self.root), strict=True)
        except ValidationError as exc:
            raise DecodeError(
                f"Recorded value {self.root!r} does not decode as {type_name(returns)}"
            ) from exc


def _has_non_finite(data: Any) -> bool:
    if isinstance(data, float):
        return not math.isfinite(data)
    if isinstance(data, dict):
        return any(_has_non_finite(item) for item in data.values())
    if isinstance(data, (list, tuple, set, frozenset)):
        return any(_has_non_finite(item) for item in data)
    return False

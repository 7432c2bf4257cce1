"""
Optional-patch values for partial-update payloads.

A PATCH request has to tell three situations apart for every field:

  - the key is missing                      -> leave the stored value alone
  - the key carries a value                 -> overwrite the stored value
  - the key carries an empty / null value   -> overwrite with the empty value

`Patch[T]` keeps "presence" and "value" side by side, so `Patch.of("")` (set to
empty) never collapses into `Patch.unset()` (absent).

Decoding through pydantic:
    class UserUpdate(BaseModel):
        name: Patch[str] = Patch.unset()

    UserUpdate.model_validate_json('{}')               # name -> Patch.unset()
    UserUpdate.model_validate_json('{"name": "Bo"}')   # name -> Patch.of("Bo")
    UserUpdate.model_validate_json('{"name": null}')   # name -> Patch.of("")

Explicit `null` decodes to the zero value of T and is still marked as set.
Encoding is lossy on purpose: an unset patch serializes to `null`, which decodes
back as `Patch.of(<zero>)`.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

T = TypeVar("T")

# zero values used when a key is present with an explicit null
_ZERO_VALUES: dict[Any, Any] = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
    bytes: b"",
}


def zero_value(tp: Any) -> Any:
    """Return the zero value for `tp` (None for types without one)."""
    return _ZERO_VALUES.get(tp)


class Patch(Generic[T]):
    """
    Either unset (field absent) or set to a value. Immutable and hashable.

    Use the constructors instead of building instances by hand:
        Patch.unset()
        Patch.of(value)
    """

    __slots__ = ("_value", "_is_set")

    def __init__(self, value: T | None = None, is_set: bool = False):
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_is_set", is_set)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Patch is immutable, cannot set {name!r}")

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def is_set(self) -> bool:
        return self._is_set

    @classmethod
    def unset(cls) -> Patch[T]:
        return cls()

    @classmethod
    def of(cls, value: T) -> Patch[T]:
        return cls(value=value, is_set=True)

    set_value = of

    def get(self, default: Any = None) -> Any:
        """Return the carried value, or `default` when unset."""
        return self.value if self.is_set else default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Patch):
            return NotImplemented
        return self._is_set == other._is_set and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._is_set, self._value))

    # field defaults are deep-copied per model instance
    def __reduce__(self):
        return type(self), (self._value, self._is_set)

    def __copy__(self) -> Patch[T]:
        return self

    def __deepcopy__(self, memo: dict) -> Patch[T]:
        return self

    def __repr__(self) -> str:
        if self.is_set:
            return f"Patch.of({self.value!r})"
        return "Patch.unset()"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        args = get_args(source_type)
        item_type = args[0] if args else Any
        zero = zero_value(item_type)

        def decode(raw: Any) -> Patch[Any]:
            # reaching this validator means the key was present
            return cls.of(zero if raw is None else raw)

        from_raw = core_schema.no_info_after_validator_function(
            decode,
            core_schema.nullable_schema(handler.generate_schema(item_type)),
        )

        return core_schema.json_or_python_schema(
            json_schema=from_raw,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_raw]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(encode_patch),
        )


def encode_patch(patch: Patch[Any]) -> Any:
    """Serialize a patch: the value when set, None (JSON null) when unset."""
    if not patch.is_set:
        return None
    return patch.value

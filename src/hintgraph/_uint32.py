"""Unsigned 32-bit integer arithmetic."""

from typing import Annotated, Any

from pydantic import Field, TypeAdapter, ValidationError

from ._errors import InvalidValueError

UINT32_MAX = 0xFFFF_FFFF
UINT32_MODULUS = UINT32_MAX + 1

UInt32 = Annotated[int, Field(strict=True, ge=0, le=UINT32_MAX)]

_UINT32_ADAPTER: TypeAdapter[int] = TypeAdapter(UInt32)


def validate_uint32(value: Any, *, what: str = "value") -> int:
    """Validate that ``value`` is an int in ``[0, 2**32)``.

    Raises:
        InvalidValueError: If the value is not an unsigned 32-bit integer.

    """
    try:
        return _UINT32_ADAPTER.validate_python(value)
    except ValidationError as e:
        msg = f"Invalid {what} {value!r}: expected an integer in [0, {UINT32_MAX}]"
        raise InvalidValueError(msg) from e


def truncate(value: int) -> int:
    """Keep the low 32 bits of ``value``."""
    return value & UINT32_MAX


def wrapping_add(a: int, b: int) -> int:
    return (a + b) & UINT32_MAX


def wrapping_mul(a: int, b: int) -> int:
    return (a * b) & UINT32_MAX

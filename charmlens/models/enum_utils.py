"""Enum helpers for charmlens models."""

from typing import TypeVar, Union

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Models use `use_enum_values`, so fields usually hold plain strings already;
    module-level constants and rule tables hold enum members.

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)

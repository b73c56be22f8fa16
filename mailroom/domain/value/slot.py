"""Three-state memo slot.

A slot distinguishes "never computed" from "computed, and the answer was
empty". Fallback selection depends on that distinction, so ``None`` can't
be used as the "not computed" marker.
"""

from typing import Generic, TypeVar

T = TypeVar("T")


class _Unset:
    """Marker for a slot that has not been populated."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


class Slot(Generic[T]):
    """Memo cell holding ``Unset``, an empty value, or a value.

    Empty is whatever the populating code stores to mean "nothing there"
    (an empty dict, ``None``); the slot itself only tracks set/unset.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: T | _Unset = UNSET

    @property
    def is_set(self) -> bool:
        return self._value is not UNSET

    def get(self) -> T:
        """Return the stored value.

        Raises:
            LookupError: If the slot is unset
        """
        if self._value is UNSET:
            raise LookupError("slot is unset")
        return self._value  # type: ignore[return-value]

    def peek(self, default: T | None = None) -> T | None:
        """Return the stored value, or ``default`` when unset."""
        if self._value is UNSET:
            return default
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> T:
        self._value = value
        return value

    def clear(self) -> None:
        self._value = UNSET

    def __repr__(self) -> str:
        return f"Slot({self._value!r})"

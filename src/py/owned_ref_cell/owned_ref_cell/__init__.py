"""Runtime-checked mutable cell with owned borrows.

Accessors returned by ``OwnedRefCell`` hold their borrow until released, not
until the end of a scope; keep them only as long as you need the value.
OwnedRef.get_value() returns the held object itself; treat it as immutable
unless you currently hold an OwnedRefMut.
"""

from .borrow_state import (
    EXCLUSIVE,
    FREE,
    BorrowState,
    BorrowStateError,
    BorrowStatus,
    Exclusive,
    Free,
    Shared,
)
from .core import (
    AccessorReleasedError,
    BorrowConflictError,
    CrossThreadAccessError,
    IAccessor,
    OwnedRef,
    OwnedRefCell,
    OwnedRefMut,
)

__all__ = [
    "OwnedRefCell",
    "OwnedRef",
    "OwnedRefMut",
    "IAccessor",
    "BorrowState",
    "BorrowStatus",
    "Free",
    "Shared",
    "Exclusive",
    "FREE",
    "EXCLUSIVE",
    "BorrowConflictError",
    "BorrowStateError",
    "AccessorReleasedError",
    "CrossThreadAccessError",
]

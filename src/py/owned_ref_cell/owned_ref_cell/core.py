import copy
import logging
import threading
from types import TracebackType
from typing import Any, Generic, Optional, TypeVar
from typing_extensions import Self, override

from .borrow_state import BorrowState, BorrowStateError, BorrowStatus, Exclusive

T = TypeVar("T")


class BorrowConflictError(Exception):
    """Signals a borrow that cannot be granted while other accessors are held."""

    def __init__(self, requested: str, status: BorrowStatus) -> None:
        super().__init__(f"cannot borrow as {requested}: cell is {status!r}")
        self.requested = requested
        self.status = status


class AccessorReleasedError(Exception):
    """Signals use of an accessor after it has been released."""


class CrossThreadAccessError(Exception):
    """Signals a borrow attempted from a thread other than the cell's creator."""


class _Slot(Generic[T]):
    # Co-owned by the cell and every live accessor.
    def __init__(self, value: T) -> None:
        self.value = value
        self.state = BorrowState()
        self.owner = threading.get_ident()

    def check_thread(self) -> None:
        current = threading.get_ident()
        if current != self.owner:
            raise CrossThreadAccessError(
                f"cell created on thread {self.owner} borrowed from thread {current}"
            )


class IAccessor(Generic[T]):
    """
    An owned borrow of an ``OwnedRefCell``.

    The borrow is held until ``release()`` is called, the accessor is used as a
    context manager and the block exits, or the accessor is garbage collected.
    """

    def get_value(self) -> T:
        """
        Get the borrowed value.
        """
        raise NotImplementedError

    def release(self) -> None:
        """
        Give the borrow back to the cell. Calling this more than once is a no-op.
        """
        raise NotImplementedError

    @property
    def released(self) -> bool:
        raise NotImplementedError

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()

    def __del__(self) -> None:
        try:
            self.release()
        except BorrowStateError:
            logging.getLogger(__name__).exception(
                "Accessor finalizer found the borrow state out of sync."
            )
            raise


class OwnedRef(IAccessor[T], Generic[T]):
    def __init__(self, slot: _Slot[T]) -> None:
        """
        Private constructor. A shared borrow on ``slot`` must already be held.
        """
        self._slot: Optional[_Slot[T]] = slot

    def _live_slot(self) -> _Slot[T]:
        if self._slot is None:
            raise AccessorReleasedError("shared accessor used after release")
        return self._slot

    @override
    def get_value(self) -> T:
        return self._live_slot().value

    @override
    def release(self) -> None:
        slot, self._slot = self._slot, None
        if slot is not None:
            slot.state.release_shared()

    @property
    @override
    def released(self) -> bool:
        return self._slot is None

    def clone(self) -> "OwnedRef[T]":
        """
        Take another shared borrow of the same cell without going through it.
        """
        slot = self._live_slot()
        slot.check_thread()
        if not slot.state.try_acquire_shared():
            raise BorrowStateError(
                f"shared accessor alive while cell is {slot.state.status!r}"
            )
        return OwnedRef(slot)

    def __copy__(self) -> "OwnedRef[T]":
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> "OwnedRef[T]":
        raise TypeError("OwnedRef cannot be deep-copied; use clone()")

    def __repr__(self) -> str:
        if self._slot is None:
            return "OwnedRef(<released>)"
        return f"OwnedRef({self._slot.value!r})"


class OwnedRefMut(IAccessor[T], Generic[T]):
    def __init__(self, slot: _Slot[T]) -> None:
        """
        Private constructor. The exclusive borrow on ``slot`` must already be held.
        """
        self._slot: Optional[_Slot[T]] = slot

    def _live_slot(self) -> _Slot[T]:
        if self._slot is None:
            raise AccessorReleasedError("exclusive accessor used after release")
        return self._slot

    @override
    def get_value(self) -> T:
        return self._live_slot().value

    def set_value(self, value: T) -> None:
        self._live_slot().value = value

    @override
    def release(self) -> None:
        slot, self._slot = self._slot, None
        if slot is not None:
            slot.state.release_exclusive()

    @property
    @override
    def released(self) -> bool:
        return self._slot is None

    def __copy__(self) -> "OwnedRefMut[T]":
        raise TypeError("OwnedRefMut is unique and cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> "OwnedRefMut[T]":
        raise TypeError("OwnedRefMut is unique and cannot be copied")

    def __repr__(self) -> str:
        if self._slot is None:
            return "OwnedRefMut(<released>)"
        return f"OwnedRefMut({self._slot.value!r})"


class OwnedRefCell(Generic[T]):
    """
    A mutable cell handing out owned, runtime-checked borrows.

    Any number of ``OwnedRef`` accessors, or exactly one ``OwnedRefMut``, may be
    outstanding at a time. Accessors share ownership of the value with the
    cell, so they stay usable after the cell itself is gone.

    Not thread-safe: borrows may only be taken on the thread that created the
    cell.

        cell = OwnedRefCell(42)
        reader = cell.borrow()
        assert cell.try_borrow_mut() is None
        reader.release()
        with cell.borrow_mut() as writer:
            writer.set_value(45)
    """

    def __init__(self, value: T):
        self._slot: _Slot[T] = _Slot(value)

    def borrow(self) -> OwnedRef[T]:
        """
        Borrow the value for reading.

        Raises BorrowConflictError if an exclusive accessor is outstanding.
        """
        ref = self.try_borrow()
        if ref is None:
            raise self._conflict("shared")
        return ref

    def try_borrow(self) -> Optional[OwnedRef[T]]:
        self._slot.check_thread()
        if not self._slot.state.try_acquire_shared():
            return None
        return OwnedRef(self._slot)

    def borrow_mut(self) -> OwnedRefMut[T]:
        """
        Borrow the value for reading and writing.

        Raises BorrowConflictError if any accessor is outstanding.
        """
        ref = self.try_borrow_mut()
        if ref is None:
            raise self._conflict("exclusive")
        return ref

    def try_borrow_mut(self) -> Optional[OwnedRefMut[T]]:
        self._slot.check_thread()
        if not self._slot.state.try_acquire_exclusive():
            return None
        return OwnedRefMut(self._slot)

    def borrow_state(self) -> BorrowStatus:
        return self._slot.state.status

    def replace(self, value: T) -> T:
        """
        Swap in a new value and return the old one.
        """
        with self.borrow_mut() as writer:
            old = writer.get_value()
            writer.set_value(value)
        return old

    def __deepcopy__(self, memo: dict[int, Any]) -> "OwnedRefCell[T]":
        """
        Copy the value into a new, unborrowed cell.

        Raises BorrowConflictError if an exclusive accessor is outstanding.
        """
        with self.borrow() as reader:
            twin = self.__class__.__new__(self.__class__)
            memo[id(self)] = twin
            twin._slot = _Slot(copy.deepcopy(reader.get_value(), memo))
        return twin

    def _conflict(self, requested: str) -> BorrowConflictError:
        status = self._slot.state.status
        logging.getLogger(__name__).debug(
            "Refused %s borrow of cell in state %r.", requested, status
        )
        return BorrowConflictError(requested, status)

    def __repr__(self) -> str:
        if isinstance(self._slot.state.status, Exclusive):
            return "OwnedRefCell(<borrowed>)"
        return f"OwnedRefCell({self._slot.value!r})"

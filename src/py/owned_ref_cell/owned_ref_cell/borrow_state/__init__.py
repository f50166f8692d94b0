from typing import Union

# Flag values: 0 is free, a positive count is the number of shared holders.
_UNUSED = 0
_WRITING = -1


class BorrowStateError(Exception):
    """Signals that a release did not match an outstanding acquisition.

    This can only happen if accessor bookkeeping is broken, so it is never
    recoverable.
    """


class Free:
    def __eq__(self, other: object) -> bool:
        return isinstance(other, Free)

    def __hash__(self) -> int:
        return hash(Free)

    def __repr__(self) -> str:
        return "Free"


class Shared:
    def __init__(self, count: int):
        if count < 1:
            raise ValueError(f"shared count must be at least 1, got {count}")
        self._count = count

    @property
    def count(self) -> int:
        return self._count

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Shared) and other._count == self._count

    def __hash__(self) -> int:
        return hash((Shared, self._count))

    def __repr__(self) -> str:
        return f"Shared({self._count})"


class Exclusive:
    def __eq__(self, other: object) -> bool:
        return isinstance(other, Exclusive)

    def __hash__(self) -> int:
        return hash(Exclusive)

    def __repr__(self) -> str:
        return "Exclusive"


FREE = Free()
EXCLUSIVE = Exclusive()

BorrowStatus = Union[Free, Shared, Exclusive]


class BorrowState:
    """Counter deciding whether a new borrow may be granted.

    Only the four transition methods below touch the flag. Nothing here is
    thread-safe; a state belongs to a single thread of execution.
    """

    def __init__(self) -> None:
        self._flag = _UNUSED

    @property
    def status(self) -> BorrowStatus:
        if self._flag == _UNUSED:
            return FREE
        if self._flag == _WRITING:
            return EXCLUSIVE
        return Shared(self._flag)

    def try_acquire_shared(self) -> bool:
        if self._flag == _WRITING:
            return False
        self._flag += 1
        return True

    def try_acquire_exclusive(self) -> bool:
        if self._flag != _UNUSED:
            return False
        self._flag = _WRITING
        return True

    def release_shared(self) -> None:
        if self._flag < 1:
            raise BorrowStateError(
                f"release of a shared borrow while {self.status!r}"
            )
        self._flag -= 1

    def release_exclusive(self) -> None:
        if self._flag != _WRITING:
            raise BorrowStateError(
                f"release of an exclusive borrow while {self.status!r}"
            )
        self._flag = _UNUSED

    def __repr__(self) -> str:
        return f"BorrowState({self.status!r})"

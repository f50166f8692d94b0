import pytest

from owned_ref_cell.owned_ref_cell import (
    EXCLUSIVE,
    FREE,
    BorrowState,
    BorrowStateError,
    Exclusive,
    Free,
    Shared,
)


def test_new_state_is_free() -> None:
    state = BorrowState()
    assert state.status == FREE
    assert isinstance(state.status, Free)


def test_shared_count_goes_up_and_down() -> None:
    state = BorrowState()
    assert state.try_acquire_shared()
    assert state.status == Shared(1)
    assert state.try_acquire_shared()
    assert state.status == Shared(2)

    state.release_shared()
    assert state.status == Shared(1)
    state.release_shared()
    assert state.status == FREE


def test_exclusive_round_trip() -> None:
    state = BorrowState()
    assert state.try_acquire_exclusive()
    assert state.status == EXCLUSIVE
    assert isinstance(state.status, Exclusive)
    state.release_exclusive()
    assert state.status == FREE


def test_shared_refused_while_exclusive() -> None:
    state = BorrowState()
    assert state.try_acquire_exclusive()
    assert not state.try_acquire_shared()
    assert state.status == EXCLUSIVE


def test_exclusive_refused_while_held() -> None:
    state = BorrowState()
    assert state.try_acquire_shared()
    assert not state.try_acquire_exclusive()
    assert state.status == Shared(1)

    state.release_shared()
    assert state.try_acquire_exclusive()
    assert not state.try_acquire_exclusive()
    assert state.status == EXCLUSIVE


def test_release_without_acquire_is_fatal() -> None:
    state = BorrowState()
    with pytest.raises(BorrowStateError, match="shared"):
        state.release_shared()
    with pytest.raises(BorrowStateError, match="exclusive"):
        state.release_exclusive()
    assert state.status == FREE


def test_release_of_wrong_kind_is_fatal() -> None:
    state = BorrowState()
    assert state.try_acquire_exclusive()
    with pytest.raises(BorrowStateError):
        state.release_shared()
    assert state.status == EXCLUSIVE

    state.release_exclusive()
    assert state.try_acquire_shared()
    with pytest.raises(BorrowStateError):
        state.release_exclusive()
    assert state.status == Shared(1)


def test_shared_rejects_non_positive_count() -> None:
    with pytest.raises(ValueError):
        Shared(0)
    with pytest.raises(ValueError):
        Shared(-3)


def test_status_values_compare_by_value() -> None:
    assert Shared(3) == Shared(3)
    assert Shared(3) != Shared(4)
    assert Free() == FREE
    assert Exclusive() == EXCLUSIVE
    assert FREE != EXCLUSIVE
    assert len({Shared(2), Shared(2), FREE, Free()}) == 2
    assert repr(Shared(5)) == "Shared(5)"
    assert repr(BorrowState()) == "BorrowState(Free)"

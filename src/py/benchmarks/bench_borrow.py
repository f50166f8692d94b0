import sys
import timeit
from typing import Callable

from owned_ref_cell.owned_ref_cell import OwnedRefCell

INNER_LOOPS = 1000


def bench_borrow_mut() -> None:
    cell = OwnedRefCell(42)
    for _ in range(INNER_LOOPS):
        cell.try_borrow_mut()


def bench_borrow() -> None:
    cell = OwnedRefCell(42)
    for _ in range(INNER_LOOPS):
        cell.try_borrow()


def bench_borrow_mut_borrow() -> None:
    cell = OwnedRefCell(OwnedRefCell(42))
    with cell.borrow_mut() as outer:
        for _ in range(INNER_LOOPS):
            outer.get_value().borrow()


def bench_borrow_mut_borrow_mut() -> None:
    cell = OwnedRefCell(OwnedRefCell(42))
    with cell.borrow_mut() as outer:
        for _ in range(INNER_LOOPS):
            outer.get_value().try_borrow_mut()


def bench_borrow_borrow_mut() -> None:
    cell = OwnedRefCell(OwnedRefCell(42))
    with cell.borrow() as outer:
        for _ in range(INNER_LOOPS):
            outer.get_value().try_borrow_mut()


BENCHMARKS: list[Callable[[], None]] = [
    bench_borrow_mut,
    bench_borrow,
    bench_borrow_mut_borrow,
    bench_borrow_mut_borrow_mut,
    bench_borrow_borrow_mut,
]


def main():
    number = int(sys.argv[1]) if len(sys.argv) > 1 else 200
    for bench in BENCHMARKS:
        best = min(timeit.repeat(bench, number=number, repeat=5))
        # Per-iteration cost of one borrow attempt, in nanoseconds.
        per_op = best / (number * INNER_LOOPS) * 1e9
        print(f"{bench.__name__:<30} {per_op:10.1f} ns/borrow")


if __name__ == "__main__":
    main()

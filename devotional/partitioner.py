"""Proportional partitioning of the corpus over a date range.

Day ``d`` of a plan with ``T`` days over ``N`` items reads the slice
``[round((d-1) * N / T), round(d * N / T))``. Because the end of one day is
the start of the next, the slices cover ``[0, N)`` exactly once.

Rounding is half up, evaluated on the exact fraction with integer
arithmetic, so a boundary never moves because of float representation.
"""

from collections.abc import Iterator
from datetime import date

from .models import DailyAllocation, DateRange


def round_half_up(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` to the nearest int, halves up."""
    return (2 * numerator + denominator) // (2 * denominator)


def total_duration(plan: DateRange) -> int:
    """Number of days in the plan, both ends included."""
    return (plan.end - plan.start).days + 1


def items_per_day(plan: DateRange, corpus_size: int) -> float:
    """Average reading pace."""
    return corpus_size / total_duration(plan)


def allocation_for_day(plan: DateRange, corpus_size: int, day: int) -> DailyAllocation:
    """Compute the corpus slice for a 1-based day of the plan."""
    if corpus_size < 0:
        raise ValueError(f"Corpus size must be non-negative, got {corpus_size}")
    total = total_duration(plan)
    if not 1 <= day <= total:
        raise ValueError(f"Day {day} outside plan of {total} days")

    return DailyAllocation(
        day=day,
        start_index=round_half_up((day - 1) * corpus_size, total),
        end_index=round_half_up(day * corpus_size, total),
    )


def current_day_index(plan: DateRange, today: date) -> int:
    """1-based index of ``today`` in the plan.

    Only meaningful when ``plan.start <= today <= plan.end``.
    """
    return (today - plan.start).days + 1


def allocation_for_all(plan: DateRange, corpus_size: int) -> Iterator[DailyAllocation]:
    """Yield the allocation of every day in the plan, in order."""
    for day in range(1, total_duration(plan) + 1):
        yield allocation_for_day(plan, corpus_size, day)

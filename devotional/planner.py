"""Daily and full-plan reading selection."""

import logging
from collections.abc import Sequence
from datetime import date

from .dates import normalize
from .models import CorpusItem, DailyAllocation, DailyReading, DateRange, PlanStatus
from .partitioner import (
    allocation_for_all,
    allocation_for_day,
    current_day_index,
    items_per_day,
)

logger = logging.getLogger(__name__)

PlanDay = tuple[DailyAllocation, tuple[CorpusItem, ...]]


class ReadingPlanner:
    """Maps plan days onto an injected, read-only corpus.

    Nothing is cached: every call recomputes from (plan, today).
    """

    def __init__(self, corpus: Sequence[CorpusItem]):
        self.corpus = tuple(corpus)

    @property
    def corpus_size(self) -> int:
        return len(self.corpus)

    def _slice(self, allocation: DailyAllocation) -> tuple[CorpusItem, ...]:
        if not 0 <= allocation.start_index <= allocation.end_index <= self.corpus_size:
            raise IndexError(
                f"Allocation {allocation} outside corpus of {self.corpus_size}"
            )
        return self.corpus[allocation.start_index : allocation.end_index]

    def status(self, plan: DateRange, today: date) -> PlanStatus:
        """Classify ``today`` against the plan."""
        today = normalize(today)
        if today < plan.start:
            return PlanStatus.BEFORE_START
        if today > plan.end:
            return PlanStatus.AFTER_END
        return PlanStatus.ACTIVE

    def daily_reading(self, plan: DateRange, today: date) -> DailyReading:
        """Get the reading for ``today`` (may be empty)."""
        today = normalize(today)
        status = self.status(plan, today)
        if status is not PlanStatus.ACTIVE:
            logger.debug(f"Plan {plan.start} -> {plan.end} is {status.value} on {today}")
            return DailyReading(status=status, today=today, plan=plan)

        day = current_day_index(plan, today)
        allocation = allocation_for_day(plan, self.corpus_size, day)
        items = self._slice(allocation)
        logger.info(
            f"Day {day}/{plan.total_days}: paragraphs "
            f"[{allocation.start_index}, {allocation.end_index})"
        )
        return DailyReading(
            status=status,
            today=today,
            plan=plan,
            allocation=allocation,
            items=items,
        )

    def full_plan(self, plan: DateRange) -> list[PlanDay]:
        """Every day of the plan with its items, rest days included."""
        days = [
            (allocation, self._slice(allocation))
            for allocation in allocation_for_all(plan, self.corpus_size)
        ]
        logger.info(f"Built full plan of {len(days)} days")
        return days

    def pace(self, plan: DateRange) -> float:
        """Average readings per day."""
        return items_per_day(plan, self.corpus_size)

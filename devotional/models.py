"""Data models for the WCF devotional plan."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from .errors import ValidationError


@dataclass(frozen=True)
class CorpusItem:
    """A paragraph of the Confession with its devotional material."""

    chapter_title: str
    chapter_number: int
    paragraph_number: int
    text: str
    references: str  # Biblical proof texts
    commentary: str  # May contain HTML markup

    @property
    def reference(self) -> str:
        """Short chapter/paragraph reference for display."""
        return f"Cap. {self.chapter_number}, Par. {self.paragraph_number}"


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        """Validate that the range is not reversed."""
        if self.end < self.start:
            raise ValidationError("A Data de Fim deve ser posterior à Data de Início.")

    @property
    def total_days(self) -> int:
        """Number of days in the range, both ends included."""
        return (self.end - self.start).days + 1

    def day_date(self, day: int) -> date:
        """Calendar day of a 1-based day index."""
        return self.start + timedelta(days=day - 1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def iso(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()

    @classmethod
    def from_iso(cls, start: str, end: str) -> "DateRange":
        return cls(start=date.fromisoformat(start), end=date.fromisoformat(end))


@dataclass(frozen=True)
class DailyAllocation:
    """The half-open corpus slice [start_index, end_index) for one day."""

    day: int  # 1-based
    start_index: int
    end_index: int

    @property
    def size(self) -> int:
        return self.end_index - self.start_index

    @property
    def is_rest_day(self) -> bool:
        return self.start_index == self.end_index


class PlanStatus(Enum):
    """Where a given day falls relative to the plan."""

    BEFORE_START = "before_start"
    ACTIVE = "active"
    AFTER_END = "after_end"


@dataclass(frozen=True)
class DailyReading:
    """Result of evaluating the plan for a single day."""

    status: PlanStatus
    today: date
    plan: DateRange
    allocation: DailyAllocation | None = None
    items: tuple[CorpusItem, ...] = ()

    @property
    def is_rest_day(self) -> bool:
        return self.allocation is not None and self.allocation.is_rest_day

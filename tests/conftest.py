"""Pytest fixtures for WCF devotional plan tests."""

from datetime import date

import pytest

from devotional.models import CorpusItem, DateRange
from devotional.planner import ReadingPlanner
from devotional.store import ScheduleStore


def make_item(index: int) -> CorpusItem:
    """Build the index-th paragraph of a synthetic corpus."""
    return CorpusItem(
        chapter_title=f"Capítulo {index // 5 + 1}",
        chapter_number=index // 5 + 1,
        paragraph_number=index % 5 + 1,
        text=f"Texto do parágrafo {index}.",
        references=f"Rm {index % 16 + 1}.1",
        commentary=f"<p>Comentário <b>{index}</b>.</p>",
    )


def make_record(index: int) -> dict:
    """JSON record as found in the data file."""
    item = make_item(index)
    return {
        "capitulo_titulo": item.chapter_title,
        "capitulo_num": item.chapter_number,
        "paragrafo_num": item.paragraph_number,
        "texto_wcf": item.text,
        "referencias_biblicas": item.references,
        "comentario_devocional": item.commentary,
    }


@pytest.fixture
def corpus() -> tuple[CorpusItem, ...]:
    """A full 175-paragraph corpus."""
    return tuple(make_item(i) for i in range(175))


@pytest.fixture
def sample_item() -> CorpusItem:
    return CorpusItem(
        chapter_title="Da Escritura Sagrada",
        chapter_number=1,
        paragraph_number=1,
        text="Ainda que a luz da natureza e as obras da criação e da providência...",
        references="Rm 2.14-15; Rm 1.19-20",
        commentary="<p>Deus se revela <em>na criação</em>.</p><p>Mas só a Escritura salva.</p>",
    )


@pytest.fixture
def planner(corpus) -> ReadingPlanner:
    return ReadingPlanner(corpus)


@pytest.fixture
def year_plan() -> DateRange:
    """A 365-day plan for 2025."""
    return DateRange(start=date(2025, 1, 1), end=date(2025, 12, 31))


@pytest.fixture
def store(tmp_path) -> ScheduleStore:
    return ScheduleStore(tmp_path / "state" / "plan.json")


@pytest.fixture
def record_factory():
    """Factory for raw JSON records."""
    return make_record


@pytest.fixture
def item_factory():
    """Factory for corpus items matching ``record_factory``."""
    return make_item

"""Tests for command logic."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from devotional.commands import (
    MISSING_DATES_TEXT,
    build_range,
    get_error_message,
    get_info_message,
    get_plan_document,
    get_today_messages,
    plan_filename,
    set_plan,
    write_plan_document,
)
from devotional.errors import PresentationBlocked, ValidationError
from devotional.models import DateRange
from devotional.store import ScheduleStore


def test_build_range():
    plan = build_range("2025-01-01", "31/12/2025")
    assert plan == DateRange(start=date(2025, 1, 1), end=date(2025, 12, 31))


@pytest.mark.parametrize(
    "start, end", [(None, "2025-01-01"), ("2025-01-01", None), ("", ""), ("  ", "2025-01-01")]
)
def test_build_range_missing(start, end):
    with pytest.raises(ValidationError, match="Data de Início E uma Data de Fim"):
        build_range(start, end)


def test_build_range_reversed():
    with pytest.raises(ValidationError, match="posterior"):
        build_range("2025-02-01", "2025-01-01")


def test_set_plan_saves(planner, store):
    saved, text = set_plan(planner, store, "2025-01-01", "2025-12-31")
    assert saved is True
    assert "365 dias" in text
    assert "0.48 leituras/dia" in text
    assert store.load() == DateRange(start=date(2025, 1, 1), end=date(2025, 12, 31))


def test_set_plan_reversed_leaves_store_untouched(planner, store, year_plan):
    store.save(year_plan)
    store_spy = MagicMock(wraps=store)

    saved, text = set_plan(planner, store_spy, "2025-03-01", "2025-01-01")

    assert saved is False
    assert "posterior" in text
    store_spy.save.assert_not_called()
    assert store.load() == year_plan


def test_set_plan_missing_dates(planner, store):
    saved, text = set_plan(planner, store, "2025-01-01", "")
    assert saved is False
    assert text == MISSING_DATES_TEXT
    assert not store.path.exists()


def test_get_today_messages_no_plan(planner, store):
    msgs = get_today_messages(planner, store, date(2025, 1, 1))
    assert len(msgs) == 1
    assert "Nenhum plano" in msgs[0]


def test_get_today_messages_restores_plan(planner, store):
    store.save(DateRange(start=date(2025, 1, 1), end=date(2025, 1, 1)))
    msgs = get_today_messages(planner, store, date(2025, 1, 1))
    assert len(msgs) == 175
    assert "Dia 1 de 1" in msgs[0]


def test_get_today_messages_before_and_after(planner, store, year_plan):
    store.save(year_plan)
    before = get_today_messages(planner, store, date(2024, 12, 31))
    after = get_today_messages(planner, store, date(2026, 1, 1))
    assert "ainda não começou" in before[0]
    assert "Plano concluído" in after[0]


def test_get_today_messages_internal_failure(store, year_plan):
    store.save(year_plan)
    planner = MagicMock()
    planner.daily_reading.side_effect = RuntimeError("boom")
    msgs = get_today_messages(planner, store, date(2025, 1, 1))
    assert msgs == [get_error_message()]


def test_get_plan_document(planner, store, year_plan):
    assert get_plan_document(planner, store) is None

    store.save(year_plan)
    plan, html = get_plan_document(planner, store)
    assert plan == year_plan
    assert html.count('<section class="dia-plano">') == 365


def test_plan_filename(year_plan):
    assert plan_filename(year_plan) == "plano-devocional-2025-01-01-a-2025-12-31.html"


def test_write_plan_document(tmp_path):
    path = write_plan_document("<html></html>", tmp_path / "out" / "plano.html")
    assert path.read_text(encoding="utf-8") == "<html></html>"


def test_write_plan_document_unwritable(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(PresentationBlocked):
        write_plan_document("<html></html>", blocker / "plano.html")


def test_write_plan_document_opens_browser(tmp_path):
    with patch("devotional.commands.webbrowser.open", return_value=True) as opener:
        write_plan_document("<html></html>", tmp_path / "plano.html", open_browser=True)
    opener.assert_called_once()
    assert opener.call_args[0][0].startswith("file://")


def test_write_plan_document_browser_blocked(tmp_path):
    with patch("devotional.commands.webbrowser.open", return_value=False):
        with pytest.raises(PresentationBlocked):
            write_plan_document("<html></html>", tmp_path / "plano.html", open_browser=True)
    # The document itself was still produced
    assert (tmp_path / "plano.html").exists()


def test_get_info_message():
    assert "/plano" in get_info_message()


def test_set_plan_save_failure_is_reported(planner, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    broken = ScheduleStore(blocker / "state" / "plan.json")

    saved, text = set_plan(planner, broken, "2025-01-01", "2025-12-31")

    assert saved is False
    assert text == get_error_message()

"""Tests for message and document formatting."""

from datetime import date

import pytest

from devotional.formatter import (
    REST_DAY_TEXT,
    format_daily_messages,
    format_error_message,
    format_info_message,
    format_item_messages,
    format_long_date,
    format_plan_summary,
    format_short_date,
    format_unavailable_message,
    format_welcome_message,
    render_plan_document,
    split_text,
    strip_markup,
    to_plain_text,
)
from devotional.models import CorpusItem, DailyReading, DateRange, PlanStatus


def test_split_text_short():
    assert split_text("short text", 100) == ["short text"]


def test_split_text_at_boundary():
    chunks = split_text("hello world foo bar", 12)
    assert chunks == ["hello world", "foo bar"]


def test_split_text_no_space():
    assert split_text("a" * 20, 10) == ["a" * 10, "a" * 10]


def test_strip_markup():
    assert strip_markup("<p>Deus <b>fala</b></p><p>hoje</p>") == "Deus fala\nhoje"
    assert strip_markup("") == ""


def test_date_formats():
    assert format_short_date(date(2025, 9, 8)) == "08/09/2025"
    assert format_long_date(date(2025, 1, 1)) == "quarta-feira, 1 de janeiro de 2025"


def test_format_item_messages(sample_item):
    msgs = format_item_messages(sample_item, "HEADER\n")
    assert msgs[0].startswith("HEADER\n")
    assert "Da Escritura Sagrada" in msgs[0]
    assert "Cap. 1, Par. 1" in msgs[0]
    assert "Rm 2.14-15" in msgs[0]
    assert "<em>" not in msgs[0]
    assert "na criação" in msgs[0]


def test_format_item_messages_escapes_text():
    item = CorpusItem("A & B", 1, 1, "x < y", "Gn 1.1", "ok")
    msg = format_item_messages(item)[0]
    assert "A &amp; B" in msg
    assert "x &lt; y" in msg


def test_format_item_messages_splits_long_commentary():
    item = CorpusItem("Longo", 1, 1, "texto", "Jo 1.1", "palavra " * 2000)
    msgs = format_item_messages(item)
    assert len(msgs) > 1
    assert "(continuação)" in msgs[1]
    for msg in msgs:
        assert len(msg) <= 4096


def test_daily_messages_active(planner):
    plan = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 5))
    msgs = format_daily_messages(planner.daily_reading(plan, date(2025, 1, 2)))
    assert len(msgs) == 35
    assert "Dia 2 de 5" in msgs[0]
    assert "02/01/2025" in msgs[0]
    assert "Dia 2 de 5" not in msgs[1]


def test_daily_messages_rest_day(planner, year_plan):
    msgs = format_daily_messages(planner.daily_reading(year_plan, date(2025, 1, 1)))
    assert msgs == [msgs[0]]
    assert REST_DAY_TEXT in msgs[0]
    assert "Dia 1 de 365" in msgs[0]


def test_daily_messages_before_start(planner, year_plan):
    msgs = format_daily_messages(planner.daily_reading(year_plan, date(2024, 12, 1)))
    assert len(msgs) == 1
    assert "ainda não começou" in msgs[0]
    assert "01/01/2025" in msgs[0]


def test_daily_messages_after_end(planner, year_plan):
    msgs = format_daily_messages(planner.daily_reading(year_plan, date(2026, 1, 1)))
    assert len(msgs) == 1
    assert "Plano concluído" in msgs[0]


def test_render_plan_document(planner):
    plan = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 3))
    html = render_plan_document(plan, planner.full_plan(plan))

    assert html.startswith("<!DOCTYPE html>")
    assert "(3 dias)" in html
    assert "Período de 01/01/2025 a 03/01/2025" in html
    assert html.count('<section class="dia-plano">') == 3
    assert html.count('<article class="devocional-item">') == 175
    assert "Dia 3 <span" in html
    # Commentary markup is kept in the printable document
    assert "<b>0</b>" in html


def test_render_plan_document_keeps_rest_days(planner, year_plan):
    html = render_plan_document(year_plan, planner.full_plan(year_plan))
    assert html.count('<section class="dia-plano">') == 365
    assert html.count('<article class="devocional-item">') == 175
    assert html.count(REST_DAY_TEXT) == 190
    assert "Dia 365 <span" in html
    assert "quarta-feira, 31 de dezembro de 2025" in html


def test_format_plan_summary(year_plan):
    assert format_plan_summary(year_plan, 175 / 365) == (
        "A gerar plano de 365 dias (0.48 leituras/dia)..."
    )


def test_static_messages():
    assert "/plano" in format_welcome_message()
    assert "/hoje" in format_info_message()
    assert "/imprimir" in format_info_message()
    assert "Não foi possível" in format_error_message()
    assert "ERRO CRÍTICO" in format_unavailable_message()


def test_strip_markup_decodes_entities():
    assert strip_markup("<p>Deus&nbsp;fala &eacute; bom</p>") == "Deus\xa0fala é bom"


def test_item_messages_escape_commentary_entities_once():
    item = CorpusItem("Título", 1, 1, "texto", "Jo 1.1", "<p>Deus&nbsp;fala &amp; age</p>")
    msg = format_item_messages(item)[0]
    assert "&amp;nbsp;" not in msg
    assert "Deus\xa0fala &amp; age" in msg


def test_split_text_keeps_entities_whole():
    text = "a" * 8 + "&amp;" + "b" * 8
    chunks = split_text(text, 10)
    assert chunks[0] == "a" * 8
    assert chunks[1].startswith("&amp;")
    assert "".join(chunks) == text


def test_to_plain_text():
    msg = '<b>Título</b>\n\nChamada &quot;Palavra de Deus&quot; &amp; &lt;fé&gt;'
    assert to_plain_text(msg) == 'Título\n\nChamada "Palavra de Deus" & <fé>'


def test_active_reading_without_allocation_is_rejected():
    plan = DateRange(date(2025, 1, 1), date(2025, 1, 10))
    reading = DailyReading(PlanStatus.ACTIVE, date(2025, 1, 2), plan)
    with pytest.raises(ValueError, match="no allocation"):
        format_daily_messages(reading)

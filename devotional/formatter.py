"""Message and document formatting for the devotional plan."""

import re
from collections.abc import Callable, Sequence
from datetime import date
from html import escape, unescape

from .models import CorpusItem, DailyAllocation, DailyReading, DateRange, PlanStatus

MAX_MESSAGE_LENGTH = 4000

PLAN_TITLE = "Plano Devocional da Confissão de Fé de Westminster"
REST_DAY_TEXT = "Dia de descanso ou recuperação (sem novas leituras agendadas)."

WEEKDAYS_PT = [
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
]
MONTHS_PT = [
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
]

_STATIC_MESSAGES: dict[str, str] = {}


def _get_static_message(key: str, generator: Callable[[], str]) -> str:
    """Get a static message from cache or generate it."""
    if key not in _STATIC_MESSAGES:
        _STATIC_MESSAGES[key] = generator()
    return _STATIC_MESSAGES[key]


def format_short_date(day: date) -> str:
    """dd/mm/yyyy, independent of locale."""
    return day.strftime("%d/%m/%Y")


def format_long_date(day: date) -> str:
    """e.g. 'quarta-feira, 1 de janeiro de 2025'."""
    weekday = WEEKDAYS_PT[day.weekday()]
    month = MONTHS_PT[day.month - 1]
    return f"{weekday}, {day.day} de {month} de {day.year}"


def strip_markup(text: str) -> str:
    """Drop HTML tags and collapse whitespace."""
    if not text:
        return ""
    text = re.sub(r"<br\s*/?>|</p>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n\n", text)
    return unescape(text).strip()


def to_plain_text(message: str) -> str:
    """Turn a Telegram HTML message into console text."""
    return unescape(re.sub(r"<[^>]+>", "", message))


def split_text(text: str, max_len: int) -> list[str]:
    """Split text into chunks at word boundaries."""
    if len(text) <= max_len:
        return [text]
    chunks = []
    while text:
        if len(text) <= max_len:
            chunks.append(text)
            break
        split_at = text.rfind(" ", 0, max_len)
        if split_at == -1:
            split_at = max_len
            # never cut an escaped entity such as &amp; in half
            amp = text.rfind("&", 0, split_at)
            if amp > 0 and text.find(";", amp, split_at) == -1:
                split_at = amp
        chunks.append(text[:split_at])
        text = text[split_at:].lstrip()
    return chunks


def _day_header(reading: DailyReading, allocation: DailyAllocation) -> str:
    return (
        f"<b>📖 {PLAN_TITLE}</b>\n"
        f"📅 Dia {allocation.day} de {reading.plan.total_days} | "
        f"{format_short_date(reading.today)}\n\n"
    )


def format_item_messages(item: CorpusItem, header: str = "") -> list[str]:
    """Format one paragraph into one or more Telegram HTML messages."""
    title = f"<b>{escape(item.chapter_title)}</b> ({escape(item.reference)})"
    base = f"{header}{title}\n\n"
    body = (
        f"{escape(item.text)}\n\n"
        f"Referências: {escape(item.references)}\n\n"
        f"Comentário Devocional:\n{escape(strip_markup(item.commentary))}"
    )

    available = MAX_MESSAGE_LENGTH - len(base) - 100
    chunks = split_text(body, available)

    messages = []
    for i, chunk in enumerate(chunks):
        msg = f"{base}{chunk}" if i == 0 else f"{title} (continuação)\n\n{chunk}"
        messages.append(msg)
    return messages


def format_daily_messages(reading: DailyReading) -> list[str]:
    """Format the daily view as a list of messages."""
    if reading.status is PlanStatus.BEFORE_START:
        return [
            f"<b>📖 {PLAN_TITLE}</b>\n\n"
            f"⏳ O plano ainda não começou. Início em "
            f"{format_short_date(reading.plan.start)}."
        ]
    if reading.status is PlanStatus.AFTER_END:
        return [
            f"<b>📖 {PLAN_TITLE}</b>\n\n"
            f"✅ Plano concluído em {format_short_date(reading.plan.end)}. "
            "Escolha um novo período com /plano para recomeçar."
        ]

    if reading.allocation is None:
        raise ValueError(f"Active reading for {reading.today} has no allocation")

    header = _day_header(reading, reading.allocation)
    if not reading.items:
        return [f"{header}<i>{REST_DAY_TEXT}</i>"]

    messages: list[str] = []
    for i, item in enumerate(reading.items):
        messages.extend(format_item_messages(item, header if i == 0 else ""))
    return messages


def format_plan_summary(plan: DateRange, pace: float) -> str:
    """One-line description of a plan's length and pace."""
    return f"A gerar plano de {plan.total_days} dias ({pace:.2f} leituras/dia)..."


def format_range_saved_message(plan: DateRange, pace: float) -> str:
    return (
        f"✅ Plano salvo: {format_short_date(plan.start)} a "
        f"{format_short_date(plan.end)}.\n{format_plan_summary(plan, pace)}"
    )


_DOCUMENT_STYLE = """
        body.plano-impressao { font-family: Georgia, serif; line-height: 1.5; margin: 2em; color: #222; }
        .titulo-plano { text-align: center; margin-bottom: 2em; }
        .dia-plano { page-break-inside: avoid; border-top: 1px solid #ccc; padding-top: 1em; }
        .data-plano { font-size: 0.7em; font-weight: normal; color: #555; }
        .wcf-texto { font-style: italic; border-left: 3px solid #999; margin-left: 0; padding-left: 1em; }
        .referencias { font-size: 0.9em; color: #444; }
        @media print { .dia-plano { page-break-before: auto; } }
"""


def _render_item(item: CorpusItem) -> str:
    return f"""
            <article class="devocional-item">
                <h3>{escape(item.chapter_title)} ({escape(item.reference)})</h3>
                <blockquote class="wcf-texto">{escape(item.text)}</blockquote>
                <p class="referencias"><strong>Referências:</strong> {escape(item.references)}</p>
                <h4>Comentário Devocional:</h4>
                <div class="comentario">{item.commentary}</div>
            </article>"""


def _render_day(
    plan: DateRange, allocation: DailyAllocation, items: Sequence[CorpusItem]
) -> str:
    day_date = plan.day_date(allocation.day)
    parts = [
        f"""
        <section class="dia-plano">
            <h2>Dia {allocation.day} <span class="data-plano">({format_long_date(day_date)})</span></h2>"""
    ]
    if not items:
        parts.append(f"\n            <p><i>{REST_DAY_TEXT}</i></p>")
    else:
        parts.extend(_render_item(item) for item in items)
    parts.append("\n        </section>")
    return "".join(parts)


def render_plan_document(
    plan: DateRange,
    days: Sequence[tuple[DailyAllocation, Sequence[CorpusItem]]],
) -> str:
    """Render the full plan as a standalone, printable HTML document.

    Every day gets a section, rest days included, so day numbering stays
    contiguous.
    """
    sections = "".join(
        _render_day(plan, allocation, items) for allocation, items in days
    )
    return f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <title>Plano Devocional da WCF ({plan.total_days} dias)</title>
    <style>{_DOCUMENT_STYLE}    </style>
</head>
<body class="plano-impressao">
    <main>
        <div class="titulo-plano">
            <h1>{PLAN_TITLE}</h1>
            <h2>Período de {format_short_date(plan.start)} a {format_short_date(plan.end)} ({plan.total_days} dias)</h2>
        </div>{sections}
    </main>
</body>
</html>
"""


def format_welcome_message() -> str:
    """Get welcome message."""

    def _generate() -> str:
        return f"""<b>📖 {PLAN_TITLE}</b>

Bem-vindo! Leia os 175 parágrafos da Confissão de Fé de Westminster, com referências bíblicas e comentário devocional, no período que você escolher.

Para começar, envie:
/plano 2025-01-01 2025-12-31"""

    return _get_static_message("welcome", _generate)


def format_info_message() -> str:
    """Get combined info message."""

    def _generate() -> str:
        return f"""<b>📖 {PLAN_TITLE}</b>

Os parágrafos da Confissão são distribuídos de forma proporcional entre os dias do período escolhido. Quando há mais dias do que parágrafos, alguns dias ficam livres para descanso ou recuperação.

<b>Comandos:</b>
/plano &lt;início&gt; &lt;fim&gt; - escolher o período (AAAA-MM-DD ou DD/MM/AAAA)
/hoje - leitura de hoje
/imprimir - plano completo para impressão
/info - informação e ajuda"""

    return _get_static_message("info", _generate)


def format_no_plan_message() -> str:
    def _generate() -> str:
        return (
            "Nenhum plano definido. Escolha um período com "
            "/plano &lt;início&gt; &lt;fim&gt;."
        )

    return _get_static_message("no_plan", _generate)


def format_error_message() -> str:
    """Get error message."""

    def _generate() -> str:
        return "Não foi possível preparar a leitura. Tente novamente em alguns minutos."

    return _get_static_message("error", _generate)


def format_unavailable_message() -> str:
    def _generate() -> str:
        return (
            "ERRO CRÍTICO: Não foi possível carregar a base de dados devocional. "
            "Verifique se o arquivo de dados está disponível e recarregue."
        )

    return _get_static_message("unavailable", _generate)


def format_presentation_blocked_message() -> str:
    def _generate() -> str:
        return (
            "O plano foi gerado, mas não foi possível exibi-lo. "
            "Verifique as permissões e tente novamente."
        )

    return _get_static_message("presentation_blocked", _generate)

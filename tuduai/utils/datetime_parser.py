"""
Извлечение срока задачи из текста по правилам.

Каскад правил упорядочен: первое сработавшее правило определяет дату,
остальные не проверяются. Время суток извлекается отдельно и применяется
к любой найденной дате.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo


logger = logging.getLogger(__name__)

DEFAULT_HOUR = 17
DEFAULT_MINUTE = 0

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

MONTH_NAMES = (
    "january|february|march|april|may|june|july|august|september|october|november|december"
    "|jan|feb|mar|apr|jun|jul|aug|sep|oct|nov|dec"
)

# Порядок совпадает с datetime.weekday()
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

FRIDAY = 4

TIME_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE)


@dataclass(frozen=True)
class ParseContext:
    """Всё, что нужно резолверу правила кроме самого совпадения"""
    now: datetime
    hour: int = DEFAULT_HOUR
    minute: int = DEFAULT_MINUTE
    numeric_order: str = "dmy"

    def at_time(self, value: datetime) -> datetime:
        return value.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)


Resolver = Callable[[re.Match, ParseContext], Optional[datetime]]


@dataclass(frozen=True)
class DateRule:
    name: str
    pattern: re.Pattern
    resolver: Resolver

    def apply(self, text: str, ctx: ParseContext) -> Optional[datetime]:
        match = self.pattern.search(text)
        if match is None:
            return None
        try:
            return self.resolver(match, ctx)
        except (ValueError, OverflowError):
            # Несуществующая календарная дата или слишком большое смещение
            logger.debug(f"Правило {self.name} совпало, но дата недопустима: {match.group(0)!r}")
            return None


def extract_time_of_day(text: str) -> tuple[int, int]:
    """
    Время суток из выражений вида "3pm", "3:30 PM", "12 am".
    Возвращает (час, минута) в 24-часовом формате, по умолчанию 17:00.
    """
    match = TIME_PATTERN.search(text)
    if match is None:
        return DEFAULT_HOUR, DEFAULT_MINUTE

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    if hour > 12 or minute > 59:
        return DEFAULT_HOUR, DEFAULT_MINUTE

    meridiem = match.group(3).lower()
    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return hour, minute


def _roll_forward(candidate: datetime, now: datetime) -> datetime:
    """Дата в прошлом переносится на следующий год (не дальше)"""
    if candidate < now:
        return candidate.replace(year=candidate.year + 1)
    return candidate


def _calendar_date(ctx: ParseContext, year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, ctx.hour, ctx.minute, tzinfo=ctx.now.tzinfo)


def _resolve_day_month(match: re.Match, ctx: ParseContext) -> Optional[datetime]:
    day = int(match.group("day"))
    month = MONTHS[match.group("month").lower()]
    if not 1 <= day <= 31:
        return None
    return _roll_forward(_calendar_date(ctx, ctx.now.year, month, day), ctx.now)


def _resolve_numeric(match: re.Match, ctx: ParseContext) -> Optional[datetime]:
    first = int(match.group("first"))
    second = int(match.group("second"))
    year = int(match.group("year")) if match.group("year") else ctx.now.year

    # (день, месяц) в порядке предпочтения
    if ctx.numeric_order == "mdy":
        readings = [(second, first), (first, second)]
    else:
        readings = [(first, second), (second, first)]

    for day, month in readings:
        try:
            candidate = _calendar_date(ctx, year, month, day)
        except ValueError:
            continue
        if year == ctx.now.year:
            try:
                candidate = _roll_forward(candidate, ctx.now)
            except ValueError:
                continue
        return candidate
    return None


def _resolve_today(match: re.Match, ctx: ParseContext) -> datetime:
    return ctx.at_time(ctx.now)


def _resolve_tomorrow(match: re.Match, ctx: ParseContext) -> datetime:
    return ctx.at_time(ctx.now + timedelta(days=1))


def _resolve_this_week(match: re.Match, ctx: ParseContext) -> datetime:
    days_until_friday = FRIDAY - ctx.now.weekday()
    if days_until_friday <= 0:
        days_until_friday += 7
    return ctx.at_time(ctx.now + timedelta(days=days_until_friday))


def _resolve_next_week(match: re.Match, ctx: ParseContext) -> datetime:
    return ctx.at_time(ctx.now + timedelta(days=7))


def _resolve_weekday(match: re.Match, ctx: ParseContext) -> datetime:
    target = WEEKDAYS.index(match.group("weekday").lower())
    days_to_add = target - ctx.now.weekday()
    if days_to_add <= 0:
        days_to_add += 7
    return ctx.at_time(ctx.now + timedelta(days=days_to_add))


def _resolve_in_days(match: re.Match, ctx: ParseContext) -> datetime:
    return ctx.at_time(ctx.now + timedelta(days=int(match.group("days"))))


def _rule(name: str, pattern: str, resolver: Resolver) -> DateRule:
    return DateRule(name, re.compile(pattern, re.IGNORECASE), resolver)


DATE_RULES: list[DateRule] = [
    _rule(
        "ordinal_day_month",
        rf"\b(?P<day>\d{{1,2}})(?:st|nd|rd|th)\s+(?:of\s+)?(?P<month>{MONTH_NAMES})\b",
        _resolve_day_month,
    ),
    _rule(
        "month_day",
        rf"\b(?P<month>{MONTH_NAMES})\s+(?P<day>\d{{1,2}})(?:st|nd|rd|th)?\b",
        _resolve_day_month,
    ),
    _rule(
        "numeric_slash",
        r"\b(?P<first>\d{1,2})[/\-](?P<second>\d{1,2})(?:[/\-](?P<year>\d{4}))?\b",
        _resolve_numeric,
    ),
    _rule(
        "numeric_dot",
        r"\b(?P<first>\d{1,2})\.(?P<second>\d{1,2})(?:\.(?P<year>\d{4}))?\b",
        _resolve_numeric,
    ),
    _rule("today", r"\b(?:today|this morning|this afternoon|this evening|tonight)\b", _resolve_today),
    _rule("tomorrow", r"\btomorrow\b", _resolve_tomorrow),
    _rule("this_week", r"\b(?:this week|by friday|end of week)\b", _resolve_this_week),
    _rule("next_week", r"\bnext week\b", _resolve_next_week),
    _rule("weekday", rf"\b(?P<weekday>{'|'.join(WEEKDAYS)})\b", _resolve_weekday),
    _rule("in_days", r"\bin (?P<days>\d+) days?\b", _resolve_in_days),
]


def extract_due_date(text: str, now: datetime, numeric_order: str = "dmy",
                     rules: list[DateRule] | None = None) -> Optional[datetime]:
    """
    Срок задачи из исходного (не приведённого к нижнему регистру) текста.

    Args:
        text: Текст задачи
        now: Текущее время; часовой пояс результата совпадает с ним
        numeric_order: Предпочтительное прочтение дат вида 5/6 ("dmy" или "mdy")
        rules: Каскад правил, по умолчанию DATE_RULES

    Returns:
        datetime или None, если временное выражение не распознано
    """
    hour, minute = extract_time_of_day(text)
    ctx = ParseContext(now=now, hour=hour, minute=minute, numeric_order=numeric_order)

    for rule in DATE_RULES if rules is None else rules:
        due = rule.apply(text, ctx)
        if due is not None:
            logger.debug(f"Срок определён правилом {rule.name}: {due.isoformat()}")
            return due
    return None


def current_time(timezone: str = "UTC") -> datetime:
    """Текущее время в часовом поясе приложения"""
    return datetime.now(tz=ZoneInfo(timezone))

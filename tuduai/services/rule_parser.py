"""
Разбор задачи по правилам.
Используется, когда модель недоступна или вернула некорректный ответ.
Каждое извлечение - чистая функция от строки.
"""
import logging
import re
from datetime import datetime
from typing import Any, Optional

from tuduai.schemas.task import Category, Priority, UNTITLED_TASK
from tuduai.utils.datetime_parser import MONTH_NAMES, WEEKDAYS, extract_due_date


logger = logging.getLogger(__name__)

PRIORITY_WORDS = ("urgent", "asap", "critical", "important", "high priority", "low priority")

# Порядок важен: первый совпавший класс побеждает
PRIORITY_RULES = [
    (Priority.URGENT, re.compile(r"\b(?:urgent|asap|critical|emergency|now)\b", re.IGNORECASE)),
    (Priority.HIGH, re.compile(r"\b(?:important|high priority|soon|quickly)\b", re.IGNORECASE)),
    (Priority.LOW, re.compile(r"\b(?:low priority|when possible|eventually|sometime)\b", re.IGNORECASE)),
]
IMMEDIACY = re.compile(r"\b(?:today|now|this morning|this afternoon)\b", re.IGNORECASE)

CATEGORY_KEYWORDS = {
    Category.WORK: ("work", "office", "meeting", "project", "client", "boss", "colleague",
                    "deadline", "presentation", "report"),
    Category.PERSONAL: ("personal", "home", "family", "friend", "birthday", "appointment",
                        "shopping", "clean", "organize"),
    Category.HEALTH: ("doctor", "gym", "exercise", "workout", "medicine", "health", "medical",
                      "therapy", "dentist"),
    Category.LEARNING: ("study", "learn", "course", "book", "read", "research", "tutorial",
                        "practice", "homework"),
}

DESCRIPTION_PATTERN = re.compile(r"(?:notes?|details?|description):\s*(.+)", re.IGNORECASE)
HASHTAG_PATTERN = re.compile(r"#\w+")
MENTION_PATTERN = re.compile(r"@\w+")

_PREFIX = r"(?:(?:by|on|at)\s+)?"

TITLE_NOISE = [
    # Время с предлогом: "at 5pm", "by 3:30 PM", "until 14:00"
    re.compile(r"\b(?:by|at|on|before|after|until)\s+\d+(?:(?::\d+)?\s*(?:am|pm)\b|:\d+)", re.IGNORECASE),
    re.compile(rf"\b{_PREFIX}\d{{1,2}}(?:st|nd|rd|th)?\s+(?:of\s+)?(?:{MONTH_NAMES})\b", re.IGNORECASE),
    re.compile(rf"\b{_PREFIX}(?:{MONTH_NAMES})\s+\d{{1,2}}(?:st|nd|rd|th)?\b", re.IGNORECASE),
    re.compile(rf"\b{_PREFIX}\d{{1,2}}/\d{{1,2}}(?:/\d{{4}})?\b", re.IGNORECASE),
    re.compile(r"\b(?:today|tomorrow|this\s+week|next\s+week)\b", re.IGNORECASE),
    re.compile(rf"\b(?:{'|'.join(WEEKDAYS)})\b", re.IGNORECASE),
    *(re.compile(rf"\b{word}\b", re.IGNORECASE) for word in PRIORITY_WORDS),
    HASHTAG_PATTERN,
    MENTION_PATTERN,
    DESCRIPTION_PATTERN,
]


def extract_title(text: str) -> str:
    """Текст без дат, слов приоритета, тегов и заметок; пустой -> "Untitled Task" """
    title = text
    for pattern in TITLE_NOISE:
        title = pattern.sub("", title)
    return re.sub(r"\s+", " ", title).strip() or UNTITLED_TASK


def extract_description(text: str) -> Optional[str]:
    match = DESCRIPTION_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1).strip() or None


def extract_priority(text: str) -> Priority:
    for priority, pattern in PRIORITY_RULES:
        if pattern.search(text):
            return priority
    if IMMEDIACY.search(text):
        return Priority.HIGH
    return Priority.MEDIUM


def extract_category(text: str) -> Category:
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return Category.OTHER


def extract_tags(text: str) -> list[str]:
    """Сначала все #хэштеги, затем все @упоминания, без дедупликации"""
    hashtags = [tag[1:] for tag in HASHTAG_PATTERN.findall(text)]
    mentions = [mention[1:] for mention in MENTION_PATTERN.findall(text)]
    return hashtags + mentions


class RuleBasedStrategy:
    """Стратегия разбора по правилам. Тотальна: всегда возвращает кандидата."""

    name = "rules"

    def __init__(self, numeric_date_order: str = "dmy"):
        self.numeric_date_order = numeric_date_order

    async def extract(self, text: str, now: datetime) -> dict[str, Any]:
        return self.extract_sync(text, now)

    def extract_sync(self, text: str, now: datetime) -> dict[str, Any]:
        lowered = text.lower()
        candidate = {
            "title": extract_title(text),
            "description": extract_description(text),
            "priority": extract_priority(lowered),
            "category": extract_category(lowered),
            "dueDate": extract_due_date(text, now, numeric_order=self.numeric_date_order),
            "tags": extract_tags(text),
        }
        logger.debug(f"Разбор по правилам: {candidate}")
        return candidate

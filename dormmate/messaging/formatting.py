"""Time labels and day grouping for the messaging UI.

All labels are Russian, matching the rest of the interface. Functions
accept ISO-8601 strings (as returned by the store) or datetimes, and an
optional ``now`` for deterministic results. Aware timestamps are converted
to local time before any calendar-day comparison.
"""

from datetime import date, datetime
from typing import Any, Mapping, Sequence, TypeVar

WEEKDAYS = ("Понедельник", "Вторник", "Среда", "Четверг", "Пятница", "Суббота", "Воскресенье")

MONTHS_SHORT = ("янв.", "февр.", "мар.", "апр.", "мая", "июн.", "июл.", "авг.", "сент.", "окт.", "нояб.", "дек.")

MONTHS_LONG = (
    "января",
    "февраля",
    "марта",
    "апреля",
    "мая",
    "июня",
    "июля",
    "августа",
    "сентября",
    "октября",
    "ноября",
    "декабря",
)

T = TypeVar("T", bound=Mapping[str, Any])


def to_local(value: str | datetime) -> datetime:
    """Parse a timestamp and express it in local time.

    Naive values are taken to be local already.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        return value.astimezone()
    return value


def _now(now: datetime | None) -> datetime:
    return to_local(now) if now is not None else datetime.now()


def _elapsed_seconds(value: datetime, now: datetime) -> float:
    if (value.tzinfo is None) != (now.tzinfo is None):
        # Compare wall-clock times when only one side carries an offset
        value = value.replace(tzinfo=None)
        now = now.replace(tzinfo=None)
    return (now - value).total_seconds()


def _short_date(value: datetime) -> str:
    return f"{value.day} {MONTHS_SHORT[value.month - 1]}"


def format_message_time(value: str | datetime, now: datetime | None = None) -> str:
    """Relative label for a message timestamp.

    Args:
        value: Message creation time.
        now: Reference time, defaults to the current local time.

    Returns:
        str: "Только что", "N мин назад", "HH:MM", a weekday name or a short date.
    """
    moment = to_local(value)
    elapsed = _elapsed_seconds(moment, _now(now))
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "Только что"
    if minutes < 60:
        return f"{minutes} мин назад"
    if hours < 24:
        return moment.strftime("%H:%M")
    if days < 7:
        return WEEKDAYS[moment.weekday()]
    return _short_date(moment)


def format_last_seen(value: str | datetime, now: datetime | None = None) -> str:
    """Coarse label for a last-seen timestamp."""
    moment = to_local(value)
    elapsed = _elapsed_seconds(moment, _now(now))
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "только что"
    if minutes < 60:
        return f"{minutes} мин назад"
    if hours < 24:
        return f"{hours} ч назад"
    if days == 1:
        return "вчера"
    if days < 7:
        return f"{days} дн назад"
    return _short_date(moment)


def get_date_separator(value: str | datetime, now: datetime | None = None) -> str:
    """Day separator label: "Сегодня", "Вчера" or a long date.

    Uses calendar days in local time, not 24-hour windows. The year is
    shown only when it differs from the current one.
    """
    moment = to_local(value)
    today = _now(now).date()
    diff_days = (today - moment.date()).days

    if diff_days == 0:
        return "Сегодня"
    if diff_days == 1:
        return "Вчера"

    label = f"{moment.day} {MONTHS_LONG[moment.month - 1]}"
    if moment.year != today.year:
        label += f" {moment.year} г."
    return label


def local_day(value: str | datetime) -> date:
    """Calendar day of a timestamp in local time."""
    return to_local(value).date()


def is_same_day(first: str | datetime, second: str | datetime) -> bool:
    """Whether two timestamps fall on the same local calendar day."""
    return local_day(first) == local_day(second)


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to ``max_length`` characters, marking the cut with "..."."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def group_messages_by_date(messages: Sequence[T]) -> list[dict[str, Any]]:
    """Group chronologically ordered messages into calendar-day runs.

    A new group starts whenever a message's day differs from the day of
    the last group. Each group is ``{"date": <first created_at>,
    "messages": [...]}``; concatenating the groups restores the input.
    """
    groups: list[dict[str, Any]] = []

    for message in messages:
        last_group = groups[-1] if groups else None
        if last_group is None or not is_same_day(last_group["date"], message["created_at"]):
            groups.append({"date": message["created_at"], "messages": [message]})
        else:
            last_group["messages"].append(message)

    return groups

"""Unit tests for messaging time labels and day grouping."""

from datetime import datetime, timedelta, timezone

from dormmate.messaging.formatting import (
    format_last_seen,
    format_message_time,
    get_date_separator,
    group_messages_by_date,
    is_same_day,
    truncate_text,
)

# Friday, 15 March 2024, noon (naive values are local time)
NOW = datetime(2024, 3, 15, 12, 0)


class TestFormatMessageTime:
    """Tests for format_message_time."""

    def test_under_a_minute_is_just_now(self) -> None:
        assert format_message_time(NOW - timedelta(seconds=30), NOW) == "Только что"

    def test_minutes_ago(self) -> None:
        assert format_message_time(NOW - timedelta(minutes=5), NOW) == "5 мин назад"

    def test_same_day_shows_clock_time(self) -> None:
        assert format_message_time(NOW - timedelta(hours=3), NOW) == "09:00"

    def test_within_a_week_shows_weekday(self) -> None:
        assert format_message_time(NOW - timedelta(days=2), NOW) == "Среда"

    def test_older_shows_short_date(self) -> None:
        assert format_message_time(NOW - timedelta(days=10), NOW) == "5 мар."

    def test_accepts_iso_strings(self) -> None:
        assert format_message_time("2024-03-15T11:55:00", NOW) == "5 мин назад"


class TestFormatLastSeen:
    """Tests for format_last_seen."""

    def test_just_now(self) -> None:
        assert format_last_seen(NOW - timedelta(seconds=10), NOW) == "только что"

    def test_hours_ago(self) -> None:
        assert format_last_seen(NOW - timedelta(hours=2), NOW) == "2 ч назад"

    def test_exactly_one_day_is_yesterday(self) -> None:
        assert format_last_seen(NOW - timedelta(hours=25), NOW) == "вчера"

    def test_days_ago(self) -> None:
        assert format_last_seen(NOW - timedelta(days=3), NOW) == "3 дн назад"

    def test_older_shows_short_date(self) -> None:
        assert format_last_seen(datetime(2024, 1, 5, 9, 0), NOW) == "5 янв."


class TestGetDateSeparator:
    """Tests for get_date_separator."""

    def test_today(self) -> None:
        assert get_date_separator(NOW.replace(hour=0, minute=1), NOW) == "Сегодня"

    def test_yesterday_uses_calendar_days(self) -> None:
        # Less than 24 hours ago but on the previous calendar day
        assert get_date_separator(datetime(2024, 3, 14, 23, 59), NOW) == "Вчера"

    def test_same_year_omits_year(self) -> None:
        assert get_date_separator(datetime(2024, 1, 5, 10, 0), NOW) == "5 января"

    def test_other_year_appends_year(self) -> None:
        assert get_date_separator(datetime(2023, 1, 5, 10, 0), NOW) == "5 января 2023 г."


class TestTruncateText:
    """Tests for truncate_text."""

    def test_truncates_long_text(self) -> None:
        assert truncate_text("Hello World", 5) == "Hello..."

    def test_keeps_short_text(self) -> None:
        assert truncate_text("Hi", 5) == "Hi"

    def test_keeps_text_of_exact_length(self) -> None:
        assert truncate_text("Hello", 5) == "Hello"


class TestSameDayAndGrouping:
    """Tests for is_same_day and group_messages_by_date."""

    def test_same_day_for_aware_timestamps(self) -> None:
        first = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)
        assert is_same_day(first, "2024-03-15T10:30:00Z")

    def test_different_days(self) -> None:
        assert not is_same_day(datetime(2024, 3, 14, 23, 0), datetime(2024, 3, 15, 1, 0))

    def test_empty_input(self) -> None:
        assert group_messages_by_date([]) == []

    def test_groups_reproduce_input_order(self) -> None:
        messages = [
            {"id": str(i), "created_at": created_at}
            for i, created_at in enumerate(
                [
                    "2024-03-13T09:00:00",
                    "2024-03-13T18:00:00",
                    "2024-03-14T08:00:00",
                    "2024-03-15T07:00:00",
                    "2024-03-15T11:00:00",
                    "2024-03-15T11:30:00",
                ]
            )
        ]

        groups = group_messages_by_date(messages)

        assert [len(g["messages"]) for g in groups] == [2, 1, 3]
        assert [m for g in groups for m in g["messages"]] == messages
        for group in groups:
            assert group["date"] == group["messages"][0]["created_at"]
            assert all(is_same_day(group["date"], m["created_at"]) for m in group["messages"])

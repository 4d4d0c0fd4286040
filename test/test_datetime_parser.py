"""
Тесты извлечения срока задачи по правилам.
"""
import pytest
from datetime import datetime
from zoneinfo import ZoneInfo

from tuduai.utils.datetime_parser import (
    DATE_RULES,
    ParseContext,
    current_time,
    extract_due_date,
    extract_time_of_day,
)


RULES = {rule.name: rule for rule in DATE_RULES}

JAN_10 = datetime(2025, 1, 10, 12, 0)
WEDNESDAY = datetime(2025, 6, 4, 10, 0)  # среда


class TestTimeOfDay:

    @pytest.mark.parametrize("text, expected", [
        ("call at 3pm", (15, 0)),
        ("call at 3:30 PM", (15, 30)),
        ("standup 9 am", (9, 0)),
        ("midnight run 12 am", (0, 0)),
        ("lunch 12pm", (12, 0)),
        ("no time here", (17, 0)),
        ("bad clock 13pm", (17, 0)),
        ("bad minutes 3:75 pm", (17, 0)),
    ])
    def test_extract_time(self, text, expected):
        assert extract_time_of_day(text) == expected


class TestAbsoluteDates:

    def test_ordinal_day_month(self):
        assert extract_due_date("Finish report by 25th June", JAN_10) == datetime(2025, 6, 25, 17, 0)

    def test_ordinal_of_month(self):
        assert extract_due_date("Pay rent 1st of Feb", JAN_10) == datetime(2025, 2, 1, 17, 0)

    def test_month_day_with_time(self):
        assert extract_due_date("Meeting on June 25th at 3 PM", JAN_10) == datetime(2025, 6, 25, 15, 0)

    def test_month_day_without_suffix(self):
        assert extract_due_date("Trip dec 3", JAN_10) == datetime(2025, 12, 3, 17, 0)

    def test_rolls_to_next_year(self):
        now = datetime(2025, 12, 20, 9, 0)
        assert extract_due_date("Submit taxes 5th January", now) == datetime(2026, 1, 5, 17, 0)

    def test_same_day_earlier_time_rolls(self):
        now = datetime(2025, 6, 25, 18, 0)
        assert extract_due_date("Report 25th June", now) == datetime(2026, 6, 25, 17, 0)

    def test_impossible_calendar_date_falls_through(self):
        assert extract_due_date("Party 31st June", JAN_10) is None
        assert extract_due_date("Party 31st June tomorrow", JAN_10) == datetime(2025, 1, 11, 17, 0)

    def test_day_out_of_range(self):
        assert RULES["ordinal_day_month"].apply("the 45th may", ParseContext(now=JAN_10)) is None

    def test_timezone_of_now_preserved(self):
        now = datetime(2025, 1, 10, 12, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        due = extract_due_date("Finish report by 25th June", now)
        assert due == datetime(2025, 6, 25, 17, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        assert due.tzinfo == now.tzinfo


class TestNumericDates:

    def test_day_month_preferred(self):
        assert extract_due_date("Call client by 15/6", JAN_10) == datetime(2025, 6, 15, 17, 0)

    def test_ambiguous_day_month(self):
        assert extract_due_date("Dinner 5/6", JAN_10) == datetime(2025, 6, 5, 17, 0)

    def test_month_day_order_configurable(self):
        assert extract_due_date("Dinner 5/6", JAN_10, numeric_order="mdy") == datetime(2025, 5, 6, 17, 0)

    def test_only_second_reading_valid(self):
        assert extract_due_date("Pay bill 6/25", JAN_10) == datetime(2025, 6, 25, 17, 0)

    def test_explicit_year_not_rolled(self):
        assert extract_due_date("Archive 1/2/2024", JAN_10) == datetime(2024, 2, 1, 17, 0)

    def test_current_year_rolled(self):
        now = datetime(2025, 6, 10, 9, 0)
        assert extract_due_date("Renew 5/1", now) == datetime(2026, 1, 5, 17, 0)

    def test_explicit_current_year_rolled(self):
        now = datetime(2025, 6, 10, 9, 0)
        assert extract_due_date("Renew 5/1/2025", now) == datetime(2026, 1, 5, 17, 0)
        assert extract_due_date("Renew 5/1/2026", now) == datetime(2026, 1, 5, 17, 0)

    def test_dotted(self):
        assert extract_due_date("Dentist 12.03 at 9am", JAN_10) == datetime(2025, 3, 12, 9, 0)

    def test_dashed(self):
        assert extract_due_date("Submit 20-7", JAN_10) == datetime(2025, 7, 20, 17, 0)

    def test_no_valid_reading(self):
        assert extract_due_date("Ratio 13/13", JAN_10) is None


class TestRelativeDates:

    def test_today(self):
        now = datetime(2025, 6, 1, 9, 0)
        assert extract_due_date("Do laundry tonight", now) == datetime(2025, 6, 1, 17, 0)
        assert extract_due_date("Email Bob this morning at 10 am", now) == datetime(2025, 6, 1, 10, 0)

    def test_tomorrow_with_time(self):
        now = datetime(2025, 6, 1, 9, 0)
        assert extract_due_date("Meeting tomorrow at 3:30 PM", now) == datetime(2025, 6, 2, 15, 30)

    def test_this_week_is_coming_friday(self):
        assert extract_due_date("Ship it this week", WEDNESDAY) == datetime(2025, 6, 6, 17, 0)

    def test_this_week_on_friday_rolls(self):
        friday = datetime(2025, 6, 6, 10, 0)
        assert extract_due_date("wrap up end of week", friday) == datetime(2025, 6, 13, 17, 0)

    def test_this_week_on_saturday_rolls_to_friday(self):
        saturday = datetime(2025, 6, 7, 10, 0)
        assert extract_due_date("finish by friday", saturday) == datetime(2025, 6, 13, 17, 0)

    def test_next_week(self):
        assert extract_due_date("Plan next week", WEDNESDAY) == datetime(2025, 6, 11, 17, 0)

    def test_weekday_later_this_week(self):
        assert extract_due_date("Call mom Friday", WEDNESDAY) == datetime(2025, 6, 6, 17, 0)

    def test_same_weekday_is_next_week(self):
        assert extract_due_date("Gym wednesday 7am", WEDNESDAY) == datetime(2025, 6, 11, 7, 0)

    def test_earlier_weekday_is_next_week(self):
        assert extract_due_date("Review on Monday", WEDNESDAY) == datetime(2025, 6, 9, 17, 0)


    def test_first_weekday_in_text_wins(self):
        assert extract_due_date("Monday or Sunday", WEDNESDAY) == datetime(2025, 6, 9, 17, 0)
        assert extract_due_date("Sunday or Monday", WEDNESDAY) == datetime(2025, 6, 8, 17, 0)
    def test_in_days(self):
        assert extract_due_date("Renew passport in 3 days", WEDNESDAY) == datetime(2025, 6, 7, 17, 0)
        assert extract_due_date("Water plants in 1 day", WEDNESDAY) == datetime(2025, 6, 5, 17, 0)

    def test_huge_offset_is_ignored(self):
        assert extract_due_date("in 99999999999 days", WEDNESDAY) is None

    def test_nothing_recognized(self):
        assert extract_due_date("Buy milk", WEDNESDAY) is None
        assert extract_due_date("", WEDNESDAY) is None


class TestCascadeOrder:

    def test_rule_order(self):
        assert [rule.name for rule in DATE_RULES] == [
            "ordinal_day_month", "month_day", "numeric_slash", "numeric_dot",
            "today", "tomorrow", "this_week", "next_week", "weekday", "in_days",
        ]

    def test_absolute_beats_relative(self):
        assert extract_due_date("tomorrow or 25th June", JAN_10) == datetime(2025, 6, 25, 17, 0)

    def test_today_beats_tomorrow(self):
        assert extract_due_date("today, not tomorrow", WEDNESDAY) == datetime(2025, 6, 4, 17, 0)

    def test_by_friday_is_this_week(self):
        assert RULES["this_week"].apply("by friday", ParseContext(now=WEDNESDAY)) == datetime(2025, 6, 6, 17, 0)

    def test_rules_in_isolation(self):
        ctx = ParseContext(now=WEDNESDAY, hour=8, minute=15)
        assert RULES["tomorrow"].apply("tomorrow", ctx) == datetime(2025, 6, 5, 8, 15)
        assert RULES["tomorrow"].apply("today", ctx) is None
        assert RULES["weekday"].apply("sunday", ctx) == datetime(2025, 6, 8, 8, 15)
        assert RULES["in_days"].apply("in 10 days", ctx) == datetime(2025, 6, 14, 8, 15)

    def test_custom_rule_list(self):
        assert extract_due_date("tomorrow", WEDNESDAY, rules=[RULES["today"]]) is None


def test_current_time_uses_timezone():
    now = current_time("Europe/Moscow")
    assert now.tzinfo == ZoneInfo("Europe/Moscow")

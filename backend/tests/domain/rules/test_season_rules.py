"""
tests/domain/rules/test_season_rules.py

Season lookup and owner usage accounting
"""
import pytest
from datetime import date, timedelta

from hoteldesk.domain.rules.season_rules import (
    parse_month_day, SeasonWindow, SeasonCalendar, SeasonLimits, compute_usage
)
from hoteldesk.models.ontology import Season, DayType


@pytest.fixture
def season_calendar():
    return SeasonCalendar(
        summer=SeasonWindow((5, 1), (9, 30)),
        winter=SeasonWindow((12, 1), (2, 28)),
    )


class TestParseMonthDay:

    def test_parse(self):
        assert parse_month_day("05-01") == (5, 1)

    @pytest.mark.parametrize("value", ["5/1", "13-01", "05-32", "", None])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_month_day(value)


class TestSeasonCalendar:

    def test_summer(self, season_calendar):
        assert season_calendar.season_for(date(2026, 7, 4)) == Season.SUMMER
        assert season_calendar.season_window(date(2026, 7, 4)) == (date(2026, 5, 1), date(2026, 9, 30))

    def test_winter_wraps_year_end(self, season_calendar):
        assert season_calendar.season_for(date(2026, 1, 15)) == Season.WINTER
        assert season_calendar.season_window(date(2026, 1, 15)) == (date(2025, 12, 1), date(2026, 2, 28))
        assert season_calendar.season_window(date(2026, 12, 10)) == (date(2026, 12, 1), date(2027, 2, 28))

    def test_off_season_is_tracked_per_month(self, season_calendar):
        assert season_calendar.season_for(date(2026, 10, 18)) == Season.NONE
        assert season_calendar.season_window(date(2026, 10, 18)) == (date(2026, 10, 1), date(2026, 10, 31))

    def test_leap_day_boundary_is_clamped(self):
        window = SeasonWindow((12, 1), (2, 29))
        assert window.instance_for(date(2026, 12, 5)) == (date(2026, 12, 1), date(2027, 2, 28))
        assert window.instance_for(date(2028, 1, 5)) == (date(2027, 12, 1), date(2028, 2, 29))

    def test_day_type(self, season_calendar):
        assert season_calendar.day_type(date(2026, 7, 4)) == DayType.WEEKEND
        assert season_calendar.day_type(date(2026, 7, 6)) == DayType.WEEKDAY


class TestComputeUsage:

    def test_counts_only_the_current_window(self, season_calendar):
        logged = [date(2026, 4, 30), date(2026, 7, 1), date(2026, 7, 2)]

        usage = compute_usage(season_calendar, SeasonLimits(total_season_limit=3), logged, today=date(2026, 7, 4))

        assert usage.total_days_used == 2
        assert usage.remaining_days == 1
        assert usage.is_over_stay is False
        assert usage.is_today_marked is False
        assert usage.current_season == Season.SUMMER
        assert usage.breakdown.weekday_used == 2
        assert usage.breakdown.weekend_used == 0

    def test_total_pool_exhausted(self, season_calendar):
        logged = [date(2026, 7, 1), date(2026, 7, 2)]

        usage = compute_usage(season_calendar, SeasonLimits(total_season_limit=2), logged, today=date(2026, 7, 4))

        assert usage.is_over_stay is True
        assert usage.remaining_days == 0

    def test_day_type_cap_exhausted(self, season_calendar):
        saturday = date(2026, 7, 4)
        limits = SeasonLimits(summer_weekend=1, total_season_limit=20)

        usage = compute_usage(season_calendar, limits, [saturday - timedelta(days=7)], today=saturday)

        assert usage.is_over_stay is True
        assert usage.breakdown.weekend_used == 1

    def test_zero_cap_means_uncapped(self, season_calendar):
        saturday = date(2026, 7, 4)
        logged = [saturday - timedelta(days=7), saturday - timedelta(days=14)]

        usage = compute_usage(season_calendar, SeasonLimits(total_season_limit=20), logged, today=saturday)

        assert usage.is_over_stay is False

    def test_today_marked(self, season_calendar):
        today = date(2026, 10, 18)

        usage = compute_usage(season_calendar, SeasonLimits(total_season_limit=22), [today], today=today)

        assert usage.is_today_marked is True
        assert usage.window_start == date(2026, 10, 1)

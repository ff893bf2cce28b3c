"""
hoteldesk/domain/rules/season_rules.py

Owner seasonal attendance accounting

An owner may stay a limited number of days per season. The season of a day
is decided by two configurable windows (summer and winter, each MM-DD to
MM-DD, winter usually wrapping the year end). Days outside both windows
fall in the "none" season, where usage is tracked per calendar month
against the same total limit.

Inside a season each day is a weekend or a weekday day. Besides the total
pool, the season may cap each day type separately; a cap of 0 means only
the total pool applies.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Iterable, Optional, Tuple

from hoteldesk.models.ontology import Season, DayType

MonthDay = Tuple[int, int]


def parse_month_day(value: str) -> MonthDay:
    """Parse 'MM-DD' into (month, day)"""
    try:
        month_str, day_str = value.split("-")
        month, day = int(month_str), int(day_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid season boundary '{value}', expected MM-DD")
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise ValueError(f"Invalid season boundary '{value}', expected MM-DD")
    return month, day


def _make_date(year: int, month_day: MonthDay) -> date:
    """Build a date, clamping the day to the month length (02-29 in common years)"""
    month, day = month_day
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


@dataclass(frozen=True)
class SeasonWindow:
    """A recurring MM-DD..MM-DD window"""
    start: MonthDay
    end: MonthDay

    @property
    def wraps_year(self) -> bool:
        return self.start > self.end

    def contains(self, day: date) -> bool:
        key = (day.month, day.day)
        if self.wraps_year:
            return key >= self.start or key <= self.end
        return self.start <= key <= self.end

    def instance_for(self, day: date) -> Tuple[date, date]:
        """Concrete (start, end) of the window occurrence containing day"""
        if not self.wraps_year:
            return _make_date(day.year, self.start), _make_date(day.year, self.end)
        if (day.month, day.day) >= self.start:
            return _make_date(day.year, self.start), _make_date(day.year + 1, self.end)
        return _make_date(day.year - 1, self.start), _make_date(day.year, self.end)


@dataclass(frozen=True)
class SeasonCalendar:
    """Season and day-type lookup"""
    summer: SeasonWindow
    winter: SeasonWindow
    weekend_days: FrozenSet[int] = frozenset({6, 7})

    @classmethod
    def from_settings(cls, settings) -> "SeasonCalendar":
        return cls(
            summer=SeasonWindow(parse_month_day(settings.SUMMER_SEASON_START),
                                parse_month_day(settings.SUMMER_SEASON_END)),
            winter=SeasonWindow(parse_month_day(settings.WINTER_SEASON_START),
                                parse_month_day(settings.WINTER_SEASON_END)),
            weekend_days=frozenset(settings.WEEKEND_DAYS),
        )

    def season_for(self, day: date) -> Season:
        if self.summer.contains(day):
            return Season.SUMMER
        if self.winter.contains(day):
            return Season.WINTER
        return Season.NONE

    def season_window(self, day: date) -> Tuple[date, date]:
        """Tracking window for day: the season occurrence, or the calendar month off-season"""
        season = self.season_for(day)
        if season == Season.SUMMER:
            return self.summer.instance_for(day)
        if season == Season.WINTER:
            return self.winter.instance_for(day)
        last_day = calendar.monthrange(day.year, day.month)[1]
        return date(day.year, day.month, 1), date(day.year, day.month, last_day)

    def day_type(self, day: date) -> DayType:
        return DayType.WEEKEND if day.isoweekday() in self.weekend_days else DayType.WEEKDAY


@dataclass(frozen=True)
class SeasonLimits:
    """Per-owner allowance"""
    summer_weekend: int = 0
    summer_weekday: int = 0
    winter_weekend: int = 0
    winter_weekday: int = 0
    total_season_limit: int = 22

    @classmethod
    def from_owner(cls, owner) -> "SeasonLimits":
        return cls(
            summer_weekend=owner.summer_weekend or 0,
            summer_weekday=owner.summer_weekday or 0,
            winter_weekend=owner.winter_weekend or 0,
            winter_weekday=owner.winter_weekday or 0,
            total_season_limit=owner.total_season_limit or 0,
        )

    def pool_cap(self, season: Season, day_type: DayType) -> int:
        """Cap of the day-type pool for a season; 0 when uncapped"""
        if season == Season.SUMMER:
            return self.summer_weekend if day_type == DayType.WEEKEND else self.summer_weekday
        if season == Season.WINTER:
            return self.winter_weekend if day_type == DayType.WEEKEND else self.winter_weekday
        return 0


@dataclass
class UsageBreakdown:
    weekend_used: int
    weekday_used: int
    season: Season


@dataclass
class OwnerUsage:
    """Usage of the window containing `today`"""
    total_days_used: int
    remaining_days: int
    limit: int
    is_over_stay: bool
    is_today_marked: bool
    current_season: Season
    breakdown: UsageBreakdown
    window_start: date
    window_end: date


def compute_usage(season_calendar: SeasonCalendar, limits: SeasonLimits,
                  logged_dates: Iterable[date], today: Optional[date] = None) -> OwnerUsage:
    """
    Tally an owner's attendance for the window containing today

    is_over_stay answers "would a mark today be beyond the allowance": the
    total pool is exhausted, or today's day-type pool has a positive cap
    that is exhausted.
    """
    today = today or date.today()
    logged = set(logged_dates)
    season = season_calendar.season_for(today)
    window_start, window_end = season_calendar.season_window(today)

    in_window = [d for d in logged if window_start <= d <= window_end]
    weekend_used = sum(1 for d in in_window if season_calendar.day_type(d) == DayType.WEEKEND)
    weekday_used = len(in_window) - weekend_used
    total_used = len(in_window)

    limit = limits.total_season_limit
    today_type = season_calendar.day_type(today)
    pool_cap = limits.pool_cap(season, today_type)
    pool_used = weekend_used if today_type == DayType.WEEKEND else weekday_used

    is_over_stay = total_used >= limit or (pool_cap > 0 and pool_used >= pool_cap)

    return OwnerUsage(
        total_days_used=total_used,
        remaining_days=max(limit - total_used, 0),
        limit=limit,
        is_over_stay=is_over_stay,
        is_today_marked=today in logged,
        current_season=season,
        breakdown=UsageBreakdown(weekend_used=weekend_used, weekday_used=weekday_used, season=season),
        window_start=window_start,
        window_end=window_end,
    )

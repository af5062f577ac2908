"""Tests for timeline geometry."""

from datetime import date, datetime

import pytest

from capacity_board.core import timeline
from capacity_board.db.models import ViewMode

MON = date(2024, 3, 4)


class TestColumns:
    def test_widths_by_window(self):
        assert timeline.day_width(7) == 160
        assert timeline.day_width(14) == 100
        assert timeline.day_width(30) == 100

    def test_weekends_collapsed(self):
        columns = timeline.build_columns(MON, 7, show_weekends=False)
        assert [c.width for c in columns] == [160, 160, 160, 160, 160, 5, 5]
        assert [c.collapsed for c in columns] == [False] * 5 + [True, True]
        assert [c.offset for c in columns] == [0, 160, 320, 480, 640, 800, 805]
        assert timeline.total_width(columns) == 810

    def test_weekends_shown(self):
        columns = timeline.build_columns(MON, 7, show_weekends=True)
        assert all(c.width == 160 for c in columns)
        assert columns[5].is_weekend and not columns[5].collapsed

    def test_today_flag(self):
        columns = timeline.build_columns(MON, 7, show_weekends=True, today=date(2024, 3, 6))
        assert [c.is_today for c in columns] == [False, False, True, False, False, False, False]

    def test_month_view(self):
        columns = timeline.build_columns(MON, ViewMode.MONTH.days, show_weekends=True)
        assert len(columns) == 30
        assert columns[-1].day == date(2024, 4, 2)


class TestNowMarker:
    def test_uniform_when_weekends_shown(self):
        columns = timeline.build_columns(MON, 7, show_weekends=True)
        now = datetime(2024, 3, 6, 12, 0)
        assert timeline.now_marker_offset(columns, now) == pytest.approx(2.5 * 160)

    def test_accounts_for_collapsed_weekend(self):
        columns = timeline.build_columns(MON, 14, show_weekends=False)
        now = datetime(2024, 3, 11, 6, 0)
        assert timeline.now_marker_offset(columns, now) == pytest.approx(5 * 100 + 2 * 5 + 25)

    def test_inside_collapsed_day(self):
        columns = timeline.build_columns(MON, 7, show_weekends=False)
        now = datetime(2024, 3, 9, 12, 0)
        assert timeline.now_marker_offset(columns, now) == pytest.approx(800 + 2.5)

    def test_outside_window(self):
        columns = timeline.build_columns(MON, 7, show_weekends=True)
        assert timeline.now_marker_offset(columns, datetime(2024, 3, 3, 23, 0)) is None
        assert timeline.now_marker_offset(columns, datetime(2024, 3, 11, 0, 0)) is None
        assert timeline.now_marker_offset([], datetime(2024, 3, 4)) is None


class TestNavigation:
    def test_initial_start(self):
        assert timeline.initial_view_start(date(2024, 3, 6)) == MON

    def test_shift(self):
        assert timeline.shift_window(MON, ViewMode.WEEK) == date(2024, 3, 11)
        assert timeline.shift_window(MON, ViewMode.TWO_WEEKS, -1) == date(2024, 2, 19)

    def test_weekend(self):
        assert timeline.is_weekend(date(2024, 3, 9))
        assert timeline.is_weekend(date(2024, 3, 10))
        assert not timeline.is_weekend(MON)

import math
from datetime import date

import pytest

from lamaison_app.calendar_grid import (
    build_month_grid,
    first_day_offset,
    format_korean_date,
    month_label,
    shift_month,
    time_slot_view,
    weeks,
    NO_DATE_MESSAGE,
)

TODAY = date(2026, 10, 19)


class TestMonthGrid:
    @pytest.mark.parametrize("year", [2024, 2025, 2026, 2027])
    @pytest.mark.parametrize("month", range(1, 13))
    def test_cell_count_covers_full_weeks(self, year, month):
        cells = build_month_grid(year, month, today=TODAY)
        offset = date(year, month, 1).isoweekday() % 7
        days = sum(1 for c in cells if not c.other_month)
        assert len(cells) % 7 == 0
        assert len(cells) == math.ceil((offset + days) / 7) * 7

    def test_october_2026_layout(self):
        cells = build_month_grid(2026, 10, today=TODAY)
        assert first_day_offset(2026, 10) == 4
        assert len(cells) == 35
        # Sep 27..30 lead, Oct 31 closes the last week
        assert [c.day for c in cells[:4]] == [27, 28, 29, 30]
        assert all(c.other_month and c.disabled for c in cells[:4])
        assert not cells[-1].other_month and cells[-1].day == 31

    def test_november_2026_trailing_cells(self):
        cells = build_month_grid(2026, 11, today=TODAY)
        assert first_day_offset(2026, 11) == 0
        assert len(cells) == 35
        trailing = cells[30:]
        assert [c.day for c in trailing] == [1, 2, 3, 4, 5]
        assert all(c.other_month and c.disabled and not c.clickable for c in trailing)

    def test_month_starting_on_sunday_has_no_leading_cells(self):
        cells = build_month_grid(2026, 2, today=TODAY)
        assert cells[0].day == 1 and not cells[0].other_month
        assert len(cells) == 28

    def test_past_days_disabled_and_today_marked(self):
        cells = [c for c in build_month_grid(2026, 10, today=TODAY) if c.date]
        for cell in cells:
            if cell.date < TODAY:
                assert cell.disabled
                assert not cell.clickable
            else:
                assert cell.clickable
        assert [c.date for c in cells if c.today] == [TODAY]

    def test_selected_marked_once(self):
        chosen = date(2026, 10, 25)
        cells = build_month_grid(2026, 10, selected=chosen, today=TODAY)
        assert [c.date for c in cells if c.selected] == [chosen]

    def test_selected_in_other_month_not_marked(self):
        cells = build_month_grid(2026, 11, selected=date(2026, 10, 25), today=TODAY)
        assert not any(c.selected for c in cells)

    def test_weeks_split(self):
        rows = weeks(build_month_grid(2026, 10, today=TODAY))
        assert len(rows) == 5
        assert all(len(r) == 7 for r in rows)


def test_shift_month_rolls_year():
    assert shift_month(2026, 12, 1) == (2027, 1)
    assert shift_month(2026, 1, -1) == (2025, 12)


def test_korean_labels():
    assert month_label(2026, 10) == "2026년 10월"
    assert format_korean_date(date(2026, 10, 19)) == "2026년 10월 19일 월요일"


class TestTimeSlotView:
    def test_placeholder_without_date(self):
        assert time_slot_view(None) == NO_DATE_MESSAGE

    def test_ten_slots_full_not_selectable(self):
        view = time_slot_view(TODAY)
        assert len(view) == 10
        full = [s["time"] for s in view if not s["selectable"]]
        assert full == ["13:00", "19:30"]

    def test_highlight_is_exclusive(self):
        view = time_slot_view(TODAY, "18:30")
        assert [s["time"] for s in view if s["highlighted"]] == ["18:30"]


class TestCalendarController:
    def test_starts_on_current_month(self, calendar):
        assert (calendar.year, calendar.month) == (2026, 10)
        assert calendar.label == "2026년 10월"

    def test_navigation(self, calendar):
        calendar.previous_month()
        assert (calendar.year, calendar.month) == (2026, 9)
        calendar.next_month()
        calendar.next_month()
        calendar.next_month()
        assert (calendar.year, calendar.month) == (2026, 12)
        calendar.next_month()
        assert (calendar.year, calendar.month) == (2027, 1)

    def test_select_date_updates_grid_and_slots(self, calendar):
        assert calendar.time_slots() == NO_DATE_MESSAGE
        calendar.select_date(date(2026, 10, 20))
        assert sum(1 for c in calendar.grid() if c.selected) == 1
        assert isinstance(calendar.time_slots(), list)
        assert calendar.date_value == "2026-10-20"
        assert calendar.date_display == "2026년 10월 20일 화요일"

    def test_past_date_rejected(self, calendar):
        with pytest.raises(ValueError):
            calendar.select_date(date(2026, 10, 18))
        assert calendar.selected_date is None

    def test_date_outside_view_rejected(self, calendar):
        with pytest.raises(ValueError):
            calendar.select_date(date(2026, 11, 2))

    def test_time_requires_date(self, calendar):
        with pytest.raises(ValueError):
            calendar.select_time_slot("18:00")
        assert calendar.selected_time is None

    def test_full_slot_rejected(self, calendar):
        calendar.select_date(TODAY)
        with pytest.raises(ValueError):
            calendar.select_time_slot("13:00")
        with pytest.raises(ValueError):
            calendar.select_time_slot("09:00")

    def test_select_time(self, calendar):
        calendar.select_date(TODAY)
        calendar.select_time_slot("18:00")
        assert calendar.selected_time == "18:00"

    def test_new_date_clears_time(self, calendar):
        calendar.select_date(TODAY)
        calendar.select_time_slot("18:00")
        calendar.select_date(date(2026, 10, 21))
        assert calendar.selected_time is None

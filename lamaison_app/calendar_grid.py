"""
Month grid, date selection and time slot rendering for the reservation widget.
"""

import calendar
import logging
from datetime import date
from typing import Optional, Union

from .config import TIME_SLOTS
from .models import DayCell, TimeSlot

logger = logging.getLogger(__name__)

WEEKDAYS_KO = ["월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일"]
NO_DATE_MESSAGE = "날짜를 먼저 선택해주세요"
DATE_PROMPT = "날짜를 선택해주세요"


def month_label(year: int, month: int) -> str:
    return f"{year}년 {month}월"


def format_korean_date(d: date) -> str:
    """Long Korean date with weekday, e.g. 2026년 10월 19일 월요일."""
    return f"{d.year}년 {d.month}월 {d.day}일 {WEEKDAYS_KO[d.weekday()]}"


def first_day_offset(year: int, month: int) -> int:
    """Column of day 1 in a Sunday-first week (0 = Sunday)."""
    return (date(year, month, 1).weekday() + 1) % 7


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_month_grid(
    year: int,
    month: int,
    selected: Optional[date] = None,
    today: Optional[date] = None
) -> list[DayCell]:
    """Sunday-first grid covering every week that touches the month."""
    today = today or date.today()
    offset = first_day_offset(year, month)
    days_in_month = calendar.monthrange(year, month)[1]
    prev_year, prev_month = shift_month(year, month, -1)
    days_in_prev = calendar.monthrange(prev_year, prev_month)[1]

    cells = []
    for i in range(offset - 1, -1, -1):
        cells.append(DayCell(days_in_prev - i, None, other_month=True, disabled=True))

    for day in range(1, days_in_month + 1):
        d = date(year, month, day)
        cells.append(DayCell(
            day,
            d,
            disabled=d < today,
            today=d == today,
            selected=selected == d
        ))

    used = offset + days_in_month
    remaining = -(-used // 7) * 7 - used
    for day in range(1, remaining + 1):
        cells.append(DayCell(day, None, other_month=True, disabled=True))

    return cells


def weeks(cells: list[DayCell]) -> list[list[DayCell]]:
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def time_slot_view(
    selected_date: Optional[date],
    selected_time: Optional[str] = None
) -> Union[str, list[dict]]:
    """Placeholder text without a date, otherwise one render instruction per slot."""
    if selected_date is None:
        return NO_DATE_MESSAGE

    view = []
    for time, status in TIME_SLOTS:
        slot = TimeSlot(time, status)
        view.append({
            "time": slot.time,
            "status": slot.status,
            "selectable": slot.selectable,
            "highlighted": slot.selectable and slot.time == selected_time,
        })
    return view


class CalendarController:
    """Owns the cursor month and the selected date/time for one visitor."""

    def __init__(self, today: Optional[date] = None):
        self._today = today
        start = self.today
        self.year = start.year
        self.month = start.month
        self.selected_date: Optional[date] = None
        self.selected_time: Optional[str] = None

    @property
    def today(self) -> date:
        return self._today or date.today()

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)

    def previous_month(self) -> None:
        self.year, self.month = shift_month(self.year, self.month, -1)

    def next_month(self) -> None:
        self.year, self.month = shift_month(self.year, self.month, 1)

    def grid(self) -> list[DayCell]:
        return build_month_grid(self.year, self.month, self.selected_date, self.today)

    def select_date(self, d: date) -> None:
        cell = next((c for c in self.grid() if c.date == d), None)
        if cell is None or not cell.clickable:
            raise ValueError(f"Date {d.isoformat()} is not selectable")
        if d != self.selected_date:
            self.selected_time = None
        self.selected_date = d
        logger.debug("Selected date %s", d.isoformat())

    def select_time_slot(self, time: str) -> None:
        if self.selected_date is None:
            raise ValueError("Pick a date before choosing a time")
        status = dict(TIME_SLOTS).get(time)
        if status is None:
            raise ValueError(f"Unknown time slot: {time}")
        if status == "full":
            raise ValueError(f"Time slot {time} is full")
        self.selected_time = time

    def time_slots(self) -> Union[str, list[dict]]:
        return time_slot_view(self.selected_date, self.selected_time)

    @property
    def date_value(self) -> str:
        return self.selected_date.isoformat() if self.selected_date else ""

    @property
    def date_display(self) -> str:
        return format_korean_date(self.selected_date) if self.selected_date else DATE_PROMPT

    def clear_selection(self) -> None:
        self.selected_date = None
        self.selected_time = None

"""
Reservation form controller, submission backends and the confirmation modal.
"""

import logging
import re
import time
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Optional
from urllib.parse import quote

from .calendar_grid import CalendarController, format_korean_date
from .config import (
    DEFAULT_GUESTS, MIN_GUESTS, MAX_GUESTS, SIMULATED_SUBMIT_DELAY,
    MAP_SEARCH_URL, RESTAURANT_ADDRESS
)
from .models import ReservationSubmission, SubmissionResult

logger = logging.getLogger(__name__)


def format_phone(raw: str) -> str:
    """Reformat typed input into XXX-XXXX-XXXX grouping."""
    digits = re.sub(r"[^0-9]", "", raw or "")
    if 3 < len(digits) <= 7:
        return f"{digits[:3]}-{digits[3:]}"
    if len(digits) > 7:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:11]}"
    return digits


def clamp_guests(value: int) -> int:
    return max(MIN_GUESTS, min(MAX_GUESTS, value))


def map_url(address: str = RESTAURANT_ADDRESS) -> str:
    return MAP_SEARCH_URL + quote(address, safe="")


def track_reservation(submission: ReservationSubmission) -> None:
    """Analytics placeholder."""
    logger.info("Track reservation: %s", submission.to_dict())


# --- Submission backends ---

class ReservationBackend(ABC):
    """Where a finished reservation gets sent."""

    @abstractmethod
    def submit(self, submission: ReservationSubmission) -> SubmissionResult:
        ...


class SimulatedReservationBackend(ReservationBackend):
    """Waits a fixed delay and always succeeds."""

    def __init__(self, delay: float = SIMULATED_SUBMIT_DELAY, sleep: Callable[[float], None] = time.sleep):
        self.delay = delay
        self.sleep = sleep

    def submit(self, submission: ReservationSubmission) -> SubmissionResult:
        self.sleep(self.delay)
        logger.info("Reservation data: %s", submission.to_dict())
        return SubmissionResult(success=True)


# --- Confirmation modal ---

def confirmation_lines(submission: ReservationSubmission) -> list[tuple[str, str]]:
    """Label/value pairs shown in the confirmation modal."""
    try:
        formatted_date = format_korean_date(date.fromisoformat(submission.date))
    except ValueError:
        formatted_date = submission.date

    lines = [
        ("예약자", submission.name),
        ("연락처", submission.phone),
        ("날짜", formatted_date),
        ("시간", submission.time),
        ("인원", f"{submission.guests}명"),
    ]
    if submission.requests:
        lines.append(("요청사항", submission.requests))
    return lines


class ConfirmationModal:
    DISMISS_TRIGGERS = ("close", "outside", "escape")

    def __init__(self):
        self.visible = False
        self.lines: list[tuple[str, str]] = []

    def show(self, submission: ReservationSubmission) -> None:
        self.lines = confirmation_lines(submission)
        self.visible = True

    def dismiss(self, trigger: str = "close") -> bool:
        if trigger not in self.DISMISS_TRIGGERS:
            return False
        self.visible = False
        return True


# --- Form controller ---

class GuestStepper:
    def __init__(self, value: int = DEFAULT_GUESTS):
        self.value = clamp_guests(value)

    def change(self, delta: int) -> int:
        self.value = clamp_guests(self.value + delta)
        return self.value

    def reset(self) -> None:
        self.value = DEFAULT_GUESTS


class ReservationForm:
    """Collects the booking form, submits it and resets the widget afterwards."""

    def __init__(
        self,
        calendar: CalendarController,
        backend: Optional[ReservationBackend] = None,
        modal: Optional[ConfirmationModal] = None
    ):
        self.calendar = calendar
        self.backend = backend or SimulatedReservationBackend()
        self.modal = modal or ConfirmationModal()
        self.guests = GuestStepper()
        self.submitting = False
        self.error: Optional[str] = None
        self.reset_fields()

    def reset_fields(self) -> None:
        self.name = ""
        self.phone = ""
        self.requests = ""
        self.marketing = False
        self.date = ""
        self.time = ""
        self.guests.reset()

    def set_phone(self, raw: str) -> str:
        self.phone = format_phone(raw)
        return self.phone

    def change_guests(self, delta: int) -> int:
        return self.guests.change(delta)

    def sync_selection(self) -> None:
        """Copy the calendar's date/time into the hidden form inputs."""
        if self.calendar.selected_date:
            self.date = self.calendar.date_value
            self.time = self.calendar.selected_time or ""

    def values(self) -> dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "date": self.date,
            "time": self.time,
            "guests": self.guests.value,
            "requests": self.requests,
            "marketing": self.marketing,
        }

    def load(self, values: dict) -> None:
        """Fill fields from a dict, e.g. a restored draft."""
        self.name = values.get("name") or ""
        self.set_phone(values.get("phone") or "")
        if values.get("date"):
            self.date = values["date"]
        if values.get("time"):
            self.time = values["time"]
        try:
            self.guests.value = clamp_guests(int(values.get("guests") or DEFAULT_GUESTS))
        except (TypeError, ValueError):
            self.guests.value = DEFAULT_GUESTS
        self.requests = values.get("requests") or ""
        self.marketing = bool(values.get("marketing", False))

    def collect(self) -> ReservationSubmission:
        self.sync_selection()
        return ReservationSubmission(
            name=self.name.strip(),
            phone=self.phone,
            date=self.date,
            time=self.time,
            guests=self.guests.value,
            requests=self.requests.strip(),
            marketing=self.marketing
        )

    def submit(self) -> Optional[SubmissionResult]:
        """Send the form; returns None when a submission is already pending."""
        if self.submitting:
            logger.debug("Ignoring submit while another is pending")
            return None

        self.submitting = True
        self.error = None
        submission = self.collect()
        try:
            result = self.backend.submit(submission)
        finally:
            self.submitting = False

        if not result.success:
            self.error = result.error or "예약 처리 중 오류가 발생했습니다."
            logger.warning("Reservation submission failed: %s", self.error)
            return result

        self.modal.show(submission)
        track_reservation(submission)

        self.reset_fields()
        self.calendar.clear_selection()
        return result

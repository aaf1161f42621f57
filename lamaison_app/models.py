"""
Dataclasses for calendar cells, time slots, reservations and chat messages.
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Optional


@dataclass
class DayCell:
    day: int
    date: Optional[date]
    other_month: bool = False
    disabled: bool = False
    today: bool = False
    selected: bool = False

    @property
    def clickable(self) -> bool:
        return not self.other_month and not self.disabled and self.date is not None


@dataclass
class TimeSlot:
    time: str
    status: str  # 'available', 'limited', 'full'

    @property
    def selectable(self) -> bool:
        return self.status != "full"


@dataclass
class ReservationDraft:
    name: str = ""
    phone: str = ""
    date: str = ""
    time: str = ""
    guests: int = 2
    requests: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ReservationSubmission(ReservationDraft):
    marketing: bool = False


@dataclass
class SubmissionResult:
    success: bool
    error: Optional[str] = None


@dataclass
class ChatMessage:
    role: str  # 'user', 'assistant'
    content: str
    loading: bool = False

"""
Periodic draft autosave for the reservation form.
"""

import logging
import time
from typing import Optional

from .config import DRAFT_AUTOSAVE_SECONDS, DRAFT_STORAGE_KEY, DEFAULT_GUESTS
from .models import ReservationDraft
from .storage import LocalStorage

logger = logging.getLogger(__name__)


def has_content(values: dict) -> bool:
    # Only the first input (name) and the first text area (requests) are checked.
    return bool(values.get("name") or values.get("requests"))


class DraftAutosave:
    def __init__(self, storage: LocalStorage, interval: float = DRAFT_AUTOSAVE_SECONDS):
        self.storage = storage
        self.interval = interval
        self._last_tick: Optional[float] = None

    def save(self, values: dict) -> ReservationDraft:
        draft = ReservationDraft(
            name=values.get("name", ""),
            phone=values.get("phone", ""),
            date=values.get("date", ""),
            time=values.get("time", ""),
            guests=values.get("guests", DEFAULT_GUESTS),
            requests=values.get("requests", "")
        )
        self.storage.set_json(DRAFT_STORAGE_KEY, draft.to_dict())
        logger.debug("Saved reservation draft")
        return draft

    def tick(self, values: dict, now: Optional[float] = None) -> bool:
        """Save when an interval has elapsed and the form has content."""
        now = time.monotonic() if now is None else now
        if self._last_tick is not None and now - self._last_tick < self.interval:
            return False
        self._last_tick = now
        if not has_content(values):
            return False
        self.save(values)
        return True

    def load(self) -> Optional[ReservationDraft]:
        data = self.storage.get_json(DRAFT_STORAGE_KEY)
        if data is None:
            return None
        return ReservationDraft(
            name=data.get("name") or "",
            phone=data.get("phone") or "",
            date=data.get("date") or "",
            time=data.get("time") or "",
            guests=data.get("guests") or DEFAULT_GUESTS,
            requests=data.get("requests") or ""
        )

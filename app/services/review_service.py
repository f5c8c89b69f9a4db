"""
Store review prompt tracking.

Counts completed actions and asks an external requester for a store review
once, shortly after the first one. The requester is any object with
is_available() and request_review().
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from app.services.storage_service import STORAGE_KEYS, StorageService
from app.utils.time_utils import to_utc_z, utcnow

logger = logging.getLogger(__name__)

REVIEW_REQUEST_DELAY_SECONDS = 2


class PendingPromptRequester:
    """
    Default requester for API clients.

    Marks a pending prompt in storage; the mobile client reads it through the
    settings endpoint, shows the native review sheet and acknowledges it.
    """

    def __init__(self, storage: StorageService):
        self.storage = storage

    def is_available(self) -> bool:
        return True

    def request_review(self) -> None:
        self.storage.set_boolean(STORAGE_KEYS['REVIEW_PROMPT_PENDING'], True)

    def is_pending(self) -> bool:
        return self.storage.get_boolean(STORAGE_KEYS['REVIEW_PROMPT_PENDING']) or False

    def acknowledge(self) -> None:
        self.storage.delete(STORAGE_KEYS['REVIEW_PROMPT_PENDING'])


def _schedule_with_timer(delay: float, fn: Callable[[], None]) -> None:
    if delay <= 0:
        fn()
        return
    timer = threading.Timer(delay, fn)
    timer.daemon = True
    timer.start()


def request_review_if_appropriate(storage: StorageService, requester, now: Optional[datetime] = None) -> bool:
    """
    Request a store review at most once per install.

    Returns:
        bool: True if the requester was asked
    """
    try:
        if storage.get_boolean(STORAGE_KEYS['HAS_REQUESTED_REVIEW']):
            return False

        if not requester.is_available():
            return False

        requester.request_review()

        storage.set_boolean(STORAGE_KEYS['HAS_REQUESTED_REVIEW'], True)
        storage.set_string(STORAGE_KEYS['REVIEW_REQUEST_DATE'], to_utc_z(now or utcnow()))
        logger.info("[REVIEW] Store review requested")
        return True
    except Exception as e:
        logger.error(f"[REVIEW] Error requesting review: {e}")
        return False


def track_event_completed_for_review(
    storage: StorageService,
    requester,
    schedule: Optional[Callable[[float, Callable[[], None]], None]] = None,
    delay: float = REVIEW_REQUEST_DELAY_SECONDS
) -> int:
    """
    Count a completed action; the first one schedules the review request.

    Returns:
        int: Updated counter
    """
    count = int(storage.get_number(STORAGE_KEYS['COMPLETED_EVENTS_COUNT']) or 0)
    new_count = count + 1
    storage.set_number(STORAGE_KEYS['COMPLETED_EVENTS_COUNT'], new_count)

    if new_count == 1:
        # Small delay so the user sees their success first
        schedule = schedule or _schedule_with_timer
        schedule(delay, lambda: request_review_if_appropriate(storage, requester))

    return new_count


def should_request_review(storage: StorageService) -> bool:
    return not storage.get_boolean(STORAGE_KEYS['HAS_REQUESTED_REVIEW'])


def reset_review_state(storage: StorageService) -> None:
    storage.delete(STORAGE_KEYS['HAS_REQUESTED_REVIEW'])
    storage.delete(STORAGE_KEYS['REVIEW_REQUEST_DATE'])
    storage.delete(STORAGE_KEYS['COMPLETED_EVENTS_COUNT'])

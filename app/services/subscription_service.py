"""
Subscription Service for managing the trial and premium entitlement.
Handles the trial/active/expired state machine and paywall gating decisions.

There is a single subscription record per install. Trial expiry is never
written automatically: a lapsed trial keeps status 'trial' until
expire_subscription() runs, while premium access is recomputed live from
the wall clock.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from app.services.storage_service import STORAGE_KEYS, StorageService
from app.utils.time_utils import parse_iso_datetime, to_utc_z, utcnow

logger = logging.getLogger(__name__)

TRIAL_DURATION_DAYS = 7
FREE_TIER_MAX_EVENTS = 1

STATUS_NONE = 'none'
STATUS_TRIAL = 'trial'
STATUS_ACTIVE = 'active'
STATUS_EXPIRED = 'expired'

DEFAULT_SUBSCRIPTION_STATE = {
    'status': STATUS_NONE,
    'trial_start_date': None,
    'trial_end_date': None,
    'is_premium': False,
}


def _compute_premium(state: Dict[str, Any], now: datetime) -> bool:
    if state['status'] == STATUS_ACTIVE:
        return True
    if state['status'] == STATUS_TRIAL:
        trial_end = parse_iso_datetime(state.get('trial_end_date'))
        return trial_end is not None and now < trial_end
    return False


def get_subscription_state(storage: StorageService, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Get current subscription state.

    is_premium is derived on read so it always matches status and the
    trial end date at the given instant.
    """
    stored = storage.get_json(STORAGE_KEYS['SUBSCRIPTION'])
    state = dict(DEFAULT_SUBSCRIPTION_STATE)
    if stored:
        state.update(stored)
    state['is_premium'] = _compute_premium(state, now or utcnow())
    return state


def save_subscription_state(storage: StorageService, state: Dict[str, Any]) -> None:
    storage.set_json(STORAGE_KEYS['SUBSCRIPTION'], state)


def start_free_trial(
    storage: StorageService,
    now: Optional[datetime] = None,
    trial_days: int = TRIAL_DURATION_DAYS
) -> Dict[str, Any]:
    """
    Start the free trial (always succeeds, even if a trial was used before).

    Returns:
        dict: New subscription state
    """
    now = now or utcnow()
    trial_end = now + timedelta(days=trial_days)

    state = {
        'status': STATUS_TRIAL,
        'trial_start_date': to_utc_z(now),
        'trial_end_date': to_utc_z(trial_end),
        'is_premium': True,
    }

    save_subscription_state(storage, state)
    logger.info(f"[SUBSCRIPTION] Trial started, expires {state['trial_end_date']}")
    return state


def is_trial_active(storage: StorageService, now: Optional[datetime] = None) -> bool:
    """True iff status is trial and the trial end date is still in the future."""
    state = get_subscription_state(storage, now)
    if state['status'] != STATUS_TRIAL or not state['trial_end_date']:
        return False
    return (now or utcnow()) < parse_iso_datetime(state['trial_end_date'])


def get_remaining_trial_days(storage: StorageService, now: Optional[datetime] = None) -> int:
    """Whole days left in the trial (rounded up), never negative."""
    state = get_subscription_state(storage, now)
    if state['status'] != STATUS_TRIAL or not state['trial_end_date']:
        return 0

    remaining = parse_iso_datetime(state['trial_end_date']) - (now or utcnow())
    days = math.ceil(remaining.total_seconds() / 86400)
    return max(0, days)


def activate_subscription(storage: StorageService) -> Dict[str, Any]:
    """Mark subscription as active (after a confirmed purchase or restore)."""
    state = {
        'status': STATUS_ACTIVE,
        'trial_start_date': None,
        'trial_end_date': None,
        'is_premium': True,
    }

    save_subscription_state(storage, state)
    logger.info("[SUBSCRIPTION] Subscription activated")
    return state


def expire_subscription(storage: StorageService, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Mark subscription as expired, keeping the trial dates for reference."""
    state = get_subscription_state(storage, now)
    state['status'] = STATUS_EXPIRED
    state['is_premium'] = False

    save_subscription_state(storage, state)
    logger.warning("[SUBSCRIPTION] Subscription expired")
    return state


def has_premium_access(storage: StorageService, now: Optional[datetime] = None) -> bool:
    """Premium = active subscription or a trial that has not lapsed yet."""
    state = get_subscription_state(storage, now)

    if state['status'] == STATUS_ACTIVE:
        return True

    if state['status'] == STATUS_TRIAL:
        return is_trial_active(storage, now)

    return False


def should_show_paywall(
    storage: StorageService,
    has_created_first_event: bool,
    now: Optional[datetime] = None
) -> bool:
    """The first event is always free; after it, non-premium users see the paywall."""
    if not has_created_first_event:
        return False

    return not has_premium_access(storage, now)


def can_create_event(
    storage: StorageService,
    current_event_count: int,
    now: Optional[datetime] = None,
    max_free_events: int = FREE_TIER_MAX_EVENTS
) -> bool:
    """Premium users create unlimited events; free users up to max_free_events."""
    if has_premium_access(storage, now):
        return True

    return current_event_count < max_free_events


def should_show_event_paywall(
    storage: StorageService,
    current_event_count: int,
    now: Optional[datetime] = None,
    max_free_events: int = FREE_TIER_MAX_EVENTS
) -> bool:
    return not can_create_event(storage, current_event_count, now, max_free_events)


def reset_subscription(storage: StorageService) -> None:
    """Reset subscription state back to 'none'."""
    save_subscription_state(storage, dict(DEFAULT_SUBSCRIPTION_STATE))


def get_premium_features(storage: StorageService, now: Optional[datetime] = None) -> Dict[str, bool]:
    """Feature flags unlocked by premium access."""
    premium = has_premium_access(storage, now)
    return {
        'unlimited_events': premium,
        'advanced_stats': premium,
        'csv_export': premium,
    }


def get_subscription_status(storage: StorageService, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Get comprehensive subscription status.

    Returns:
        dict: Stored state plus trial_active, remaining_trial_days and features
    """
    state = get_subscription_state(storage, now)
    state['trial_active'] = is_trial_active(storage, now)
    state['remaining_trial_days'] = get_remaining_trial_days(storage, now)
    state['features'] = get_premium_features(storage, now)
    return state

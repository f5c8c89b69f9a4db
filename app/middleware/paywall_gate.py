"""Paywall gate - blocks premium endpoints when the user has no premium access."""
from functools import wraps

from flask import current_app

from app.exceptions import PaywallRequiredError
from app.services.event_service import get_events_count
from app.services.storage_service import get_storage
from app.services.subscription_service import has_premium_access, should_show_event_paywall


def require_premium(feature: str):
    """
    Decorator: require an active subscription or a running trial.

    Usage:
        @require_premium('csv_export')
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not has_premium_access(get_storage()):
                current_app.logger.info(f"Paywall hit for feature {feature}")
                raise PaywallRequiredError(f'{feature} requires a premium subscription', feature=feature)
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_event_slot(f):
    """
    Decorator: allow event creation only while under the free-tier limit
    or with premium access.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        storage = get_storage()
        max_free = current_app.config.get('FREE_TIER_MAX_EVENTS', 1)
        if should_show_event_paywall(storage, get_events_count(storage), max_free_events=max_free):
            raise PaywallRequiredError(
                'Free plan includes one event. Start a trial or subscribe to add more.',
                feature='unlimited_events'
            )
        return f(*args, **kwargs)
    return decorated_function

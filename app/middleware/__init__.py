"""Request gating decorators."""
from app.middleware.paywall_gate import require_premium, require_event_slot

__all__ = ['require_premium', 'require_event_slot']

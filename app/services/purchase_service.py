"""
In-app purchase sync.

The store SDK runs on the device and reports customer info (the set of
active entitlements) plus purchase and restore outcomes. This module maps
those reports onto the subscription state machine.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from app.exceptions import PurchaseError
from app.services.storage_service import StorageService
from app.services.subscription_service import activate_subscription, expire_subscription

logger = logging.getLogger(__name__)

PREMIUM_ENTITLEMENT_ID = 'pro'


def has_entitlement(active_entitlements: Optional[Iterable[str]], entitlement_id: str = PREMIUM_ENTITLEMENT_ID) -> bool:
    return entitlement_id in set(active_entitlements or ())


def apply_customer_info(
    storage: StorageService,
    active_entitlements: Optional[Iterable[str]],
    entitlement_id: str = PREMIUM_ENTITLEMENT_ID
) -> Dict[str, Any]:
    """
    Sync the local state with the store's view of the customer.

    Entitlement present -> active; absent -> expired.

    Returns:
        dict: New subscription state
    """
    if has_entitlement(active_entitlements, entitlement_id):
        return activate_subscription(storage)
    return expire_subscription(storage)


def handle_purchase_result(
    storage: StorageService,
    result: Dict[str, Any],
    entitlement_id: str = PREMIUM_ENTITLEMENT_ID
) -> Dict[str, Any]:
    """
    Apply the outcome of a purchase attempt.

    Args:
        storage: Storage service
        result: {'success': bool, 'user_cancelled': bool,
                 'active_entitlements': [...], 'message': str}

    Returns:
        dict: {'success': True, 'state': ...} or
              {'success': False, 'user_cancelled': True} for a cancelled sheet

    Raises:
        PurchaseError: failed purchase, or success without the entitlement
    """
    if result.get('user_cancelled'):
        logger.info("[SUBSCRIPTION] Purchase cancelled by user")
        return {'success': False, 'user_cancelled': True}

    if not result.get('success'):
        message = result.get('message') or 'Purchase failed'
        logger.error(f"[SUBSCRIPTION] Purchase error: {message}")
        raise PurchaseError(message, code=result.get('code') or 'PURCHASE_FAILED')

    if not has_entitlement(result.get('active_entitlements'), entitlement_id):
        raise PurchaseError('Purchase completed but no active entitlement was detected.')

    state = activate_subscription(storage)
    return {'success': True, 'state': state}


def handle_restore_result(
    storage: StorageService,
    active_entitlements: Optional[Iterable[str]],
    entitlement_id: str = PREMIUM_ENTITLEMENT_ID
) -> Dict[str, Any]:
    """Restore previous purchases; nothing active means the subscription lapsed."""
    state = apply_customer_info(storage, active_entitlements, entitlement_id)
    return {
        'success': True,
        'has_active_subscription': state['status'] == 'active',
        'state': state,
    }

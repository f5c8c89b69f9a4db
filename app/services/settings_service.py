"""
App settings, onboarding flag and full data reset.
"""
import logging
from typing import Any, Dict

from app.services.storage_service import STORAGE_KEYS, StorageService

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'low_stock_threshold': 5,
}


def get_app_settings(storage: StorageService) -> Dict[str, Any]:
    """Get all app settings, defaults filled in for missing values."""
    stored = storage.get_json(STORAGE_KEYS['SETTINGS']) or {}
    settings = dict(DEFAULT_SETTINGS)
    settings.update(stored)
    return settings


def update_app_settings(storage: StorageService, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge partial updates into the stored settings."""
    settings = get_app_settings(storage)
    settings.update(updates)
    storage.set_json(STORAGE_KEYS['SETTINGS'], settings)
    return settings


def get_low_stock_threshold(storage: StorageService) -> int:
    return get_app_settings(storage)['low_stock_threshold']


def set_low_stock_threshold(storage: StorageService, threshold: int) -> None:
    update_app_settings(storage, {'low_stock_threshold': threshold})


def has_seen_onboarding(storage: StorageService) -> bool:
    return storage.get_boolean(STORAGE_KEYS['ONBOARDING']) or False


def set_onboarding_complete(storage: StorageService) -> None:
    storage.set_boolean(STORAGE_KEYS['ONBOARDING'], True)


def reset_onboarding(storage: StorageService) -> None:
    storage.delete(STORAGE_KEYS['ONBOARDING'])


def reset_all_data(storage: StorageService) -> None:
    """Permanently delete events, sales, catalog, subscription and settings."""
    storage.clear_all()
    logger.warning("All application data was reset")

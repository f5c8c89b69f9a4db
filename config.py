"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')

    # Database (durable side of the key-value store)
    # Priority: DATABASE_URL > SQLite file next to the app
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        SQLITE_PATH = os.getenv('SQLITE_PATH', 'vendstats.db')
        DATABASE_URL = f"sqlite:///{SQLITE_PATH}"

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Storage Configuration
    # sql (default), redis or memory
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'sql').lower()
    STORAGE_KEY_PREFIX = os.getenv('STORAGE_KEY_PREFIX', 'vendstats')
    STORAGE_ASYNC_WRITES = os.getenv('STORAGE_ASYNC_WRITES', 'false').lower() == 'true'
    STORAGE_STRICT_WRITES = os.getenv('STORAGE_STRICT_WRITES', 'false').lower() == 'true'
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

    # Subscription / free tier
    TRIAL_DURATION_DAYS = int(os.getenv('TRIAL_DURATION_DAYS', '7'))
    FREE_TIER_MAX_EVENTS = int(os.getenv('FREE_TIER_MAX_EVENTS', '1'))
    PREMIUM_ENTITLEMENT_ID = os.getenv('PREMIUM_ENTITLEMENT_ID', 'pro')

    # Store review prompt
    REVIEW_REQUEST_DELAY_SECONDS = float(os.getenv('REVIEW_REQUEST_DELAY_SECONDS', '2'))


class TestConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    STORAGE_BACKEND = 'sql'
    STORAGE_ASYNC_WRITES = False
    STORAGE_STRICT_WRITES = False
    REVIEW_REQUEST_DELAY_SECONDS = 0

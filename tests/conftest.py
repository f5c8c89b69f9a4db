import pytest
from datetime import datetime, timezone

from sqlalchemy.orm import scoped_session, sessionmaker

from app import create_app
from app.database import Base, build_engine
from app.services.event_service import create_event
from app.services.sale_service import create_sale
from app.services.storage_backends import MemoryStorageBackend, SQLStorageBackend
from app.services.storage_service import StorageService


@pytest.fixture(scope='function')
def app():
    """Create application instance for testing (fresh in-memory database)."""
    app = create_app('config.TestConfig')
    yield app
    app.extensions['storage'].close()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def app_storage(app):
    """Storage service registered on the test app."""
    return app.extensions['storage']


@pytest.fixture(scope='function')
def session():
    """Session bound to a private in-memory SQLite database."""
    engine = build_engine('sqlite://')
    Base.metadata.create_all(engine)
    session = scoped_session(sessionmaker(bind=engine))
    yield session
    session.remove()
    engine.dispose()


@pytest.fixture(scope='function')
def storage(session):
    """Hydrated storage service over the SQL backend."""
    storage = StorageService(SQLStorageBackend(session))
    storage.initialize()
    yield storage
    storage.close()


@pytest.fixture(scope='function')
def memory_backend():
    return MemoryStorageBackend()


@pytest.fixture(scope='function')
def memory_storage(memory_backend):
    """Hydrated storage service over the process-local backend."""
    storage = StorageService(memory_backend)
    storage.initialize()
    return storage


@pytest.fixture
def now():
    """Fixed clock for time-dependent checks."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope='function')
def market_event(storage):
    """Craft fair with $50 booth fee and $20 travel."""
    return create_event(storage, {
        'name': 'Craft Fair',
        'date': '2024-06-01',
        'booth_fee': 50.0,
        'travel_cost': 20.0,
    })


@pytest.fixture(scope='function')
def market_sales(storage, market_event):
    """Ten stickers and three prints at the craft fair."""
    return [
        create_sale(storage, {
            'event_id': market_event['id'], 'item_name': 'Sticker',
            'quantity': 10, 'sale_price': 5.0, 'cost_per_item': 2.0,
        }),
        create_sale(storage, {
            'event_id': market_event['id'], 'item_name': 'Print',
            'quantity': 3, 'sale_price': 10.0, 'cost_per_item': 4.0,
        }),
    ]

"""Database configuration and initialization."""
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Create SQLAlchemy base
Base = declarative_base()

# Global session and engine
engine = None
db_session = None


def build_engine(database_uri: str, echo: bool = False):
    """Create an engine suited to the configured database."""
    if database_uri.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        if database_uri in ('sqlite://', 'sqlite:///:memory:'):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs['poolclass'] = StaticPool
        return create_engine(database_uri, echo=echo, **kwargs)

    return create_engine(
        database_uri,
        echo=echo,
        pool_pre_ping=True,  # Enable connection health checks
        pool_size=5,
        max_overflow=10
    )


def init_db(app):
    """Initialize database connection and create tables."""
    global engine, db_session

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    engine = build_engine(database_uri, echo=app.config.get('SQLALCHEMY_ECHO', False))

    db_session = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )

    Base.query = db_session.query_property()

    # Import models so they are registered on the metadata
    from app import models  # noqa: F401
    Base.metadata.create_all(engine)

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def get_session():
    """Get database session."""
    return db_session

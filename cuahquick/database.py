import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from cuahquick.core import config

logger = logging.getLogger(__name__)

if not config.DATABASE_URL:
    raise RuntimeError("DATABASE_URL is required to connect to the database.")


def build_engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    options = {
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": config.DB_MAX_OVERFLOW,
        "pool_timeout": config.DB_POOL_TIMEOUT_SECONDS,
        "pool_pre_ping": True,
    }
    ssl_mode = config.DB_SSL_MODE.lower()
    if ssl_mode:
        if backend == "postgresql":
            options["connect_args"] = {"sslmode": config.DB_SSL_MODE}
        elif backend == "mysql" and ssl_mode != "disable":
            # PyMySQL enables TLS for any non-empty ssl dict.
            options["connect_args"] = {"ssl": {"check_hostname": ssl_mode == "verify-full"}}
    return options


engine = create_engine(config.DATABASE_URL, **build_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def init_db() -> None:
    # Register every model on Base.metadata before creating tables.
    from cuahquick.models import order, product, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%s)", engine.url.get_backend_name())


def shutdown_db() -> None:
    engine.dispose()
    logger.info("Database connection pool disposed")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

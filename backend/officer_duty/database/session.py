from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from officer_duty.config import settings

_database_url = settings.get_database_url()

_engine_options = {
    "echo": settings.DB_ECHO,
    "connect_args": settings.get_connect_args(),
    "pool_pre_ping": True,
}
if not _database_url.startswith("sqlite"):
    _engine_options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_OVERFLOW,
        pool_recycle=3600,
    )

engine = create_engine(_database_url, **_engine_options)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings

# attempt upserts need INSERT ... ON CONFLICT or ON DUPLICATE KEY
SUPPORTED_DIALECTS = ("sqlite", "postgresql", "mysql")


def build_engine(url: str, echo: bool = False, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, echo=echo, **kwargs)
    if engine.dialect.name not in SUPPORTED_DIALECTS:
        raise RuntimeError(
            f"Unsupported database \"{engine.dialect.name}\"; use one of: {', '.join(SUPPORTED_DIALECTS)}"
        )

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

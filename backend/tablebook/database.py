from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings
from .models import Base

settings = get_settings()


def _connect_args(url: str) -> dict[str, Any]:
    # Handlers run on the event loop thread while sessions may be opened elsewhere.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    echo=settings.echo_sql,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)

session_factory = sessionmaker(engine, expire_on_commit=False, class_=Session)


def init_db(bind: Engine | None = None) -> None:
    Base.metadata.create_all(bind or engine)

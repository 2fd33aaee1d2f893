"""Generate database engine / session factory"""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import SETTINGS
from .schema import Base


def make_session_factory(database_url: str | None = None, echo: bool = False) -> sessionmaker[Session]:
    """Engine + sessionmaker for the configured database. Tables are created if missing."""
    url = database_url or SETTINGS.database_url
    # Convert postgresql:// to postgresql+psycopg:// for psycopg3 compatibility
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, echo=echo, connect_args=connect_args)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, expire_on_commit=False)

"""Connection to the accounts database."""

from typing import Generator
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from .models import Base

logger = logging.getLogger(__name__)


class Database(object):
    """
    Owns the engine and hands out sessions.

    Open one at process start and :meth:`close` it at shutdown. Every
    :meth:`transaction` gets its own session, so stores may be used from
    several threads at once.
    """

    def __init__(self, uri: str, echo: bool = False) -> None:
        if 'sqlite' in uri:
            args = {"check_same_thread": False}
        else:
            args = {}
        logger.debug('New database engine for %s', uri.split('@')[-1])
        self.engine = create_engine(uri, echo=echo, connect_args=args,
                                    pool_pre_ping=True)
        self._sessions = sessionmaker(autocommit=False, autoflush=False,
                                      bind=self.engine)

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Context manager for database transaction."""
        session = self._sessions()
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                session.commit()
        except Exception as e:
            logger.error('Commit failed, rolling back: %s', str(e))
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(bind=self.engine)

    def is_available(self) -> bool:
        """Check our connection to the database."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text('SELECT 1'))
        except Exception as e:
            logger.error('Encountered an error talking to database: %s', e)
            return False
        return True

    def close(self) -> None:
        """Release all pooled connections."""
        self.engine.dispose()

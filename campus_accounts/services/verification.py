"""Pending and confirmed email verification codes."""

from typing import Optional
from datetime import datetime
import logging

from .. import domain
from ..util import as_utc
from .database import Database
from .models import DBVerification

logger = logging.getLogger(__name__)


class VerificationStore(object):
    """
    Verification records, at most one unconfirmed record per email.

    Confirmed records are kept but no longer match any lookup.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def delete_unconfirmed(self, email: str) -> int:
        """Remove pending codes for ``email``. Returns how many were removed."""
        with self.db.transaction() as session:
            deleted: int = session.query(DBVerification) \
                .filter(DBVerification.email == email) \
                .filter(DBVerification.is_auth.is_(False)) \
                .delete(synchronize_session=False)
            session.commit()
        logger.debug('Removed %i pending codes', deleted)
        return deleted

    def insert(self, record: domain.VerificationRecord) -> None:
        with self.db.transaction() as session:
            session.add(DBVerification(
                email=record.email,
                auth_code=record.code,
                date=_to_db_time(record.issued_at),
                is_auth=record.confirmed
            ))

    def find_unconfirmed(self, email: str, code: str) \
            -> Optional[domain.VerificationRecord]:
        """Get the pending record for ``email`` if its code is ``code``."""
        with self.db.transaction() as session:
            db_record = (
                session.query(DBVerification)
                .filter(DBVerification.email == email)
                .filter(DBVerification.auth_code == code)
                .filter(DBVerification.is_auth.is_(False))
                .first()
            )
            if db_record is None:
                return None
            return domain.VerificationRecord(
                email=db_record.email,
                code=db_record.auth_code,
                issued_at=as_utc(db_record.date),
                confirmed=bool(db_record.is_auth)
            )

    def mark_confirmed(self, email: str, code: str, when: datetime) -> None:
        """Confirm the record for ``email`` and ``code`` as of ``when``."""
        with self.db.transaction() as session:
            session.query(DBVerification) \
                .filter(DBVerification.email == email) \
                .filter(DBVerification.auth_code == code) \
                .update({DBVerification.is_auth: True,
                         DBVerification.date: _to_db_time(when)},
                        synchronize_session=False)
            session.commit()


def _to_db_time(t: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    return as_utc(t).replace(tzinfo=None)

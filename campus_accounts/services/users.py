"""Provide methods for working with user accounts."""

from typing import Optional, Tuple
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from .. import domain
from ..exceptions import DuplicateAccount
from .database import Database
from .models import DBUser, DBProfile

logger = logging.getLogger(__name__)


class UserStore(object):
    """User account lookups and inserts."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def find_by_id(self, user_id: str) -> Optional[domain.UserAccount]:
        """Get an account by its id (email)."""
        with self.db.transaction() as session:
            db_user = session.get(DBUser, user_id)
            return _to_domain(db_user) if db_user is not None else None

    def find_by_id_or_nickname(self, user_id: str, nickname: str) \
            -> Optional[domain.UserAccount]:
        """Get an account that has either the given id or nickname."""
        with self.db.transaction() as session:
            db_user = (
                session.query(DBUser)
                .filter(or_(DBUser.id == user_id, DBUser.nickname == nickname))
                .first()
            )
            return _to_domain(db_user) if db_user is not None else None

    def find_by_credentials(self, user_id: str, password_digest: str) \
            -> Optional[Tuple[domain.UserAccount, Optional[str]]]:
        """
        Get an account by id and password digest in a single lookup.

        Returns
        -------
        :class:`.domain.UserAccount`
        str or None
            Storage key of the profile image, if the user has a profile with
            an image.

        """
        with self.db.transaction() as session:
            row = (
                session.query(DBUser, DBProfile.image)
                .outerjoin(DBProfile, DBProfile.user_id == DBUser.id)
                .filter(DBUser.id == user_id)
                .filter(DBUser.password == password_digest)
                .first()
            )
            if row is None:
                return None
            db_user, image = row
            return _to_domain(db_user), image

    def find_by_student(self, uni_id: str, name: str, birthday: str) \
            -> Optional[domain.UserAccount]:
        """Get the account already bound to a student identity, if any."""
        with self.db.transaction() as session:
            db_user = (
                session.query(DBUser)
                .filter(DBUser.uni_id == uni_id)
                .filter(DBUser.name == name)
                .filter(DBUser.birthday == birthday)
                .first()
            )
            return _to_domain(db_user) if db_user is not None else None

    def insert(self, account: domain.UserAccount) -> None:
        """
        Add a new account and its empty, closed profile.

        Raises
        ------
        :class:`DuplicateAccount`
            The id or nickname is already taken.

        """
        try:
            with self.db.transaction() as session:
                db_user = DBUser(
                    id=account.id,
                    nickname=account.nickname,
                    password=account.password_digest,
                    is_admin=account.is_admin,
                    is_student=account.is_student,
                    uni_id=account.uni_id,
                    name=account.name,
                    birthday=account.birthday
                )
                session.add(db_user)
                session.add(DBProfile(user=db_user, is_open_information=False))
        except IntegrityError as e:
            logger.debug('Insert of %s rejected: %s', account.id, e)
            raise DuplicateAccount(account.id) from e


def _to_domain(db_user: DBUser) -> domain.UserAccount:
    return domain.UserAccount(
        id=db_user.id,
        nickname=db_user.nickname,
        password_digest=db_user.password,
        is_admin=bool(db_user.is_admin),
        is_student=bool(db_user.is_student),
        uni_id=db_user.uni_id,
        name=db_user.name,
        birthday=db_user.birthday
    )

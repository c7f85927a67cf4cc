"""Provide methods for reading and updating user profiles."""

from typing import Any, Dict, List, Optional, Type
import json
import logging

from .. import domain
from .database import Database
from .models import DBJobCategory, DBProfile, DBTechnology, DBUser

logger = logging.getLogger(__name__)

UNCHANGED = object()
"""Marks the image reference as untouched in :meth:`ProfileStore.update`."""


class ProfileStore(object):
    """Profiles and the lookup tables their positions and technologies use."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, user_id: str) -> Optional[domain.ProfileRecord]:
        """Load a profile together with the owner's nickname."""
        with self.db.transaction() as session:
            row = (
                session.query(DBProfile, DBUser.nickname)
                .join(DBUser, DBProfile.user_id == DBUser.id)
                .filter(DBProfile.user_id == user_id)
                .first()
            )
            if row is None:
                return None
            db_profile, nickname = row
            return domain.ProfileRecord(
                user_id=db_profile.user_id,
                nickname=nickname,
                is_open=bool(db_profile.is_open_information),
                image=db_profile.image or None,
                positions=_loads(db_profile.positions),
                technologies=_loads(db_profile.technologies),
                introduction=db_profile.introduction or None,
                awards=_loads(db_profile.awards),
                links=_loads(db_profile.links)
            )

    def get_image(self, user_id: str) -> Optional[str]:
        """Get the storage key of the profile image."""
        with self.db.transaction() as session:
            db_profile = session.get(DBProfile, user_id)
            if db_profile is None:
                return None
            return db_profile.image or None

    def update(self, user_id: str, update: domain.ProfileUpdate,
               image: Any = UNCHANGED) -> None:
        """
        Overwrite every optional field of a profile.

        Parameters
        ----------
        user_id : str
        update : :class:`.domain.ProfileUpdate`
            Fields that are ``None`` are cleared.
        image : str or None
            New storage key for the profile image, ``None`` to clear it. Left
            alone if not given.

        """
        values: Dict[Any, Any] = {
            DBProfile.positions: _dumps(update.positions),
            DBProfile.technologies: _dumps(update.technologies),
            DBProfile.introduction: update.introduction or None,
            DBProfile.awards: _dumps(
                [award.model_dump(by_alias=True) for award in update.awards]
                if update.awards else None
            ),
            DBProfile.links: _dumps(update.links),
        }
        if image is not UNCHANGED:
            values[DBProfile.image] = image
        with self.db.transaction() as session:
            session.query(DBProfile) \
                .filter(DBProfile.user_id == user_id) \
                .update(values, synchronize_session=False)
            session.commit()

    def set_open(self, user_id: str, is_open: bool) -> None:
        with self.db.transaction() as session:
            session.query(DBProfile) \
                .filter(DBProfile.user_id == user_id) \
                .update({DBProfile.is_open_information: is_open},
                        synchronize_session=False)
            session.commit()

    def positions(self, ids: List[int]) -> List[domain.Category]:
        """Resolve position ids against the job category table."""
        return self._lookup(DBJobCategory, ids)

    def technologies(self, ids: List[int]) -> List[domain.Category]:
        """Resolve technology ids against the technology table."""
        return self._lookup(DBTechnology, ids)

    def _lookup(self, model: Type, ids: List[int]) -> List[domain.Category]:
        if not ids:
            return []
        with self.db.transaction() as session:
            rows = session.query(model).filter(model.id.in_(ids)).all()
            return [domain.Category(id=row.id, name=row.name) for row in rows]


def _loads(value: Optional[str]) -> Optional[Any]:
    if not value:
        return None
    return json.loads(value)


def _dumps(value: Optional[Any]) -> Optional[str]:
    if not value:
        return None
    return json.dumps(value, ensure_ascii=False)

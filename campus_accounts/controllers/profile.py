"""
Controllers for viewing and editing user profiles.

Owners always see their whole profile. Other users, and anonymous visitors,
see the optional fields and completeness score only if the owner has opened
the profile.
"""

from typing import Callable, Optional, Tuple, Union
import logging

from starlette.concurrency import run_in_threadpool

from .. import domain, scoring
from ..exceptions import ImageUploadFailed, ProfileNotFound, StorageFailed
from ..services import ObjectStorage, ProfileStore
from ..services.profiles import UNCHANGED
from .util import flow_boundary

logger = logging.getLogger(__name__)

ImageTransform = Callable[[bytes], bytes]

ProfileData = Tuple[domain.Profile, Optional[int]]


def keep_image(data: bytes) -> bytes:
    """Default image transform: store uploads as they are."""
    return data


class ImageUpload(object):
    """A newly uploaded profile image."""

    def __init__(self, data: bytes, filename: str) -> None:
        self.data = data
        self.filename = filename


class ProfileFlow(object):
    """Profile retrieval, editing and visibility."""

    def __init__(self, profiles: ProfileStore, storage: ObjectStorage,
                 resize: ImageTransform = keep_image) -> None:
        self.profiles = profiles
        self.storage = storage
        self.resize = resize

    @flow_boundary
    async def get_profile(self, user_id: str,
                          requester: Optional[str] = None) -> ProfileData:
        """
        Assemble the profile of ``user_id`` as seen by ``requester``.

        Returns
        -------
        :class:`.domain.Profile`
        int or None
            Completeness score; ``None`` when the optional fields are
            withheld from the requester.

        Raises
        ------
        :class:`ProfileNotFound`

        """
        record = await run_in_threadpool(self.profiles.get, user_id)
        if record is None:
            raise ProfileNotFound()

        is_me = requester == user_id
        profile = domain.Profile(id=record.user_id, nickname=record.nickname,
                                 is_open=record.is_open, is_me=is_me)
        if not is_me and not record.is_open:
            return profile, None

        profile.introduction = record.introduction
        profile.awards = record.awards
        profile.links = record.links
        if record.positions:
            profile.positions = await run_in_threadpool(
                self.profiles.positions, record.positions)
        if record.technologies:
            profile.technologies = await run_in_threadpool(
                self.profiles.technologies, record.technologies)
        if record.image:
            profile.image = await run_in_threadpool(
                self.storage.get_object_url, record.image)
        return profile, scoring.score(profile)

    @flow_boundary
    async def update_profile(self, user_id: str, update: domain.ProfileUpdate,
                             image: Union[ImageUpload, str, None] = None) \
            -> ProfileData:
        """
        Replace the optional fields of the owner's profile.

        Parameters
        ----------
        user_id : str
        update : :class:`.domain.ProfileUpdate`
            Awards are stored sorted by award date.
        image : :class:`ImageUpload` or str or None
            A string keeps the current image. Otherwise the current image is
            removed, and replaced by the upload if there is one.

        Raises
        ------
        :class:`ImageUploadFailed`

        """
        if update.awards:
            update.awards = sorted(update.awards,
                                   key=lambda award: award.awarded_at)

        new_image = UNCHANGED
        if not isinstance(image, str):
            await self._remove_image(user_id)
            new_image = None
            if image is not None:
                new_image = await self._store_image(user_id, image)

        await run_in_threadpool(self.profiles.update, user_id, update,
                                new_image)
        return await self.get_profile(user_id, user_id)

    @flow_boundary
    async def set_open(self, user_id: str, is_open: bool) -> bool:
        """Open or close the profile to other users."""
        await run_in_threadpool(self.profiles.set_open, user_id, is_open)
        return is_open

    async def _remove_image(self, user_id: str) -> None:
        key = await run_in_threadpool(self.profiles.get_image, user_id)
        if not key:
            return
        try:
            await run_in_threadpool(self.storage.delete, key)
        except StorageFailed as e:
            logger.warning('Could not delete old profile image: %s', e)

    async def _store_image(self, user_id: str, image: ImageUpload) -> str:
        try:
            data = self.resize(image.data)
            key: str = await run_in_threadpool(
                self.storage.upload, data,
                f'profile/{user_id}/{image.filename}')
        except (StorageFailed, ValueError, OSError) as e:
            logger.error('Profile image upload failed: %s', e)
            raise ImageUploadFailed() from e
        return key

"""
Email verification, login and access token renewal.

An email address is verified by sending it a short random code that must be
confirmed within :data:`.config.VERIFICATION_CODE_VALIDITY` minutes. Only the
most recent code for an address can be confirmed: requesting a new one
removes any code still pending.

Logging in with an id and password yields a short-lived access token and a
longer-lived refresh token. The refresh token can only be exchanged for new
access tokens.
"""

from typing import Callable, Optional
from datetime import datetime, timedelta
import asyncio
import logging

from starlette.concurrency import run_in_threadpool

from .. import domain
from ..exceptions import AccountNotFound, ExpiredCode, InvalidCode, \
    InvalidCredentials, InvalidFormat, StorageFailed
from ..passwords import PasswordHasher, hash_password
from ..services import MailSession, ObjectStorage, UserStore, \
    VerificationStore
from ..tokens import ACCESS, REFRESH, TokenIssuer
from ..util import generate_code, is_valid_email, now, require
from .util import flow_boundary

logger = logging.getLogger(__name__)

CODE_LENGTH = 8
CODE_VALIDITY = timedelta(minutes=5)


class AuthFlow(object):
    """Verification codes, login and token renewal."""

    def __init__(self, users: UserStore, verifications: VerificationStore,
                 mail: MailSession, storage: ObjectStorage,
                 tokens: TokenIssuer, hasher: PasswordHasher = hash_password,
                 clock: Callable[[], datetime] = now,
                 code_length: int = CODE_LENGTH,
                 code_validity: timedelta = CODE_VALIDITY) -> None:
        self.users = users
        self.verifications = verifications
        self.mail = mail
        self.storage = storage
        self.tokens = tokens
        self.hasher = hasher
        self.clock = clock
        self.code_length = code_length
        self.code_validity = code_validity

    @flow_boundary
    async def request_code(self, email: Optional[str]) -> None:
        """
        Send a new verification code to ``email``.

        The code is never returned; the only way to learn it is to read the
        message. Mail delivery and storing the code run concurrently and
        must both succeed. If one of them fails the other is not undone; the
        next request for the same address removes a stale code.

        Raises
        ------
        :class:`InvalidRequest`
        :class:`InvalidFormat`
        :class:`Unexpected`

        """
        require(email=email)
        if not is_valid_email(email):
            raise InvalidFormat()

        code = generate_code(self.code_length)
        record = domain.VerificationRecord(email=email, code=code,
                                           issued_at=self.clock())
        await run_in_threadpool(self.verifications.delete_unconfirmed, email)
        await asyncio.gather(
            run_in_threadpool(self.mail.send_verification_code, email, code),
            run_in_threadpool(self.verifications.insert, record)
        )
        logger.debug('Sent verification code')

    @flow_boundary
    async def confirm_code(self, email: Optional[str],
                           code: Optional[str]) -> None:
        """
        Confirm the pending code for ``email``.

        A wrong code and the absence of any pending code are reported the
        same way.

        Raises
        ------
        :class:`InvalidRequest`
        :class:`InvalidCode`
        :class:`ExpiredCode`
            The code was sent :data:`CODE_VALIDITY` or longer ago.

        """
        require(email=email, code=code)
        current = self.clock()
        record = await run_in_threadpool(self.verifications.find_unconfirmed,
                                         email, code)
        if record is None:
            raise InvalidCode()
        if current - record.issued_at >= self.code_validity:
            logger.debug('Code issued at %s has expired', record.issued_at)
            raise ExpiredCode()
        await run_in_threadpool(self.verifications.mark_confirmed, email, code,
                                current)

    @flow_boundary
    async def login(self, user_id: Optional[str],
                    password: Optional[str]) -> domain.LoginResult:
        """
        Check credentials and issue an access and a refresh token.

        Raises
        ------
        :class:`InvalidRequest`
        :class:`InvalidFormat`
        :class:`InvalidCredentials`
            Unknown id or wrong password; the two are not distinguished.

        """
        require(id=user_id, password=password)
        if not is_valid_email(user_id):
            raise InvalidFormat()

        found = await run_in_threadpool(self.users.find_by_credentials,
                                        user_id, self.hasher(password))
        if found is None:
            logger.debug('Authentication failed')
            raise InvalidCredentials()
        account, image_key = found

        image = None
        if image_key:
            image = await self._image_url(image_key)

        return domain.LoginResult(
            access_token=self.tokens.issue(account.id, ACCESS),
            refresh_token=self.tokens.issue(account.id, REFRESH),
            email=account.id,
            nickname=account.nickname,
            is_admin=account.is_admin,
            image=image
        )

    @flow_boundary
    async def refresh_access_token(self, claims: domain.TokenClaims) \
            -> domain.RefreshResult:
        """
        Issue a new access token for the holder of a verified refresh token.

        The refresh token itself is left as it is.

        Raises
        ------
        :class:`AccountNotFound`
            The account was removed after the refresh token was issued.

        """
        account = await run_in_threadpool(self.users.find_by_id, claims.email)
        if account is None:
            raise AccountNotFound()
        return domain.RefreshResult(
            access_token=self.tokens.issue(account.id, ACCESS),
            email=account.id,
            nickname=account.nickname,
            is_admin=account.is_admin
        )

    async def _image_url(self, key: str) -> Optional[str]:
        try:
            url: str = await run_in_threadpool(self.storage.get_object_url, key)
        except StorageFailed as e:
            logger.warning('Could not resolve profile image: %s', e)
            return None
        return url

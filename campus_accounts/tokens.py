"""Functions for working with access and refresh tokens."""

from datetime import datetime, timedelta
import logging

import jwt
from pytz import UTC

from . import domain
from .exceptions import ExpiredToken, InvalidToken
from .util import now

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'
ACCESS = 'access'
REFRESH = 'refresh'


class TokenIssuer(object):
    """
    Signs and verifies bearer tokens.

    Tokens are not stored anywhere; a token is valid as long as its signature
    checks out and it has not expired.
    """

    def __init__(self, secret: str, access_expires: int = 300,
                 refresh_expires: int = 86400) -> None:
        self._secret = secret
        self._expires = {ACCESS: access_expires, REFRESH: refresh_expires}

    def issue(self, email: str, purpose: str) -> str:
        """Encode a token for ``email`` usable only for ``purpose``."""
        issued = now()
        payload = {
            'email': email,
            'sub': purpose,
            'iat': issued,
            'exp': issued + timedelta(seconds=self._expires[purpose])
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str, expected_purpose: str) -> domain.TokenClaims:
        """
        Decode a token and check that it was issued for ``expected_purpose``.

        Raises
        ------
        :class:`ExpiredToken`
        :class:`InvalidToken`
            Raised if the token is malformed, forged, or has another purpose.

        """
        try:
            data: dict = jwt.decode(token, self._secret, algorithms=[ALGORITHM],
                                    options={'require': ['exp', 'sub']})
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken() from e
        except jwt.InvalidTokenError as e:
            logger.debug('Not a valid token: %s', e)
            raise InvalidToken() from e

        if data['sub'] != expected_purpose or not data.get('email'):
            logger.debug('Token for %s presented where %s is required',
                         data['sub'], expected_purpose)
            raise InvalidToken()
        return domain.TokenClaims(
            email=data['email'],
            purpose=data['sub'],
            expires=datetime.fromtimestamp(data['exp'], tz=UTC)
        )

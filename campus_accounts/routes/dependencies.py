"""Request dependencies: flows and bearer token checks."""

from typing import Optional
import logging

from fastapi import Depends, Header, Request

from .. import domain
from ..controllers import AuthFlow, ProfileFlow, RegistrationFlow
from ..exceptions import InvalidToken
from ..tokens import ACCESS, REFRESH, TokenIssuer

log = logging.getLogger(__name__)


def auth_flow(request: Request) -> AuthFlow:
    return request.app.extra['auth_flow']


def registration_flow(request: Request) -> RegistrationFlow:
    return request.app.extra['registration_flow']


def profile_flow(request: Request) -> ProfileFlow:
    return request.app.extra['profile_flow']


def token_issuer(request: Request) -> TokenIssuer:
    return request.app.extra['tokens']


async def bearer_token(Authorization: Optional[str] = Header(None)) \
        -> Optional[str]:
    """Gets the JWT from an Authorization Bearer header."""
    if not Authorization:
        return None
    parts = Authorization.split()
    if not parts or parts[0].lower() != "bearer":
        log.debug("Authorization header lacked bearer")
        return None
    if len(parts) != 2:
        log.debug("Authorization header not 2 parts")
        return None
    return parts[1]


async def access_claims(token: Optional[str] = Depends(bearer_token),
                        tokens: TokenIssuer = Depends(token_issuer)) \
        -> domain.TokenClaims:
    """Require a valid access token."""
    if not token:
        raise InvalidToken()
    return tokens.verify(token, ACCESS)


async def refresh_claims(token: Optional[str] = Depends(bearer_token),
                         tokens: TokenIssuer = Depends(token_issuer)) \
        -> domain.TokenClaims:
    """Require a valid refresh token."""
    if not token:
        raise InvalidToken()
    return tokens.verify(token, REFRESH)


async def optional_email(token: Optional[str] = Depends(bearer_token),
                         tokens: TokenIssuer = Depends(token_issuer)) \
        -> Optional[str]:
    """Email of the requester if they sent a valid access token."""
    if not token:
        return None
    try:
        return tokens.verify(token, ACCESS).email
    except InvalidToken as e:
        log.debug("Ignoring bad token on public route: %s", e)
        return None

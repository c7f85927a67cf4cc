"""Defines account, verification and profile concepts for the accounts service.

Models serialize with camelCase aliases, which is what API clients send and
expect. Use ``model_dump(by_alias=True)`` when rendering a response.
"""

from typing import List, Literal, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerificationRecord(CamelModel):
    """A code sent to an email address to prove ownership of it."""

    email: str
    code: str
    """Case-sensitive alphanumeric code."""

    issued_at: datetime
    """When the code was sent, or when it was confirmed."""

    confirmed: bool = False


class UserAccount(CamelModel):
    """A registered account. The verified email is the account id."""

    id: str
    nickname: str
    password_digest: str
    is_admin: bool = False
    is_student: bool = False
    """Student accounts are bound to a record in the student registry."""

    uni_id: Optional[str] = None
    name: Optional[str] = None
    birthday: Optional[str] = None
    """``YYYYMMDD``."""


class Student(CamelModel):
    """An entry of the student registry that student accounts must match."""

    uni_id: str
    name: str
    birthday: str


class Registration(CamelModel):
    """Data submitted to create an account.

    Every field is optional here; :class:`.RegistrationFlow` decides which
    ones are required.
    """

    id: Optional[str] = None
    nickname: Optional[str] = None
    password: Optional[str] = None
    verify_password: Optional[str] = None
    is_student: Optional[bool] = None
    uni_id: Optional[str] = Field(default=None, alias='uniID')
    name: Optional[str] = None
    birthday: Optional[str] = None


class Category(CamelModel):
    """A row of a lookup table (job positions, technologies)."""

    id: int
    name: str


class Award(CamelModel):
    name: str
    awarded_at: str


class ProfileRecord(CamelModel):
    """A profile as stored, with lookups still unresolved."""

    user_id: str
    nickname: str
    is_open: bool = False
    image: Optional[str] = None
    """Object storage key."""

    positions: Optional[List[int]] = None
    technologies: Optional[List[int]] = None
    introduction: Optional[str] = None
    awards: Optional[List[Award]] = None
    links: Optional[List[str]] = None


class Profile(CamelModel):
    """A profile as shown to a requester."""

    id: str
    nickname: str
    is_open: bool
    is_me: bool
    image: Optional[str] = None
    """Retrievable URL of the profile image."""

    positions: Optional[List[Category]] = None
    technologies: Optional[List[Category]] = None
    introduction: Optional[str] = None
    awards: Optional[List[Award]] = None
    links: Optional[List[str]] = None


class ProfileUpdate(CamelModel):
    """New values for the optional profile fields.

    A field left as ``None`` is cleared; nothing is merged.
    """

    positions: Optional[List[int]] = None
    technologies: Optional[List[int]] = None
    introduction: Optional[str] = None
    awards: Optional[List[Award]] = None
    links: Optional[List[str]] = None


class TokenClaims(CamelModel):
    """Claims carried by an access or refresh token."""

    email: str
    purpose: Literal['access', 'refresh']
    expires: datetime


class LoginResult(CamelModel):
    access_token: str
    refresh_token: str
    email: str
    nickname: str
    is_admin: bool
    image: Optional[str] = None


class RefreshResult(CamelModel):
    access_token: str
    email: str
    nickname: str
    is_admin: bool

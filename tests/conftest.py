"""Shared fixtures.

Each test gets a fresh sqlite database file; mail and object storage are
mocks, so nothing leaves the process.
"""
from datetime import datetime, timedelta
from unittest import mock

import pytest
from fastapi.testclient import TestClient
from pytz import UTC

from campus_accounts import domain
from campus_accounts.controllers import AuthFlow, ProfileFlow, \
    RegistrationFlow
from campus_accounts.factory import create_app
from campus_accounts.passwords import hash_password
from campus_accounts.services import Database, MailSession, ObjectStorage, \
    ProfileStore, StudentStore, UserStore, VerificationStore
from campus_accounts.services.models import DBJobCategory, DBStudent, \
    DBTechnology
from campus_accounts.tokens import TokenIssuer

EMAIL = 'first@last.iv'
NICKNAME = 'foouser'
PASSWORD = 'thepassword'


class FakeClock:
    """Stands in for :func:`campus_accounts.util.now`."""

    def __init__(self, t: datetime) -> None:
        self.t = t

    def __call__(self) -> datetime:
        return self.t

    def advance(self, **kwargs) -> None:
        self.t = self.t + timedelta(**kwargs)


@pytest.fixture
def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path}/test.db")
    database.create_all()
    yield database
    database.drop_all()
    database.close()


@pytest.fixture
def users(db):
    return UserStore(db)


@pytest.fixture
def verifications(db):
    return VerificationStore(db)


@pytest.fixture
def students(db):
    with db.transaction() as session:
        session.add(DBStudent(uni_id='20231234', name='Kim Minji',
                              birthday='20000229'))
    return StudentStore(db)


@pytest.fixture
def profiles(db):
    with db.transaction() as session:
        session.add_all([
            DBJobCategory(id=1, name='Frontend'),
            DBJobCategory(id=2, name='Backend'),
            DBTechnology(id=1, name='Python'),
            DBTechnology(id=2, name='TypeScript'),
            DBTechnology(id=3, name='Go'),
        ])
    return ProfileStore(db)


@pytest.fixture
def mail():
    return mock.MagicMock(spec=MailSession)


@pytest.fixture
def storage():
    _storage = mock.MagicMock(spec=ObjectStorage)
    _storage.get_object_url.side_effect = \
        lambda key: f"https://files.example.com/{key}"
    _storage.upload.side_effect = lambda data, path: path
    return _storage


@pytest.fixture
def secret():
    return "testing_secret"


@pytest.fixture
def tokens(secret):
    return TokenIssuer(secret, access_expires=300, refresh_expires=86400)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def auth_flow(users, verifications, mail, storage, tokens, clock):
    return AuthFlow(users, verifications, mail, storage, tokens, clock=clock)


@pytest.fixture
def registration_flow(users, students):
    return RegistrationFlow(users, students)


@pytest.fixture
def profile_flow(profiles, storage):
    return ProfileFlow(profiles, storage)


@pytest.fixture
def account(users):
    """An ordinary account with an empty, closed profile."""
    user = domain.UserAccount(id=EMAIL, nickname=NICKNAME,
                              password_digest=hash_password(PASSWORD))
    users.insert(user)
    return user


@pytest.fixture
def client(db, mail, storage, secret, profiles, students):
    app = create_app(db=db, mail=mail, storage=storage, jwt_secret=secret)
    return TestClient(app)

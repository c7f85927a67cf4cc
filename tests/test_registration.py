"""Tests for :mod:`campus_accounts.controllers.registration`."""

from unittest import mock

import pytest

from campus_accounts import domain
from campus_accounts.controllers import RegistrationFlow
from campus_accounts.controllers import registration as reg
from campus_accounts.exceptions import Conflict, DuplicateAccount, \
    Forbidden, InvalidBirthday, InvalidRequest, PasswordMismatch
from campus_accounts.passwords import hash_password

from .conftest import EMAIL, NICKNAME, PASSWORD

STUDENT = {'uni_id': '20231234', 'name': 'Kim Minji', 'birthday': '20000229'}


def _registration(**fields) -> domain.Registration:
    values = {'id': 'new@user.com', 'nickname': 'newbie',
              'password': 'secret1', 'verify_password': 'secret1',
              'is_student': False}
    values.update(fields)
    return domain.Registration(**values)


@pytest.mark.asyncio
async def test_register(registration_flow, users):
    await registration_flow.register(_registration())
    account = users.find_by_id('new@user.com')
    assert account.nickname == 'newbie'
    assert account.password_digest == hash_password('secret1')
    assert not account.is_student
    assert not account.is_admin
    assert account.uni_id is None


@pytest.mark.asyncio
async def test_register_creates_closed_profile(registration_flow, profiles):
    await registration_flow.register(_registration())
    profile = profiles.get('new@user.com')
    assert profile.nickname == 'newbie'
    assert profile.is_open is False
    assert profile.introduction is None


@pytest.mark.asyncio
async def test_register_student(registration_flow, users):
    await registration_flow.register(_registration(is_student=True,
                                                   **STUDENT))
    account = users.find_by_id('new@user.com')
    assert account.is_student
    assert account.uni_id == '20231234'
    assert account.birthday == '20000229'


@pytest.mark.asyncio
async def test_register_missing_fields(registration_flow):
    with pytest.raises(InvalidRequest):
        await registration_flow.register(_registration(nickname=''))
    with pytest.raises(InvalidRequest):
        await registration_flow.register(_registration(is_student=None))
    with pytest.raises(InvalidRequest):
        await registration_flow.register(
            _registration(is_student=True, uni_id='20231234', name='Kim')
        )


@pytest.mark.asyncio
async def test_register_password_mismatch(registration_flow, users):
    with pytest.raises(PasswordMismatch):
        await registration_flow.register(_registration(verify_password='x'))
    assert users.find_by_id('new@user.com') is None


@pytest.mark.asyncio
async def test_register_invalid_birthday(registration_flow):
    for birthday in ['20230230', '19000229', '20230431', '2000022']:
        with pytest.raises(InvalidBirthday):
            await registration_flow.register(_registration(
                is_student=True, uni_id='20231234', name='Kim Minji',
                birthday=birthday
            ))


@pytest.mark.asyncio
async def test_register_duplicate_id(registration_flow, account):
    with pytest.raises(Conflict) as e:
        await registration_flow.register(_registration(id=EMAIL))
    assert str(e.value) == reg.DUPLICATE_ID


@pytest.mark.asyncio
async def test_register_duplicate_nickname(registration_flow, account):
    with pytest.raises(Conflict) as e:
        await registration_flow.register(_registration(nickname=NICKNAME))
    assert str(e.value) == reg.DUPLICATE_NICKNAME


@pytest.mark.asyncio
async def test_register_unknown_student(registration_flow, users):
    with pytest.raises(Forbidden) as e:
        await registration_flow.register(_registration(
            is_student=True, uni_id='20239999', name='Kim Minji',
            birthday='20000229'
        ))
    assert str(e.value) == reg.UNREGISTERED_STUDENT
    assert users.find_by_id('new@user.com') is None


@pytest.mark.asyncio
async def test_register_student_bound(registration_flow):
    """A student identity can be bound to one account only."""
    await registration_flow.register(_registration(is_student=True,
                                                   **STUDENT))
    with pytest.raises(Conflict) as e:
        await registration_flow.register(_registration(
            id='other@user.com', nickname='other', is_student=True, **STUDENT
        ))
    assert str(e.value) == reg.ACCOUNT_EXISTS


@pytest.mark.asyncio
async def test_register_student_bound_checked_first(registration_flow):
    """A bound student identity is reported before a duplicate id."""
    await registration_flow.register(_registration(is_student=True,
                                                   **STUDENT))
    with pytest.raises(Conflict) as e:
        await registration_flow.register(_registration(is_student=True,
                                                       **STUDENT))
    assert str(e.value) == reg.ACCOUNT_EXISTS


@pytest.mark.asyncio
async def test_register_lost_race(students):
    """An insert rejected by the store is still reported as a conflict."""
    users = mock.MagicMock()
    users.find_by_id_or_nickname.return_value = None
    users.insert.side_effect = DuplicateAccount('taken')
    flow = RegistrationFlow(users, students)
    with pytest.raises(Conflict):
        await flow.register(_registration())


@pytest.mark.asyncio
async def test_register_store_rejects_duplicate(users, registration_flow,
                                                account):
    """The unique constraint holds even if the pre-check is skipped."""
    with pytest.raises(DuplicateAccount):
        users.insert(domain.UserAccount(id='x@user.com', nickname=NICKNAME,
                                        password_digest=PASSWORD))


@pytest.mark.asyncio
async def test_register_duplicate_id_before_unknown_student(registration_flow,
                                                            account):
    """A taken id is reported before a missing registry entry."""
    with pytest.raises(Conflict) as e:
        await registration_flow.register(_registration(
            id=EMAIL, is_student=True, uni_id='20239999', name='Kim Minji',
            birthday='20000229'
        ))
    assert str(e.value) == reg.DUPLICATE_ID


@pytest.mark.asyncio
async def test_register_duplicate_nickname_before_unknown_student(
        registration_flow, account):
    with pytest.raises(Conflict) as e:
        await registration_flow.register(_registration(
            nickname=NICKNAME, is_student=True, uni_id='20239999',
            name='Kim Minji', birthday='20000229'
        ))
    assert str(e.value) == reg.DUPLICATE_NICKNAME


@pytest.mark.asyncio
async def test_register_non_ascii_birthday(registration_flow):
    """Digits outside ASCII are an invalid birthday, not a crash."""
    with pytest.raises(InvalidBirthday):
        await registration_flow.register(_registration(
            is_student=True, uni_id='20231234', name='Kim Minji',
            birthday='2000022²'
        ))


@pytest.mark.asyncio
async def test_register_validates_before_lookups(registration_flow):
    """No store lookup is started for a registration that fails validation."""
    with mock.patch('campus_accounts.controllers.registration'
                    '.run_in_threadpool') as mock_run:
        with pytest.raises(InvalidBirthday):
            await registration_flow.register(_registration(
                is_student=True, uni_id='20231234', name='Kim Minji',
                birthday='20230230'
            ))
        with pytest.raises(InvalidRequest):
            await registration_flow.register(_registration(
                is_student=True, uni_id='20231234', name='Kim Minji'
            ))
    mock_run.assert_not_called()

"""
Account registration.

Anyone with a verified email address can register an ordinary account.
Student accounts additionally carry a university id, name and birth date,
which must match an entry in the student registry; a student identity can be
bound to one account only.
"""

from typing import Optional
import asyncio
import logging

from starlette.concurrency import run_in_threadpool

from .. import domain
from ..exceptions import Conflict, DuplicateAccount, Forbidden, \
    InvalidBirthday, PasswordMismatch
from ..passwords import PasswordHasher, hash_password
from ..services import StudentStore, UserStore
from ..util import is_valid_birthday, require
from .util import flow_boundary

logger = logging.getLogger(__name__)

ACCOUNT_EXISTS = 'An account already exists for this student.'
DUPLICATE_ID = 'This id (email) is already registered.'
DUPLICATE_NICKNAME = 'This nickname is already taken.'
UNREGISTERED_STUDENT = 'The student information is not registered.'


class RegistrationFlow(object):
    """Creates accounts after checking that nothing collides."""

    def __init__(self, users: UserStore, students: StudentStore,
                 hasher: PasswordHasher = hash_password) -> None:
        self.users = users
        self.students = students
        self.hasher = hasher

    @flow_boundary
    async def register(self, registration: domain.Registration) -> None:
        """
        Register a new account.

        The uniqueness checks are a pre-check only. Two concurrent
        registrations can both pass them; the store's unique constraints
        reject the second insert, which is reported as :class:`Conflict`.

        Raises
        ------
        :class:`InvalidRequest`
        :class:`PasswordMismatch`
        :class:`InvalidBirthday`
        :class:`Conflict`
        :class:`Forbidden`
            Student registration without a matching registry entry.

        """
        r = registration
        require(id=r.id, nickname=r.nickname, password=r.password,
                verify_password=r.verify_password, is_student=r.is_student)
        if r.password != r.verify_password:
            raise PasswordMismatch()

        if r.is_student:
            require(uni_id=r.uni_id, name=r.name, birthday=r.birthday)
            if not is_valid_birthday(r.birthday):
                raise InvalidBirthday()

        lookups = [run_in_threadpool(self.users.find_by_id_or_nickname,
                                     r.id, r.nickname)]
        if r.is_student:
            lookups.append(run_in_threadpool(self.students.find, r.uni_id,
                                             r.name, r.birthday))
            lookups.append(run_in_threadpool(self.users.find_by_student,
                                             r.uni_id, r.name, r.birthday))

        found = await asyncio.gather(*lookups)
        existing: Optional[domain.UserAccount] = found[0]

        if r.is_student and found[2] is not None:
            raise Conflict(ACCOUNT_EXISTS)
        if existing is not None:
            if existing.id == r.id:
                raise Conflict(DUPLICATE_ID)
            if existing.nickname == r.nickname:
                raise Conflict(DUPLICATE_NICKNAME)
        if r.is_student and found[1] is None:
            raise Forbidden(UNREGISTERED_STUDENT)

        account = domain.UserAccount(
            id=r.id,
            nickname=r.nickname,
            password_digest=self.hasher(r.password),
            is_student=bool(r.is_student),
            uni_id=r.uni_id if r.is_student else None,
            name=r.name if r.is_student else None,
            birthday=r.birthday if r.is_student else None
        )
        try:
            await run_in_threadpool(self.users.insert, account)
        except DuplicateAccount as e:
            logger.debug('Lost registration race for %s', r.id)
            raise Conflict() from e
        logger.info('Registered new %s account',
                    'student' if r.is_student else 'ordinary')

"""
Stores and external services used by the account flows.

Stores share a :class:`.Database`; mail and object storage talk to SMTP and
S3 respectively.
"""

from .database import Database
from .users import UserStore
from .verification import VerificationStore
from .students import StudentStore
from .profiles import ProfileStore
from .mail import MailSession
from .storage import ObjectStorage

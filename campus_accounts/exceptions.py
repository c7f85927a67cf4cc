"""Exceptions.

Each error carries the status code reported to API clients. Messages for
failed code confirmation and failed login are deliberately generic so that
they do not reveal whether an account or a pending code exists.
"""

from typing import Optional


class AccountsError(RuntimeError):
    """Base class for errors reported to API clients."""

    status_code = 500
    message = 'The request to the server failed.'

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class InvalidRequest(AccountsError):
    """A required field is missing or empty."""

    status_code = 400
    message = 'Invalid request.'


class InvalidFormat(AccountsError):
    """The id is not shaped like an email address."""

    status_code = 403
    message = 'The id is not a valid email address.'


class PasswordMismatch(AccountsError):
    """Password and password confirmation differ."""

    status_code = 400
    message = 'Passwords do not match.'


class InvalidBirthday(AccountsError):
    """Birth date is not a real calendar date."""

    status_code = 400
    message = 'Invalid birth date.'


class InvalidCode(AccountsError):
    """No pending verification matches the email and code."""

    status_code = 409
    message = 'The verification code is incorrect.'


class ExpiredCode(AccountsError):
    """The verification code was issued too long ago."""

    status_code = 409
    message = 'The verification request has expired.'


class InvalidCredentials(AccountsError):
    """Failed to authenticate user with provided credentials."""

    status_code = 400
    message = 'Incorrect id or password.'


class Conflict(AccountsError):
    """Account id, nickname or student identity is already taken."""

    status_code = 409
    message = 'The account already exists.'


class Forbidden(AccountsError):
    """Student registration without a matching student record."""

    status_code = 403
    message = 'Unregistered student identity.'


class AccountNotFound(AccountsError):
    """User does not exist."""

    status_code = 404
    message = 'Account is not registered.'


class ProfileNotFound(AccountsError):
    """No profile for the requested account."""

    status_code = 404
    message = 'Resource not found.'


class InvalidToken(AccountsError):
    """Token is malformed, forged, or was issued for another purpose."""

    status_code = 401
    message = 'Invalid token.'


class ExpiredToken(InvalidToken):
    """Token has expired."""

    message = 'Token has expired.'


class ImageUploadFailed(AccountsError):
    """Could not store a new profile image."""

    status_code = 500
    message = 'Failed to upload the image.'


class Unexpected(AccountsError):
    """A store, mail or storage collaborator failed."""


class MailDeliveryFailed(RuntimeError):
    """Failed to hand a message to the SMTP service."""


class StorageFailed(RuntimeError):
    """An object storage operation failed."""


class DuplicateAccount(RuntimeError):
    """The store rejected an insert on a uniqueness constraint."""

"""
Account flows.

Flows know nothing about HTTP. They validate their input, talk to the stores
and external services, and raise :mod:`campus_accounts.exceptions` errors
which the routes render as responses.
"""

from .authentication import AuthFlow
from .registration import RegistrationFlow
from .profile import ImageUpload, ProfileFlow

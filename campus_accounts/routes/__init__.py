"""HTTP routes of the accounts service."""

from . import api, dependencies

"""ASGI entry-point, e.g. ``uvicorn campus_accounts.asgi:app``."""

from . import config
from .app_logging import setup_logger
from .factory import create_app

setup_logger(config.LOGLEVEL)
app = create_app()

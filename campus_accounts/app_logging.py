"""JSON logging for the accounts service."""
import logging
from typing import Union

from pythonjsonlogger import jsonlogger

QUIET_LOGGERS = ('botocore', 'boto3', 's3transfer', 'urllib3')
"""Libraries that log every request at debug level."""


def setup_logger(level: Union[int, str] = logging.INFO) -> None:
    """Send JSON log lines to stderr at ``level``."""
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    ))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

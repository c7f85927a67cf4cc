"""Application configuration, read from the environment."""
import os

#################### Database ####################
DATABASE_URI = os.environ.get('DATABASE_URI', 'sqlite:///campus_accounts.db')
"""SQLAlchemy URI for the accounts database.

Tables for users, profiles, verification codes, student records and the
position/technology lookups are expected to exist there already."""

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""Create missing tables on startup. Useful for dev and tests only."""


#################### Tokens ####################
JWT_SECRET = os.environ.get('JWT_SECRET', '')
"""Secret used to sign access and refresh tokens.

The app refuses to start if this is empty."""

ACCESS_TOKEN_EXPIRES = int(os.environ.get('ACCESS_TOKEN_EXPIRES', '300'))
"""Lifetime of an access token, in seconds."""

REFRESH_TOKEN_EXPIRES = int(os.environ.get('REFRESH_TOKEN_EXPIRES', '86400'))
"""Lifetime of a refresh token, in seconds."""


#################### Email verification ####################
VERIFICATION_CODE_LENGTH = int(os.environ.get('VERIFICATION_CODE_LENGTH', '8'))
"""Characters per verification code. At most 8, the width of the stored code."""

VERIFICATION_CODE_VALIDITY = int(os.environ.get('VERIFICATION_CODE_VALIDITY', '5'))
"""Minutes a verification code can be confirmed after it was sent."""

SMTP_HOST = os.environ.get('SMTP_HOST', 'smtp.naver.com')
SMTP_PORT = int(os.environ.get('SMTP_PORT', '587'))
SMTP_USER = os.environ.get('SMTP_USER', '')
SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD', '')
MAIL_FROM = os.environ.get('MAIL_FROM', SMTP_USER)
"""Sender address of verification mail. Defaults to the SMTP login."""


#################### Object storage ####################
S3_BUCKET = os.environ.get('S3_BUCKET', 'campus-accounts')
AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID', 'nope')
AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY', 'nope')
AWS_REGION = os.environ.get('AWS_REGION', 'ap-northeast-2')

S3_URL_EXPIRES = int(os.environ.get('S3_URL_EXPIRES', '3600'))
"""Lifetime of a presigned profile image URL, in seconds."""


#################### Minor configs ##############################
CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '')
"""Comma separated list of additional allowed origins."""

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')

VERSION = '0.1.0'

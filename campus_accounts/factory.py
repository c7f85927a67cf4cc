"""Application factory for the accounts service."""

from typing import Any, AsyncIterator, Callable, Optional
from contextlib import asynccontextmanager
from datetime import timedelta
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import config
from .controllers import AuthFlow, ProfileFlow, RegistrationFlow
from .exceptions import AccountsError
from .routes import api
from .services import Database, MailSession, ObjectStorage, ProfileStore, \
    StudentStore, UserStore, VerificationStore
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

origins = ["http://localhost",
           "http://localhost:3000",
           ]


def create_app(db: Optional[Database] = None,
               mail: Optional[MailSession] = None,
               storage: Optional[ObjectStorage] = None,
               jwt_secret: Optional[str] = None,
               **extra: Any) -> FastAPI:
    """
    Initialize and configure the accounts application.

    Collaborators not passed in are built from :mod:`.config`. The database
    is disposed of when the application shuts down.
    """
    jwt_secret = jwt_secret or config.JWT_SECRET
    if not jwt_secret:
        logger.error("JWT_SECRET needs to be set.")
        raise ValueError("JWT_SECRET is not set.")

    if db is None:
        db = Database(config.DATABASE_URI)
        if config.CREATE_DB:
            db.create_all()
    if mail is None:
        mail = MailSession(config.SMTP_HOST, config.SMTP_PORT,
                           config.SMTP_USER, config.SMTP_PASSWORD,
                           config.MAIL_FROM)
    if storage is None:
        storage = ObjectStorage(config.S3_BUCKET, config.AWS_REGION,
                                config.AWS_ACCESS_KEY_ID,
                                config.AWS_SECRET_ACCESS_KEY,
                                url_expires=config.S3_URL_EXPIRES)

    tokens = TokenIssuer(jwt_secret, config.ACCESS_TOKEN_EXPIRES,
                         config.REFRESH_TOKEN_EXPIRES)
    users = UserStore(db)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not db.is_available():
            logger.warning("Database is not available at startup")
        yield
        logger.info("Closing database connections")
        db.close()

    app = FastAPI(
        title="campus-accounts",
        version=config.VERSION,
        lifespan=lifespan,
        db=db,
        tokens=tokens,
        auth_flow=AuthFlow(
            users, VerificationStore(db), mail, storage, tokens,
            code_length=config.VERIFICATION_CODE_LENGTH,
            code_validity=timedelta(minutes=config.VERIFICATION_CODE_VALIDITY)
        ),
        registration_flow=RegistrationFlow(users, StudentStore(db)),
        profile_flow=ProfileFlow(ProfileStore(db), storage),
        **extra
    )

    allowed = list(origins)
    if config.CORS_ORIGINS:
        for cors_origin in config.CORS_ORIGINS.split(","):
            allowed.append(cors_origin.strip())
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api.router)

    @app.exception_handler(AccountsError)
    async def accounts_error(request: Request, exc: AccountsError) \
            -> JSONResponse:
        logger.debug("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code,
                            content={'message': str(exc)})

    @app.middleware("http")
    async def apply_response_headers(request: Request,
                                     call_next: Callable) -> Response:
        """Prevent UI redress attacks."""
        response: Response = await call_next(request)
        response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    return app

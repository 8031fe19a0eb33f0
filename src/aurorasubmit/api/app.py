import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aurorasubmit import __version__
from aurorasubmit.api.middleware import LoggingMiddleware
from aurorasubmit.api.routes import auth, health, submissions
from aurorasubmit.api.schemas import StatusKind, StatusResponse
from aurorasubmit.config import Settings, get_settings, get_token_path
from aurorasubmit.errors import (
    AuthenticationError,
    GitHubError,
    MetadataError,
    PullRequestError,
    SubmissionError,
    ValidationError,
)
from aurorasubmit.github.oauth import TokenStore
from aurorasubmit.logging_config import setup_logging
from aurorasubmit.session import SubmissionSession

logger = logging.getLogger(__name__)


def _status_code_for(exc: SubmissionError) -> int:
    if isinstance(exc, (ValidationError, MetadataError)):
        return 400
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, (GitHubError, PullRequestError)):
        return 502
    # ConfigurationError and anything unexpected
    return 500


async def submission_error_handler(request: Request, exc: SubmissionError):
    status_code = _status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content=StatusResponse(status=StatusKind.ERROR, message=str(exc)).model_dump(mode="json"),
    )


def create_app(
    settings: Settings | None = None,
    session: SubmissionSession | None = None,
) -> FastAPI:
    settings = settings or (session.settings if session else get_settings())
    setup_logging(settings.debug)

    if session is None:
        session = SubmissionSession(settings, TokenStore(get_token_path()))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Aurora Submit v{__version__}")
        logger.info(
            f"Submissions target {settings.github_repo_owner}/{settings.github_repo_name}"
            f"@{settings.github_target_branch}"
        )
        if await session.check_auth():
            logger.info("Resumed GitHub session from stored token")
        yield
        logger.info("Shutting down Aurora Submit")
        await session.close()

    app = FastAPI(
        title="Aurora Submit",
        description="Submit backgrounds, skins and coverflows as a GitHub pull request",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session = session

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(SubmissionError, submission_error_handler)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(submissions.router)
    return app

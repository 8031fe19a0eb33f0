# Auth router - GitHub OAuth login, callback, token exchange, logout.
# Created: 2026-10-19

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError as PayloadError

from aurorasubmit.api.deps import get_session
from aurorasubmit.api.schemas import StatusKind, StatusResponse, TokenExchangeRequest
from aurorasubmit.errors import (
    AuthenticationError,
    ConfigurationError,
    SubmissionError,
    ValidationError,
)
from aurorasubmit.github.oauth import build_authorize_url, exchange_code
from aurorasubmit.session import SubmissionSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.get("/auth/login")
async def login(session: SubmissionSession = Depends(get_session)):
    """Send the contributor to GitHub to authorize the app."""
    return RedirectResponse(build_authorize_url(session.settings), status_code=307)


@router.get("/auth/callback")
async def oauth_callback(
    code: str | None = Query(None),
    error: str | None = Query(None),
    error_description: str | None = Query(None),
    session: SubmissionSession = Depends(get_session),
):
    """GitHub redirects here after the user grants (or denies) access."""
    if error:
        message = error_description or error
        return JSONResponse(
            status_code=401,
            content=StatusResponse(
                status=StatusKind.ERROR, message=f"Error during authentication: {message}"
            ).model_dump(mode="json"),
        )

    try:
        await session.complete_login(code)
    except SubmissionError as e:
        status_code = 400 if isinstance(e, ValidationError) else 500
        if isinstance(e, AuthenticationError):
            status_code = 401
        return JSONResponse(
            status_code=status_code,
            content=StatusResponse(
                status=StatusKind.ERROR, message=f"Error during authentication: {e}"
            ).model_dump(mode="json"),
        )

    # Redirecting drops the one-time code from the address bar.
    return RedirectResponse("/", status_code=303)


@router.api_route("/api/github-callback", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def github_callback(request: Request, session: SubmissionSession = Depends(get_session)):
    """Exchange an authorization code for a token without starting a session.

    Every outcome, including a wrong method or an unreadable body, is a
    JSON object with either ``access_token`` or ``error``.
    """
    if request.method != "POST":
        return JSONResponse(
            status_code=405, content={"error": "Method Not Allowed"}, headers={"Allow": "POST"}
        )

    try:
        code = TokenExchangeRequest.model_validate_json(await request.body()).code
    except PayloadError:
        code = None

    try:
        token = await exchange_code(code, session.settings, transport=session.oauth_transport)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except (ConfigurationError, AuthenticationError) as e:
        logger.error("Token exchange failed: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)})
    return {"access_token": token}


@router.post("/auth/logout", response_model=StatusResponse)
async def logout(session: SubmissionSession = Depends(get_session)):
    await session.logout()
    return StatusResponse(message="Signed out of GitHub.")

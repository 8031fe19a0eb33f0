from fastapi import Request

from aurorasubmit.session import SubmissionSession


def get_session(request: Request) -> SubmissionSession:
    return request.app.state.session


def require_auth(request: Request) -> SubmissionSession:
    """Dependency for routes that talk to GitHub on the user's behalf."""
    session = get_session(request)
    session.require_client()
    return session

"""Session endpoints, one session manager per client cookie."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request, Response

from creation_studio.api.models import SessionOut
from creation_studio.api.sessions import (
    SESSION_COOKIE,
    SIGNED_OUT,
    ClientSession,
    SessionRegistry,
)
from creation_studio.domain.auth import AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


def _wire(state: AuthSession) -> dict[str, object]:
    return SessionOut.from_domain(state).to_wire()


def _client_session(request: Request) -> ClientSession | None:
    registry: SessionRegistry = request.app.state.sessions
    return registry.get(request.cookies.get(SESSION_COOKIE))


@router.get("/session")
async def get_session(request: Request) -> dict[str, object]:
    """Return the caller's session state."""
    session = _client_session(request)
    return _wire(session.manager.state if session else SIGNED_OUT)


@router.post("/sign-in")
async def sign_in(request: Request, response: Response) -> dict[str, object]:
    """Start Google sign-in and return the authorization URL to open."""
    session = _client_session(request)
    if session is None:
        registry: SessionRegistry = request.app.state.sessions
        session_id, session = await registry.create()
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")

    task = session.sign_in_task
    if task is None or task.done():
        task = asyncio.create_task(session.manager.sign_in_with_identity_provider())
        session.sign_in_task = task

    url_waiter = asyncio.create_task(session.broker.wait_for_url())
    done, _ = await asyncio.wait(
        {task, url_waiter}, return_when=asyncio.FIRST_COMPLETED
    )
    if url_waiter in done:
        return {
            "authorizationUrl": url_waiter.result(),
            "session": _wire(session.manager.state),
        }
    url_waiter.cancel()
    return {"authorizationUrl": None, "session": _wire(session.manager.state)}


@router.get("/callback")
async def oauth_callback(
    request: Request, code: str | None = None, error: str | None = None
) -> dict[str, object]:
    """Finish the caller's pending sign-in with the redirect parameters."""
    session = _client_session(request)
    if session is None:
        return _wire(SIGNED_OUT)
    if code and not error:
        resolved = session.broker.complete(code)
    else:
        resolved = session.broker.cancel()
    if resolved and session.sign_in_task is not None:
        await session.sign_in_task
    return _wire(session.manager.state)


@router.post("/sign-out")
async def sign_out(request: Request) -> dict[str, object]:
    """Sign the caller out."""
    session = _client_session(request)
    if session is None:
        return _wire(SIGNED_OUT)
    await session.manager.sign_out()
    return _wire(session.manager.state)


@router.delete("/error")
async def clear_error(request: Request) -> dict[str, object]:
    """Dismiss the caller's last session error."""
    session = _client_session(request)
    if session is None:
        return _wire(SIGNED_OUT)
    session.manager.clear_error()
    return _wire(session.manager.state)

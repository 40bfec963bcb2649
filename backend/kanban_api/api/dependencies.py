from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Header, Request
from pydantic import ValidationError
from kanban_api.api.schemas import BoardWrite
from kanban_api.core.container import Container
from kanban_api.core.errors import INVALID_BODY_MESSAGE, InvalidInputError, UnauthenticatedError
from kanban_api.core.security import decode_access_token
from kanban_api.services.auth_service import AuthService
from kanban_api.services.board_service import BoardService

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Principal:
    """Identity of the caller, taken from a verified token"""
    user_id: str
    email: str


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_auth_service(container: Container = Depends(get_container)) -> AuthService:
    return container.auth_service


def get_board_service(container: Container = Depends(get_container)) -> BoardService:
    return container.board_service


def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    container: Container = Depends(get_container),
) -> Principal:
    """
    Require a valid bearer token.

    Used as a dependency on every protected route. Any failure raises
    UnauthenticatedError before the route handler runs. The verified
    identity is returned to the handler and also kept on request.state
    for the access log.
    """
    # Scheme must be exactly "Bearer " as sent by our clients
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthenticatedError("missing bearer token")

    token = authorization[len(BEARER_PREFIX):]
    # Signature, expiry and issuer are all checked here; None means any of them failed
    claims = decode_access_token(container.token_settings, token)
    if claims is None:
        raise UnauthenticatedError("invalid token")

    principal = Principal(user_id=claims.subject, email=claims.email)
    request.state.principal = principal
    return principal


async def get_board_write(
    request: Request,
    _: Principal = Depends(get_current_principal),
) -> BoardWrite:
    """
    Parse the board body after the bearer check.

    Anonymous requests get 401 whatever their body looks like.
    """
    try:
        payload = await request.json()
        return BoardWrite.model_validate(payload)
    except (ValueError, ValidationError):
        raise InvalidInputError(INVALID_BODY_MESSAGE) from None

from fastapi import APIRouter, Depends, status
from kanban_api.api.dependencies import Principal, get_auth_service, get_current_principal
from kanban_api.api.schemas import AuthEnvelope, AuthResult, Credentials, UserEnvelope, UserOut
from kanban_api.core.errors import UnauthenticatedError, NotFoundError
from kanban_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthEnvelope, status_code=status.HTTP_201_CREATED)
def register(credentials: Credentials, auth_service: AuthService = Depends(get_auth_service)):
    """Register a new user and log them in"""
    user, token = auth_service.register(credentials.email, credentials.password)
    return AuthEnvelope(data=AuthResult(user=UserOut.model_validate(user), token=token))


@router.post("/login", response_model=AuthEnvelope)
def login(credentials: Credentials, auth_service: AuthService = Depends(get_auth_service)):
    """Login and get access token"""
    user, token = auth_service.login(credentials.email, credentials.password)
    return AuthEnvelope(data=AuthResult(user=UserOut.model_validate(user), token=token))


@router.get("/me", response_model=UserEnvelope)
def get_current_user_info(
    principal: Principal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get current user information"""
    try:
        user = auth_service.get_user(principal.user_id)
    except NotFoundError:
        # Token is valid but the account behind it is gone (e.g. memory store restarted)
        raise UnauthenticatedError()
    return UserEnvelope(data=UserOut.model_validate(user))

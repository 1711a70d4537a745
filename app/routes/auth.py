"""
Authentication endpoints - username/password registration and login.
"""

from fastapi import APIRouter, Depends, status
import logging

from app.models.user import LoginRequest, Principal, RegisterRequest, TokenResponse, UserResponse
from app.routes.deps import get_current_principal
from app.services.identity_provider import get_identity_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest):
    """
    Create an account with a role (user, worker or manager).

    Returns 409 if the username is already taken.
    """
    get_identity_provider().register(request.username, request.password, request.role)
    return {"message": "User created"}


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Exchange username/password for a signed bearer token.
    """
    return get_identity_provider().login(request.username, request.password)


@router.get("/me", response_model=UserResponse)
def me(principal: Principal = Depends(get_current_principal)):
    return UserResponse(username=principal.subject, role=principal.role)

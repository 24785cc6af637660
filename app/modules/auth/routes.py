from fastapi import APIRouter, Depends
from app.modules.auth.identity import IdentityClient
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    CurrentUserResponse
)
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_current_user_id, get_identity_client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    identity: IdentityClient = Depends(get_identity_client)
):
    """Logout, invalidate token and drop any profile draft held for this session"""
    await identity.sign_out()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
):
    """Get current authenticated user."""
    return current_user

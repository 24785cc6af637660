"""
Core dependencies for route protection and session resolution
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.exceptions import NotAuthenticated
from app.database.supabase_client import get_supabase
from app.modules.auth.identity import IdentityClient, Session
from app.modules.auth.service import AuthService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_identity_client(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> IdentityClient:
    """Identity client bound to the caller's session"""
    return IdentityClient(auth_service, token)


async def get_current_session(
    identity: IdentityClient = Depends(get_identity_client)
) -> Session:
    """Resolve the caller's live session or fail with 401"""
    session = await identity.get_current_session()
    if session is None:
        raise NotAuthenticated("Invalid or expired session")
    return session

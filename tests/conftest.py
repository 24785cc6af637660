from __future__ import annotations

import os

# Settings are read at import time; keep tests away from any real project.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT", "10000/minute")

from typing import Dict, List, Optional

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.core.dependencies import get_auth_service
from app.core.exceptions import PersistFailure, ProfileNotFound, UploadFailure
from app.main import app as fastapi_app
from app.modules.auth.identity import IdentityClient, SessionEvents
from app.modules.profiles.registry import WorkflowRegistry, get_workflow_registry
from app.modules.profiles.routes import get_avatar_storage, get_profile_store
from app.modules.profiles.schemas import Profile
from app.modules.profiles.workflow import ProfileWorkflow

PUBLIC_BASE = "https://project.supabase.co/storage/v1/object/public/avatars"


# ── Fakes for the three Supabase collaborators ────────────────────────


class FakeAuthService:
    """Maps access tokens to users the way Supabase Auth would."""

    def __init__(self, users: Optional[Dict[str, dict]] = None):
        self.users = users if users is not None else {
            "token-U1": {"id": "U1", "email": "ada@example.com", "user_metadata": {}},
        }
        self.logged_out: List[str] = []

    def get_current_user(self, token: str) -> dict:
        if token not in self.users:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return self.users[token]

    def logout(self, token: str) -> bool:
        self.logged_out.append(token)
        self.users.pop(token, None)
        return True


class FakeProfileStore:
    """In-memory profiles table with upsert-by-id semantics."""

    def __init__(self):
        self.rows: Dict[str, dict] = {}
        self.fetch_calls: List[str] = []
        self.upsert_calls: List[dict] = []
        self.fetch_error: Optional[Exception] = None
        self.upsert_error: Optional[str] = None

    async def fetch_one(self, owner_id: str) -> Profile:
        self.fetch_calls.append(owner_id)
        if self.fetch_error is not None:
            raise self.fetch_error
        if owner_id not in self.rows:
            raise ProfileNotFound(owner_id)
        return Profile.from_row(self.rows[owner_id])

    async def upsert(self, profile: Profile) -> Profile:
        row = profile.to_row()
        self.upsert_calls.append(row)
        if self.upsert_error is not None:
            raise PersistFailure(self.upsert_error)
        # Upsert only overwrites the columns it was given
        merged = {**self.rows.get(profile.id, {}), **row}
        self.rows[profile.id] = merged
        return Profile.from_row(merged)


class FakeAvatarStorage:
    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.upload_calls: List[tuple] = []
        self.upload_error: Optional[str] = None

    async def upload(self, path, file_content, content_type="application/octet-stream", overwrite=True):
        self.upload_calls.append((path, content_type, overwrite))
        if self.upload_error is not None:
            raise UploadFailure(f"Avatar upload failed: {self.upload_error}")
        if path in self.objects and not overwrite:
            raise UploadFailure("Avatar upload failed: The resource already exists")
        self.objects[path] = file_content
        return path

    def public_url(self, path: str) -> str:
        return f"{PUBLIC_BASE}/{path}"


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture(name="auth_service")
def auth_service_fixture() -> FakeAuthService:
    return FakeAuthService()


@pytest.fixture(name="profile_store")
def profile_store_fixture() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture(name="avatar_storage")
def avatar_storage_fixture() -> FakeAvatarStorage:
    return FakeAvatarStorage()


@pytest.fixture(name="events")
def events_fixture() -> SessionEvents:
    return SessionEvents()


@pytest.fixture(name="identity")
def identity_fixture(auth_service, events) -> IdentityClient:
    return IdentityClient(auth_service, "token-U1", events=events)


@pytest.fixture(name="anonymous_identity")
def anonymous_identity_fixture(auth_service, events) -> IdentityClient:
    return IdentityClient(auth_service, None, events=events)


@pytest.fixture(name="workflow")
def workflow_fixture(identity, profile_store, avatar_storage) -> ProfileWorkflow:
    return ProfileWorkflow(identity, profile_store, avatar_storage)


@pytest.fixture(name="stored_row")
def stored_row_fixture() -> dict:
    return {
        "id": "U1",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "date_of_birth": "1815-12-10",
        "country": "UK",
        "religion": None,
        "blood_group": "O+",
        "marital_status": "married",
        "institution": "Analytical Society",
        "hobbies": ["mathematics", "poetry"],
        "avatar_url": f"{PUBLIC_BASE}/U1/avatar.png",
    }


@pytest.fixture(name="registry")
def registry_fixture() -> WorkflowRegistry:
    registry = WorkflowRegistry()
    yield registry
    registry.clear()


@pytest.fixture(name="client")
def client_fixture(auth_service, profile_store, avatar_storage, registry):
    """TestClient with Supabase collaborators replaced by in-memory fakes."""
    fastapi_app.dependency_overrides[get_auth_service] = lambda: auth_service
    fastapi_app.dependency_overrides[get_profile_store] = lambda: profile_store
    fastapi_app.dependency_overrides[get_avatar_storage] = lambda: avatar_storage
    fastapi_app.dependency_overrides[get_workflow_registry] = lambda: registry
    with TestClient(fastapi_app) as client:
        yield client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(name="auth_headers")
def auth_headers_fixture() -> dict:
    return {"Authorization": "Bearer token-U1"}

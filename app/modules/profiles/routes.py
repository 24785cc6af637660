from fastapi import APIRouter, Depends, File, Header, HTTPException, UploadFile
from app.config import settings
from app.core.dependencies import get_current_session, get_identity_client
from app.database.supabase_client import get_service_supabase
from app.modules.auth.identity import IdentityClient, Session
from app.modules.profiles.registry import WorkflowRegistry, get_workflow_registry
from app.modules.profiles.schemas import EditView, FieldUpdate, LoadingView, ReadOnlyView
from app.modules.profiles.storage import AvatarStorage
from app.modules.profiles.store import ProfileStore
from app.modules.profiles.views import build_edit_view, build_read_only_view, resolve_locale
from app.modules.profiles.workflow import ProfileWorkflow
from supabase import Client
from typing import Optional, Union

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_store(supabase: Client = Depends(get_service_supabase)) -> ProfileStore:
    return ProfileStore(supabase)


def get_avatar_storage(supabase: Client = Depends(get_service_supabase)) -> AvatarStorage:
    return AvatarStorage(supabase)


def get_profile_workflow(
    session: Session = Depends(get_current_session),
    identity: IdentityClient = Depends(get_identity_client),
    store: ProfileStore = Depends(get_profile_store),
    storage: AvatarStorage = Depends(get_avatar_storage),
    registry: WorkflowRegistry = Depends(get_workflow_registry),
) -> ProfileWorkflow:
    return registry.get_or_create(
        session, identity, lambda: ProfileWorkflow(identity, store, storage)
    )


@router.post("/load", response_model=Union[EditView, LoadingView])
async def load_profile(workflow: ProfileWorkflow = Depends(get_profile_workflow)):
    """Reload the caller's profile from the store into the form"""
    await workflow.load()
    return build_edit_view(workflow)


@router.post("/edit", response_model=Union[EditView, LoadingView])
async def begin_edit(workflow: ProfileWorkflow = Depends(get_profile_workflow)):
    """Switch the form to edit mode"""
    workflow.begin_edit()
    return build_edit_view(workflow)


@router.patch("/draft", response_model=Union[EditView, LoadingView])
async def update_field(
    update: FieldUpdate,
    workflow: ProfileWorkflow = Depends(get_profile_workflow),
):
    """Replace one field of the unsaved draft"""
    workflow.update_field(update.field, update.value)
    return build_edit_view(workflow)


@router.post("/avatar", response_model=Union[EditView, LoadingView])
async def select_avatar(
    file: UploadFile = File(...),
    workflow: ProfileWorkflow = Depends(get_profile_workflow),
):
    """
    Hold an avatar image for the next save. Nothing is uploaded until then;
    a new selection replaces the previous one.
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are accepted")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(data) > settings.max_avatar_bytes:
        raise HTTPException(status_code=413, detail="Avatar image is too large")
    workflow.select_avatar(file.filename or "", file.content_type, data)
    return build_edit_view(workflow)


@router.post("/save", response_model=Union[EditView, LoadingView])
async def save_profile(workflow: ProfileWorkflow = Depends(get_profile_workflow)):
    """Upload the pending avatar, upsert the draft and reload it from the store"""
    await workflow.save()
    return build_edit_view(workflow)


@router.get("/form", response_model=Union[EditView, LoadingView])
async def get_form(workflow: ProfileWorkflow = Depends(get_profile_workflow)):
    """Edit/summary form; loads the profile on first visit"""
    if not workflow.loaded:
        await workflow.load()
    return build_edit_view(workflow)


@router.get("/view", response_model=Union[ReadOnlyView, LoadingView])
async def get_read_only_view(
    accept_language: Optional[str] = Header(None),
    workflow: ProfileWorkflow = Depends(get_profile_workflow),
):
    """Read-only profile page, dates formatted for the caller's locale"""
    if workflow.stored is None:
        await workflow.load()
    return build_read_only_view(workflow.stored, resolve_locale(accept_language))

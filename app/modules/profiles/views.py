"""View models for the profile form and the read-only profile page."""
from typing import List, Optional, Union

from babel import Locale, UnknownLocaleError
from babel.dates import format_date

from app.config import settings
from app.modules.profiles.fields import format_hobbies, meaningful_hobbies
from app.modules.profiles.schemas import (
    BloodGroup, EditView, FormInput, LoadingView, MaritalStatus, Profile,
    ProfileField, ReadOnlyEntry, ReadOnlyView,
)
from app.modules.profiles.workflow import ProfileWorkflow

NOT_SPECIFIED = "Not specified"
NO_HOBBIES = "No hobbies specified"


def resolve_locale(accept_language: Optional[str]) -> Locale:
    """First parseable language tag of an Accept-Language header, else the configured default"""
    for part in (accept_language or "").split(","):
        tag = part.split(";", 1)[0].strip()
        if not tag or tag == "*":
            continue
        try:
            return Locale.parse(tag, sep="-")
        except (ValueError, UnknownLocaleError):
            continue
    return Locale.parse(settings.default_locale)


def _select_options(placeholder: str, values: List[str], labels: Optional[List[str]] = None) -> List[dict]:
    labels = labels or values
    return [{"value": "", "label": placeholder}] + [
        {"value": value, "label": label} for value, label in zip(values, labels)
    ]


def build_edit_view(workflow: ProfileWorkflow) -> Union[EditView, LoadingView]:
    if not workflow.loaded:
        return LoadingView()

    draft = workflow.draft
    disabled = not workflow.editing
    marital = [status.value for status in MaritalStatus]

    fields = [
        FormInput(name=ProfileField.FIRST_NAME, label="First Name", kind="text",
                  value=draft.first_name, required=True, disabled=disabled),
        FormInput(name=ProfileField.LAST_NAME, label="Last Name", kind="text",
                  value=draft.last_name, required=True, disabled=disabled),
        FormInput(name=ProfileField.DATE_OF_BIRTH, label="Date of Birth", kind="date",
                  value=draft.date_of_birth.isoformat() if draft.date_of_birth else "",
                  required=True, disabled=disabled),
        FormInput(name=ProfileField.COUNTRY, label="Country of Origin", kind="text",
                  value=draft.country, required=True, disabled=disabled),
        FormInput(name=ProfileField.MARITAL_STATUS, label="Marital Status", kind="select",
                  value=draft.marital_status.value if draft.marital_status else "",
                  disabled=disabled,
                  options=_select_options("Select Marital Status", marital,
                                          [status.capitalize() for status in marital])),
        FormInput(name=ProfileField.INSTITUTION, label="Current Institution", kind="text",
                  value=draft.institution or "", disabled=disabled,
                  placeholder="Enter your current institution"),
        FormInput(name=ProfileField.RELIGION, label="Religion", kind="text",
                  value=draft.religion or "", disabled=disabled),
        FormInput(name=ProfileField.BLOOD_GROUP, label="Blood Group", kind="select",
                  value=draft.blood_group.value if draft.blood_group else "",
                  disabled=disabled,
                  options=_select_options("Select Blood Group", [group.value for group in BloodGroup])),
        FormInput(name=ProfileField.HOBBIES, label="Hobbies", kind="textarea",
                  value=format_hobbies(draft.hobbies), disabled=disabled,
                  placeholder="Enter your hobbies (comma-separated)"),
    ]

    return EditView(
        title="Edit Profile" if workflow.editing else "Your Profile",
        editing=workflow.editing,
        avatar_url=draft.avatar_url,
        can_upload_avatar=workflow.editing,
        pending_avatar=workflow.pending_avatar.filename if workflow.pending_avatar else None,
        fields=fields,
        actions=["save"] if workflow.editing else ["view_profile", "edit"],
        error=workflow.error,
    )


def build_read_only_view(profile: Optional[Profile], locale: Locale) -> Union[ReadOnlyView, LoadingView]:
    if profile is None:
        return LoadingView()

    hobbies = meaningful_hobbies(profile.hobbies)
    entries = [
        ReadOnlyEntry(label="Full name", value=f"{profile.first_name} {profile.last_name}"),
        ReadOnlyEntry(label="Date of Birth",
                      value=format_date(profile.date_of_birth, format="medium", locale=locale)),
        ReadOnlyEntry(label="Country of Origin", value=profile.country),
        ReadOnlyEntry(label="Marital Status",
                      value=profile.marital_status.value.capitalize() if profile.marital_status else NOT_SPECIFIED),
        ReadOnlyEntry(label="Current Institution", value=profile.institution or NOT_SPECIFIED),
        ReadOnlyEntry(label="Religion", value=profile.religion or NOT_SPECIFIED),
        ReadOnlyEntry(label="Blood Group",
                      value=profile.blood_group.value if profile.blood_group else NOT_SPECIFIED),
        ReadOnlyEntry(label="Hobbies", items=hobbies) if hobbies
        else ReadOnlyEntry(label="Hobbies", value=NO_HOBBIES),
    ]

    return ReadOnlyView(
        avatar_url=profile.avatar_url,
        entries=entries,
        actions=["back_to_edit"],
    )

"""Per-field transforms applied when the user edits the profile form."""
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from app.core.exceptions import InvalidProfile
from app.modules.profiles.schemas import BloodGroup, MaritalStatus, ProfileDraft, ProfileField


def parse_hobbies(raw: str) -> List[str]:
    """Split comma separated hobbies, trimming each entry.

    Empty segments are kept, so "" becomes [""]. Views decide how to show them.
    """
    return [hobby.strip() for hobby in raw.split(",")]


def format_hobbies(hobbies: List[str]) -> str:
    return ", ".join(hobbies)


def meaningful_hobbies(hobbies: Optional[List[str]]) -> List[str]:
    return [hobby for hobby in hobbies or [] if hobby.strip()]


def _required_text(raw: str) -> str:
    return raw


def _optional_text(raw: str) -> Optional[str]:
    return raw if raw.strip() else None


def _date_of_birth(raw: str) -> Optional[date]:
    if not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        raise InvalidProfile(f"Invalid date of birth: {raw!r}")


def _blood_group(raw: str) -> Optional[BloodGroup]:
    if not raw.strip():
        return None
    try:
        return BloodGroup(raw.strip())
    except ValueError:
        raise InvalidProfile(f"Invalid blood group: {raw!r}")


def _marital_status(raw: str) -> Optional[MaritalStatus]:
    if not raw.strip():
        return None
    try:
        return MaritalStatus(raw.strip().lower())
    except ValueError:
        raise InvalidProfile(f"Invalid marital status: {raw!r}")


FIELD_TRANSFORMS: Dict[ProfileField, Callable[[str], Any]] = {
    ProfileField.FIRST_NAME: _required_text,
    ProfileField.LAST_NAME: _required_text,
    ProfileField.DATE_OF_BIRTH: _date_of_birth,
    ProfileField.COUNTRY: _required_text,
    ProfileField.RELIGION: _optional_text,
    ProfileField.BLOOD_GROUP: _blood_group,
    ProfileField.MARITAL_STATUS: _marital_status,
    ProfileField.INSTITUTION: _optional_text,
    ProfileField.HOBBIES: parse_hobbies,
}


def apply_update(draft: ProfileDraft, field: ProfileField, raw: str) -> ProfileDraft:
    """Return a copy of draft with one field replaced by its transformed value."""
    value = FIELD_TRANSFORMS[field](raw)
    return draft.model_copy(update={field.value: value})

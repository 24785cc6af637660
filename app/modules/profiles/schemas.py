from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import date
from enum import Enum
from app.modules.profiles.models import PROFILE_COLUMNS

REQUIRED_FIELDS = ("first_name", "last_name", "date_of_birth", "country")


class BloodGroup(str, Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class ProfileField(str, Enum):
    """Form fields a user can edit. avatar_url and id are never typed."""
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    DATE_OF_BIRTH = "date_of_birth"
    COUNTRY = "country"
    RELIGION = "religion"
    BLOOD_GROUP = "blood_group"
    MARITAL_STATUS = "marital_status"
    INSTITUTION = "institution"
    HOBBIES = "hobbies"


class ProfileDraft(BaseModel):
    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[date] = None
    country: str = ""
    religion: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    marital_status: Optional[MaritalStatus] = None
    institution: Optional[str] = None
    hobbies: List[str] = Field(default_factory=list)
    avatar_url: Optional[str] = None

    @field_validator("religion", "blood_group", "marital_status", "institution", "avatar_url", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # Rows written by older clients store "" for unset optional columns
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("hobbies", mode="before")
    @classmethod
    def null_hobbies(cls, value):
        return [] if value is None else value

    def missing_required(self) -> List[str]:
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing

    def to_profile(self, owner_id: str, avatar_url: Optional[str] = None) -> "Profile":
        data = self.model_dump()
        data["avatar_url"] = avatar_url if avatar_url is not None else self.avatar_url
        return Profile(id=owner_id, **data)


class Profile(ProfileDraft):
    id: str
    date_of_birth: date

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Profile":
        return cls(**{column: row.get(column) for column in PROFILE_COLUMNS})

    def to_row(self) -> Dict[str, Any]:
        row = self.model_dump(mode="json", include=set(PROFILE_COLUMNS))
        # A missing avatar leaves the stored column untouched
        if row.get("avatar_url") is None:
            row.pop("avatar_url", None)
        return row

    def to_draft(self) -> ProfileDraft:
        return ProfileDraft(**self.model_dump(exclude={"id"}))


class FieldUpdate(BaseModel):
    field: ProfileField
    value: str = ""


# ---------------------------------------------------------------------------
# View models
# ---------------------------------------------------------------------------


class LoadingView(BaseModel):
    loading: bool = True
    message: str = "Loading profile..."


class FormInput(BaseModel):
    name: ProfileField
    label: str
    kind: str  # text | date | select | textarea
    value: str
    required: bool = False
    disabled: bool = False
    placeholder: Optional[str] = None
    options: List[Dict[str, str]] = Field(default_factory=list)


class EditView(BaseModel):
    loading: bool = False
    title: str
    editing: bool
    avatar_url: Optional[str] = None
    can_upload_avatar: bool
    pending_avatar: Optional[str] = None
    fields: List[FormInput]
    actions: List[str]
    error: Optional[str] = None


class ReadOnlyEntry(BaseModel):
    label: str
    value: Optional[str] = None
    items: Optional[List[str]] = None


class ReadOnlyView(BaseModel):
    loading: bool = False
    title: str = "Profile Information"
    subtitle: str = "Personal details and information."
    avatar_url: Optional[str] = None
    entries: List[ReadOnlyEntry]
    actions: List[str]

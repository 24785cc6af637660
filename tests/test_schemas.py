"""Tests for the Profile entity and its row mapping."""
from __future__ import annotations

from datetime import date

import pydantic
import pytest

from app.modules.profiles.models import PROFILE_COLUMNS, PROFILE_COLUMNS_VERSION, PROFILE_SELECT
from app.modules.profiles.schemas import BloodGroup, Profile, ProfileDraft


def test_select_uses_explicit_column_list():
    assert "*" not in PROFILE_SELECT
    assert PROFILE_SELECT.split(", ") == list(PROFILE_COLUMNS)
    assert PROFILE_COLUMNS_VERSION == 1


def test_from_row_ignores_unknown_columns(stored_row):
    row = dict(stored_row, created_at="2025-02-06T19:38:12Z", theme="dark")
    profile = Profile.from_row(row)

    assert profile.id == "U1"
    assert not hasattr(profile, "theme")


def test_from_row_normalises_legacy_blank_values(stored_row):
    row = dict(stored_row, religion="", blood_group="", marital_status="", hobbies=None, avatar_url="")
    profile = Profile.from_row(row)

    assert profile.religion is None
    assert profile.blood_group is None
    assert profile.marital_status is None
    assert profile.hobbies == []
    assert profile.avatar_url is None


def test_to_row_is_json_ready(stored_row):
    row = Profile.from_row(stored_row).to_row()

    assert set(row) == set(PROFILE_COLUMNS)
    assert row["date_of_birth"] == "1815-12-10"
    assert row["blood_group"] == "O+"
    assert row["marital_status"] == "married"


def test_to_row_omits_absent_avatar(stored_row):
    row = Profile.from_row(dict(stored_row, avatar_url=None)).to_row()

    assert "avatar_url" not in row
    assert set(row) == set(PROFILE_COLUMNS) - {"avatar_url"}


def test_profile_requires_date_of_birth(stored_row):
    with pytest.raises(pydantic.ValidationError):
        Profile.from_row(dict(stored_row, date_of_birth=None))


class TestDraft:
    def test_defaults_are_empty(self):
        draft = ProfileDraft()
        assert draft.first_name == ""
        assert draft.date_of_birth is None
        assert draft.hobbies == []
        assert draft.avatar_url is None

    def test_missing_required(self):
        draft = ProfileDraft(first_name="Ada", last_name="  ")
        assert draft.missing_required() == ["last_name", "date_of_birth", "country"]

    def test_to_profile_prefers_new_avatar_url(self):
        draft = ProfileDraft(
            first_name="Ada", last_name="Lovelace", date_of_birth=date(1815, 12, 10),
            country="UK", avatar_url="https://old",
        )
        assert draft.to_profile("U1").avatar_url == "https://old"
        assert draft.to_profile("U1", avatar_url="https://new").avatar_url == "https://new"

    def test_to_draft_round_trip(self, stored_row):
        profile = Profile.from_row(stored_row)
        draft = profile.to_draft()

        assert isinstance(draft, ProfileDraft)
        assert draft.blood_group is BloodGroup.O_POSITIVE
        assert draft.to_profile("U1") == profile

from __future__ import annotations

import pytest

from scoop.auth.callback import resolve_redirect_path
from scoop.auth.identity import annotate_account_linking, derive_identities, derive_username
from scoop.auth.models import AuthState, InternalExchange


def test_google_subject_yields_single_identity() -> None:
    profile = {"name": "Jane", "email": "jane@example.com", "picture": "p"}
    identities = derive_identities("google-oauth2|12345", profile)
    assert len(identities) == 1
    assert identities[0]["provider"] == "google-oauth2"
    assert identities[0]["connection"] == "google-oauth2"
    assert identities[0]["user_id"] == "12345"
    assert identities[0]["isSocial"] is True
    assert identities[0]["profileData"] == profile


@pytest.mark.parametrize("sub", ["auth0|abc", "github|1", "apple|x", "linkedin", "google-oauth2"])
def test_unknown_or_bare_subjects_yield_nothing(sub) -> None:
    assert derive_identities(sub, {}) == []


def test_linkedin_subject() -> None:
    (identity,) = derive_identities("linkedin|AbC-9", {})
    assert identity["provider"] == "linkedin"
    assert identity["user_id"] == "AbC-9"


@pytest.mark.parametrize(
    "profile,expected",
    [
        ({"email": "a.b@c.com", "nickname": "nick", "name": "Full Name"}, "a.b"),
        ({"nickname": "nick", "name": "Full Name"}, "nick"),
        ({"name": "Full Name"}, "Full"),
        ({}, "user"),
        ({"email": "", "nickname": "", "name": ""}, "user"),
    ],
)
def test_derive_username_fallbacks(profile, expected) -> None:
    assert derive_username(profile) == expected


def test_account_linking_annotation() -> None:
    profile = annotate_account_linking({"email": "a@b.com"}, AuthState("/connected-accounts", "facebook"))
    assert profile["connectedPlatform"] == "Facebook"
    assert profile["connectedUsername"] == "a"


def test_account_linking_needs_known_platform_and_email() -> None:
    unknown = annotate_account_linking({"email": "a@b.com"}, AuthState("/connected-accounts", "twitter"))
    assert "connectedPlatform" not in unknown
    no_email = annotate_account_linking({}, AuthState("/connected-accounts", "linkedin"))
    assert "connectedPlatform" not in no_email


def test_no_annotation_outside_connected_accounts() -> None:
    profile = annotate_account_linking({"email": "a@b.com"}, AuthState("/", "facebook"))
    assert "connectedPlatform" not in profile


@pytest.mark.parametrize(
    "state,backend_user,expected",
    [
        (AuthState("/", None), {"username": "jane", "phone": "555"}, "/"),
        (AuthState("/", None), {"username": "jane"}, "/onboarding"),
        (AuthState("/", None), {"phone": "555"}, "/onboarding"),
        (AuthState("/", None), None, "/onboarding"),
        (AuthState("/feed", None), None, "/feed"),
        (AuthState("/connected-accounts", None), {"username": "jane", "phone": "555"}, "/connected-accounts"),
        (AuthState("/connected-accounts", "google-oauth2"), None, "/connected-accounts"),
    ],
)
def test_resolve_redirect_path(state, backend_user, expected) -> None:
    assert resolve_redirect_path(state, InternalExchange(user=backend_user)) == expected

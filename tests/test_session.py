"""
Unit tests for the cookie session: signing, state resolution and roles.
"""

import pytest

from sanitarios_shared.session import (
    SessionState,
    check_session,
    dashboard_url_for_roles,
    decode_user_cookie,
    encode_user_cookie,
    get_current_user,
    get_user_roles,
    has_any_role,
)


def _cookies(token=None, user=None) -> dict:
    parts = []
    if token:
        parts.append(f"token={token}")
    if user:
        parts.append(f"user={user}")
    return {"Cookie": "; ".join(parts)} if parts else {}


class TestUserCookie:
    """Tests for the signed user cookie."""

    def test_round_trip_keeps_known_fields(self, app):
        with app.test_request_context():
            raw = encode_user_cookie(
                {"id": 7, "roles": ["OPERARIO"], "empleadoId": 3, "password": "x"}
            )
            user = decode_user_cookie(raw)

        assert user == {"id": 7, "roles": ["OPERARIO"], "empleadoId": 3}

    def test_tampered_cookie_is_rejected(self, app):
        with app.test_request_context():
            raw = encode_user_cookie({"id": 7, "roles": ["OPERARIO"]})

            assert decode_user_cookie(f"e{raw}") is None

    def test_cookie_signed_with_other_secret_is_rejected(self, app):
        with app.test_request_context():
            raw = encode_user_cookie({"id": 1, "roles": ["ADMIN"]})
        app.config["SECRET_KEY"] = "another-secret"

        with app.test_request_context():
            assert decode_user_cookie(raw) is None


class TestCheckSession:
    """Tests for check_session."""

    def test_missing_without_token(self, app):
        with app.test_request_context():
            assert check_session() is SessionState.MISSING

    def test_valid_with_fresh_token_and_signed_user(self, app, token_factory):
        with app.test_request_context():
            user = encode_user_cookie({"id": 1, "roles": ["ADMIN"]})
        headers = _cookies(token_factory(), user)

        with app.test_request_context(headers=headers):
            assert check_session() is SessionState.VALID
            assert get_current_user()["roles"] == ["ADMIN"]

    def test_expiring_token(self, app, token_factory):
        with app.test_request_context(headers=_cookies(token_factory(expires_in=60))):
            assert check_session() is SessionState.EXPIRED

    def test_token_without_exp_counts_as_expiring(self, app, token_factory):
        with app.test_request_context(headers=_cookies(token_factory(expires_in=None))):
            assert check_session() is SessionState.EXPIRED

    def test_margin_comes_from_config(self, app, token_factory):
        app.config["TOKEN_EXPIRY_MARGIN_SECONDS"] = 30

        with app.test_request_context(headers=_cookies(token_factory(expires_in=60))):
            assert check_session() is SessionState.VALID

    def test_invalid_user_cookie(self, app, token_factory):
        with app.test_request_context(headers=_cookies(token_factory(), "forged")):
            assert check_session() is SessionState.INVALID_USER


class TestRoles:
    """Tests for role resolution."""

    def test_roles_from_user_cookie(self, app, token_factory):
        with app.test_request_context():
            user = encode_user_cookie({"id": 1, "roles": ["supervisor"]})

        with app.test_request_context(headers=_cookies(token_factory(), user)):
            assert get_user_roles() == ["SUPERVISOR"]
            assert has_any_role({"SUPERVISOR", "ADMIN"})
            assert not has_any_role({"OPERARIO"})

    def test_token_role_claim_narrows_cookie_roles(self, app, token_factory):
        with app.test_request_context():
            user = encode_user_cookie({"id": 1, "roles": ["ADMIN", "OPERARIO"]})

        token = token_factory(roles=["OPERARIO"])
        with app.test_request_context(headers=_cookies(token, user)):
            assert get_user_roles() == ["OPERARIO"]

    def test_token_role_claim_never_adds_roles(self, app, token_factory):
        with app.test_request_context():
            user = encode_user_cookie({"id": 1, "roles": ["OPERARIO"]})

        token = token_factory(roles=["ADMIN"])
        with app.test_request_context(headers=_cookies(token, user)):
            assert get_user_roles() == []
            assert not has_any_role({"ADMIN", "SUPERVISOR"})

    def test_token_claim_without_user_cookie(self, app, token_factory):
        with app.test_request_context(headers=_cookies(token_factory(roles=["ADMIN"]))):
            assert get_user_roles() == []

    def test_no_session_no_roles(self, app):
        with app.test_request_context():
            assert get_user_roles() == []

    @pytest.mark.parametrize(
        "roles, expected",
        [
            (["ADMIN"], "/admin/dashboard"),
            (["SUPERVISOR"], "/admin/dashboard"),
            (["OPERARIO", "ADMIN"], "/admin/dashboard"),
            (["OPERARIO"], "/operario/dashboard"),
            (["INVITADO"], None),
            ([], None),
        ],
    )
    def test_dashboard_url_for_roles(self, roles, expected):
        assert dashboard_url_for_roles(roles) == expected

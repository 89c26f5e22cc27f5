"""Tests for auth utility functions."""
import pytest
from datetime import datetime, timedelta
from fastapi import Response


class TestPasswordHashing:
    """Tests for password hashing functions."""

    def test_hash_password(self):
        """Test password hashing."""
        from finroute.utils.auth import hash_password

        password = "mysecretpassword123"
        hashed = hash_password(password)

        # Should return a bcrypt hash
        assert hashed.startswith("$2b$")
        assert len(hashed) > 50

        # Same password should produce different hashes (due to salt)
        assert hashed != hash_password(password)

    def test_verify_password_correct(self):
        """Test password verification with correct password."""
        from finroute.utils.auth import hash_password, verify_password

        hashed = hash_password("mysecretpassword123")

        assert verify_password("mysecretpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        """Test password verification with incorrect password."""
        from finroute.utils.auth import hash_password, verify_password

        hashed = hash_password("mysecretpassword123")

        assert verify_password("wrongpassword", hashed) is False
        assert verify_password("", hashed) is False


class TestSessionTokens:
    """Tests for session token functions."""

    def test_issue_and_verify(self):
        """Test a freshly issued token verifies to its uid."""
        from finroute.utils.auth import issue_session_token, verify_session_token

        token = issue_session_token(uid="user123")
        session = verify_session_token(token)

        assert session is not None
        assert session.uid == "user123"

    def test_token_payload(self):
        """Test the payload carries uid, iat and a 30 day exp."""
        from jose import jwt
        from finroute.config import settings
        from finroute.utils.auth import issue_session_token

        token = issue_session_token(uid="user123")
        payload = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])

        assert payload["uid"] == "user123"
        assert payload["exp"] - payload["iat"] == 30 * 24 * 60 * 60

    def test_expired_token_is_no_session(self):
        """Test an expired token is treated like a missing cookie."""
        from finroute.utils.auth import issue_session_token, verify_session_token

        token = issue_session_token(uid="user123", expires_delta=timedelta(seconds=-1))

        assert verify_session_token(token) is None
        assert verify_session_token(None) is None

    def test_malformed_token_is_no_session(self):
        """Test garbage tokens return None instead of raising."""
        from finroute.utils.auth import verify_session_token

        assert verify_session_token("invalid.token.here") is None
        assert verify_session_token("") is None

    def test_forged_token_is_no_session(self):
        """Test a token signed with another secret is rejected."""
        from jose import jwt
        from finroute.utils.auth import verify_session_token

        forged = jwt.encode(
            {"uid": "user123", "exp": datetime.utcnow() + timedelta(days=1)},
            "not-the-secret",
            algorithm="HS256",
        )

        assert verify_session_token(forged) is None

    def test_token_without_uid_is_no_session(self):
        """Test a validly signed token lacking uid is rejected."""
        from jose import jwt
        from finroute.config import settings
        from finroute.utils.auth import verify_session_token

        token = jwt.encode(
            {"sub": "user123", "exp": datetime.utcnow() + timedelta(days=1)},
            settings.jwt_secret,
            algorithm="HS256",
        )

        assert verify_session_token(token) is None


class TestSessionCookie:
    """Tests for session cookie helpers."""

    def test_set_session_cookie(self):
        """Test cookie attributes."""
        from finroute.utils.auth import set_session_cookie

        response = Response()
        set_session_cookie(response, "abc")
        header = response.headers["set-cookie"]

        assert header.startswith("finroute_session=abc")
        assert "HttpOnly" in header
        assert "Max-Age=2592000" in header
        assert "Path=/" in header
        assert "samesite=lax" in header.lower()
        # Secure only in production
        assert "Secure" not in header

    def test_clear_session_cookie(self):
        """Test revoking writes an expired empty cookie."""
        from finroute.utils.auth import clear_session_cookie

        response = Response()
        clear_session_cookie(response)
        header = response.headers["set-cookie"]

        assert header.startswith('finroute_session=""') or header.startswith("finroute_session=;")
        assert "Max-Age=0" in header

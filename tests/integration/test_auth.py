import jwt
import pytest

from tenantscope.web.auth.session import SESSION_ALGORITHM, SessionAuth


@pytest.mark.integration
class TestSessionAuth:
    def test_create_session(self) -> None:
        auth = SessionAuth(secret_key="test-secret")
        token = auth.create_session("u-alice")
        assert len(token) > 20
        assert auth.user_id_for(token) == "u-alice"

    def test_token_is_verifiable_by_any_holder_of_the_secret(self) -> None:
        token = SessionAuth(secret_key="shared").create_session("u-alice")
        assert SessionAuth(secret_key="shared").user_id_for(token) == "u-alice"

    def test_externally_issued_token(self) -> None:
        token = jwt.encode(
            {"sub": "u-bob", "exp": 4102444800}, "shared", algorithm=SESSION_ALGORITHM
        )
        assert SessionAuth(secret_key="shared").user_id_for(token) == "u-bob"

    def test_invalid_token(self) -> None:
        auth = SessionAuth(secret_key="test-secret")
        assert auth.validate_session("invalid-token") is None
        assert auth.user_id_for(None) is None
        assert auth.user_id_for("") is None

    def test_tampered_token(self) -> None:
        auth = SessionAuth(secret_key="test-secret")
        header, payload, signature = auth.create_session("u-alice").split(".")
        forged = f"{header}.{payload}.{signature[::-1]}"
        assert auth.validate_session(forged) is None

    def test_different_secrets(self) -> None:
        token = SessionAuth(secret_key="secret-1").create_session("u-alice")
        assert SessionAuth(secret_key="secret-2").validate_session(token) is None

    def test_expired_session(self) -> None:
        auth = SessionAuth(secret_key="test-secret", max_age=-60)
        token = auth.create_session("u-alice")
        assert auth.validate_session(token) is None

    def test_token_without_expiry_rejected(self) -> None:
        token = jwt.encode({"sub": "u-alice"}, "test-secret", algorithm=SESSION_ALGORITHM)
        assert SessionAuth(secret_key="test-secret").validate_session(token) is None

    def test_unsigned_token_rejected(self) -> None:
        token = jwt.encode({"sub": "u-root", "exp": 4102444800}, None, algorithm="none")
        assert SessionAuth(secret_key="test-secret").validate_session(token) is None

"""
Unit Tests for access token verification.

Uses unittest.mock to simulate the token endpoint without making network
requests.
"""
import pytest
from unittest.mock import MagicMock
import requests

from indieauth import (
    StaticTokenVerifier,
    TokenEndpointVerifier,
    TokenVerificationError,
    verifier_from_config,
)
from indieauth.tokens import TOKEN_USER_AGENT


def _mock_session(status_code=200, json_data=None, side_effect=None):
    session = MagicMock()
    session.headers = {}
    if side_effect:
        session.get.side_effect = side_effect
    else:
        response = MagicMock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        session.get.return_value = response
    return session


class TestStaticTokenVerifier:
    """Test suite for StaticTokenVerifier."""

    def test_matching_token(self):
        assert StaticTokenVerifier("secret").verify("secret") is True

    def test_wrong_token(self):
        assert StaticTokenVerifier("secret").verify("guess") is False

    def test_empty_token(self):
        assert StaticTokenVerifier("secret").verify("") is False

    def test_requires_token(self):
        with pytest.raises(ValueError):
            StaticTokenVerifier("")


class TestTokenEndpointVerifier:
    """Test suite for TokenEndpointVerifier."""

    ENDPOINT = "https://tokens.example.com/token"

    def test_valid_token(self):
        session = _mock_session(json_data={
            "me": "https://blog.example.com/",
            "client_id": "https://app.example.com/",
            "scope": "create update",
        })
        verifier = TokenEndpointVerifier(self.ENDPOINT, session=session)

        assert verifier.verify("abc") is True
        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args[0] == self.ENDPOINT
        assert kwargs["headers"]["Authorization"] == "Bearer abc"
        assert session.headers["User-Agent"] == TOKEN_USER_AGENT

    def test_legacy_post_scope(self):
        session = _mock_session(json_data={"me": "https://blog.example.com/", "scope": "post"})
        assert TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc") is True

    def test_missing_create_scope(self):
        session = _mock_session(json_data={"me": "https://blog.example.com/", "scope": "read"})
        assert TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc") is False

    def test_inactive_token(self):
        session = _mock_session(json_data={"active": False})
        assert TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc") is False

    def test_me_must_match(self):
        session = _mock_session(json_data={"me": "https://other.example.com/", "scope": "create"})
        verifier = TokenEndpointVerifier(self.ENDPOINT, me="https://blog.example.com/", session=session)
        assert verifier.verify("abc") is False

    def test_me_trailing_slash_ignored(self):
        session = _mock_session(json_data={"me": "https://blog.example.com", "scope": "create"})
        verifier = TokenEndpointVerifier(self.ENDPOINT, me="https://blog.example.com/", session=session)
        assert verifier.verify("abc") is True

    def test_rejected_token(self):
        session = _mock_session(status_code=401)
        assert TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc") is False

    def test_server_error_raises(self):
        session = _mock_session(status_code=502)
        with pytest.raises(TokenVerificationError):
            TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc")

    def test_connection_error_raises(self):
        session = _mock_session(side_effect=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(TokenVerificationError, match="refused"):
            TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc")

    def test_invalid_json_raises(self):
        session = _mock_session(json_data=ValueError("not json"))
        with pytest.raises(TokenVerificationError):
            TokenEndpointVerifier(self.ENDPOINT, session=session).verify("abc")

    def test_empty_token_skips_request(self):
        session = _mock_session()
        assert TokenEndpointVerifier(self.ENDPOINT, session=session).verify("") is False
        session.get.assert_not_called()


class TestVerifierFromConfig:
    """Test suite for verifier_from_config()."""

    def test_token_endpoint(self):
        verifier = verifier_from_config({"micropub": {
            "token_endpoint": "https://tokens.example.com/token",
            "me": "https://blog.example.com/",
        }})
        assert isinstance(verifier, TokenEndpointVerifier)
        assert verifier.me == "https://blog.example.com"

    def test_token_file(self, tmp_path):
        token_file = tmp_path / "micropub_token"
        token_file.write_text("s3cret\n")

        verifier = verifier_from_config({"micropub": {"token_file": str(token_file)}})
        assert isinstance(verifier, StaticTokenVerifier)
        assert verifier.verify("s3cret") is True

    def test_missing_token_file(self, tmp_path):
        assert verifier_from_config({"micropub": {"token_file": str(tmp_path / "missing")}}) is None

    def test_nothing_configured(self):
        assert verifier_from_config({}) is None

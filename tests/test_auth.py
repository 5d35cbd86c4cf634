"""
Tests for Bearer Token Authentication

Every /books route requires "Authorization: Bearer <access token>".
The check runs before the handler does anything else, so an
unauthenticated request never reaches validation, id parsing or the
database.
"""

from datetime import timedelta

import pytest
from fastapi import status
from jose import jwt

from app.services.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_token_type,
)

BOOKS_URL = "/api/v1/books/"

ROUTES = [
    ("get", BOOKS_URL),
    ("post", BOOKS_URL),
    ("get", f"{BOOKS_URL}1"),
    ("put", f"{BOOKS_URL}1"),
    ("delete", f"{BOOKS_URL}1"),
]


class TestBearerAuthentication:
    """Tests for the token gate on the books routes."""

    @pytest.mark.parametrize("method,url", ROUTES)
    def test_missing_token_rejected(self, client, method, url):
        """Test that every books route requires a token."""
        response = client.request(method, url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Could not validate credentials"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.parametrize("method,url", ROUTES)
    def test_garbage_token_rejected(self, client, method, url):
        """Test that a token that is not a JWT is rejected."""
        response = client.request(
            method,
            url,
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_wrong_scheme_rejected(self, client, access_token):
        """Test that the token must be sent with the Bearer scheme."""
        response = client.get(
            BOOKS_URL,
            headers={"Authorization": f"Basic {access_token}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token_rejected(self, client):
        """Test that an expired access token is rejected."""
        token = create_access_token(
            {"sub": "test-user"},
            expires_delta=timedelta(minutes=-1),
        )

        response = client.get(BOOKS_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token_rejected(self, client):
        """Test that refresh tokens cannot be used to call the API."""
        token = create_refresh_token({"sub": "test-user"})

        response = client.get(BOOKS_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_without_subject_rejected(self, client):
        """Test that an access token must name a subject."""
        token = create_access_token({})

        response = client.get(BOOKS_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_signed_with_other_key_rejected(self, client):
        """Test that a token signed with a different secret is rejected."""
        token = jwt.encode(
            {"sub": "intruder", "type": "access"},
            "some-other-secret-key-that-is-long-enough",
            algorithm="HS256",
        )

        response = client.get(BOOKS_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_valid_token_accepted(self, client, auth_headers):
        """Test that a valid access token opens the API."""
        response = client.get(BOOKS_URL, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK

    def test_auth_checked_before_validation(self, client, count_books):
        """Test that an invalid body without a token is a 401, not a 400."""
        response = client.post(BOOKS_URL, json={"title": ""})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert count_books() == 0

    def test_auth_checked_before_id_parsing(self, client):
        """Test that a bad id without a token is a 401, not a 404."""
        response = client.get(f"{BOOKS_URL}abc")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unauthenticated_delete_leaves_book(self, client, sample_book, count_books):
        """Test that the handler body never runs without a token."""
        response = client.delete(f"{BOOKS_URL}{sample_book.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert count_books() == 1

    def test_public_endpoints_need_no_token(self, client):
        """Test that root and health stay open."""
        assert client.get("/").status_code == status.HTTP_200_OK
        assert client.get("/health").status_code == status.HTTP_200_OK


class TestTokenHelpers:
    """Tests for the token functions in app.services.security."""

    def test_access_token_round_trip(self):
        """Test that an access token decodes to its claims."""
        token = create_access_token({"sub": "librarian"})

        payload = decode_token(token)

        assert payload["sub"] == "librarian"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_verify_token_type_mismatch(self):
        """Test that a refresh token fails an access-type check."""
        token = create_refresh_token({"sub": "librarian"})

        assert verify_token_type(token, "access") is None
        assert verify_token_type(token, "refresh")["sub"] == "librarian"

    def test_decode_invalid_token(self):
        """Test that garbage decodes to None instead of raising."""
        assert decode_token("a.b.c") is None

"""
Tests for bearer token issuance and validation.
"""
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from django.test import RequestFactory, SimpleTestCase, override_settings

from apps.core.exceptions import AuthError
from apps.identity.dtos import UserDTO
from apps.identity.jwt_auth import (
    JWT_ALGORITHM,
    authenticate_request,
    create_access_token,
    decode_token,
    get_bearer_token,
)

SECRET = "test-signing-secret-that-is-long-enough-for-hs256"


@override_settings(
    JWT_SECRET=SECRET,
    JWT_ISSUER="usertasks-test",
    JWT_AUDIENCE="usertasks-test-clients",
    JWT_EXPIRY_MINUTES=30,
)
class TokenIssuerTest(SimpleTestCase):

    def setUp(self):
        self.user = UserDTO(id=uuid.uuid4(), username="alice", email="alice@example.com")

    def _raw_payload(self, token):
        return jwt.decode(
            token,
            SECRET,
            algorithms=[JWT_ALGORITHM],
            audience="usertasks-test-clients",
            issuer="usertasks-test",
        )

    def test_token_carries_identity_claims(self):
        payload = self._raw_payload(create_access_token(self.user))
        self.assertEqual(payload["sub"], str(self.user.id))
        self.assertEqual(payload["name"], "alice")
        self.assertEqual(payload["email"], "alice@example.com")
        self.assertEqual(payload["iss"], "usertasks-test")
        self.assertEqual(payload["aud"], "usertasks-test-clients")

    def test_expiry_is_issue_time_plus_configured_minutes(self):
        payload = self._raw_payload(create_access_token(self.user))
        self.assertEqual(payload["exp"] - payload["iat"], 30 * 60)

    def test_decode_round_trip(self):
        claims = decode_token(create_access_token(self.user))
        self.assertEqual(claims.user_id, self.user.id)
        self.assertEqual(claims.username, "alice")
        self.assertEqual(claims.email, "alice@example.com")

    def test_expired_token_rejected(self):
        with override_settings(JWT_EXPIRY_MINUTES=-1):
            token = create_access_token(self.user)
        with self.assertRaisesMessage(AuthError, "Token has expired"):
            decode_token(token)

    def test_wrong_signature_rejected(self):
        with override_settings(JWT_SECRET="another-secret-that-is-also-long-enough-for-hs256"):
            token = create_access_token(self.user)
        with self.assertRaises(AuthError):
            decode_token(token)

    def test_wrong_issuer_rejected(self):
        with override_settings(JWT_ISSUER="someone-else"):
            token = create_access_token(self.user)
        with self.assertRaises(AuthError):
            decode_token(token)

    def test_wrong_audience_rejected(self):
        with override_settings(JWT_AUDIENCE="another-audience"):
            token = create_access_token(self.user)
        with self.assertRaises(AuthError):
            decode_token(token)

    def test_malformed_subject_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "not-a-uuid",
                "iss": "usertasks-test",
                "aud": "usertasks-test-clients",
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            SECRET,
            algorithm=JWT_ALGORITHM,
        )
        with self.assertRaises(AuthError):
            decode_token(token)

    def test_garbage_rejected(self):
        with self.assertRaises(AuthError):
            decode_token("not.a.token")


@override_settings(JWT_SECRET=SECRET)
class BearerHeaderTest(SimpleTestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def test_extracts_bearer_token(self):
        request = self.factory.get("/", HTTP_AUTHORIZATION="Bearer abc.def.ghi")
        self.assertEqual(get_bearer_token(request), "abc.def.ghi")

    def test_scheme_is_case_insensitive(self):
        request = self.factory.get("/", HTTP_AUTHORIZATION="bearer abc")
        self.assertEqual(get_bearer_token(request), "abc")

    def test_other_schemes_ignored(self):
        request = self.factory.get("/", HTTP_AUTHORIZATION="Basic dXNlcjpwYXNz")
        self.assertIsNone(get_bearer_token(request))

    def test_missing_header_requires_authentication(self):
        with self.assertRaisesMessage(AuthError, "Authentication required"):
            authenticate_request(self.factory.get("/"))

    def test_valid_header_authenticates(self):
        user = UserDTO(id=uuid.uuid4(), username="bob", email="bob@example.com")
        request = self.factory.get(
            "/", HTTP_AUTHORIZATION=f"Bearer {create_access_token(user)}"
        )
        self.assertEqual(authenticate_request(request).user_id, user.id)

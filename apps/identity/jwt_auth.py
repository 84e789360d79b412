"""
JWT Authentication utilities for UserTasks.

Issues and validates the bearer tokens sent in the Authorization header.
Tokens are HS256-signed and carry the user's id (sub), username (name) and
email, plus the configured issuer and audience.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt
from django.conf import settings
from django.http import HttpRequest

from apps.core.exceptions import AuthError
from .dtos import TokenClaims, UserDTO

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'
REQUIRED_CLAIMS = ['sub', 'exp', 'iat', 'iss', 'aud']


def create_access_token(user: UserDTO) -> str:
    """
    Create a signed access token for the given user.

    Expires JWT_EXPIRY_MINUTES after issue.
    """
    issued_at = datetime.now(timezone.utc)
    payload = {
        'sub': str(user.id),
        'name': user.username,
        'email': user.email,
        'iss': settings.JWT_ISSUER,
        'aud': settings.JWT_AUDIENCE,
        'iat': issued_at,
        'exp': issued_at + timedelta(minutes=settings.JWT_EXPIRY_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> TokenClaims:
    """
    Decode and validate a JWT token.

    Checks signature, issuer, audience and expiry.

    Raises:
        AuthError: if the token is expired, malformed or fails any check.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={'require': REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthError("Invalid token")

    try:
        user_id = UUID(payload['sub'])
    except (TypeError, ValueError):
        logger.warning("JWT token carries a malformed subject")
        raise AuthError("Invalid token")

    return TokenClaims(
        user_id=user_id,
        username=payload.get('name', ''),
        email=payload.get('email', ''),
    )


def get_bearer_token(request: HttpRequest) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def authenticate_request(request: HttpRequest) -> TokenClaims:
    """
    Require a valid bearer token on the request.

    Raises AuthError (401) when the header is missing or the token invalid.
    """
    token = get_bearer_token(request)
    if not token:
        raise AuthError("Authentication required")
    return decode_token(token)

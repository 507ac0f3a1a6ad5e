# apps/core/auth_service.py

"""
Authentication service - every piece of auth logic lives here

Views only translate HTTP into calls on this service: it hashes and checks
passwords through Django's auth machinery and signs/verifies the bearer
tokens (JWT) used by the API and the WebSocket.
"""

import logging
import re
from datetime import timedelta
from typing import Dict, Optional, Tuple

import jwt
from django.conf import settings
from django.contrib.auth import authenticate
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import User, normalize_email

logger = logging.getLogger(__name__)

DURATION_PATTERN = re.compile(r'^\s*(\d+)\s*([smhdw]?)\s*$')
DURATION_UNITS = {
    '': 'seconds',
    's': 'seconds',
    'm': 'minutes',
    'h': 'hours',
    'd': 'days',
    'w': 'weeks',
}


class AuthenticationFailed(Exception):
    """Credentials or token rejected (HTTP 401)"""


class UserAlreadyExists(Exception):
    """Email already registered (HTTP 409)"""


def parse_duration(value: str) -> timedelta:
    """
    Parse token lifetimes such as '7d', '12h', '30m' or '3600'
    """
    match = DURATION_PATTERN.match(str(value))
    if not match:
        raise ImproperlyConfigured(f"Invalid JWT_EXPIRES_IN value: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{DURATION_UNITS[unit]: int(amount)})


class AuthenticationService:
    """
    Registration, login and token handling

    Settings are read on every call so tests can override them.
    """

    def register_user(self, email: str, password: str, name: str) -> User:
        """
        Create an account with a hashed password

        Raises UserAlreadyExists when the email is taken (case-insensitive).
        """
        email = normalize_email(email)

        if self._user_exists(email):
            raise UserAlreadyExists('User with this email already exists')

        try:
            with transaction.atomic():
                user = User.objects.create_user(email=email, password=password, name=name.strip())
        except IntegrityError:
            # Lost a race with a concurrent registration
            raise UserAlreadyExists('User with this email already exists')

        logger.info("User registered: %s", user.email)
        return user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Check credentials and issue a token

        Raises AuthenticationFailed with a message that does not reveal
        whether the email exists.
        """
        user = authenticate(email=normalize_email(email), password=password)
        if user is None:
            logger.warning("Failed login for %s", normalize_email(email))
            raise AuthenticationFailed('Invalid credentials')

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        return self.issue_token(user), user

    def issue_token(self, user: User) -> str:
        """Sign a token carrying the user id and email"""
        now = timezone.now()
        payload = {
            'id': str(user.pk),
            'email': user.email,
            'iat': now,
            'exp': now + parse_duration(settings.JWT_EXPIRES_IN),
        }
        return jwt.encode(payload, self._get_secret(), algorithm=settings.JWT_ALGORITHM)

    def decode_token(self, token: str) -> Dict:
        """
        Verify signature and expiry

        Raises AuthenticationFailed for anything that is not a valid,
        unexpired token of ours.
        """
        try:
            payload = jwt.decode(
                token,
                self._get_secret(),
                algorithms=[settings.JWT_ALGORITHM],
                options={'require': ['exp', 'id']},
            )
        except jwt.PyJWTError:
            raise AuthenticationFailed('Invalid or expired token')
        return payload

    def claims_from_header(self, header: Optional[str]) -> Optional[Dict]:
        """Claims of a 'Bearer <token>' header, or None"""
        token = self._extract_bearer_token(header)
        if not token:
            return None
        try:
            return self.decode_token(token)
        except AuthenticationFailed:
            return None

    def user_from_claims(self, claims: Optional[Dict]) -> Optional[User]:
        """Active user the claims point to, or None if it is gone"""
        if not claims:
            return None
        try:
            return User.objects.get(pk=claims.get('id'), is_active=True)
        except (User.DoesNotExist, ValidationError, ValueError, TypeError):
            # Malformed ids surface as ValidationError from UUIDField
            return None

    # =================== PRIVATE METHODS ===================

    def _get_secret(self) -> str:
        secret = getattr(settings, 'JWT_SECRET', '')
        if not secret:
            raise ImproperlyConfigured('Please define the JWT_SECRET environment variable')
        return secret

    def _user_exists(self, email: str) -> bool:
        return User.objects.filter(email__iexact=email).exists()

    def _extract_bearer_token(self, header: Optional[str]) -> Optional[str]:
        if not header or not header.startswith('Bearer '):
            return None
        return header[len('Bearer '):].strip() or None


# Global service instance
auth_service = AuthenticationService()

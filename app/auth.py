import base64
import json
import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .models import Profile
from .schemas import Role
from .shared.errors import AuthenticationError, AuthorizationError, StoreError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)

# Cache for Google's public keys
_cached_keys = None


@dataclass(frozen=True)
class Identity:
    """Who the bearer token says the caller is."""

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class Caller:
    """An identity together with the role stored on its profile."""

    uid: str
    email: Optional[str]
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


async def get_google_public_keys(force_refresh: bool = False) -> Optional[dict]:
    """Fetch Google's public keys for Firebase token verification"""
    global _cached_keys
    if _cached_keys and not force_refresh:
        return _cached_keys

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(GOOGLE_CERTS_URL)
        if response.status_code == 200:
            _cached_keys = response.json()
            logger.info(f"✅ Fetched {len(_cached_keys)} Google public keys")
            return _cached_keys
        logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
    return None


def _decode_segment(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


async def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token and return its claims.

    Checks the RS256 signature against Google's certificates, then the
    audience, issuer, expiry and issued-at claims.
    """
    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise StoreError("Authentication is not configured")

    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format")
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_decode_segment(header_b64))
        claims = json.loads(_decode_segment(payload_b64))
        signature = _decode_segment(signature_b64)
    except (ValueError, TypeError) as e:
        logger.warning(f"⚠️ Undecodable token: {e}")
        raise AuthenticationError("Invalid token") from e

    kid = header.get("kid")
    if header.get("alg") != "RS256" or not kid:
        raise AuthenticationError("Invalid token header")

    public_keys = await get_google_public_keys()
    if not public_keys or kid not in public_keys:
        # Keys rotate; refetch once before giving up
        public_keys = await get_google_public_keys(force_refresh=True)
        if not public_keys or kid not in public_keys:
            logger.error(f"❌ Key ID {kid} not found in public keys after refresh")
            raise AuthenticationError("Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode())
    try:
        cert.public_key().verify(
            signature,
            f"{header_b64}.{payload_b64}".encode(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
    except Exception as e:
        logger.warning(f"⚠️ Token signature verification failed: {type(e).__name__}")
        raise AuthenticationError("Invalid token signature") from e

    if claims.get("aud") != FIREBASE_PROJECT_ID:
        raise AuthenticationError("Invalid token audience")
    if claims.get("iss") != f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}":
        raise AuthenticationError("Invalid token issuer")

    now = time.time()
    if claims.get("exp", 0) < now:
        raise AuthenticationError("Token has expired. Please sign in again.")
    if claims.get("iat", 0) > now + 60:  # Allow 60 seconds clock skew
        raise AuthenticationError("Invalid token")

    return claims


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Resolve the bearer token to the caller's identity"""
    if not credentials or not credentials.credentials:
        raise AuthenticationError("No token provided")

    claims = await verify_firebase_token(credentials.credentials)

    # Firebase ID tokens use 'sub' as the user ID claim
    uid = claims.get("sub") or claims.get("user_id")
    if not uid:
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(claims.keys())}")
        raise AuthenticationError("Invalid token claims")

    return Identity(uid=uid, email=claims.get("email"), name=claims.get("name"))


def get_current_caller(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Caller:
    """Identity plus the role from the caller's profile (client if none exists yet)"""
    profile = db.query(Profile).filter(Profile.id == identity.uid).first()
    role = Role(profile.role) if profile else Role.CLIENT
    return Caller(uid=identity.uid, email=identity.email, role=role)


def require_roles(*roles: Role):
    """Build a dependency that only lets callers with one of ``roles`` through."""
    allowed = set(roles)

    def dependency(caller: Caller = Depends(get_current_caller)) -> Caller:
        if caller.role not in allowed:
            logger.warning(f"⚠️ {caller.uid} ({caller.role.value}) denied; requires {sorted(r.value for r in allowed)}")
            if allowed == {Role.ADMIN}:
                raise AuthorizationError("Admin access required")
            raise AuthorizationError("Access denied")
        return caller

    return dependency


require_staff = require_roles(Role.ADMIN, Role.PHOTOGRAPHER)
require_admin = require_roles(Role.ADMIN)

"""
Caller identity resolution
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth as firebase_auth

from ....core.exceptions import AuthenticationException

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def verify_firebase_token(id_token: str) -> Optional[dict]:
    """Verify Firebase ID token"""
    try:
        return firebase_auth.verify_id_token(id_token)
    except (firebase_auth.InvalidIdTokenError, ValueError) as e:
        logger.info(f"Rejected Firebase token: {e}")
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """Get current user id from a Firebase ID token"""
    if credentials is None:
        raise AuthenticationException("Authentication required")

    decoded_token = verify_firebase_token(credentials.credentials)
    if decoded_token is None or not decoded_token.get("uid"):
        raise AuthenticationException("Invalid authentication credentials")

    return decoded_token["uid"]

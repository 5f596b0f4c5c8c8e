"""
Bearer Token Verification

Resolves the caller's owner identity from an `Authorization: Bearer` token.
Tokens are issued by an external identity provider; this service only
verifies them (shared secret, JWT_ALGORITHM) and maps the `sub` claim to a
live account in the Account Directory.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import AuthenticationError
from shortlink.core.setting import settings
from shortlink.db.account_directory import SQLAccountDirectory
from shortlink.db.interface import AccountDirectory
from shortlink.db.session import get_session

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_subject(token: str) -> str:
    """
    Verify a bearer token and return its subject.

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {str(e)}")

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Token has no subject")
    return str(subject)


async def authenticate(token: str, directory: AccountDirectory) -> str:
    """Return the id of the live account a token belongs to."""
    account_id = decode_subject(token)
    account = await directory.find_by_id(account_id)
    if account is None:
        raise AuthenticationError(f"Account {account_id} not found")
    return account.id


async def get_current_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session)
) -> str:
    """FastAPI dependency: owner id of an authenticated caller, 401 otherwise."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await authenticate(credentials.credentials, SQLAccountDirectory(session))
    except AuthenticationError as e:
        logger.warning(str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_optional_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session)
) -> Optional[str]:
    """FastAPI dependency: owner id when a valid token is present, None otherwise."""
    if credentials is None:
        return None
    try:
        return await authenticate(credentials.credentials, SQLAccountDirectory(session))
    except AuthenticationError as e:
        logger.info(f"Ignoring bearer token on anonymous-capable route: {e}")
        return None

# apps/api/src/domains/auth/dependencies.py
import logging
from typing import Optional

import jwt
from fastapi import Depends, Header

from src.core.database import Database, get_db
from src.core.settings import settings
from src.shared.abilities.models import Session
from src.shared.exceptions import InvalidTokenError

from .service import session_for_person
from .types import IdentityTokenPayload

logger = logging.getLogger(__name__)


def decode_identity_token(token: str) -> IdentityTokenPayload:
    """
    Verifies an identity token signed with JWT_SECRET.
    """
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured; rejecting identity token")
        raise InvalidTokenError()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except jwt.PyJWTError:
        raise InvalidTokenError()
    return IdentityTokenPayload(**dict(payload))


def get_token_payload(
    authorization: Optional[str] = Header(None),
) -> Optional[IdentityTokenPayload]:
    """
    Extracts and validates the bearer token from the Authorization header.
    Returns None when no token was sent.
    """
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise InvalidTokenError()

    token = authorization.split(" ", 1)[1]
    return decode_identity_token(token)


async def get_session(
    payload: Optional[IdentityTokenPayload] = Depends(get_token_payload),
    db: Database = Depends(get_db),
) -> Session:
    """
    Resolves the session of the request.

    Requests without a token, or whose token names no known person, get an
    anonymous session.
    """
    if payload is None or not payload.lookup_email:
        return Session.anonymous()

    person = await db.person.find_unique(where={"email": payload.lookup_email})
    if person is None:
        logger.info(f"No person for {payload.lookup_email}; using anonymous session")
        return Session.anonymous()
    return session_for_person(person)

import logging
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from .services.supabase_client import SupabaseClient, get_supabase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller, passed explicitly into every workflow call."""

    user_id: str
    access_token: str
    email: str | None = None


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Authorization must be a Bearer token")
    return token.strip()


async def get_session(
    authorization: str | None = Header(default=None),
    supabase: SupabaseClient = Depends(get_supabase),
) -> SessionContext:
    token = _bearer_token(authorization)
    user = await supabase.get_user(token)
    user_id = user.get("id")
    if not user_id:
        logger.warning("Supabase returned a user without id")
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return SessionContext(user_id=user_id, access_token=token, email=user.get("email"))

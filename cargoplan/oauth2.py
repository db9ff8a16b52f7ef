from typing import List, Optional
from datetime import datetime

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session, joinedload

from cargoplan.database import get_session
from cargoplan.config import get_settings
from cargoplan import models, schemas
from cargoplan.security import decode_id_claim, get_token_payload

settings = get_settings()

# Authorization: Bearer <token>
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

# --- CORE USER RETRIEVAL LOGIC ---

def get_token_user(token: str, db: Session) -> Optional[models.User]:
    """
    Decodes the token and verifies it against the database UserToken table.
    """
    if not token:
        return None

    payload = get_token_payload(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    if not payload:
        return None

    user_token_id = decode_id_claim(payload, 'r')
    user_id = decode_id_claim(payload, 'sub')
    if user_token_id is None or user_id is None:
        return None
    access_key = payload.get('a')

    # The token row must still exist and be unexpired
    user_token = db.query(models.UserToken).options(
        joinedload(models.UserToken.user)
    ).filter(
        models.UserToken.access_key == access_key,
        models.UserToken.id == user_token_id,
        models.UserToken.user_id == user_id,
        models.UserToken.expires_at > datetime.utcnow()
    ).first()

    if user_token and user_token.user:
        return user_token.user
    return None


# --- DEPENDENCIES ---

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_session)
) -> models.User:
    """
    Dependency for API Routes expecting a Header Token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    user = get_token_user(token, db)

    if not user:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=400, detail="User is inactive")

    return user


def get_current_actor(user: models.User = Depends(get_current_user)) -> schemas.Actor:
    return schemas.Actor.model_validate(user)


# --- ROLE CHECKERS ---

def require_role(allowed_roles: List[str]):
    """
    Factory for role-based permission checks.
    """
    def role_checker(actor: schemas.Actor = Depends(get_current_actor)) -> schemas.Actor:
        if actor.role.value not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Action requires one of the following roles: {', '.join(allowed_roles)}"
            )
        return actor
    return role_checker

# --- PRE-DEFINED DEPENDENCIES ---

require_admin_role = require_role(["admin"])
require_agent_role = require_role(["agent"])

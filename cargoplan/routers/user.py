# cargoplan/routers/user.py

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, status, HTTPException, Header
from sqlalchemy.orm import Session

from cargoplan import models, schemas
from cargoplan.database import get_db
from cargoplan.config import get_settings
from cargoplan.utils import unique_string
from cargoplan.security import (
    verify_password,
    generate_token,
    get_token_payload,
    encode_id_claim,
    decode_id_claim,
)
from cargoplan.oauth2 import get_current_user

settings = get_settings()

router = APIRouter(
    prefix="/api/v1",
    tags=['Users & Auth']
)

# =================================================================================
# HELPER FUNCTIONS (Internal)
# =================================================================================

def _generate_tokens_helper(user: models.User, db: Session):
    """
    Internal helper to generate Access and Refresh tokens and save to DB.
    """
    refresh_key = unique_string(100)
    access_key = unique_string(50)
    rt_expires = timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)

    user_token = models.UserToken(
        user_id=user.id,
        refresh_key=refresh_key,
        access_key=access_key,
        expires_at=datetime.utcnow() + rt_expires,
    )

    db.add(user_token)
    db.commit()
    db.refresh(user_token)

    at_payload = {
        "sub": encode_id_claim(user.id),
        'a': access_key,
        'r': encode_id_claim(user_token.id),
    }
    at_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = generate_token(at_payload, settings.JWT_SECRET, settings.JWT_ALGORITHM, at_expires)

    rt_payload = {"sub": encode_id_claim(user.id), "t": refresh_key, 'a': access_key}
    refresh_token = generate_token(rt_payload, settings.SECRET_KEY, settings.JWT_ALGORITHM, rt_expires)

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "expires_in": int(at_expires.total_seconds()),
        "user_id": user.id,
        "username": user.username,
        "role": user.role.value,
        "city": user.city,
    }

# =================================================================================
# AUTH ENDPOINTS
# =================================================================================

@router.post("/auth/login", status_code=status.HTTP_200_OK, response_model=schemas.LoginResponse)
def login(
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate a user and return tokens.
    """
    user = db.query(models.User).filter(models.User.username == credentials.username).first()

    if not user or not verify_password(credentials.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password.")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated. Contact support.")

    return _generate_tokens_helper(user, db)


@router.post("/auth/refresh", status_code=status.HTTP_200_OK, response_model=schemas.LoginResponse)
def refresh_token(
    refresh_token: str = Header(..., alias="refresh_token"),
    db: Session = Depends(get_db)
):
    """
    Refresh access token using a valid refresh token.
    """
    token_payload = get_token_payload(refresh_token, settings.SECRET_KEY, settings.JWT_ALGORITHM)
    user_id = decode_id_claim(token_payload, 'sub') if token_payload else None
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token.")

    refresh_key = token_payload.get('t')
    access_key = token_payload.get('a')

    user_token = db.query(models.UserToken).filter(
        models.UserToken.refresh_key == refresh_key,
        models.UserToken.access_key == access_key,
        models.UserToken.user_id == user_id,
        models.UserToken.expires_at > datetime.utcnow()
    ).first()

    if not user_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token.")

    # Retire the old pair before issuing a new one
    user_token.expires_at = datetime.utcnow()
    db.add(user_token)
    db.commit()

    return _generate_tokens_helper(user_token.user, db)

# =================================================================================
# USER ENDPOINTS
# =================================================================================

@router.get("/users/me", response_model=schemas.UserOut)
def get_current_user_profile(
    current_user: models.User = Depends(get_current_user)
):
    return current_user

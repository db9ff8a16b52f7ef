import logging
import base64
import binascii
import jwt
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

# --- Claim encoding ---
# Numeric ids ("sub" = user id, "r" = user_tokens row id) travel base85 encoded.

def str_encode(string: str) -> str:
    return base64.b85encode(string.encode('ascii')).decode('ascii')

def str_decode(string: str) -> str:
    return base64.b85decode(string.encode('ascii')).decode('ascii')

def encode_id_claim(value: int) -> str:
    return str_encode(str(value))

def decode_id_claim(payload: Dict[str, Any], key: str) -> Optional[int]:
    """Reads an encoded id claim. None when it is absent or was tampered with."""
    raw = payload.get(key)
    if not isinstance(raw, str):
        return None
    try:
        return int(str_decode(raw))
    except (ValueError, binascii.Error):
        logger.warning("Unreadable '%s' claim in token", key)
        return None

# --- JWT ---

def generate_token(payload: dict, secret: str, algo: str, expiry: timedelta) -> str:
    expire = datetime.utcnow() + expiry
    to_encode = payload.copy()
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret, algorithm=algo)

def get_token_payload(token: str, secret: str, algo: str) -> Optional[Dict[str, Any]]:
    """Decodes a JWT. Returns None for any unusable token."""
    try:
        return jwt.decode(token, secret, algorithms=[algo])
    except jwt.ExpiredSignatureError:
        logger.warning("Token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid Token: {e}")
        return None

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from rcc_portal.core.config import ALGORITHM, RESET_TOKEN_TTL_MINUTES, SECRET_KEY, TOKEN_TTL_MINUTES

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ACCESS_PURPOSE = "access"
RESET_PURPOSE = "reset"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def new_jti() -> str:
    return uuid.uuid4().hex


def create_access_token(
    data: dict[str, Any],
    jti: str,
    expires_delta: Optional[timedelta] = None,
    purpose: str = ACCESS_PURPOSE,
) -> str:
    """
    Encode a signed JWT. ``jti`` must match the value stored on the profile
    for the token to be accepted.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=TOKEN_TTL_MINUTES))
    to_encode.update({"exp": expire, "jti": jti, "purpose": purpose})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_reset_token(email: str, jti: str) -> str:
    return create_access_token(
        {"sub": email},
        jti=jti,
        expires_delta=timedelta(minutes=RESET_TOKEN_TTL_MINUTES),
        purpose=RESET_PURPOSE,
    )


def decode_token(token: str, purpose: str = ACCESS_PURPOSE) -> Optional[dict[str, Any]]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("purpose") != purpose:
        return None
    return payload

import logging
import uuid
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import HTTPException
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from todoapp.config import SECRET_KEY, ALGORITHM
from todoapp.models.user import RevokedToken, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if len(password.encode("utf-8")) > 72:
        raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    A ValueError from the backend (for example plain >72 bytes) counts as a mismatch.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(user: User):
    """Return (token, expires_at) for a fresh session of ``user``."""
    # read expiry at call-time so runtime overrides of the config take effect
    import todoapp.config as _cfg
    expires_at = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": user.id,
        "email": user.email,
        "jti": str(uuid.uuid4()),
        "exp": int(expires_at.timestamp()),  # JWT spec uses Unix timestamp
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM), expires_at


def extract_token(authorization: Optional[str], token_query: Optional[str]) -> Optional[str]:
    """Return token from Authorization header (Bearer ...) or token query param.
    Header has precedence.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return token_query


def decode_token(tok: str) -> dict:
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(tok, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if not payload.get("sub") or not payload.get("jti"):
        raise HTTPException(status_code=401, detail="Invalid token: missing claims")
    return payload


def get_current_user(db: Session, authorization: Optional[str], token: Optional[str]) -> tuple[User, dict]:
    """Resolve the caller of a request to (user, token claims) or raise 401."""
    tok = extract_token(authorization, token)
    if not tok:
        raise HTTPException(status_code=401, detail="Missing token")
    payload = decode_token(tok)
    if db.get(RevokedToken, payload["jti"]) is not None:
        raise HTTPException(status_code=401, detail="Token has been revoked")
    user = db.get(User, payload["sub"])
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token: unknown user")
    return user, payload


def revoke_token(db: Session, payload: dict) -> None:
    expires_at = datetime.fromtimestamp(payload["exp"], UTC)
    db.add(RevokedToken(jti=payload["jti"], user_id=payload["sub"], expires_at=expires_at))
    # expired tokens fail decoding anyway; no need to remember them
    purged = db.query(RevokedToken).filter(RevokedToken.expires_at < datetime.now(UTC)).delete()
    db.commit()
    logger.info("token revoked user=%s purged=%d", payload["sub"], purged)

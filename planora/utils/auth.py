from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Header, HTTPException
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from planora.config import SECRET_KEY, ALGORITHM

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str):
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    A malformed hash counts as a failed verification so the caller can answer
    with an authentication failure instead of an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(data: dict):
    data = data.copy()
    # read expiry at call-time so tests (and runtime overrides) that modify
    # planora.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
    import planora.config as _cfg
    expire = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    data.update({"exp": int(expire.timestamp())})  # JWT spec uses Unix timestamp
    return jwt.encode(data, SECRET_KEY, algorithm=ALGORITHM)


def _extract_token(authorization: Optional[str], token_query: Optional[str]) -> Optional[str]:
    """Return token from Authorization header (Bearer ...) or token query param (compat).
    Header has precedence.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return token_query


def decode_user_id(tok: str) -> str:
    # jwt.decode validates exp automatically
    try:
        payload = jwt.decode(tok, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user")
    return user_id


def get_current_user(authorization: Optional[str] = Header(None), token: Optional[str] = None) -> str:
    """Resolve the caller's profile id from the bearer token."""
    tok = _extract_token(authorization, token)
    if not tok:
        raise HTTPException(status_code=401, detail="Missing token", headers={"WWW-Authenticate": "Bearer"})
    return decode_user_id(tok)


def get_optional_user(authorization: Optional[str] = Header(None), token: Optional[str] = None) -> Optional[str]:
    """Like get_current_user, but an anonymous or invalid caller is just None."""
    tok = _extract_token(authorization, token)
    if not tok:
        return None
    try:
        return decode_user_id(tok)
    except HTTPException:
        return None

# projecthub/utils/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from projecthub.config.security import SecurityConfig

pwd_context = CryptContext(
    schemes=SecurityConfig.PASSWORDS['schemes'],
    deprecated="auto",
    bcrypt__rounds=SecurityConfig.PASSWORDS['bcrypt_rounds'],
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=SecurityConfig.JWT['access_token_expire_minutes'])
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(
        to_encode,
        SecurityConfig.JWT['secret_key'],
        algorithm=SecurityConfig.JWT['algorithm']
    )


def decode_access_token(token: str) -> dict:
    """Decode a token; raises JWTError when it is invalid or expired"""
    return jwt.decode(
        token,
        SecurityConfig.JWT['secret_key'],
        algorithms=[SecurityConfig.JWT['algorithm']]
    )


__all__ = [
    "JWTError",
    "create_access_token",
    "decode_access_token",
    "get_password_hash",
    "verify_password",
]

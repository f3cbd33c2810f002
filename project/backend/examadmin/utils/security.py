import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import Unauthorized
from ..models.admin import AdminIdentity

logger = logging.getLogger(__name__)

# Password context. bcrypt stays verifiable for hashes created by the old Node service.
pwd_context = CryptContext(
    schemes=["argon2", "bcrypt"],
    deprecated="auto",
    argon2__time_cost=3,
    argon2__memory_cost=65536,
    argon2__parallelism=4,
    argon2__hash_len=32
)

bearer_scheme = HTTPBearer(auto_error=False)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class TokenPayload(BaseModel):
    sub: str  # admin ID
    email: str = ""
    exp: int
    iat: Optional[int] = None
    jti: Optional[str] = None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification failed: {str(e)}")
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def generate_secure_token(length: int = 32) -> str:
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT carrying the admin identity
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "jti": generate_secure_token(),
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT. Signature, expiry and shape failures all
    surface as the same Unauthorized error.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return TokenPayload(**payload)
    except (JWTError, PydanticValidationError) as e:
        logger.warning(f"Token validation failed: {str(e)}")
        raise Unauthorized(INVALID_TOKEN_MESSAGE)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> AdminIdentity:
    """
    Dependency guarding admin routes with a bearer token
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, token missing")

    token_data = decode_token(credentials.credentials)
    return AdminIdentity(id=token_data.sub, email=token_data.email)

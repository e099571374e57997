# auth_utils.py
import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from core.config import ACCESS_TOKEN_EXPIRE_MINUTES, BCRYPT_ROUNDS, JWT_ALGORITHM, SECRET_KEY
from core.errors import Unauthorized, ValidationFailed

# ---------------- Passwords ----------------
bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
MAX_BCRYPT_LENGTH = 72

# ---------------- OAuth2 ----------------
# login lives under /requesters/login and /providers/login; this URL only feeds the docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/requesters/login", auto_error=False)


class Role(str, enum.Enum):
    PATIENT = "Patient"
    DOCTOR = "Doctor"


@dataclass(frozen=True)
class CallerIdentity:
    id: str
    role: Role


def hash_password(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_BCRYPT_LENGTH:
        raise ValidationFailed("Password too long, max 72 bytes")
    return bcrypt_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    if len(password.encode("utf-8")) > MAX_BCRYPT_LENGTH:
        return False
    return bcrypt_context.verify(password, hashed_password)


def create_access_token(email: str, user_id: str, role: Role, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": email, "id": user_id, "role": role.value, "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_identity(token: str) -> CallerIdentity:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid token")

    user_id = payload.get("id")
    if not user_id:
        raise Unauthorized("Invalid token")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise Unauthorized("Invalid token")
    return CallerIdentity(id=str(user_id), role=role)


def get_current_identity(token: Optional[str] = Depends(oauth2_scheme)) -> CallerIdentity:
    """Resolve the bearer token once per request into a typed caller identity."""
    if not token:
        raise Unauthorized("Not authenticated")
    return decode_identity(token)

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

import bcrypt
import logging

from config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from database import get_db_session
from models_orm import UserORM
from service_modules.errors import Unauthorized

logger = logging.getLogger("gym_app")


@dataclass(frozen=True)
class OwnerContext:
    """Authenticated owner identity, passed explicitly into every scoped call."""
    owner_id: str
    username: str


def verify_password(plain_password, hashed_password):
    # bcrypt requires bytes for both
    pwd_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def get_password_hash(password):
    # bcrypt requires bytes, returns bytes. We store as string.
    pwd_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def resolve_owner_context(token: Optional[str]) -> OwnerContext:
    """Decode a bearer token and load the owner it names."""
    if not token:
        raise Unauthorized()

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"AUTH: JWT validation error: {e}")
        raise Unauthorized()

    owner_id = payload.get("sub")
    if owner_id is None:
        logger.info("AUTH: token missing 'sub'")
        raise Unauthorized()

    db = get_db_session()
    try:
        user = db.query(UserORM).filter(UserORM.id == owner_id).first()
    finally:
        db.close()

    if user is None:
        logger.info(f"AUTH: owner {owner_id} not found")
        raise Unauthorized()

    return OwnerContext(owner_id=user.id, username=user.username)


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def get_current_owner(token: Optional[str] = Depends(oauth2_scheme)) -> OwnerContext:
    return resolve_owner_context(token)

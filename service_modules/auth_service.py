"""
Auth Service - handles owner signup and login.
"""
from sqlalchemy.exc import IntegrityError

from auth import verify_password, get_password_hash, create_access_token
from models import RegisterOwnerRequest, Owner, Token
from .base import (
    get_db_session, UserORM,
    Unauthorized, Conflict, logger
)


class AuthService:
    """Service for managing authentication and owner registration."""

    def authenticate(self, username: str, password: str) -> Token:
        """Check credentials and issue an access token for the owner."""
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.username == username).first()
        finally:
            db.close()

        if not user or not verify_password(password, user.hashed_password):
            logger.info(f"AUTH: failed login for {username!r}")
            raise Unauthorized("Incorrect username or password")

        token = create_access_token({"sub": user.id})
        return Token(access_token=token, owner_id=user.id)

    def register_owner(self, data: RegisterOwnerRequest) -> Owner:
        logger.debug(f"register_owner called for {data.username}")
        db = get_db_session()
        try:
            existing_user = db.query(UserORM).filter(
                (UserORM.username == data.username) |
                (UserORM.email == data.email)
            ).first()
            if existing_user:
                raise Conflict("Username or email already registered")

            new_user = UserORM(
                username=data.username,
                email=data.email,
                hashed_password=get_password_hash(data.password),
                name=data.name,
                phone=data.phone,
            )
            db.add(new_user)
            try:
                db.commit()
            except IntegrityError:
                # lost a race with a concurrent signup for the same name
                db.rollback()
                raise Conflict("Username or email already registered")

            logger.info(f"Registered owner {new_user.id} ({data.username})")
            return Owner.model_validate(new_user)
        finally:
            db.close()


# Singleton instance
auth_service = AuthService()


def get_auth_service() -> AuthService:
    """Dependency injection helper."""
    return auth_service

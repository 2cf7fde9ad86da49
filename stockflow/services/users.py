"""User accounts: sign-up, sign-in and admin management."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from stockflow.auth import get_password_hash, verify_password
from stockflow.database import transaction
from stockflow.exceptions import (
    AuthenticationError,
    InactiveAccountError,
    NotFoundError,
    ValidationError,
)
from stockflow.models.user import User
from stockflow.schemas.user import SignUpRequest, UserCreate

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def _create(
    db: Session,
    email: str,
    password: str,
    first_name: Optional[str],
    last_name: Optional[str],
    is_admin: bool,
    is_active: bool
) -> User:
    if get_user_by_email(db, email):
        raise ValidationError("Email already registered")

    with transaction(db):
        user = User(
            email=_normalize_email(email),
            password_hash=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            is_admin=is_admin,
            is_active=is_active,
        )
        db.add(user)

    db.refresh(user)
    return user


def sign_up(db: Session, user_data: SignUpRequest) -> User:
    """Register a new account. It stays inactive until an admin activates it."""
    user = _create(
        db, user_data.email, user_data.password,
        user_data.first_name, user_data.last_name,
        is_admin=False, is_active=False,
    )
    logger.info("New sign-up %s awaiting activation", user.email)
    return user


def create_user(db: Session, user_data: UserCreate) -> User:
    """Create a user on behalf of an admin."""
    user = _create(
        db, user_data.email, user_data.password,
        user_data.first_name, user_data.last_name,
        is_admin=user_data.is_admin, is_active=user_data.is_active,
    )
    logger.info("Created user %s (admin=%s, active=%s)", user.email, user.is_admin, user.is_active)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Check credentials and return the user if they may sign in."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed sign-in for %s", email)
        raise AuthenticationError("Invalid email or password")
    if not user.is_active:
        raise InactiveAccountError("Your account is not active")
    return user


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def set_user_active(db: Session, user_id: str, is_active: bool) -> User:
    """Activate or deactivate a user."""
    user = get_user(db, user_id)
    with transaction(db):
        user.is_active = is_active
    db.refresh(user)
    logger.info("User %s %s", user.email, "activated" if is_active else "deactivated")
    return user

"""Email/password verification with account-state gates."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import verify_password
from app.models import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DEACTIVATED = "Account has been deactivated"
ACCOUNT_PENDING = "Account is pending approval"


def find_user_by_email(session: Session, email: str) -> User | None:
    return session.query(User).filter(User.email == email.strip().lower()).first()


def ensure_account_usable(user: User) -> None:
    """Account-state gate shared by sign-in and every authenticated request: deactivated, then pending."""
    if not user.active:
        logger.warning("Request refused: user_id=%s deactivated", user.id)
        raise ForbiddenError(ACCOUNT_DEACTIVATED)
    if not user.approved:
        logger.warning("Request refused: user_id=%s pending approval", user.id)
        raise ForbiddenError(ACCOUNT_PENDING)


def verify_credentials(session: Session, email: str, password: str) -> User:
    """
    Return the user for a correct email/password pair.

    Unknown email and wrong password raise the same UnauthorizedError. Account state is
    checked only after the password matched: deactivated, then pending approval.
    """
    user = find_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Sign-in refused: invalid credentials")
        raise UnauthorizedError(INVALID_CREDENTIALS)
    ensure_account_usable(user)
    return user

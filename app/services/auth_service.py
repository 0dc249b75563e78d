# app/services/auth_service.py
"""
Stub login - any password is accepted.
Known usernames get their account back; unknown ones get an account created on
the spot with a role guessed from the name. Replace before real deployment.
"""

from app.exceptions import ValidationError
from app.models.user import User
from app.services.repository import EntityRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)


def role_for_username(username: str) -> str:
    if username == "admin":
        return "admin"
    if username == "security":
        return "security_officer"
    if username in ("student", "staff"):
        return "student_staff"
    return "visitor"


def login(repo: EntityRepository, username: str, password: str) -> User:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password required")

    user = repo.get_user_by_username(username)
    if user is None:
        user = repo.create("user", {
            "username": username,
            "password": password,
            "role": role_for_username(username),
            "full_name": f"{username.capitalize()} User",
            "email": f"{username}@campus.edu",
        })
        logger.info(f"[AUTH] Created demo account {username!r} role={user.role}")
    return user

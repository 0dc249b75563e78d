# app/services/seed_service.py
"""
Demo data for a fresh database: one user per role and three campus gates
staffed by the security officer. Skipped when any user already exists.
"""

from app.services.repository import EntityRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    {"username": "admin", "role": "admin", "full_name": "Admin User",
     "email": "admin@campus.edu", "phone_number": "+2341234567890"},
    {"username": "security", "role": "security_officer", "full_name": "Security Officer",
     "email": "security@campus.edu", "phone_number": "+2341234567891"},
    {"username": "student", "role": "student_staff", "full_name": "John Student",
     "email": "john.student@campus.edu", "phone_number": "+2341234567892"},
    {"username": "visitor", "role": "visitor", "full_name": "Jane Visitor",
     "email": "jane.visitor@example.com", "phone_number": "+2341234567893"},
]

DEMO_GATES = [
    {"name": "Main Gate Entrance", "location": "Campus Main Entrance"},
    {"name": "Main Gate Exit", "location": "Campus Main Exit"},
    {"name": "Hostel Gate", "location": "Student Hostel Entrance"},
]


def seed_demo_data(repo: EntityRepository) -> bool:
    """Returns True if anything was seeded."""
    if repo.find_one("user") is not None:
        logger.info("Database already populated - demo seed skipped")
        return False

    with repo.transaction():
        users = [repo.create("user", {**u, "password": "password"}) for u in DEMO_USERS]
        officer = next(u for u in users if u.role == "security_officer")
        for g in DEMO_GATES:
            repo.create("gate", {**g, "status": "online", "assigned_officer": officer.id})

    logger.info(f"🌱 Seeded {len(DEMO_USERS)} demo users and {len(DEMO_GATES)} gates")
    return True

"""
Role seeding for the relief API.

Run once at application startup, or by hand with ``relief-seed`` /
``python -m relief_api.seed`` against a fresh database.
"""
import logging

from sqlalchemy.orm import Session

from relief_api import models
from relief_api.database import SessionLocal, init_db

logger = logging.getLogger(__name__)

DEFAULT_ROLES = {
    models.RoleName.CITIZEN: "Regular citizen who can report emergencies",
    models.RoleName.RESCUE_WORKER: "Rescue worker who can handle emergency reports and tasks",
    models.RoleName.NGO: "Non-governmental organization that can manage resources",
    models.RoleName.GOVERNMENT: "Government agency with full access",
}


def seed_roles(db: Session) -> int:
    """Insert any missing default role; returns how many were added."""
    existing = {name for (name,) in db.query(models.Role.role_name).all()}
    added = 0
    for role, description in DEFAULT_ROLES.items():
        if role.value in existing:
            continue
        db.add(models.Role(role_name=role.value, role_description=description))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} default role(s)")
    return added


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        added = seed_roles(db)
    finally:
        db.close()
    print(f"Roles ready ({added} added)")


if __name__ == "__main__":
    main()

"""
Replaces the users table with one admin and one agent per supported city.

    python -m cargoplan.scripts.seed_users
"""

import logging

from sqlalchemy.orm import Session

from cargoplan import models
from cargoplan.config import get_settings
from cargoplan.database import Base, SessionLocal, engine
from cargoplan.security import hash_password

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin123"


def seed_users(db: Session) -> list:
    settings = get_settings()

    # Tokens reference users, clear them first
    db.query(models.UserToken).delete()
    db.query(models.User).delete()

    users = [models.User(
        username=ADMIN_USERNAME,
        password=hash_password(settings.SEED_ADMIN_PASSWORD),
        role=models.UserRole.ADMIN,
    )]
    agent_password = hash_password(settings.SEED_AGENT_PASSWORD)
    for city in models.VALID_CITIES:
        users.append(models.User(
            username=f"agent_{city.lower()}",
            password=agent_password,
            role=models.UserRole.AGENT,
            city=city,
        ))

    db.add_all(users)
    db.commit()
    logger.info("Seeded %s users (1 admin, %s agents)", len(users), len(users) - 1)
    return users


def main():
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_users(db)
    logger.info("Admin login: %s / <SEED_ADMIN_PASSWORD>", ADMIN_USERNAME)
    logger.info("Agent logins: agent_<city> (e.g. agent_mumbai) / <SEED_AGENT_PASSWORD>")


if __name__ == "__main__":
    main()

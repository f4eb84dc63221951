"""
Seed welcome notifications for the first registered user
Usage: python seed_notifications.py
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy.orm import Session

from skilli.database import Base, SessionLocal, engine
from skilli.domain.notifications.service import TYPE_REMINDER, TYPE_UPDATE, NotificationService
from skilli.models import Notification, User

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)

WELCOME_NOTIFICATIONS = [
    {
        "type": TYPE_UPDATE,
        "title": "Bienvenue sur Skilli!",
        "message": "Découvrez les nouvelles fonctionnalités: notifications en temps réel, dashboard provider, et bien plus!",
    },
    {
        "type": TYPE_REMINDER,
        "title": "Complétez votre profil",
        "message": "Ajoutez une photo de profil et complétez vos informations pour recevoir plus de réservations.",
    },
]


def seed_notifications(db: Session) -> list[Notification]:
    """Create the welcome notifications for the oldest user; returns what was created"""
    user = db.query(User).order_by(User.created_at.asc()).first()
    if not user:
        logger.info("❌ No users found. Please create a user first.")
        return []

    logger.info(f"📧 Creating notifications for user: {user.email}")
    service = NotificationService(db)
    created = []
    for notification in WELCOME_NOTIFICATIONS:
        created.append(service.create_notification(user_id=user.id, **notification))
        logger.info(f"✅ Created: {notification['title']}")
    return created


if __name__ == "__main__":
    logger.info("🌱 Seeding notifications...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        seed_notifications(db)
        logger.info("✨ Notifications seeded successfully!")
    except Exception as e:
        logger.error(f"❌ Error seeding notifications: {e}")
        sys.exit(1)
    finally:
        db.close()

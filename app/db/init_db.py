import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.models.base import Base
from app.models.notification import Notification

logger = logging.getLogger(__name__)

# (user_id, title, message, type, read, age)
DEMO_NOTIFICATIONS = [
    # Alice (user_id 1)
    (1, "Order Shipped", "Your order #2 has been shipped and is on the way!", "order_shipped", False, timedelta(days=1)),
    (1, "Order Completed", "Your order #1 has been delivered. Thank you for shopping!", "order_completed", True, timedelta(days=8)),
    (1, "Leave a Review", "How was your Gaming Headset? Share your experience!", "review_reminder", False, timedelta(days=2)),
    # Bob (user_id 2)
    (2, "Special Promotion", "Get 20% off on all monitors this weekend!", "promotion", False, timedelta(hours=3)),
    (2, "Cart Reminder", "You have 2 items in your cart. Complete your purchase!", "cart_reminder", False, timedelta(days=1)),
    # David (user_id 4)
    (4, "Order Processing", "Your order #4 is being processed and will ship soon.", "order_processing", True, timedelta(days=4)),
    (4, "Order Placed", "Thank you! Your order #3 has been placed successfully.", "order_placed", True, timedelta(days=2)),
    (4, "New Arrivals", "Check out our latest collection of gaming accessories!", "promotion", False, timedelta(hours=6)),
]


def create_tables(engine: Engine):
    Base.metadata.create_all(bind=engine)


def seed_demo_data(session_factory: sessionmaker) -> int:
    """Insert the demo inbox when the table is empty. Returns the number of rows added."""
    db = session_factory()
    try:
        if db.query(Notification).count() > 0:
            return 0
        now = datetime.now(timezone.utc)
        db.add_all(
            [
                Notification(user_id=user_id, title=title, message=message, type=type_, read=read, created_at=now - age)
                for user_id, title, message, type_, read, age in DEMO_NOTIFICATIONS
            ]
        )
        db.commit()
        logger.info("Seeded %d demo notifications", len(DEMO_NOTIFICATIONS))
        return len(DEMO_NOTIFICATIONS)
    finally:
        db.close()

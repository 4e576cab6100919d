# scripts/seed_db.py
# Создаёт таблицы и заливает демо-данные в DATABASE_URL из tailorcraft.core.config.settings
import logging

from sqlalchemy import text

from tailorcraft.core.config import settings
from tailorcraft.db.base import Base
from tailorcraft.db.seed import seed_demo_data
from tailorcraft.db.session import SessionLocal, engine

import tailorcraft.models.user
import tailorcraft.models.product
import tailorcraft.models.worker
import tailorcraft.models.order
import tailorcraft.models.order_event

logger = logging.getLogger("seed_db")

def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info("Connecting to %s", engine.url.render_as_string(hide_password=True))
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if seed_demo_data(db):
            print("Demo data loaded.")
        else:
            print("Database already seeded.")
    finally:
        db.close()

if __name__ == '__main__':
    main()

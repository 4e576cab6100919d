# tailorcraft/db/seed.py
# Демо-данные: ткани, каталог, пользователи трёх ролей и мастера.
# Повторный запуск ничего не дублирует.
import logging
from decimal import Decimal
from functools import lru_cache

from sqlalchemy.orm import Session

from tailorcraft.core.security import get_password_hash
from tailorcraft.models.product import Fabric, Product
from tailorcraft.models.user import User, RoleEnum
from tailorcraft.models.worker import Worker, WorkerSpecialty

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "tailorcraft"

FABRICS = [
    ("f1", "Italian Merino Wool", "50"),
    ("f2", "Egyptian Cotton", "30"),
    ("f3", "Linen Blend", "35"),
]

PRODUCTS = [
    {
        "id": "p1",
        "name": "Bespoke Italian Suit",
        "description": "Fully canvassed, hand-finished buttonholes, your choice of premium lining.",
        "price": "450",
        "category": "Suits",
        "is_customizable": True,
        "fabrics": ["f1", "f3"],
    },
    {
        "id": "p2",
        "name": "Signature White Shirt",
        "description": "Crisp, breathable, and perfectly fitted.",
        "price": "85",
        "category": "Shirts",
        "is_customizable": True,
        "fabrics": ["f2"],
    },
    {
        "id": "p3",
        "name": "Tailored Chinos",
        "description": "Versatile trousers between formal and casual.",
        "price": "65",
        "category": "Pants",
        "is_customizable": True,
        "fabrics": ["f2", "f3"],
    },
    {
        "id": "p4",
        "name": "Silk Jacquard Tie",
        "description": "Woven silk tie with a subtle geometric pattern.",
        "price": "45",
        "category": "Accessories",
        "is_customizable": False,
        "fabrics": [],
    },
    {
        "id": "p5",
        "name": "Summer Linen Blazer",
        "description": "Unstructured and lightweight.",
        "price": "220",
        "category": "Blazers",
        "is_customizable": True,
        "fabrics": ["f3"],
    },
]

USERS = [
    ("u1", "Admin User", "admin@tailorcraft.com", RoleEnum.ADMIN),
    ("u2", "John Doe", "john@example.com", RoleEnum.CUSTOMER),
    ("u3", "Alice Freeman", "alice@example.com", RoleEnum.CUSTOMER),
    ("u4", "Sarah Stitch", "sarah@tailorcraft.com", RoleEnum.WORKER),
]

WORKERS = [
    ("w1", None, "Master Ahmed", WorkerSpecialty.CUTTER, 4.8),
    ("w2", "u4", "Sarah Stitch", WorkerSpecialty.TAILOR, 4.9),
    ("w3", None, "Mike Finish", WorkerSpecialty.FINISHER, 4.5),
]


@lru_cache(maxsize=1)
def _demo_password_hash() -> str:
    return get_password_hash(DEMO_PASSWORD)


def seed_demo_data(db: Session) -> bool:
    """Заполняет пустую БД. Возвращает False, если данные уже есть."""
    if db.get(Product, "p1") is not None:
        logger.info("Demo data already present, skipping seed")
        return False

    fabrics = {}
    for fid, name, price in FABRICS:
        fabrics[fid] = Fabric(id=fid, name=name, price_per_meter=Decimal(price))
        db.add(fabrics[fid])

    for p in PRODUCTS:
        db.add(Product(
            id=p["id"],
            name=p["name"],
            description=p["description"],
            price=Decimal(p["price"]),
            category=p["category"],
            is_customizable=p["is_customizable"],
            fabrics=[fabrics[f] for f in p["fabrics"]],
        ))

    for uid, name, email, role in USERS:
        db.add(User(id=uid, name=name, email=email, password_hash=_demo_password_hash(), role=role))
    db.flush()

    for wid, user_id, name, specialty, rating in WORKERS:
        db.add(Worker(id=wid, user_id=user_id, name=name, specialty=specialty, performance_rating=rating))

    db.commit()
    logger.info("Seeded %s products, %s users, %s workers", len(PRODUCTS), len(USERS), len(WORKERS))
    return True

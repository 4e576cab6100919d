# tailorcraft/services/dashboard.py
# Агрегаты для админ-панели: выручка, активные заказы, загрузка мастеров.
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from tailorcraft.models.order import Order, OrderStatus
from tailorcraft.models.user import User, RoleEnum
from tailorcraft.models.worker import Worker

PRODUCTION_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.PROCESSING)


def dashboard_summary(db: Session) -> dict:
    revenue = db.query(func.coalesce(func.sum(Order.total_amount), 0)).scalar()
    by_status = {s.value: 0 for s in OrderStatus}
    for status, count in db.query(Order.status, func.count(Order.id)).group_by(Order.status).all():
        by_status[status.value] = count

    return {
        "total_revenue": Decimal(str(revenue)),
        "active_orders": sum(c for s, c in by_status.items() if s != OrderStatus.DELIVERED.value),
        "pending_production": sum(by_status[s.value] for s in PRODUCTION_STATUSES),
        "total_customers": db.query(func.count(User.id)).filter(User.role == RoleEnum.CUSTOMER).scalar(),
        "orders_by_status": by_status,
    }


def worker_roster(db: Session) -> list[dict]:
    """Мастера с числом назначенных им незавершённых заказов."""
    active = dict(
        db.query(Order.assigned_worker_id, func.count(Order.id))
        .filter(Order.assigned_worker_id.isnot(None), Order.status.in_(PRODUCTION_STATUSES))
        .group_by(Order.assigned_worker_id)
        .all()
    )
    return [
        {
            "id": w.id,
            "name": w.name,
            "specialty": w.specialty.value,
            "performance_rating": w.performance_rating,
            "active_orders": active.get(w.id, 0),
        }
        for w in db.query(Worker).order_by(Worker.id).all()
    ]

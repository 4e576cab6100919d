# tailorcraft/models/order_event.py
# Журнал событий заказа (смена статуса/этапа, назначение мастера).
# Пишется в той же транзакции, что и само изменение; читают его
# дашборд и уведомления клиентов.
import datetime
import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Session

from tailorcraft.db.base import Base


class OrderEventKind(str, enum.Enum):
    STATUS_CHANGED = "STATUS_CHANGED"
    WORKER_ASSIGNED = "WORKER_ASSIGNED"


class OrderEvent(Base):
    __tablename__ = "order_events"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    kind = Column(Enum(OrderEventKind), nullable=False)
    from_status = Column(String, nullable=True)
    to_status = Column(String, nullable=True)
    from_stage = Column(String, nullable=True)
    to_stage = Column(String, nullable=True)
    from_worker_id = Column(String, nullable=True)
    to_worker_id = Column(String, nullable=True)
    actor_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    @staticmethod
    def log(session: Session, order_id, kind, actor_id=None, **changes):
        """Добавляет событие в текущую сессию; commit делает вызывающий."""
        rec = OrderEvent(
            order_id=order_id,
            kind=kind,
            actor_id=actor_id,
            created_at=datetime.datetime.utcnow(),
            **changes,
        )
        session.add(rec)
        return rec

# tailorcraft/models/order.py
# Модели Order и OrderItem: суммы фиксируются при оформлении, статусы меняет workflow.
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric, DateTime, Enum, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from tailorcraft.db.base import Base
import enum

class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    READY = "READY"
    DELIVERED = "DELIVERED"

class WorkflowStage(str, enum.Enum):
    CUTTING = "CUTTING"
    SEWING = "SEWING"
    FINISHING = "FINISHING"
    PRESSING = "PRESSING"
    DONE = "DONE"

class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("advance_amount >= 0 AND advance_amount <= total_amount", name="ck_orders_advance"),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    advance_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    workflow_stage = Column(Enum(WorkflowStage), nullable=True)
    assigned_worker_id = Column(String, ForeignKey("workers.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("User")
    assigned_worker = relationship("Worker")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def due_amount(self) -> Decimal:
        # Не хранится: всегда выводится из total и advance
        return Decimal(self.total_amount) - Decimal(self.advance_amount)

class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_order_items_quantity"),)

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_at_booking = Column(Numeric(10, 2), nullable=False)
    is_custom = Column(Boolean, nullable=False, default=False)
    selected_fabric = Column(String, ForeignKey("fabrics.id"), nullable=True)
    selected_size = Column(String, nullable=True)
    measurements_json = Column(JSON, nullable=True)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

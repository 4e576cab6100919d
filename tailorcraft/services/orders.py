# tailorcraft/services/orders.py
# Оформление заказа: валидация позиций, цены из каталога, атомарная запись.
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tailorcraft.core.config import settings
from tailorcraft.core.errors import NotFoundError, PersistenceError, ValidationError
from tailorcraft.db.session import transaction
from tailorcraft.models.order import Order, OrderItem, OrderStatus
from tailorcraft.models.product import Fabric, Product
from tailorcraft.models.user import User

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Numeric(10, 2) в orders/order_items
MAX_AMOUNT = Decimal("99999999.99")
MAX_QUANTITY = 1000

MEASUREMENT_FIELDS = (
    "neck",
    "chest",
    "waist",
    "shoulder",
    "sleeve_length",
    "length",
    "inseam",
    "hip",
)
JSON_KEYS = {"sleeve_length": "sleeveLength"}


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class MeasurementInput:
    neck: float | None = None
    chest: float | None = None
    waist: float | None = None
    shoulder: float | None = None
    sleeve_length: float | None = None
    length: float | None = None
    inseam: float | None = None
    hip: float | None = None
    special_instructions: str | None = None

    def to_json(self) -> dict:
        # ключи хранятся так же, как приходят в API
        data = {
            JSON_KEYS.get(name, name): getattr(self, name)
            for name in MEASUREMENT_FIELDS
            if getattr(self, name) is not None
        }
        if self.special_instructions:
            data["specialInstructions"] = self.special_instructions
        return data


@dataclass
class OrderItemInput:
    product_id: str
    quantity: int
    is_custom: bool = False
    selected_size: str | None = None
    selected_fabric_id: str | None = None
    measurements: MeasurementInput | None = None


@dataclass
class PricedItem:
    product: Product
    quantity: int
    unit_price: Decimal
    is_custom: bool
    selected_size: str | None
    fabric: Fabric | None
    measurements: MeasurementInput | None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Quote:
    items: list[PricedItem] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return to_money(sum((i.line_total for i in self.items), Decimal("0")))


@dataclass(frozen=True)
class SubmittedOrder:
    order_id: int
    total_amount: Decimal
    advance_amount: Decimal
    due_amount: Decimal
    status: OrderStatus


def _validate_measurements(m: MeasurementInput, prefix: str) -> None:
    present = 0
    for name in MEASUREMENT_FIELDS:
        value = getattr(m, name)
        if value is None:
            continue
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float, Decimal))
            or not math.isfinite(value)
            or value <= 0
        ):
            raise ValidationError(f"Measurement '{name}' must be a positive number.", field=f"{prefix}.measurements.{name}")
        present += 1
    if present == 0:
        raise ValidationError("Custom item needs at least one measurement.", field=f"{prefix}.measurements")


def validate_item(item: OrderItemInput, index: int) -> None:
    """Проверки, не требующие БД: количество и согласованность custom/standard."""
    prefix = f"items[{index}]"
    q = item.quantity
    if isinstance(q, bool) or not isinstance(q, int) or not 0 < q <= MAX_QUANTITY:
        raise ValidationError(f"Quantity must be an integer from 1 to {MAX_QUANTITY}.", field=f"{prefix}.quantity")

    if item.is_custom:
        if item.selected_size:
            raise ValidationError("Custom item cannot carry a size.", field=f"{prefix}.selected_size")
        if not item.selected_fabric_id:
            raise ValidationError("Custom item needs a fabric.", field=f"{prefix}.selected_fabric_id")
        if item.measurements is None:
            raise ValidationError("Custom item needs measurements.", field=f"{prefix}.measurements")
        _validate_measurements(item.measurements, prefix)
    else:
        if not (item.selected_size and item.selected_size.strip()):
            raise ValidationError("Standard item needs a size.", field=f"{prefix}.selected_size")
        if item.selected_fabric_id is not None:
            raise ValidationError("Standard item cannot carry a fabric.", field=f"{prefix}.selected_fabric_id")
        if item.measurements is not None:
            raise ValidationError("Standard item cannot carry measurements.", field=f"{prefix}.measurements")


def _price_item(db: Session, item: OrderItemInput, index: int) -> PricedItem:
    prefix = f"items[{index}]"
    product = db.get(Product, item.product_id)
    if product is None:
        raise NotFoundError(f"Unknown product: {item.product_id}", field=f"{prefix}.product_id")

    fabric = None
    unit_price = to_money(product.price)
    if item.is_custom:
        if not product.is_customizable:
            raise ValidationError(f"Product {product.id} is not customizable.", field=f"{prefix}.is_custom")
        fabric = db.get(Fabric, item.selected_fabric_id)
        if fabric is None:
            raise NotFoundError(f"Unknown fabric: {item.selected_fabric_id}", field=f"{prefix}.selected_fabric_id")
        allowed = product.fabric_ids
        if allowed and fabric.id not in allowed:
            raise ValidationError(
                f"Fabric {fabric.id} is not offered for product {product.id}.",
                field=f"{prefix}.selected_fabric_id",
            )
        unit_price = to_money(unit_price + settings.CUSTOM_TAILORING_FEE)

    return PricedItem(
        product=product,
        quantity=item.quantity,
        unit_price=unit_price,
        is_custom=item.is_custom,
        selected_size=item.selected_size.strip() if item.selected_size else None,
        fabric=fabric,
        measurements=item.measurements,
    )


def quote_order(db: Session, *, items: list[OrderItemInput]) -> Quote:
    """Оценка корзины по текущему каталогу без записи в БД."""
    if not items:
        raise ValidationError("Order must contain at least one item.", field="items")
    for i, item in enumerate(items):
        validate_item(item, i)
    quote = Quote(items=[_price_item(db, item, i) for i, item in enumerate(items)])
    if quote.total_amount > MAX_AMOUNT:
        raise ValidationError(f"Order total cannot exceed {MAX_AMOUNT}.", field="items")
    return quote


def submit_order(
    db: Session,
    *,
    customer_id: str,
    items: list[OrderItemInput],
    advance_amount=Decimal("0"),
) -> SubmittedOrder:
    """
    Создаёт заказ и все его позиции одной транзакцией.

    Цены берутся из каталога на момент оформления; присланные клиентом
    суммы не используются. При сбое записи не остаётся ни заголовка,
    ни позиций.
    """
    quote = quote_order(db, items=items)

    if db.get(User, customer_id) is None:
        raise NotFoundError(f"Unknown customer: {customer_id}", field="customer_id")

    total = quote.total_amount
    advance = to_money(advance_amount)
    if advance < 0:
        raise ValidationError("Advance amount cannot be negative.", field="advance_amount")
    if advance > total:
        raise ValidationError("Advance amount cannot exceed the order total.", field="advance_amount")

    order = Order(
        customer_id=customer_id,
        total_amount=total,
        advance_amount=advance,
        status=OrderStatus.PENDING,
        workflow_stage=None,
    )
    for p in quote.items:
        order.items.append(
            OrderItem(
                product_id=p.product.id,
                quantity=p.quantity,
                price_at_booking=p.unit_price,
                is_custom=p.is_custom,
                selected_fabric=p.fabric.id if p.fabric else None,
                selected_size=p.selected_size,
                measurements_json=p.measurements.to_json() if p.measurements else None,
            )
        )

    try:
        with transaction(db):
            db.add(order)
            db.flush()
            order_id = order.id
    except SQLAlchemyError as e:
        logger.error("Order persistence failed for customer %s", customer_id, exc_info=True)
        raise PersistenceError("Could not persist the order, nothing was saved.") from e

    logger.info("Order %s submitted by %s: %s items, total %s", order_id, customer_id, len(quote.items), total)
    return SubmittedOrder(
        order_id=order_id,
        total_amount=total,
        advance_amount=advance,
        due_amount=total - advance,
        status=OrderStatus.PENDING,
    )


def get_order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")
    return order


def list_orders(db: Session, *, customer_id: str | None = None) -> list[Order]:
    q = db.query(Order)
    if customer_id is not None:
        q = q.filter(Order.customer_id == customer_id)
    return q.order_by(Order.id.desc()).all()

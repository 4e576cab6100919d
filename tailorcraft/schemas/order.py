# tailorcraft/schemas/order.py
# Схемы запросов/ответов для заказов. Суммы клиент не присылает:
# их считает сервер по каталогу.
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, FiniteFloat

from tailorcraft.models.order import OrderStatus, WorkflowStage
from tailorcraft.models.order_event import OrderEventKind
from tailorcraft.schemas.common import CamelModel
from tailorcraft.services.orders import MAX_QUANTITY, MeasurementInput, OrderItemInput


class MeasurementIn(CamelModel):
    # NaN/Infinity из JSON сюда не пропускаем
    neck: Optional[FiniteFloat] = None
    chest: Optional[FiniteFloat] = None
    waist: Optional[FiniteFloat] = None
    shoulder: Optional[FiniteFloat] = None
    sleeve_length: Optional[FiniteFloat] = None
    length: Optional[FiniteFloat] = None
    inseam: Optional[FiniteFloat] = None
    hip: Optional[FiniteFloat] = None
    special_instructions: Optional[str] = None


class OrderItemIn(CamelModel):
    product_id: str
    quantity: int = Field(le=MAX_QUANTITY)
    # если не указан, позиция считается индивидуальной при наличии ткани или мерок
    is_custom: Optional[bool] = None
    selected_size: Optional[str] = None
    selected_fabric_id: Optional[str] = None
    measurements: Optional[MeasurementIn] = None

    def to_input(self) -> OrderItemInput:
        is_custom = self.is_custom
        if is_custom is None:
            is_custom = self.selected_fabric_id is not None or self.measurements is not None
        return OrderItemInput(
            product_id=self.product_id,
            quantity=self.quantity,
            is_custom=is_custom,
            selected_size=self.selected_size,
            selected_fabric_id=self.selected_fabric_id,
            measurements=MeasurementInput(**self.measurements.model_dump()) if self.measurements else None,
        )


class OrderCreate(CamelModel):
    customer_id: Optional[str] = None
    advance_amount: Decimal = Decimal("0")
    items: List[OrderItemIn]


class QuoteRequest(CamelModel):
    items: List[OrderItemIn]


class OrderCreated(CamelModel):
    order_id: int
    total_amount: float
    advance_amount: float
    due_amount: float
    status: OrderStatus


class QuoteItemOut(CamelModel):
    product_id: str
    quantity: int
    unit_price: float
    line_total: float
    is_custom: bool


class QuoteOut(CamelModel):
    items: List[QuoteItemOut]
    total_amount: float


class OrderItemOut(CamelModel):
    id: int
    product_id: str
    quantity: int
    price_at_booking: float
    is_custom: bool
    selected_fabric: Optional[str] = None
    selected_size: Optional[str] = None
    measurements: Optional[dict] = Field(default=None, validation_alias="measurements_json")


class OrderOut(CamelModel):
    id: int
    customer_id: str
    items: List[OrderItemOut]
    total_amount: float
    advance_amount: float
    due_amount: float
    status: OrderStatus
    workflow_stage: Optional[WorkflowStage] = None
    assigned_worker_id: Optional[str] = None
    created_at: datetime


class TransitionRequest(CamelModel):
    status: OrderStatus
    workflow_stage: Optional[WorkflowStage] = None


class AssignWorkerRequest(CamelModel):
    worker_id: str


class OrderEventOut(CamelModel):
    id: int
    order_id: int
    kind: OrderEventKind
    from_status: Optional[str] = None
    to_status: Optional[str] = None
    from_stage: Optional[str] = None
    to_stage: Optional[str] = None
    from_worker_id: Optional[str] = None
    to_worker_id: Optional[str] = None
    actor_id: Optional[str] = None
    created_at: datetime

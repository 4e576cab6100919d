# tailorcraft/api/orders.py
# Роуты заказов: оформление, просмотр, смена статуса, назначение мастера.
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tailorcraft.core.errors import AuthError, NotFoundError, ValidationError
from tailorcraft.core.security import get_current_user, require_role
from tailorcraft.db.session import get_db
from tailorcraft.models.user import User, RoleEnum
from tailorcraft.schemas.order import (
    AssignWorkerRequest,
    OrderCreate,
    OrderCreated,
    OrderEventOut,
    OrderOut,
    QuoteOut,
    QuoteRequest,
    TransitionRequest,
)
from tailorcraft.services import orders as order_service
from tailorcraft.services import workflow

router = APIRouter()

staff_only = require_role(RoleEnum.ADMIN, RoleEnum.WORKER)
admin_only = require_role(RoleEnum.ADMIN)


def _customer_for(payload: OrderCreate, user: User) -> str:
    if user.role == RoleEnum.CUSTOMER:
        if payload.customer_id not in (None, user.id):
            raise AuthError("Customers can only order for themselves", status_code=403)
        return user.id
    if user.role == RoleEnum.ADMIN:
        if not payload.customer_id:
            raise ValidationError("customerId is required when ordering on behalf of a customer",
                                  field="customer_id")
        return payload.customer_id
    raise AuthError("Insufficient privileges", status_code=403)


def _visible_order(db: Session, order_id: int, user: User):
    order = order_service.get_order(db, order_id)
    # чужой заказ для покупателя просто не существует
    if user.role == RoleEnum.CUSTOMER and order.customer_id != user.id:
        raise NotFoundError(f"Order {order_id} not found.")
    return order


@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    result = order_service.submit_order(
        db,
        customer_id=_customer_for(payload, user),
        items=[i.to_input() for i in payload.items],
        advance_amount=payload.advance_amount,
    )
    return result

@router.post("/quote", response_model=QuoteOut)
def quote(payload: QuoteRequest, db: Session = Depends(get_db)):
    """Цена корзины по текущему каталогу, ничего не сохраняется."""
    q = order_service.quote_order(db, items=[i.to_input() for i in payload.items])
    return {
        "items": [
            {
                "product_id": p.product.id,
                "quantity": p.quantity,
                "unit_price": p.unit_price,
                "line_total": p.line_total,
                "is_custom": p.is_custom,
            }
            for p in q.items
        ],
        "total_amount": q.total_amount,
    }

@router.get("", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if user.role == RoleEnum.CUSTOMER:
        return order_service.list_orders(db, customer_id=user.id)
    return order_service.list_orders(db)

@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _visible_order(db, order_id, user)

@router.patch("/{order_id}/status", response_model=OrderOut)
def change_status(order_id: int, payload: TransitionRequest, db: Session = Depends(get_db),
                  user: User = Depends(staff_only)):
    return workflow.transition_order(
        db,
        order_id=order_id,
        target_status=payload.status,
        target_stage=payload.workflow_stage,
        actor_id=user.id,
    )

@router.post("/{order_id}/assign-worker", response_model=OrderOut)
def assign_worker(order_id: int, payload: AssignWorkerRequest, db: Session = Depends(get_db),
                  user: User = Depends(admin_only)):
    return workflow.assign_worker(db, order_id=order_id, worker_id=payload.worker_id, actor_id=user.id)

@router.get("/{order_id}/events", response_model=List[OrderEventOut])
def order_events(order_id: int, db: Session = Depends(get_db), user: User = Depends(staff_only)):
    return workflow.list_events(db, order_id)

# tailorcraft/services/workflow.py
# Жизненный цикл заказа: статусы, этапы производства, назначение мастера.
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tailorcraft.core.errors import InvalidTransitionError, NotFoundError, PersistenceError
from tailorcraft.db.session import transaction
from tailorcraft.models.order import Order, OrderStatus, WorkflowStage
from tailorcraft.models.order_event import OrderEvent, OrderEventKind
from tailorcraft.models.worker import Worker

logger = logging.getLogger(__name__)

STATUS_ORDER = list(OrderStatus)
STAGE_ORDER = list(WorkflowStage)

# Назначать мастера можно только пока заказ в работе или подтверждён
ASSIGNABLE_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.PROCESSING)


def _next(seq: list, current):
    idx = seq.index(current)
    return seq[idx + 1] if idx + 1 < len(seq) else None


def _value(member):
    return member.value if member is not None else None


def resolve_transition(
    current_status: OrderStatus,
    current_stage: WorkflowStage | None,
    target_status: OrderStatus,
    target_stage: WorkflowStage | None = None,
) -> tuple[OrderStatus, WorkflowStage | None]:
    """
    Возвращает новую пару (status, stage) или бросает InvalidTransitionError.

    Разрешён только шаг вперёд на одну позицию: либо следующий статус,
    либо (внутри PROCESSING) следующий этап. Откатов и пропусков нет.
    """
    def reject(reason: str):
        return InvalidTransitionError(
            f"Cannot move from {current_status.value}/{_value(current_stage)} "
            f"to {target_status.value}/{_value(target_stage)}: {reason}"
        )

    if target_status == current_status:
        if current_status != OrderStatus.PROCESSING:
            raise reject("status is unchanged")
        if target_stage is None:
            raise reject("workflow stage is required")
        if current_stage is None or _next(STAGE_ORDER, current_stage) != target_stage:
            raise reject("stages advance one step at a time")
        return current_status, target_stage

    if _next(STATUS_ORDER, current_status) != target_status:
        raise reject("statuses advance one step at a time")

    if target_status == OrderStatus.CONFIRMED:
        if target_stage is not None:
            raise reject("workflow stage is only set while processing")
        return target_status, None

    if target_status == OrderStatus.PROCESSING:
        if target_stage not in (None, WorkflowStage.CUTTING):
            raise reject("production starts with cutting")
        return target_status, WorkflowStage.CUTTING

    # READY и DELIVERED: этап замораживается на DONE
    if target_stage not in (None, WorkflowStage.DONE):
        raise reject("stage is fixed once production is done")
    if current_stage != WorkflowStage.DONE:
        raise reject("production is not done")
    return target_status, WorkflowStage.DONE


def _load(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")
    return order


def transition_order(
    db: Session,
    *,
    order_id: int,
    target_status: OrderStatus,
    target_stage: WorkflowStage | None = None,
    actor_id: str | None = None,
) -> Order:
    order = _load(db, order_id)
    from_status, from_stage = order.status, order.workflow_stage

    try:
        new_status, new_stage = resolve_transition(from_status, from_stage, target_status, target_stage)
    except InvalidTransitionError:
        logger.warning("Rejected transition of order %s by %s", order_id, actor_id)
        raise

    # compare-and-swap по паре (status, stage), прочитанной выше
    stage_clause = Order.workflow_stage.is_(None) if from_stage is None else Order.workflow_stage == from_stage
    try:
        with transaction(db):
            updated = (
                db.query(Order)
                .filter(Order.id == order_id, Order.status == from_status, stage_clause)
                .update({"status": new_status, "workflow_stage": new_stage}, synchronize_session=False)
            )
            if updated != 1:
                raise InvalidTransitionError(f"Order {order_id} was changed concurrently, reload and retry.")
            OrderEvent.log(
                db,
                order_id,
                OrderEventKind.STATUS_CHANGED,
                actor_id=actor_id,
                from_status=_value(from_status),
                to_status=_value(new_status),
                from_stage=_value(from_stage),
                to_stage=_value(new_stage),
            )
    except SQLAlchemyError as e:
        logger.error("Transition of order %s failed", order_id, exc_info=True)
        raise PersistenceError(f"Could not update order {order_id}.") from e

    db.refresh(order)
    logger.info(
        "Order %s: %s/%s -> %s/%s by %s",
        order_id, _value(from_status), _value(from_stage), _value(new_status), _value(new_stage), actor_id,
    )
    return order


def assign_worker(db: Session, *, order_id: int, worker_id: str, actor_id: str | None = None) -> Order:
    order = _load(db, order_id)
    if order.status not in ASSIGNABLE_STATUSES:
        raise InvalidTransitionError(
            f"Workers can only be assigned to CONFIRMED or PROCESSING orders, order {order_id} is {order.status.value}."
        )
    if db.get(Worker, worker_id) is None:
        raise NotFoundError(f"Worker {worker_id} not found.", field="worker_id")

    previous = order.assigned_worker_id
    if previous == worker_id:
        return order

    try:
        with transaction(db):
            updated = (
                db.query(Order)
                .filter(Order.id == order_id, Order.status == order.status)
                .filter(
                    Order.assigned_worker_id.is_(None)
                    if previous is None
                    else Order.assigned_worker_id == previous
                )
                .update({"assigned_worker_id": worker_id}, synchronize_session=False)
            )
            if updated != 1:
                raise InvalidTransitionError(f"Order {order_id} was changed concurrently, reload and retry.")
            OrderEvent.log(
                db,
                order_id,
                OrderEventKind.WORKER_ASSIGNED,
                actor_id=actor_id,
                from_worker_id=previous,
                to_worker_id=worker_id,
            )
    except SQLAlchemyError as e:
        logger.error("Worker assignment for order %s failed", order_id, exc_info=True)
        raise PersistenceError(f"Could not assign worker to order {order_id}.") from e

    db.refresh(order)
    logger.info("Order %s assigned to worker %s (was %s) by %s", order_id, worker_id, previous, actor_id)
    return order


def list_events(db: Session, order_id: int) -> list[OrderEvent]:
    _load(db, order_id)
    return (
        db.query(OrderEvent)
        .filter(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.id)
        .all()
    )

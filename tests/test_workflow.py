# tests/test_workflow.py
import pytest

from tailorcraft.core.errors import InvalidTransitionError, NotFoundError
from tailorcraft.models.order import Order, OrderStatus as S, WorkflowStage as W
from tailorcraft.models.order_event import OrderEvent, OrderEventKind
from tailorcraft.services.orders import OrderItemInput, submit_order
from tailorcraft.services.workflow import (
    assign_worker,
    list_events,
    resolve_transition,
    transition_order,
)

HAPPY_PATH = [
    (S.CONFIRMED, None),
    (S.PROCESSING, W.CUTTING),
    (S.PROCESSING, W.SEWING),
    (S.PROCESSING, W.FINISHING),
    (S.PROCESSING, W.PRESSING),
    (S.PROCESSING, W.DONE),
    (S.READY, None),
    (S.DELIVERED, None),
]


@pytest.fixture
def order_id(db):
    return submit_order(
        db, customer_id="u2", items=[OrderItemInput(product_id="p2", quantity=2, selected_size="M")]
    ).order_id


def advance_to(db, order_id, steps):
    for status, stage in steps:
        transition_order(db, order_id=order_id, target_status=status, target_stage=stage, actor_id="u1")
    return db.get(Order, order_id)


@pytest.mark.parametrize(
    "current, target, expected",
    [
        ((S.PENDING, None), (S.CONFIRMED, None), (S.CONFIRMED, None)),
        ((S.CONFIRMED, None), (S.PROCESSING, None), (S.PROCESSING, W.CUTTING)),
        ((S.CONFIRMED, None), (S.PROCESSING, W.CUTTING), (S.PROCESSING, W.CUTTING)),
        ((S.PROCESSING, W.CUTTING), (S.PROCESSING, W.SEWING), (S.PROCESSING, W.SEWING)),
        ((S.PROCESSING, W.PRESSING), (S.PROCESSING, W.DONE), (S.PROCESSING, W.DONE)),
        ((S.PROCESSING, W.DONE), (S.READY, None), (S.READY, W.DONE)),
        ((S.READY, W.DONE), (S.DELIVERED, W.DONE), (S.DELIVERED, W.DONE)),
    ],
)
def test_forward_transitions(current, target, expected):
    assert resolve_transition(*current, *target) == expected


@pytest.mark.parametrize(
    "current, target",
    [
        ((S.PENDING, None), (S.PENDING, None)),
        ((S.PENDING, None), (S.PROCESSING, None)),
        ((S.PENDING, None), (S.CONFIRMED, W.CUTTING)),
        ((S.CONFIRMED, None), (S.READY, None)),
        ((S.CONFIRMED, None), (S.PROCESSING, W.SEWING)),
        ((S.PROCESSING, W.CUTTING), (S.PROCESSING, W.FINISHING)),
        ((S.PROCESSING, W.SEWING), (S.PROCESSING, W.CUTTING)),
        ((S.PROCESSING, W.SEWING), (S.PROCESSING, None)),
        ((S.PROCESSING, W.DONE), (S.PROCESSING, W.DONE)),
        ((S.PROCESSING, W.PRESSING), (S.READY, None)),
        ((S.PROCESSING, W.DONE), (S.READY, W.PRESSING)),
        ((S.READY, W.DONE), (S.PROCESSING, W.CUTTING)),
        ((S.DELIVERED, W.DONE), (S.PROCESSING, None)),
        ((S.DELIVERED, W.DONE), (S.DELIVERED, W.DONE)),
        ((S.DELIVERED, W.DONE), (S.PENDING, None)),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidTransitionError):
        resolve_transition(*current, *target)


def test_full_lifecycle_emits_event_per_step(db, order_id):
    order = advance_to(db, order_id, HAPPY_PATH)

    assert order.status == S.DELIVERED
    assert order.workflow_stage == W.DONE
    events = list_events(db, order_id)
    assert len(events) == len(HAPPY_PATH)
    assert all(e.kind == OrderEventKind.STATUS_CHANGED for e in events)
    first, last = events[0], events[-1]
    assert (first.from_status, first.to_status, first.from_stage, first.to_stage) == (
        "PENDING", "CONFIRMED", None, None,
    )
    assert (last.from_status, last.to_status, last.to_stage) == ("READY", "DELIVERED", "DONE")
    assert all(e.actor_id == "u1" and e.created_at is not None for e in events)


def test_delivered_to_processing_rejected_state_unchanged(db, order_id):
    advance_to(db, order_id, HAPPY_PATH)

    with pytest.raises(InvalidTransitionError):
        transition_order(db, order_id=order_id, target_status=S.PROCESSING, actor_id="u1")

    db.expire_all()
    order = db.get(Order, order_id)
    assert (order.status, order.workflow_stage) == (S.DELIVERED, W.DONE)
    assert len(list_events(db, order_id)) == len(HAPPY_PATH)


def test_totals_untouched_by_workflow(db, order_id):
    order = advance_to(db, order_id, HAPPY_PATH[:4])
    assert order.total_amount == 170
    assert order.advance_amount + order.due_amount == order.total_amount


def test_unknown_order(db):
    with pytest.raises(NotFoundError):
        transition_order(db, order_id=999, target_status=S.CONFIRMED)


def test_stale_writer_loses_compare_and_swap(db, session_factory, order_id):
    stale = session_factory()
    try:
        # второй оператор прочитал заказ в PENDING
        assert stale.get(Order, order_id).status == S.PENDING

        transition_order(db, order_id=order_id, target_status=S.CONFIRMED, actor_id="u1")

        with pytest.raises(InvalidTransitionError):
            transition_order(stale, order_id=order_id, target_status=S.CONFIRMED, actor_id="u4")
    finally:
        stale.close()

    db.expire_all()
    assert db.get(Order, order_id).status == S.CONFIRMED
    assert len(list_events(db, order_id)) == 1


def test_assign_then_reassign_worker(db, order_id):
    advance_to(db, order_id, HAPPY_PATH[:1])

    assign_worker(db, order_id=order_id, worker_id="w2", actor_id="u1")
    before = len(list_events(db, order_id))
    order = assign_worker(db, order_id=order_id, worker_id="w3", actor_id="u1")

    assert order.assigned_worker_id == "w3"
    new_events = list_events(db, order_id)[before:]
    assert len(new_events) == 1
    change = new_events[0]
    assert change.kind == OrderEventKind.WORKER_ASSIGNED
    assert (change.from_worker_id, change.to_worker_id, change.actor_id) == ("w2", "w3", "u1")


def test_assigning_same_worker_is_noop(db, order_id):
    advance_to(db, order_id, HAPPY_PATH[:2])
    assign_worker(db, order_id=order_id, worker_id="w1")
    assign_worker(db, order_id=order_id, worker_id="w1")

    kinds = [e.kind for e in list_events(db, order_id)]
    assert kinds.count(OrderEventKind.WORKER_ASSIGNED) == 1


@pytest.mark.parametrize("steps", [[], HAPPY_PATH[:7], HAPPY_PATH])
def test_assignment_outside_production_rejected(db, order_id, steps):
    advance_to(db, order_id, steps)
    with pytest.raises(InvalidTransitionError):
        assign_worker(db, order_id=order_id, worker_id="w2")
    db.expire_all()
    assert db.get(Order, order_id).assigned_worker_id is None


def test_assign_unknown_worker(db, order_id):
    advance_to(db, order_id, HAPPY_PATH[:1])
    with pytest.raises(NotFoundError):
        assign_worker(db, order_id=order_id, worker_id="w404")
    assert db.query(OrderEvent).filter(OrderEvent.kind == OrderEventKind.WORKER_ASSIGNED).count() == 0


def test_stale_assignment_loses_compare_and_swap(db, session_factory, order_id):
    advance_to(db, order_id, HAPPY_PATH[:1])
    stale = session_factory()
    try:
        # второй админ видит заказ ещё без мастера
        assert stale.get(Order, order_id).assigned_worker_id is None

        assign_worker(db, order_id=order_id, worker_id="w2", actor_id="u1")

        with pytest.raises(InvalidTransitionError):
            assign_worker(stale, order_id=order_id, worker_id="w3", actor_id="u1")
    finally:
        stale.close()

    db.expire_all()
    assert db.get(Order, order_id).assigned_worker_id == "w2"
    kinds = [e.kind for e in list_events(db, order_id)]
    assert kinds.count(OrderEventKind.WORKER_ASSIGNED) == 1

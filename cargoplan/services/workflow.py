"""
Request workflow: submission, status changes and the per-vehicle revenue ledger.

Approving a request credits its plan's vehicle ledger in the same
transaction as the status change. Either both are committed or neither is.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from cargoplan import exceptions, models, schemas
from cargoplan.utils import parse_number

logger = logging.getLogger(__name__)

REQUEST_STATUSES = [s.value for s in models.RequestStatus]
CARGO_SIZES = [s.value for s in models.CargoSize]

# vehicle_number -> lock, serialises ledger read-modify-write inside this process.
# Entries are never evicted: one Lock per distinct vehicle number, so the dict
# is bounded by the fleet size.
_ledger_locks: Dict[str, threading.Lock] = {}
_ledger_locks_guard = threading.Lock()


@contextmanager
def _vehicle_ledger_lock(vehicle_number: str):
    with _ledger_locks_guard:
        lock = _ledger_locks.setdefault(vehicle_number, threading.Lock())
    with lock:
        yield


def _require_admin(actor: schemas.Actor) -> None:
    if not actor.is_admin:
        raise exceptions.PermissionDenied("Access denied. Admin only.")


def _require_agent(actor: schemas.Actor) -> None:
    if not actor.is_agent:
        raise exceptions.PermissionDenied("Access denied. Agents only.")


def _parse_price(value) -> float:
    return parse_number(value) or 0.0


def _parse_id(value):
    number = parse_number(value)
    if number is None or number <= 0 or not number.is_integer():
        return None
    return int(number)


def validate_cargo(data: schemas.CargoRequestCreate) -> List[str]:
    """Returns every field violation, empty when the cargo details are acceptable."""
    errors = []
    if data.plan_id is None or data.plan_id == "":
        errors.append("Plan ID is required")
    elif _parse_id(data.plan_id) is None:
        errors.append("Plan ID must be a valid id")

    for label, value in (("Box count", data.box_count), ("Weight", data.weight), ("Price", data.price)):
        if value is None or value == "":
            errors.append(f"{label} is required")
            continue
        number = parse_number(value)
        if number is None or number <= 0:
            errors.append(f"{label} must be a positive number")
        elif label == "Box count" and not number.is_integer():
            errors.append("Box count must be a whole number")

    if not data.size:
        errors.append("Size is required")
    elif data.size not in CARGO_SIZES:
        errors.append("Invalid size. Must be big, small, or unsized")
    return errors


def submit_request(db: Session, actor: schemas.Actor, data: schemas.CargoRequestCreate) -> models.CargoRequest:
    _require_agent(actor)

    errors = validate_cargo(data)
    if errors:
        raise exceptions.ValidationError("Invalid cargo request.", errors=errors)

    plan = db.query(models.Plan).filter(models.Plan.id == _parse_id(data.plan_id)).first()
    if not plan:
        raise exceptions.NotFound("Plan not found")

    now = datetime.utcnow()
    dimensions = data.dimensions or schemas.Dimensions()
    new_request = models.CargoRequest(
        plan_id=plan.id,
        agent_id=actor.id,
        box_count=int(parse_number(data.box_count)),
        size=models.CargoSize(data.size),
        dimension_length=dimensions.length,
        dimension_width=dimensions.width,
        dimension_height=dimensions.height,
        weight=parse_number(data.weight),
        price=parse_number(data.price),
        description=data.description,
        special_instructions=data.special_instructions,
        pickup_address=data.pickup_address,
        delivery_address=data.delivery_address,
        contact_person=data.contact_person,
        contact_phone=data.contact_phone,
        status=models.RequestStatus.PENDING,
        created_at=now,
        updated_at=now,
    )
    new_request.status_history.append(
        models.RequestStatusHistory(status=models.RequestStatus.PENDING, timestamp=now, updated_by=actor.id)
    )

    db.add(new_request)
    _commit(db)
    db.refresh(new_request)
    logger.info("Request %s submitted by agent %s against plan %s", new_request.id, actor.id, plan.id)
    return new_request


def change_status(db: Session, request_id: int, new_status: str, actor: schemas.Actor) -> models.CargoRequest:
    """
    Sets a request's status and records it in the status history.

    Any status may follow any other. Moving into "approved" also credits
    the plan's vehicle ledger; a request already present in that ledger is
    not credited twice.
    """
    _require_admin(actor)

    if not new_status:
        raise exceptions.ValidationError("Status is required", errors=["Status is required"])
    if new_status not in REQUEST_STATUSES:
        message = f"Invalid status: {new_status}"
        raise exceptions.ValidationError(message, errors=[message])
    status = models.RequestStatus(new_status)

    cargo_request = db.query(models.CargoRequest).options(
        joinedload(models.CargoRequest.plan)
    ).filter(models.CargoRequest.id == request_id).first()
    if not cargo_request:
        raise exceptions.NotFound("Request not found")

    vehicle_number = None
    if status == models.RequestStatus.APPROVED:
        # Checked before anything is touched so a bad plan leaves no trace
        if not cargo_request.plan or not cargo_request.plan.vehicle_number:
            logger.error("Request %s has no usable plan vehicle number", cargo_request.id)
            raise exceptions.ValidationError("Invalid plan data for this request")
        vehicle_number = cargo_request.plan.vehicle_number

    now = datetime.utcnow()
    cargo_request.status = status
    cargo_request.updated_at = now
    cargo_request.status_history.append(
        models.RequestStatusHistory(status=status, timestamp=now, updated_by=actor.id)
    )

    if vehicle_number is None:
        _commit(db)
    else:
        with _vehicle_ledger_lock(vehicle_number), _persisting(db):
            _credit_vehicle_ledger(db, vehicle_number, cargo_request, now)
            db.commit()

    db.refresh(cargo_request)
    logger.info("Request %s moved to %s by admin %s", cargo_request.id, status.value, actor.id)
    return cargo_request


def _credit_vehicle_ledger(db: Session, vehicle_number: str, cargo_request: models.CargoRequest, now: datetime) -> None:
    price = _parse_price(cargo_request.price)

    ledger = db.query(models.VehicleAmount).options(
        selectinload(models.VehicleAmount.approved_requests)
    ).filter(
        models.VehicleAmount.vehicle_number == vehicle_number
    ).with_for_update().first()

    if not ledger:
        ledger = models.VehicleAmount(vehicle_number=vehicle_number, total_amount=0.0)
        db.add(ledger)
        logger.info("Opening vehicle ledger for %s", vehicle_number)
    elif any(entry.request_id == cargo_request.id for entry in ledger.approved_requests):
        logger.warning("Request %s already credited to vehicle %s, skipping", cargo_request.id, vehicle_number)
        return

    ledger.total_amount = (ledger.total_amount or 0.0) + price
    ledger.approved_requests.append(
        models.ApprovedRequest(request_id=cargo_request.id, price=price, approved_at=now)
    )
    ledger.updated_at = now
    logger.info("Vehicle %s credited %.2f for request %s (total %.2f)",
                vehicle_number, price, cargo_request.id, ledger.total_amount)


@contextmanager
def _persisting(db: Session):
    """Rolls back and translates any database error raised inside the block."""
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Commit rejected: {e}")
        raise exceptions.Conflict()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Commit failed: {e}")
        raise exceptions.PersistenceError()


def _commit(db: Session) -> None:
    with _persisting(db):
        db.commit()


def get_vehicle_ledger(db: Session, actor: schemas.Actor) -> List[models.VehicleAmount]:
    _require_admin(actor)

    return db.query(models.VehicleAmount).options(
        selectinload(models.VehicleAmount.approved_requests)
        .joinedload(models.ApprovedRequest.request)
        .joinedload(models.CargoRequest.plan)
    ).order_by(models.VehicleAmount.vehicle_number).all()

import logging
from datetime import datetime
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cargoplan import exceptions, models, schemas
from cargoplan.utils import parse_number

logger = logging.getLogger(__name__)


def validate_plan(data: schemas.PlanCreate) -> List[str]:
    errors = []
    required = {
        "vehicle_type": data.vehicle_type,
        "vehicle_number": data.vehicle_number,
        "number_of_vehicles": data.number_of_vehicles,
        "route": data.route,
        "starting_time": data.starting_time,
    }
    missing = [name for name, value in required.items() if value in (None, "")]
    if missing:
        errors.append(f"Missing required fields: {', '.join(missing)}")

    if data.route is not None:
        if not data.route.from_ or not data.route.to:
            errors.append("Route must include both origin and destination")
        elif data.route.from_ == data.route.to:
            errors.append("Origin and destination cannot be the same")

    for label, value in (("Number of vehicles", data.number_of_vehicles), ("Capacity", data.capacity)):
        if value is None or value == "":
            continue
        number = parse_number(value)
        if number is None or number <= 0:
            errors.append(f"{label} must be a positive number")
        elif label == "Number of vehicles" and not number.is_integer():
            errors.append("Number of vehicles must be a whole number")

    if data.available_capacity not in (None, "") and parse_number(data.available_capacity) is None:
        errors.append("Available capacity must be a number")

    return errors


def create_plan(db: Session, actor: schemas.Actor, data: schemas.PlanCreate) -> models.Plan:
    if not actor.is_admin:
        raise exceptions.PermissionDenied("Access denied. Admin only.")

    errors = validate_plan(data)
    if errors:
        raise exceptions.ValidationError(errors[0], errors=errors)

    capacity = parse_number(data.capacity)
    available_capacity = parse_number(data.available_capacity)

    now = datetime.utcnow()
    plan = models.Plan(
        vehicle_type=data.vehicle_type,
        vehicle_number=data.vehicle_number,
        number_of_vehicles=int(parse_number(data.number_of_vehicles)),
        route_from=data.route.from_,
        route_to=data.route.to,
        estimated_distance=data.route.estimated_distance,
        estimated_duration=data.route.estimated_duration,
        starting_time=data.starting_time,
        estimated_arrival_time=data.estimated_arrival_time,
        capacity=capacity,
        available_capacity=available_capacity if available_capacity is not None else capacity,
        status=data.status,
        notes=data.notes,
        created_by=actor.id,
        created_at=now,
        updated_at=now,
    )

    try:
        db.add(plan)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating plan: {e}")
        raise exceptions.PersistenceError("Could not create plan.")

    db.refresh(plan)
    logger.info("Plan %s created for vehicle %s (%s -> %s)", plan.id, plan.vehicle_number, plan.route_from, plan.route_to)
    return plan

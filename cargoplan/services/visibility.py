# Role based narrowing of plan and request listings.

import enum
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from cargoplan import exceptions, models, schemas


class RequestScope(str, enum.Enum):
    ALL = 'all'
    MINE = 'mine'


def list_plans(db: Session, actor: schemas.Actor) -> List[models.Plan]:
    query = db.query(models.Plan)

    if actor.is_admin:
        return query.all()

    if actor.is_agent:
        # Exact, case sensitive match against the agent's home city
        return query.filter(or_(
            models.Plan.route_from == actor.city,
            models.Plan.route_to == actor.city
        )).all()

    raise exceptions.PermissionDenied("Unauthorized role")


def list_requests(db: Session, actor: schemas.Actor, scope: RequestScope) -> List[models.CargoRequest]:
    query = db.query(models.CargoRequest).options(
        joinedload(models.CargoRequest.plan),
        selectinload(models.CargoRequest.status_history)
    )

    if scope == RequestScope.ALL and actor.is_admin:
        return query.order_by(models.CargoRequest.id.desc()).all()

    if scope == RequestScope.MINE and actor.is_agent:
        return query.filter(
            models.CargoRequest.agent_id == actor.id
        ).order_by(models.CargoRequest.id.desc()).all()

    if scope == RequestScope.ALL:
        raise exceptions.PermissionDenied("Access denied. Admin only.")
    raise exceptions.PermissionDenied("Access denied. Agents only.")

# cargoplan/routers/plan.py
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cargoplan import schemas, oauth2
from cargoplan.database import get_db
from cargoplan.services import plans, visibility

router = APIRouter(
    prefix="/api/v1/plans",
    tags=['Plans API']
)

# 1. READ ALL (role filtered)
@router.get("/", response_model=List[schemas.PlanOut])
def get_all_plans(
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.get_current_actor)
):
    """
    - Admin: every plan.
    - Agent: plans starting or ending in the agent's city.
    """
    return visibility.list_plans(db, actor)

# 2. CREATE (Admin Only)
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.PlanOut)
def create_plan(
    plan_data: schemas.PlanCreate,
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.require_admin_role)
):
    return plans.create_plan(db, actor, plan_data)

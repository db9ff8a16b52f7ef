# cargoplan/routers/request.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from cargoplan import models, schemas, oauth2
from cargoplan.database import get_db
from cargoplan.services import visibility, workflow

router = APIRouter(
    prefix="/api/v1/requests",
    tags=['Requests API']
)

# =================================================================================
# 1. GET ALL REQUESTS (Admin)
# =================================================================================
@router.get("/", response_model=List[schemas.CargoRequestOut])
def get_all_requests(
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.require_admin_role)
):
    return visibility.list_requests(db, actor, visibility.RequestScope.ALL)

# =================================================================================
# 2. GET OWN REQUESTS (Agent)
# =================================================================================
@router.get("/my-requests", response_model=List[schemas.CargoRequestOut])
def get_my_requests(
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.require_agent_role)
):
    return visibility.list_requests(db, actor, visibility.RequestScope.MINE)

# =================================================================================
# 3. VEHICLE LEDGER (Admin, must be before /{id})
# =================================================================================
@router.get("/vehicle-amounts", response_model=List[schemas.VehicleAmountOut])
def get_vehicle_amounts(
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.require_admin_role)
):
    """
    Every vehicle's running total with the approved requests behind it.
    """
    return workflow.get_vehicle_ledger(db, actor)

# =================================================================================
# 4. PENDING COUNT
# =================================================================================
@router.get("/count/pending", response_model=schemas.PendingRequestsCount)
def get_pending_requests_count(
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.get_current_actor)
):
    """
    Used for dashboard badges. Agents only count their own requests.
    """
    query = db.query(models.CargoRequest).filter(models.CargoRequest.status == models.RequestStatus.PENDING)

    if not actor.is_admin:
        query = query.filter(models.CargoRequest.agent_id == actor.id)

    return {"count": query.count()}

# =================================================================================
# 5. CREATE NEW REQUEST (Agent)
# =================================================================================
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.CargoRequestOut)
def create_request(
    request_data: schemas.CargoRequestCreate,
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.require_agent_role)
):
    return workflow.submit_request(db, actor, request_data)

# =================================================================================
# 6. CHANGE STATUS (Admin)
# =================================================================================
@router.patch("/{id}/status", response_model=schemas.CargoRequestOut)
@router.put("/{id}/status", response_model=schemas.CargoRequestOut)
def update_request_status(
    id: int,
    status_data: schemas.StatusUpdate,
    db: Session = Depends(get_db),
    actor: schemas.Actor = Depends(oauth2.require_admin_role)
):
    return workflow.change_status(db, id, status_data.status, actor)

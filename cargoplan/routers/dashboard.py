# cargoplan/routers/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func

from cargoplan import models, schemas, oauth2
from cargoplan.database import get_db

router = APIRouter(
    prefix="/api/v1/dashboard-data",
    tags=["Dashboard Data"],
    dependencies=[Depends(oauth2.require_admin_role)]
)

@router.get("/kpis", response_model=schemas.KPIStats)
def get_dashboard_kpis_data(db: Session = Depends(get_db)):
    total_plans = db.query(func.count(models.Plan.id)).scalar() or 0
    active_plans = db.query(func.count(models.Plan.id)).filter(
        models.Plan.status == models.PlanStatus.ACTIVE
    ).scalar() or 0

    # Every status is reported, zero when no request holds it
    requests_by_status = {s.value: 0 for s in models.RequestStatus}
    rows = db.query(models.CargoRequest.status, func.count(models.CargoRequest.id))\
             .group_by(models.CargoRequest.status).all()
    for request_status, count in rows:
        requests_by_status[models.RequestStatus(request_status).value] = count

    total_revenue = db.query(func.sum(models.VehicleAmount.total_amount)).scalar() or 0.0
    vehicles_with_revenue = db.query(func.count(models.VehicleAmount.id)).scalar() or 0

    return {
        "total_plans": total_plans,
        "active_plans": active_plans,
        "total_requests": sum(requests_by_status.values()),
        "requests_by_status": requests_by_status,
        "total_revenue": round(total_revenue, 2),
        "vehicles_with_revenue": vehicles_with_revenue,
    }

# Exposes all models to the app
from .users import User, UserToken, UserRole, VALID_CITIES
from .operations import (
    Plan, PlanStatus, CargoSize, RequestStatus,
    CargoRequest, RequestStatusHistory, VehicleAmount, ApprovedRequest
)

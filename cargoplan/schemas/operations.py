from typing import List, Optional, Union
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from cargoplan.models.operations import PlanStatus, CargoSize, RequestStatus

# Numbers as sent by the client, coerced and range checked in the services
RawNumber = Optional[Union[int, float, str]]

# =================================================================
# PLANS
# =================================================================
class RouteBase(BaseModel):
    # "from" is a keyword, the field is exposed under its alias
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    estimated_distance: Optional[float] = None
    estimated_duration: Optional[float] = None
    model_config = ConfigDict(populate_by_name=True)

# Numeric and required checks happen in the plan service so every
# violation is reported together.
class PlanCreate(BaseModel):
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None
    number_of_vehicles: RawNumber = None
    route: Optional[RouteBase] = None
    starting_time: Optional[datetime] = None
    estimated_arrival_time: Optional[datetime] = None
    capacity: RawNumber = None
    available_capacity: RawNumber = None
    status: PlanStatus = PlanStatus.ACTIVE
    notes: Optional[str] = None

class PlanOut(BaseModel):
    id: int
    vehicle_type: str
    vehicle_number: str
    number_of_vehicles: int
    route: RouteBase
    starting_time: datetime
    estimated_arrival_time: Optional[datetime] = None
    capacity: Optional[float] = None
    available_capacity: Optional[float] = None
    status: PlanStatus
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

# =================================================================
# CARGO REQUESTS
# =================================================================
class Dimensions(BaseModel):
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None

class CargoRequestCreate(BaseModel):
    plan_id: RawNumber = None
    box_count: RawNumber = None
    size: Optional[str] = None
    dimensions: Optional[Dimensions] = None
    weight: RawNumber = None
    price: RawNumber = None
    description: Optional[str] = None
    special_instructions: Optional[str] = None
    pickup_address: Optional[str] = None
    delivery_address: Optional[str] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None

class StatusUpdate(BaseModel):
    status: Optional[str] = None

class StatusHistoryOut(BaseModel):
    status: RequestStatus
    timestamp: datetime
    updated_by: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)

class CargoRequestOut(BaseModel):
    id: int
    plan_id: Optional[int] = None
    agent_id: Optional[int] = None
    box_count: int
    size: CargoSize
    dimensions: Optional[Dimensions] = None
    weight: float
    price: float
    description: Optional[str] = None
    special_instructions: Optional[str] = None
    pickup_address: Optional[str] = None
    delivery_address: Optional[str] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    status: RequestStatus
    status_history: List[StatusHistoryOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    plan: Optional[PlanOut] = None

    model_config = ConfigDict(from_attributes=True)

class PendingRequestsCount(BaseModel):
    count: int

# =================================================================
# VEHICLE LEDGER
# =================================================================
class LedgerRequestOut(BaseModel):
    id: int
    price: float
    status: RequestStatus
    agent_id: Optional[int] = None
    plan: Optional[PlanOut] = None
    model_config = ConfigDict(from_attributes=True)

class ApprovedRequestOut(BaseModel):
    request_id: Optional[int] = None
    price: float
    approved_at: datetime
    request: Optional[LedgerRequestOut] = None
    model_config = ConfigDict(from_attributes=True)

class VehicleAmountOut(BaseModel):
    id: int
    vehicle_number: str
    total_amount: float
    approved_requests: List[ApprovedRequestOut] = []
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

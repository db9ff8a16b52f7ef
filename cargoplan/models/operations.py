# cargoplan/models/operations.py

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from cargoplan.database import Base
from cargoplan.models.users import _enum_values
from datetime import datetime
import enum

class PlanStatus(str, enum.Enum):
    ACTIVE = 'active'
    IN_TRANSIT = 'in-transit'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

class CargoSize(str, enum.Enum):
    BIG = 'big'
    SMALL = 'small'
    UNSIZED = 'unsized'

class RequestStatus(str, enum.Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    IN_TRANSIT = 'in-transit'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'

# Shared by cargo_requests and request_status_history
request_status_type = Enum(RequestStatus, name='request_status_enum', values_callable=_enum_values)

class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_type = Column(String, nullable=False)
    vehicle_number = Column(String, nullable=False, index=True)
    number_of_vehicles = Column(Integer, nullable=False)

    # Route (embedded)
    route_from = Column(String, nullable=False, index=True)
    route_to = Column(String, nullable=False, index=True)
    estimated_distance = Column(Float, nullable=True)
    estimated_duration = Column(Float, nullable=True)  # hours

    starting_time = Column(DateTime, nullable=False)
    estimated_arrival_time = Column(DateTime, nullable=True)
    capacity = Column(Float, nullable=True)  # kg
    available_capacity = Column(Float, nullable=True)  # kg, advisory only
    status = Column(Enum(PlanStatus, name='plan_status_enum', values_callable=_enum_values), nullable=False, default=PlanStatus.ACTIVE, index=True)
    notes = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = relationship("User")
    requests = relationship("CargoRequest", back_populates="plan")

    @property
    def route(self):
        return {
            "from": self.route_from,
            "to": self.route_to,
            "estimated_distance": self.estimated_distance,
            "estimated_duration": self.estimated_duration,
        }

class CargoRequest(Base):
    __tablename__ = "cargo_requests"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="SET NULL"), nullable=True, index=True)
    agent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    box_count = Column(Integer, nullable=False)
    size = Column(Enum(CargoSize, name='cargo_size_enum', values_callable=_enum_values), nullable=False)
    dimension_length = Column(Float, nullable=True)
    dimension_width = Column(Float, nullable=True)
    dimension_height = Column(Float, nullable=True)
    weight = Column(Float, nullable=False)
    price = Column(Float, nullable=False)

    description = Column(Text, nullable=True)
    special_instructions = Column(Text, nullable=True)
    pickup_address = Column(String, nullable=True)
    delivery_address = Column(String, nullable=True)
    contact_person = Column(String, nullable=True)
    contact_phone = Column(String(20), nullable=True)

    status = Column(request_status_type, nullable=False, default=RequestStatus.PENDING, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    plan = relationship("Plan", back_populates="requests")
    agent = relationship("User")
    status_history = relationship(
        "RequestStatusHistory",
        back_populates="request",
        order_by="RequestStatusHistory.id",
        cascade="all, delete-orphan"
    )

    @property
    def dimensions(self):
        values = (self.dimension_length, self.dimension_width, self.dimension_height)
        if all(v is None for v in values):
            return None
        return {"length": values[0], "width": values[1], "height": values[2]}

class RequestStatusHistory(Base):
    __tablename__ = "request_status_history"
    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey('cargo_requests.id', ondelete="CASCADE"), nullable=False, index=True)
    status = Column(request_status_type, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_by = Column(Integer, ForeignKey('users.id', ondelete="SET NULL"), nullable=True, index=True)

    request = relationship("CargoRequest", back_populates="status_history")

class VehicleAmount(Base):
    """Running revenue total for one vehicle number, fed by request approvals."""
    __tablename__ = "vehicle_amounts"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_number = Column(String, nullable=False, unique=True, index=True)
    total_amount = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime, default=datetime.utcnow)

    approved_requests = relationship(
        "ApprovedRequest",
        back_populates="vehicle_amount",
        order_by="ApprovedRequest.id",
        cascade="all, delete-orphan"
    )

class ApprovedRequest(Base):
    __tablename__ = "approved_requests"
    id = Column(Integer, primary_key=True, index=True)
    vehicle_amount_id = Column(Integer, ForeignKey('vehicle_amounts.id', ondelete="CASCADE"), nullable=False, index=True)
    request_id = Column(Integer, ForeignKey('cargo_requests.id', ondelete="SET NULL"), nullable=True, index=True)
    price = Column(Float, nullable=False)
    approved_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    vehicle_amount = relationship("VehicleAmount", back_populates="approved_requests")
    request = relationship("CargoRequest")

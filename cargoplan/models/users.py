# Users and Tokens

import enum

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, Integer, String, ForeignKey, func
from sqlalchemy.orm import relationship
from cargoplan.database import Base

VALID_CITIES = [
    'Mumbai', 'Delhi', 'Bangalore', 'Hyderabad', 'Chennai',
    'Kolkata', 'Ahmedabad', 'Pune', 'Jaipur', 'Lucknow',
    'Kanpur', 'Nagpur', 'Indore', 'Thane', 'Bhopal'
]

class UserRole(str, enum.Enum):
    ADMIN = 'admin'
    AGENT = 'agent'

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class User(Base):
    __tablename__ = 'users'
    __table_args__ = (
        CheckConstraint("role != 'agent' OR city IS NOT NULL", name="ck_users_agent_city"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    role = Column(Enum(UserRole, name='user_role_enum', values_callable=_enum_values), nullable=False, index=True)
    city = Column(String(50), nullable=True, index=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    tokens = relationship("UserToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

class UserToken(Base):
    __tablename__ = "user_tokens"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('users.id'))

    access_key = Column(String(250), nullable=True, index=True, default=None)
    refresh_key = Column(String(250), nullable=True, index=True, default=None)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="tokens")

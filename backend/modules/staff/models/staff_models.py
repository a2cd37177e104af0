from datetime import datetime

from sqlalchemy import Column, String, DateTime, Enum
from core.database import Base
from ..enums.staff_enums import StaffRole


class StaffRecord(Base):
    __tablename__ = "staff_users"
    id = Column(String(64), primary_key=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    role = Column(Enum(StaffRole, values_callable=lambda obj: [e.value for e in obj]), default=StaffRole.WAITER, nullable=False)
    # Argon2 hash; NULL until a credential is set
    hashed_password = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

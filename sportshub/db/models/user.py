from sqlalchemy import Column, String, DateTime, Uuid, func, Enum
import uuid
from sportshub.db.session import Base
import enum

class RoleEnum(str, enum.Enum):
    user = "user"
    publisher = "publisher"
    admin = "admin"

class User(Base):
    """Local mirror of an identity-provider account."""
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(Enum(RoleEnum), default=RoleEnum.user, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.admin

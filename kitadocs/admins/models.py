"""
Admin Model - Platform administrators who verify doctors and moderate content.
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, func
from ..database import Base


class AdminRole(str, enum.Enum):
    """Administrative access level"""
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class Admin(Base):
    """
    Admin Model - Stores administrator accounts

    Fields:
    - id: Primary key
    - name: Display name
    - email: Unique login email
    - password: Initial password as issued while is_initial is True, bcrypt hash afterwards
    - is_initial: Whether the admin still uses the issued password
    - role: ADMIN or SUPER_ADMIN
    """
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    is_initial = Column(Boolean, nullable=False, default=True)
    role = Column(Enum(AdminRole), nullable=False, default=AdminRole.ADMIN)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Admin(id={self.id}, email='{self.email}', role='{self.role}')>"

# tailorcraft/models/user.py
# Модель пользователя: email, password_hash, role.
from sqlalchemy import Column, String, DateTime, Enum
from datetime import datetime
from tailorcraft.db.base import Base
import enum

class RoleEnum(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
    WORKER = "WORKER"

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # NULL допустим для демо-пользователей, входящих без пароля
    password_hash = Column(String, nullable=True)
    role = Column(Enum(RoleEnum), default=RoleEnum.CUSTOMER, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

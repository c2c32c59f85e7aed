from sqlalchemy import Column, String, Boolean, Enum
from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin
import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"     # Acceso total, cuentas por pagar y usuarios
    SALES = "sales"     # Cotizaciones, clientes y productos
    VIEWER = "viewer"   # Solo lectura


class User(Base, BaseMixin):
    __tablename__ = "users"

    username = Column(String(100), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=True)
    password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.SALES)
    is_active = Column(Boolean, default=True, nullable=False)

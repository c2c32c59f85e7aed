from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin
from sqlalchemy import Column, String, Text, ForeignKey, Numeric, Enum, Uuid
from sqlalchemy.orm import relationship
import enum


class PricingModel(str, enum.Enum):
    PER_UNIT = "unidade"          # Precio por unidad
    PER_SQUARE_METER = "m2"       # Precio por metro cuadrado (ancho x alto)


class Product(Base, BaseMixin):
    __tablename__ = "products"

    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    pricing_model = Column(Enum(PricingModel), nullable=False, default=PricingModel.PER_UNIT)
    base_price = Column(Numeric(15, 2), nullable=False, default=0)
    unit = Column(String(30), nullable=True)  # Ej: "un", "m²", "cx"
    custom_cash_price = Column(Numeric(15, 2), nullable=True)   # Precio especial en efectivo
    custom_card_price = Column(Numeric(15, 2), nullable=True)   # Precio especial con tarjeta
    supplier_cost = Column(Numeric(15, 2), nullable=True)       # Costo del proveedor

    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    # Relationships
    category = relationship("Category", back_populates="products")

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from maxcontrol.database.database import Base
from maxcontrol.common.mixins import BaseMixin

class Category(Base, BaseMixin):
    __tablename__ = "categories"

    name = Column(String(100), nullable=False, unique=True)

    # Relationships
    products = relationship("Product", back_populates="category")

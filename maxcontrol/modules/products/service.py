from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional, Dict
from uuid import UUID
import logging

from maxcontrol.modules.products.models import Product, PricingModel
from maxcontrol.modules.products.schemas import ProductCreate, ProductUpdate
from maxcontrol.modules.categories.models import Category

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, db: Session):
        self.db = db

    def _require_category(self, category_id: Optional[UUID]) -> None:
        if category_id is None:
            return
        exists = self.db.query(Category.id).filter(Category.id == category_id).first()
        if not exists:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada"
            )

    def _apply(self, product: Product, data: ProductCreate) -> None:
        values = data.model_dump()
        values["pricing_model"] = PricingModel(data.pricing_model)
        for field, value in values.items():
            setattr(product, field, value)

    def create_product(self, data: ProductCreate) -> Product:
        """Crear producto"""
        self._require_category(data.category_id)
        try:
            product = Product()
            self._apply(product, data)
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            logger.info(f"Product {product.name} created")
            return product
        except Exception:
            self.db.rollback()
            logger.exception("Error creating product")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creando producto"
            )

    def get_products(self, category_id: Optional[UUID] = None) -> List[Product]:
        """Listar productos ordenados por nombre"""
        query = self.db.query(Product)
        if category_id:
            query = query.filter(Product.category_id == category_id)
        return query.order_by(Product.name.asc()).all()

    def get_product_by_id(self, product_id: UUID) -> Product:
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto no encontrado"
            )
        return product

    def update_product(self, product_id: UUID, data: ProductUpdate) -> Product:
        """Actualizar producto"""
        product = self.get_product_by_id(product_id)
        self._require_category(data.category_id)
        try:
            self._apply(product, data)
            self.db.commit()
            self.db.refresh(product)
            return product
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating product {product_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando producto"
            )

    def delete_product(self, product_id: UUID) -> Dict[str, str]:
        """Eliminar producto. Las cotizaciones conservan su copia de los ítems."""
        product = self.get_product_by_id(product_id)
        try:
            self.db.delete(product)
            self.db.commit()
            logger.info(f"Product {product_id} deleted")
            return {"message": "Producto eliminado"}
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting product {product_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando producto"
            )

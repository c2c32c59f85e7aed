from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, List
import logging

from maxcontrol.modules.categories.models import Category
from maxcontrol.modules.categories.schemas import CategoryCreate, CategoryUpdate
from maxcontrol.modules.products.models import Product

logger = logging.getLogger(__name__)


class CategoryService:
    """Servicio para gestión de categorías"""

    def __init__(self, db: Session):
        self.db = db

    def create_category(self, data: CategoryCreate) -> Category:
        """
        Crear nueva categoría

        Args:
            data: Datos de la categoría

        Returns:
            Category: Categoría creada
        """
        try:
            existing = self.db.query(Category).filter(Category.name == data.name).first()
            if existing:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Ya existe una categoría con el nombre '{data.name}'"
                )

            category = Category(name=data.name)

            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)
            return category

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Error de integridad en base de datos"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating category")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno creando categoría"
            )

    def get_all_categories(self) -> List[Category]:
        """Listar categorías ordenadas por nombre"""
        return self.db.query(Category).order_by(Category.name.asc()).all()

    def get_category_by_id(self, category_id: UUID) -> Category:
        """Obtener categoría por ID"""
        category = self.db.query(Category).filter(Category.id == category_id).first()

        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada"
            )
        return category

    def update_category(self, category_id: UUID, data: CategoryUpdate) -> Category:
        """Actualizar categoría"""
        try:
            category = self.get_category_by_id(category_id)

            if data.name != category.name:
                existing = self.db.query(Category).filter(
                    Category.name == data.name,
                    Category.id != category_id
                ).first()

                if existing:
                    raise HTTPException(
                        status_code=status.HTTP_409_CONFLICT,
                        detail=f"Ya existe otra categoría con el nombre '{data.name}'"
                    )

            category.name = data.name

            self.db.commit()
            self.db.refresh(category)
            return category

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating category {category_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando categoría"
            )

    def delete_category(self, category_id: UUID) -> Dict[str, str]:
        """
        Eliminar categoría

        Los productos de la categoría quedan sin categoría.
        """
        try:
            category = self.get_category_by_id(category_id)

            unlinked = self.db.query(Product).filter(
                Product.category_id == category_id
            ).update({Product.category_id: None}, synchronize_session=False)

            self.db.delete(category)
            self.db.commit()
            logger.info(f"Category {category.name} deleted, {unlinked} products unlinked")
            return {"message": "Categoría eliminada"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting category {category_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando categoría"
            )

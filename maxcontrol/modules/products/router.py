from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_admin, require_any_role
from maxcontrol.modules.products.service import ProductService
from maxcontrol.modules.products.schemas import ProductCreate, ProductUpdate, ProductOut

product_router = APIRouter(prefix="/api/products", tags=["Products"])


@product_router.get("", response_model=List[ProductOut])
def list_products(
    category_id: Optional[UUID] = Query(None, description="Filtrar por categoría"),
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return ProductService(db).get_products(category_id)


@product_router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    return ProductService(db).get_product_by_id(product_id)


@product_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    """
    Crear producto

    Solo administradores pueden gestionar el catálogo.
    """
    return ProductService(db).create_product(data)


@product_router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    return ProductService(db).update_product(product_id, data)


@product_router.delete("/{product_id}")
def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    return ProductService(db).delete_product(product_id)

from fastapi import APIRouter, status, Depends
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.dependencies import require_admin, require_any_role
from maxcontrol.modules.categories import service
from maxcontrol.modules.categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryOut
)

categories_router = APIRouter(prefix="/api/categories", tags=["Categories"])

@categories_router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    category_service = service.CategoryService(db)
    return category_service.create_category(data)

@categories_router.get("", response_model=List[CategoryOut])
def list_categories(
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    category_service = service.CategoryService(db)
    return category_service.get_all_categories()

@categories_router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_any_role())
):
    category_service = service.CategoryService(db)
    return category_service.get_category_by_id(category_id)

@categories_router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    category_service = service.CategoryService(db)
    return category_service.update_category(category_id, data)

@categories_router.delete("/{category_id}")
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    category_service = service.CategoryService(db)
    return category_service.delete_category(category_id)

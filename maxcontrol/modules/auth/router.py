from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.service import AuthService, UserService
from maxcontrol.modules.auth.dependencies import CurrentUser, require_admin
from maxcontrol.modules.auth.schemas import (
    UserCreate, UserUpdate, UserOut, UserLogin, TokenResponse
)

auth_router = APIRouter(prefix="/api/auth", tags=["Auth"])
users_router = APIRouter(prefix="/api/users", tags=["Users"])


@auth_router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Login de usuario. Retorna token de acceso y datos del usuario.
    """
    auth_service = AuthService(db)
    return auth_service.login(credentials.username, credentials.password)


@auth_router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: CurrentUser):
    """
    Obtener información del usuario actual.
    """
    return current_user


# ===== USERS ENDPOINTS =====

@users_router.get("", response_model=List[UserOut])
def list_users(
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    return UserService(db).list_users()


@users_router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    return UserService(db).get_user_by_id(user_id)


@users_router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    return UserService(db).create_user(data)


@users_router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    """
    Actualizar usuario

    La contraseña es opcional; el último administrador no puede perder su rol.
    """
    return UserService(db).update_user(user_id, data)


@users_router.delete("/{user_id}")
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(require_admin())
):
    return UserService(db).delete_user(user_id, auth_context)

"""
Servicios de autenticación y gestión de usuarios
"""
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Dict
from uuid import UUID
import logging

from maxcontrol.core.config import settings
from maxcontrol.modules.auth.models import User, UserRole
from maxcontrol.modules.auth.schemas import (
    UserCreate, UserUpdate, UserOut, TokenResponse, AuthContext
)
from maxcontrol.modules.auth.utils import hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def login(self, username: str, password: str) -> TokenResponse:
        """
        Login de usuario. Retorna token de acceso y datos del usuario.
        """
        user = self.db.query(User).filter(User.username == username.strip()).first()

        if not user or not verify_password(password, user.password):
            logger.info(f"Failed login attempt for username '{username}'")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Credenciales incorrectas"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Cuenta inactiva"
            )

        token_data = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role.value
        }
        access_token = create_access_token(token_data)

        return TokenResponse(
            access_token=access_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserOut.model_validate(user)
        )


class UserService:
    """Servicio para gestión de usuarios (solo administradores)"""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.full_name.asc(), User.username.asc()).all()

    def get_user_by_id(self, user_id: UUID) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Usuario no encontrado"
            )
        return user

    def _ensure_username_available(self, username: str, exclude_id: UUID = None):
        query = self.db.query(User).filter(User.username == username)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El usuario ya existe"
            )

    def create_user(self, data: UserCreate) -> User:
        """Crear usuario con contraseña hasheada"""
        self._ensure_username_available(data.username)
        try:
            user = User(
                username=data.username,
                full_name=data.full_name,
                password=hash_password(data.password),
                role=UserRole(data.role)
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"User {user.username} created with role {user.role.value}")
            return user
        except Exception:
            self.db.rollback()
            logger.exception("Error creating user")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creando usuario"
            )

    def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        """
        Actualizar usuario.

        No se permite quitar el rol de administrador al último administrador.
        """
        user = self.get_user_by_id(user_id)
        new_role = UserRole(data.role)

        if user.role == UserRole.ADMIN and new_role != UserRole.ADMIN:
            admin_count = self.db.query(User).filter(User.role == UserRole.ADMIN).count()
            if admin_count <= 1:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="No se puede quitar el rol al último administrador"
                )

        if data.username != user.username:
            self._ensure_username_available(data.username, exclude_id=user.id)

        try:
            user.username = data.username
            user.full_name = data.full_name
            user.role = new_role
            if data.password:
                user.password = hash_password(data.password)

            self.db.commit()
            self.db.refresh(user)
            return user
        except Exception:
            self.db.rollback()
            logger.exception(f"Error updating user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error actualizando usuario"
            )

    def delete_user(self, user_id: UUID, auth_context: AuthContext) -> Dict[str, str]:
        """Eliminar usuario. Un usuario no puede eliminarse a sí mismo."""
        if auth_context.user_id == user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No puedes eliminar tu propia cuenta"
            )

        user = self.get_user_by_id(user_id)
        try:
            self.db.delete(user)
            self.db.commit()
            logger.info(f"User {user.username} deleted by {auth_context.username}")
            return {"message": "Usuario eliminado"}
        except Exception:
            self.db.rollback()
            logger.exception(f"Error deleting user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error eliminando usuario"
            )


def ensure_initial_admin(db: Session) -> None:
    """Crear el administrador inicial configurado si aún no hay usuarios."""
    if not settings.INITIAL_ADMIN_USERNAME or not settings.INITIAL_ADMIN_PASSWORD:
        return
    if db.query(User).count() > 0:
        return

    db.add(User(
        username=settings.INITIAL_ADMIN_USERNAME,
        full_name="Administrador",
        password=hash_password(settings.INITIAL_ADMIN_PASSWORD),
        role=UserRole.ADMIN
    ))
    db.commit()
    logger.info(f"Initial admin '{settings.INITIAL_ADMIN_USERNAME}' created")

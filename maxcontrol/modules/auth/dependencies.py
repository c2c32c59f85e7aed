"""
Dependencias de autenticación para FastAPI.
"""
from typing import Annotated
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt

from maxcontrol.database.database import get_db
from maxcontrol.modules.auth.models import User, UserRole
from maxcontrol.modules.auth.schemas import AuthContext
from maxcontrol.core.config import settings

# Security scheme
security = HTTPBearer()

ALL_ROLES = [UserRole.ADMIN, UserRole.SALES, UserRole.VIEWER]


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Obtener usuario actual desde token JWT.
        """
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudieron validar las credenciales",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            payload = jwt.decode(
                credentials.credentials,
                settings.APP_SECRET_STRING,
                algorithms=[settings.ALGORITHM]
            )
            user_id: str = payload.get("sub")
            if user_id is None:
                raise credentials_exception
        except jwt.PyJWTError:
            raise credentials_exception

        user = db.query(User).filter(User.id == _parse_uuid(user_id, credentials_exception)).first()

        if user is None or not user.is_active:
            raise credentials_exception

        return user

    @staticmethod
    def get_auth_context(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        db: Session = Depends(get_db)
    ) -> AuthContext:
        """
        Construir la identidad del usuario que llama a partir del token.
        """
        user = AuthDependencies.get_current_user(credentials, db)
        return AuthContext(
            user_id=user.id,
            username=user.username,
            full_name=user.full_name,
            role=user.role.value
        )

    @staticmethod
    def require_role(allowed_roles: list[UserRole]):
        """
        Dependencia para requerir roles específicos.
        """
        allowed_values = [role.value for role in allowed_roles]

        def role_checker(auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)):
            if auth_context.role.value not in allowed_values:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Se requiere uno de estos roles: {', '.join(allowed_values)}"
                )
            return auth_context
        return role_checker

    @staticmethod
    def require_admin():
        """Dependencia para requerir rol de administrador."""
        return AuthDependencies.require_role([UserRole.ADMIN])

    @staticmethod
    def require_seller():
        """Dependencia para roles que pueden escribir cotizaciones y clientes."""
        return AuthDependencies.require_role([UserRole.ADMIN, UserRole.SALES])

    @staticmethod
    def require_any_role():
        """Dependencia que requiere cualquier usuario autenticado."""
        return AuthDependencies.require_role(ALL_ROLES)


def _parse_uuid(value: str, error: HTTPException) -> UUID:
    try:
        return UUID(value)
    except (ValueError, TypeError):
        raise error


# Instancias de dependencias
get_current_user = AuthDependencies.get_current_user
get_auth_context = AuthDependencies.get_auth_context
require_admin = AuthDependencies.require_admin
require_seller = AuthDependencies.require_seller
require_any_role = AuthDependencies.require_any_role

CurrentUser = Annotated[User, Depends(get_current_user)]

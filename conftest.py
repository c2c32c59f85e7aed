"""
Fixtures compartidas para los tests de todos los módulos

Base SQLite en memoria (una por test), cliente HTTP con get_db sobrescrito,
usuarios de cada rol con sus headers de autenticación e información de empresa.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from maxcontrol.main import app
from maxcontrol.database.database import Base, get_db
from maxcontrol.modules.auth.models import User, UserRole
from maxcontrol.modules.auth.schemas import AuthContext
from maxcontrol.modules.auth.utils import hash_password, create_access_token
from maxcontrol.modules.company.models import CompanyInfo, COMPANY_INFO_ID

TEST_PASSWORD = "secret123"

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db_session, username: str, full_name: str, role: UserRole) -> User:
    user = User(
        username=username,
        full_name=full_name,
        password=hash_password(TEST_PASSWORD),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "username": user.username, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db_session):
    return _create_user(db_session, "admin", "Administrador", UserRole.ADMIN)


@pytest.fixture
def sales_user(db_session):
    return _create_user(db_session, "vendedor", "Carla Vendedora", UserRole.SALES)


@pytest.fixture
def viewer_user(db_session):
    return _create_user(db_session, "consulta", "Usuario Consulta", UserRole.VIEWER)


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def sales_headers(sales_user):
    return _headers(sales_user)


@pytest.fixture
def viewer_headers(viewer_user):
    return _headers(viewer_user)


@pytest.fixture
def sales_context(sales_user):
    return AuthContext(
        user_id=sales_user.id,
        username=sales_user.username,
        full_name=sales_user.full_name,
        role=sales_user.role.value,
    )


@pytest.fixture
def company_info(db_session):
    info = CompanyInfo(
        id=COMPANY_INFO_ID,
        name="Vidraçaria Max",
        address="Rua das Flores, 100",
        phone="(11) 98888-7777",
        email="contato@max.com.br",
        cnpj="11.222.333/0001-81",
    )
    db_session.add(info)
    db_session.commit()
    db_session.refresh(info)
    return info


@pytest.fixture
def user_password():
    return TEST_PASSWORD

"""
Fixtures compartidos para los tests

La base de datos de pruebas es sqlite en memoria; las variables de entorno
se fijan antes de importar la aplicación para que Settings las lea.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.database.database import Base, SessionLocal, engine, get_db
from app.main import app


@pytest.fixture
def db_session():
    """Sesión sobre un esquema recién creado; se destruye al terminar"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Cliente HTTP cuyas dependencias de BD usan la sesión de pruebas"""
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

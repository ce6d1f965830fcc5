from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storeledger.app.db.base import Base
from storeledger.app.db.models import models_v1  # noqa: F401  (register tables)
from storeledger.app.db.models.models_v1 import BomLine, Material, Project
from storeledger.app.schemas.movements import InwardCreate, InwardLineCreate
from storeledger.services.inward import register_inward


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Session on a private in-memory SQLite database.

    Schema is created per test and thrown away afterwards, so commits made
    by the services under test never leak between tests.
    """
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_project(db_session):
    def _make(code: str = "PRJ-A", name: str | None = None) -> Project:
        project = Project(code=code, name=name or f"Project {code}")
        db_session.add(project)
        db_session.commit()
        return project

    return _make


@pytest.fixture
def make_material(db_session):
    def _make(code: str = "MAT-M", unit: str = "nos") -> Material:
        material = Material(
            code=code,
            name=f"Material {code}",
            unit=unit,
            ordered_qty=Decimal("0"),
            received_qty=Decimal("0"),
            utilized_qty=Decimal("0"),
            balance_qty=Decimal("0"),
        )
        db_session.add(material)
        db_session.commit()
        return material

    return _make


@pytest.fixture
def allocate(db_session):
    def _allocate(project: Project, material: Material, quantity) -> BomLine:
        line = BomLine(project_id=project.id, material_id=material.id, quantity=Decimal(str(quantity)))
        db_session.add(line)
        db_session.commit()
        return line

    return _allocate


@pytest.fixture
def receive(db_session):
    """Books a plain SUPPLY receipt and fails the test if it is rejected."""

    def _receive(project: Project, material: Material, received, ordered=0):
        result = register_inward(
            db_session,
            InwardCreate(
                project_id=project.id,
                lines=[
                    InwardLineCreate(
                        material_id=material.id,
                        ordered_qty=Decimal(str(ordered)),
                        received_qty=Decimal(str(received)),
                    )
                ],
            ),
        )
        assert result.ok, result.error
        return result.value

    return _receive


@pytest.fixture
def project(make_project):
    return make_project("PRJ-A", "Alpha Substation")


@pytest.fixture
def material(make_material):
    return make_material("MAT-M", "nos")

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")  # keep app import off the real database

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.security import create_access_token
from app.db.base import Base
from app.main import app
from app.models.hierarchy import DegreeProgram, Department, Faculty, Module
from app.models.user import AdminType, User, UserRole


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def seed_university(db) -> SimpleNamespace:
    """Two faculties, three departments, one degree program with two modules, and staff/students."""
    computing = Faculty(name="Faculty of Computing")
    science = Faculty(name="Faculty of Science")
    db.add_all([computing, science])
    db.flush()

    computer_science = Department(name="Computer Science", faculty_id=computing.id)
    software = Department(name="Software Engineering", faculty_id=computing.id)
    mathematics = Department(name="Mathematics", faculty_id=science.id)
    db.add_all([computer_science, software, mathematics])
    db.flush()

    bsc_cs = DegreeProgram(name="BSc Computer Science", department_id=computer_science.id)
    db.add(bsc_cs)
    db.flush()

    ada = User(
        name="Ada Lovelace",
        email="ada@uni.example.com",
        role=UserRole.lecturer,
        department_id=computer_science.id,
    )
    grace = User(
        name="Grace Hopper",
        email="grace@uni.example.com",
        role=UserRole.lecturer,
        department_id=software.id,
    )
    carl = User(
        name="Carl Gauss",
        email="gauss@uni.example.com",
        role=UserRole.lecturer,
        department_id=mathematics.id,
    )
    retired = User(
        name="Alan Retired",
        email="alan@uni.example.com",
        role=UserRole.lecturer,
        department_id=computer_science.id,
        is_active=False,
    )
    student = User(
        name="Sam Student",
        email="sam@uni.example.com",
        role=UserRole.student,
        department_id=computer_science.id,
        degree_program_id=bsc_cs.id,
    )
    unassigned_student = User(
        name="Una Assigned",
        email="una@uni.example.com",
        role=UserRole.student,
    )
    officer = User(
        name="Olive Officer",
        email="officer@uni.example.com",
        role=UserRole.admin,
        admin_type=AdminType.medical_officer,
    )
    super_admin = User(
        name="Sid Super",
        email="super@uni.example.com",
        role=UserRole.admin,
        admin_type=AdminType.super_admin,
    )
    exam_admin = User(
        name="Eve Exams",
        email="exams@uni.example.com",
        role=UserRole.admin,
        admin_type=AdminType.exam_admin,
    )
    db.add_all([ada, grace, carl, retired, student, unassigned_student, officer, super_admin, exam_admin])
    db.flush()

    algorithms = Module(code="CS201", name="Algorithms", degree_program_id=bsc_cs.id, leader_id=ada.id)
    databases = Module(code="CS202", name="Databases", degree_program_id=bsc_cs.id, leader_id=ada.id)
    calculus = Module(code="MA101", name="Calculus", leader_id=carl.id)
    db.add_all([algorithms, databases, calculus])
    db.commit()

    return SimpleNamespace(
        computing_id=computing.id,
        science_id=science.id,
        computer_science_id=computer_science.id,
        software_id=software.id,
        mathematics_id=mathematics.id,
        degree_id=bsc_cs.id,
        ada_id=ada.id,
        grace_id=grace.id,
        carl_id=carl.id,
        retired_id=retired.id,
        student_id=student.id,
        unassigned_student_id=unassigned_student.id,
        officer_id=officer.id,
        super_admin_id=super_admin.id,
        exam_admin_id=exam_admin.id,
        algorithms_id=algorithms.id,
        databases_id=databases.id,
        calculus_id=calculus.id,
    )


@pytest.fixture()
def university(db_session) -> SimpleNamespace:
    return seed_university(db_session)


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture()
def headers():
    return auth_headers

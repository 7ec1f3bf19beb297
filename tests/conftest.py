import os

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['JWT_SECRET_KEY'] = 'test-secret'

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cuahquick import crud  # noqa: E402
from cuahquick.auth import jwt_handler  # noqa: E402
from cuahquick.database import Base, SessionLocal, engine  # noqa: E402
from cuahquick.main import app  # noqa: E402
from cuahquick.models import order, product, user  # noqa: E402,F401


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {'value': 0}

    def _make_user(role: str = 'client', **overrides):
        counter['value'] += 1
        number = 30000 + counter['value']
        fields = {
            'full_name': f'User {number}',
            'email': f'user{number}@ucq.edu.mx',
            'password': 'p@ss1234',
            'phone': '4420000000',
            'student_id': str(number),
            'role': role,
        }
        fields.update(overrides)
        return crud.create_user(db, **fields)

    return _make_user


def bearer(user_obj) -> dict:
    token = jwt_handler.create_access_token(user_id=user_obj.id, role=user_obj.role, email=user_obj.email)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers():
    return bearer

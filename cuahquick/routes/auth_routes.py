import logging
import re

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cuahquick import crud
from cuahquick.auth import jwt_handler
from cuahquick.auth.dependencies import get_current_claims
from cuahquick.auth.jwt_handler import SessionClaims
from cuahquick.auth.passwords import verify_password
from cuahquick.core import config
from cuahquick.core.errors import (
    DuplicateUser,
    InternalError,
    InvalidCredentials,
    InvalidDomain,
    InvalidToken,
    MissingFields,
    MissingStudentIdInEmail,
    StudentIdMismatch,
)
from cuahquick.database import get_db
from cuahquick.models.user import ROLE_CLIENT

logger = logging.getLogger(__name__)

router = APIRouter(tags=['auth'])

TRAILING_DIGITS = re.compile(r'([0-9]+)\Z')


class RegisterRequest(BaseModel):
    full_name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    student_id: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def extract_student_id_from_email(email: str) -> str | None:
    """Return the digits that end the local part of ``email``, if any."""
    local_part = email.split('@', 1)[0]
    match = TRAILING_DIGITS.search(local_part)
    return match.group(1) if match else None


def validate_registration(data: RegisterRequest) -> None:
    fields = (data.full_name, data.email, data.password, data.phone, data.student_id)
    if any(is_blank(value) for value in fields):
        raise MissingFields('All fields are required, including the student ID.')

    domain = config.INSTITUTIONAL_EMAIL_DOMAIN
    if not data.email.lower().endswith(domain):
        raise InvalidDomain(f'Registration is only allowed for email addresses ending in {domain}.')

    email_student_id = extract_student_id_from_email(data.email)
    if email_student_id is None:
        raise MissingStudentIdInEmail()
    if email_student_id != data.student_id:
        raise StudentIdMismatch()


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    validate_registration(data)

    try:
        user = crud.create_user(
            db,
            full_name=data.full_name,
            email=data.email,
            password=data.password,
            phone=data.phone,
            student_id=data.student_id,
            role=ROLE_CLIENT,
        )
    except crud.UniqueViolation as exc:
        logger.info('Registration rejected, duplicate %s', exc.field or 'user')
        raise DuplicateUser() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Registration failed')
        raise InternalError() from exc

    token = jwt_handler.create_access_token(user_id=user.id, role=user.role, email=user.email)
    return {
        'message': 'Registration successful.',
        'token': token,
        'user': crud.public_user(user),
    }


@router.post('/login')
def login(data: LoginRequest, db: Session = Depends(get_db)):
    if is_blank(data.email) or is_blank(data.password):
        raise MissingFields('Email and password are required.')

    try:
        user = crud.get_user_by_email(db, data.email)
    except SQLAlchemyError as exc:
        logger.exception('Login lookup failed')
        raise InternalError() from exc

    if user is None or not verify_password(data.password, user.password_hash):
        logger.info('Login failed for %s', data.email)
        raise InvalidCredentials()

    token = jwt_handler.create_access_token(user_id=user.id, role=user.role, email=user.email)
    return {
        'message': 'Login successful.',
        'token': token,
        'user': crud.public_user(user, include_student_id=False),
    }


@router.get('/me')
def me(claims: SessionClaims = Depends(get_current_claims), db: Session = Depends(get_db)):
    try:
        user = crud.get_user_by_id(db, claims.id)
    except SQLAlchemyError as exc:
        logger.exception('Profile lookup failed')
        raise InternalError() from exc

    if user is None:
        logger.info('Token refers to missing user %s', claims.id)
        raise InvalidToken()
    return {'user': crud.public_user(user)}

import pytest

from cuahquick.auth import jwt_handler
from cuahquick.core.errors import (
    DuplicateUser,
    InvalidCredentials,
    InvalidDomain,
    MissingFields,
    MissingStudentIdInEmail,
    StudentIdMismatch,
)
from cuahquick.models.user import User
from cuahquick.routes.auth_routes import (
    LoginRequest,
    RegisterRequest,
    extract_student_id_from_email,
    login,
    register,
    validate_registration,
)

ANA = {
    'full_name': 'Ana Ruiz',
    'email': 'aruiz20045@ucq.edu.mx',
    'password': 'p@ss1234',
    'phone': '4421234567',
    'student_id': '20045',
}


def _register_request(**overrides) -> RegisterRequest:
    return RegisterRequest(**{**ANA, **overrides})


@pytest.mark.parametrize(
    ('email', 'expected'),
    [
        ('aruiz20045@ucq.edu.mx', '20045'),
        ('a1b2c345@ucq.edu.mx', '345'),
        ('007@ucq.edu.mx', '007'),
        ('aruiz@ucq.edu.mx', None),
        ('20045aruiz@ucq.edu.mx', None),
    ],
)
def test_extract_student_id_from_email(email: str, expected: str | None) -> None:
    assert extract_student_id_from_email(email) == expected


@pytest.mark.parametrize('missing_field', ['full_name', 'email', 'password', 'phone', 'student_id'])
def test_validate_registration_requires_every_field(missing_field: str) -> None:
    with pytest.raises(MissingFields):
        validate_registration(_register_request(**{missing_field: None}))


def test_validate_registration_treats_blank_strings_as_missing() -> None:
    with pytest.raises(MissingFields):
        validate_registration(_register_request(phone='   '))


@pytest.mark.parametrize('email', ['aruiz20045@gmail.com', 'aruiz20045@ucq.edu.mx.evil.com', 'aruiz20045@ucq.edu'])
def test_validate_registration_rejects_non_institutional_domain(email: str) -> None:
    with pytest.raises(InvalidDomain):
        validate_registration(_register_request(email=email))


def test_validate_registration_accepts_uppercase_domain() -> None:
    validate_registration(_register_request(email='aruiz20045@UCQ.EDU.MX'))


def test_validate_registration_requires_digits_in_local_part() -> None:
    with pytest.raises(MissingStudentIdInEmail):
        validate_registration(_register_request(email='aruiz@ucq.edu.mx'))


@pytest.mark.parametrize('student_id', ['20046', '020045', '2004', ' 20045'])
def test_validate_registration_rejects_student_id_mismatch(student_id: str) -> None:
    with pytest.raises(StudentIdMismatch):
        validate_registration(_register_request(student_id=student_id))


def test_validate_registration_checks_domain_before_student_id() -> None:
    with pytest.raises(InvalidDomain):
        validate_registration(_register_request(email='aruiz@gmail.com', student_id='1'))


def test_register_creates_client_user_and_token(db) -> None:
    response = register(data=_register_request(), db=db)

    assert response['message'] == 'Registration successful.'
    assert response['user']['full_name'] == 'Ana Ruiz'
    assert response['user']['email'] == 'aruiz20045@ucq.edu.mx'
    assert response['user']['role'] == 'client'
    assert response['user']['student_id'] == '20045'
    assert 'password_hash' not in response['user']

    claims = jwt_handler.verify_access_token(response['token']).claims
    assert claims.id == response['user']['id']
    assert claims.role == 'client'

    stored = db.query(User).filter(User.email == ANA['email']).one()
    assert stored.password_hash != ANA['password']
    assert stored.password_hash.startswith('$2b$10$')


def test_register_ignores_role_in_payload(client) -> None:
    response = client.post('/api/register', json={**ANA, 'role': 'shop'})

    assert response.status_code == 201
    assert response.json()['user']['role'] == 'client'


def test_register_twice_with_same_email_is_duplicate(client) -> None:
    first = client.post('/api/register', json=ANA)
    second = client.post('/api/register', json=ANA)

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()['error'] == 'DuplicateUser'


def test_register_duplicate_student_id_uses_same_message(db, make_user) -> None:
    make_user(email='other20045@ucq.edu.mx', student_id='20045')

    with pytest.raises(DuplicateUser) as exception_info:
        register(data=_register_request(), db=db)

    assert exception_info.value.message == DuplicateUser.message


def test_register_endpoint_reports_validation_errors(client) -> None:
    response = client.post('/api/register', json={**ANA, 'email': 'aruiz@ucq.edu.mx'})

    assert response.status_code == 400
    assert response.json()['error'] == 'MissingStudentIdInEmail'


def test_login_returns_token_and_public_user(db, make_user) -> None:
    user = make_user(email='luis30100@ucq.edu.mx', student_id='30100')

    response = login(data=LoginRequest(email='luis30100@ucq.edu.mx', password='p@ss1234'), db=db)

    assert response['user'] == {
        'id': user.id,
        'full_name': user.full_name,
        'email': 'luis30100@ucq.edu.mx',
        'role': 'client',
    }
    claims = jwt_handler.verify_access_token(response['token']).claims
    assert claims.id == user.id
    assert claims.email == 'luis30100@ucq.edu.mx'


def test_login_requires_email_and_password(db) -> None:
    with pytest.raises(MissingFields):
        login(data=LoginRequest(email='luis30100@ucq.edu.mx'), db=db)


def test_login_wrong_password_and_unknown_email_are_indistinguishable(client, make_user) -> None:
    make_user(email='luis30100@ucq.edu.mx', student_id='30100')

    wrong_password = client.post('/api/login', json={'email': 'luis30100@ucq.edu.mx', 'password': 'nope'})
    unknown_email = client.post('/api/login', json={'email': 'nobody1@ucq.edu.mx', 'password': 'p@ss1234'})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()['error'] == InvalidCredentials.code


def test_me_returns_current_user(client, make_user, auth_headers) -> None:
    user = make_user()

    response = client.get('/api/me', headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()['user']['id'] == user.id


def test_me_rejects_token_for_missing_user(client) -> None:
    token = jwt_handler.create_access_token(user_id=999, role='client')

    response = client.get('/api/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.json()['error'] == 'InvalidToken'

"""Database access for users, orders and products.

Handlers call these helpers instead of touching the session directly, so
driver specific failures (duplicate keys in particular) surface as
``UniqueViolation`` no matter which database is behind ``DATABASE_URL``.
"""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cuahquick.auth.passwords import hash_password
from cuahquick.models.order import ACTIVE_ORDER_STATUSES, STATUS_PENDING, Order
from cuahquick.models.product import Product
from cuahquick.models.user import ROLE_CLIENT, User

UNIQUE_USER_FIELDS = ('student_id', 'email')


class UniqueViolation(Exception):
    def __init__(self, field: str | None = None):
        super().__init__(f'Unique constraint violated on {field or "unknown field"}')
        self.field = field


def _violated_field(exc: IntegrityError, candidates: tuple[str, ...]) -> str | None:
    detail = str(exc.orig).lower()
    for field in candidates:
        if field in detail:
            return field
    return None


def public_user(user: User, include_student_id: bool = True) -> dict:
    data = {
        'id': user.id,
        'full_name': user.full_name,
        'email': user.email,
        'role': user.role,
    }
    if include_student_id:
        data['student_id'] = user.student_id
    return data


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(
    db: Session,
    *,
    full_name: str,
    email: str,
    password: str,
    phone: str,
    student_id: str | None = None,
    role: str = ROLE_CLIENT,
) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(password),
        phone=phone,
        role=role,
        student_id=student_id,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UniqueViolation(_violated_field(exc, UNIQUE_USER_FIELDS)) from exc
    db.refresh(user)
    return user


def create_order(
    db: Session,
    *,
    user_id: int,
    shop_id: int,
    total_amount: Decimal,
    building: str,
    classroom: str,
    delivery_notes: str | None = None,
) -> Order:
    order = Order(
        user_id=user_id,
        shop_id=shop_id,
        total_amount=total_amount,
        building=building,
        classroom=classroom,
        delivery_notes=delivery_notes or '',
        status=STATUS_PENDING,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def list_active_orders(db: Session) -> list[dict]:
    rows = (
        db.query(
            Order.id,
            Order.status,
            Order.total_amount,
            Order.created_at,
            User.full_name.label('client_name'),
            User.phone.label('client_phone'),
            Order.building,
            Order.classroom,
            Order.delivery_notes,
        )
        .join(User, Order.user_id == User.id)
        .filter(Order.status.in_(ACTIVE_ORDER_STATUSES))
        .order_by(Order.created_at.asc(), Order.id.asc())
        .all()
    )
    return [dict(row._mapping) for row in rows]


def get_order(db: Session, order_id: int) -> Order | None:
    return db.query(Order).filter(Order.id == order_id).first()


def update_order_status(db: Session, order_id: int, new_status: str) -> bool:
    """Set the status of ``order_id``; returns False when no row matched."""
    updated = (
        db.query(Order)
        .filter(Order.id == order_id)
        .update({Order.status: new_status}, synchronize_session=False)
    )
    db.commit()
    return updated > 0


def list_available_products(db: Session) -> list[Product]:
    return (
        db.query(Product)
        .filter(Product.is_available.is_(True))
        .order_by(Product.category.asc(), Product.name.asc())
        .all()
    )


def seed_products(db: Session, products: list[dict]) -> int:
    if db.query(Product.id).first() is not None:
        return 0
    db.add_all([Product(**product) for product in products])
    db.commit()
    return len(products)

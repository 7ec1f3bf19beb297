import logging
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cuahquick import crud
from cuahquick.auth.dependencies import require_role
from cuahquick.auth.jwt_handler import SessionClaims
from cuahquick.core import config
from cuahquick.core.errors import InternalError, InvalidStatus, InvalidStatusTransition, OrderNotFound
from cuahquick.database import get_db
from cuahquick.models.order import (
    STATUS_CANCELLED,
    STATUS_DELIVERED,
    STATUS_PENDING,
    STATUS_PREPARING,
    STATUS_READY,
)
from cuahquick.models.user import ROLE_SHOP

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/shop', tags=['shop'])

require_shop = require_role(ROLE_SHOP)

UPDATABLE_STATUSES = (STATUS_PREPARING, STATUS_READY, STATUS_DELIVERED, STATUS_CANCELLED)
ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_PREPARING, STATUS_CANCELLED},
    STATUS_PREPARING: {STATUS_READY, STATUS_CANCELLED},
    STATUS_READY: {STATUS_DELIVERED, STATUS_CANCELLED},
    STATUS_DELIVERED: set(),
    STATUS_CANCELLED: set(),
}


class ShopOrderResponse(BaseModel):
    id: int
    status: str
    total_amount: Decimal
    created_at: datetime | None = None
    client_name: str
    client_phone: str
    building: str
    classroom: str
    delivery_notes: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str | None = None


def is_transition_allowed(current_status: str, new_status: str) -> bool:
    return new_status in ALLOWED_TRANSITIONS.get(current_status, set())


@router.get('/orders')
def list_shop_orders(
    claims: SessionClaims = Depends(require_shop),
    db: Session = Depends(get_db),
):
    try:
        rows = crud.list_active_orders(db)
    except SQLAlchemyError as exc:
        logger.exception('Listing shop orders failed')
        raise InternalError('Internal server error while fetching orders.') from exc

    return {
        'message': 'Pending orders fetched successfully.',
        'orders': [ShopOrderResponse(**row).model_dump(mode='json') for row in rows],
    }


@router.put('/orders/{order_id}')
def update_shop_order_status(
    order_id: int,
    data: UpdateOrderStatusRequest,
    claims: SessionClaims = Depends(require_shop),
    db: Session = Depends(get_db),
):
    new_status = data.status
    if new_status not in UPDATABLE_STATUSES:
        raise InvalidStatus(f'Invalid status. Allowed values: {", ".join(UPDATABLE_STATUSES)}.')

    try:
        if config.ORDER_ENFORCE_TRANSITIONS:
            order = crud.get_order(db, order_id)
            if order is None:
                raise OrderNotFound()
            if not is_transition_allowed(order.status, new_status):
                raise InvalidStatusTransition(
                    f'An order cannot move from {order.status} to {new_status}.'
                )

        if not crud.update_order_status(db, order_id, new_status):
            raise OrderNotFound()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Updating order %s failed', order_id)
        raise InternalError('Internal server error while updating the order.') from exc

    logger.info('Order %s set to %s by shop user %s', order_id, new_status, claims.id)
    return {
        'message': 'Order status updated successfully.',
        'order_id': order_id,
        'status': new_status,
    }

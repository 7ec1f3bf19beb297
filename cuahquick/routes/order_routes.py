import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cuahquick import crud
from cuahquick.auth.dependencies import get_current_claims
from cuahquick.auth.jwt_handler import SessionClaims
from cuahquick.core.errors import InternalError, MissingFields
from cuahquick.database import get_db
from cuahquick.routes.auth_routes import is_blank

logger = logging.getLogger(__name__)

router = APIRouter(tags=['orders'])


class CreateOrderRequest(BaseModel):
    shop_id: int | None = None
    total_amount: Decimal | None = None
    building: str | None = None
    classroom: str | None = None
    delivery_notes: str | None = None


@router.post('/orders', status_code=status.HTTP_201_CREATED)
def create_order(
    data: CreateOrderRequest,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    # Zero amounts and shop ids count as missing, same as empty strings.
    if not data.shop_id or not data.total_amount or is_blank(data.building) or is_blank(data.classroom):
        raise MissingFields('Required order fields are missing.')

    try:
        order = crud.create_order(
            db,
            user_id=claims.id,
            shop_id=data.shop_id,
            total_amount=data.total_amount,
            building=data.building,
            classroom=data.classroom,
            delivery_notes=data.delivery_notes,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Order creation failed for user %s', claims.id)
        raise InternalError('Internal server error while processing the order.') from exc

    logger.info('Order %s created by user %s', order.id, claims.id)
    return {
        'message': 'Order created successfully.',
        'order_id': order.id,
    }

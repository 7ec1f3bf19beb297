import logging
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cuahquick import crud
from cuahquick.core.errors import InternalError
from cuahquick.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=['products'])


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    category: str

    class Config:
        from_attributes = True


@router.get('/products')
def list_products(db: Session = Depends(get_db)):
    try:
        products = crud.list_available_products(db)
    except SQLAlchemyError as exc:
        logger.exception('Listing products failed')
        raise InternalError() from exc

    return {
        'message': 'Products fetched successfully.',
        'products': [ProductResponse.model_validate(product).model_dump(mode='json') for product in products],
    }


@router.get('/menu')
def list_menu(db: Session = Depends(get_db)):
    return list_products(db=db)

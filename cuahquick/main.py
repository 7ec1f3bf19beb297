import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from cuahquick.core import config
from cuahquick.core.errors import register_error_handlers
from cuahquick.database import init_db, shutdown_db
from cuahquick.routes import auth_routes, order_routes, product_routes, shop_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.validate_runtime_config()
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')
    logger.info('Cuah-Quick API started')

    yield

    shutdown_db()
    logger.info('Cuah-Quick API stopped')


app = FastAPI(title='Cuah-Quick API', lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['GET', 'HEAD', 'PUT', 'PATCH', 'POST', 'DELETE'],
    allow_headers=['*'],
)

register_error_handlers(app)


@app.get('/')
def root():
    return {'status': 'Cuah-Quick API Running'}


app.include_router(auth_routes.router, prefix='/api')
app.include_router(order_routes.router, prefix='/api')
app.include_router(shop_routes.router, prefix='/api')
app.include_router(product_routes.router, prefix='/api')


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('cuahquick.main:app', host='0.0.0.0', port=config.PORT)

import logging
from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI

from storefront.config import settings
from storefront.database import engine
from storefront.infrastructure.db_schema import metadata
from storefront.presentation.api import router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    if settings.CREATE_TABLES_ON_STARTUP:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
            logger.info("Таблицы созданы")
        except Exception as e:
            logger.error(f"Не удалось создать таблицы: {e}")
            raise

    yield

    logger.info("Приложение останавливается...")
    await engine.dispose()


app = FastAPI(
    title="Storefront Order Service",
    description="Сервис заказов интернет-магазина",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Storefront Order Service работает"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


def run():
    """Запуск API через uvicorn"""
    logger.info(f"Запуск сервера на {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "storefront.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=1,  # счетчик номеров заказов живет в памяти процесса
    )


if __name__ == "__main__":
    run()

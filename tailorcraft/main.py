# tailorcraft/main.py
# Точка входа FastAPI. Таблицы создаются (и при необходимости заполняются
# демо-данными) в lifespan с повторными попытками.

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tailorcraft.core.config import settings
from tailorcraft.core.errors import AppError
from tailorcraft.db.base import Base
from tailorcraft.db.seed import seed_demo_data
from tailorcraft.db.session import SessionLocal, engine

# Импорт моделей, чтобы SQLAlchemy видел их определения
import tailorcraft.models.user
import tailorcraft.models.product
import tailorcraft.models.worker
import tailorcraft.models.order
import tailorcraft.models.order_event

from tailorcraft.api import admin as admin_router
from tailorcraft.api import auth as auth_router
from tailorcraft.api import catalog as catalog_router
from tailorcraft.api import orders as orders_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def try_create_tables(retries: int = 5, delay: int = 2) -> bool:
    """
    Пытаемся создать таблицы с повторными попытками.
    Если БД недоступна, логируем ошибку и пробуем снова.

    Args:
        retries: Количество попыток подключения
        delay: Задержка между попытками в секундах

    Returns:
        True если таблицы созданы/существуют, False если все попытки исчерпаны
    """
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Creating tables ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("✅ Database tables created (or already exist).")
            return True
        except Exception as e:
            logger.warning(f"❌ Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"⏳ Waiting {delay}s before retry...")
                time.sleep(delay)
    logger.error(f"❌ Could not create tables after {retries} retries.")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения."""
    logger.info("🚀 TailorCraft API starting up...")
    if not try_create_tables(retries=5, delay=2):
        if settings.ENVIRONMENT in ("production", "prod"):
            raise RuntimeError("Cannot start application: database tables creation failed")
        logger.error("⚠️ Failed to create database tables. Application may not work correctly.")
    elif settings.SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_demo_data(db)
        finally:
            db.close()

    yield

    logger.info("🛑 TailorCraft API shutting down...")
    engine.dispose()


app = FastAPI(
    title="TailorCraft API",
    description="Каталог, оформление заказов и производственный цикл ателье",
    version="1.0.0",
    lifespan=lifespan
)

# CORS: в разработке открыт для всех, в продакшене ограничить доменами
if settings.ENVIRONMENT == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["https://tailorcraft.com"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )

app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
app.include_router(catalog_router.router, prefix="/api", tags=["catalog"])
app.include_router(orders_router.router, prefix="/api/orders", tags=["orders"])
app.include_router(admin_router.router, prefix="/api/admin", tags=["admin"])


@app.get("/", tags=["health"])
async def root():
    """Базовый health check."""
    return {
        "status": "ok",
        "service": "TailorCraft API",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["health"])
async def health():
    return {"status": "healthy", "version": "1.0.0"}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Доменные ошибки -> HTTP-код, заданный на классе исключения."""
    body = {"error": type(exc).__name__, "detail": exc.message}
    if exc.field:
        body["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Ошибки схемы запроса отдаём как 400 с указанием поля."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "detail": first.get("msg", "Invalid request"),
            "field": field,
            "errors": [{"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]} for e in errors],
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Глобальный обработчик непредвиденных ошибок."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalError",
            "detail": str(exc) if settings.ENVIRONMENT == "development" else "An error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tailorcraft.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )

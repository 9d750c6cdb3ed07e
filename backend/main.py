# backend/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import Database
from utils.errors import AppError, InternalError

# Routers
from routes.auth import router as auth_router
from routes.cakes import router as cakes_router
from routes.cart import router as cart_router
from routes.orders import router as orders_router
from routes.admin import router as admin_router
from routes.contact import router as contact_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    # Malformed bodies are client errors (400), not 422
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid input"))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": message, "errors": jsonable_errors(errors)},
        )

    # Per-request boundary: log the traceback, never leak the raw error
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = InternalError()
        return JSONResponse(status_code=error.status_code, content={"detail": error.message})


def jsonable_errors(errors):
    # ctx may hold exception instances that JSON cannot encode
    return [{k: v for k, v in e.items() if k in ("loc", "msg", "type")} for e in errors]


def create_app(database: Optional[Database] = None) -> FastAPI:
    if database is None:
        database = Database(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        logger.info("Cake Shop API started")
        yield
        database.dispose()

    app = FastAPI(title="Cake Shop API", version="1.0.0", lifespan=lifespan)
    app.state.db = database

    # CORS Configuration
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
        origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    _register_error_handlers(app)

    # Register routers under /api
    for router in (auth_router, cakes_router, cart_router, orders_router, admin_router, contact_router):
        app.include_router(router, prefix="/api")

    @app.get("/")
    def read_root():
        return {"message": "Cake Shop API is running!"}

    return app


configure_logging()
app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

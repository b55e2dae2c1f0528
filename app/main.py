from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from app.api import auth, availability, bookings, users
from app.core.config import settings
from app.core.config_loader import load_company_config
from app.core.errors import BookingAppError
from app.core.logger import setup_logging, logger
from app.services.db_service import Database, UserStore
from app.services.user_service import UserService

setup_logging()

def create_app(
    database: Optional[Database] = None,
    company_config: Optional[Dict[str, Any]] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    """
    Builds the application. ``database`` and ``company_config`` are created from
    settings at startup when not given.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("🚀 Starting Appointment Booking Backend")
        owns_db = app.state.db is None
        if owns_db:
            app.state.db = Database(settings.DATABASE_URL)
        if app.state.company_config is None:
            app.state.company_config = load_company_config()

        app.state.db.init_schema()
        await UserService(UserStore(app.state.db)).ensure_superadmin(
            settings.SUPERADMIN_NAME, settings.SUPERADMIN_PASSWORD
        )
        yield
        # Shutdown
        if owns_db:
            app.state.db.dispose()
            app.state.db = None
        logger.info("🛑 Shutting down backend")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.db = database
    app.state.company_config = company_config
    app.state.clock = clock
    app.state.page_size = settings.PAGE_SIZE

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE,
        max_age=settings.SESSION_MAX_AGE,
        https_only=settings.ENVIRONMENT == "production",
    )

    @app.exception_handler(BookingAppError)
    async def booking_error_handler(request: Request, exc: BookingAppError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"message": message})

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
        )

    # Include routers
    app.include_router(bookings.router, prefix=settings.API_V1_STR, tags=["Bookings"])
    app.include_router(availability.router, prefix=settings.API_V1_STR, tags=["Availability"])
    app.include_router(auth.router, prefix=settings.API_V1_STR, tags=["Auth"])
    app.include_router(users.router, prefix=settings.API_V1_STR, tags=["Users"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=True)

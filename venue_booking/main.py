import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as SchemaValidationError
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import RedirectResponse

from . import config
from .database import Base, SessionLocal, engine
from .dependencies import LoginRequired
from .domain.errors import DomainError
from .routes import routers
from .services import UserService
from .stores import SqlUserStore
from .web import error_message, render, status_for

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def seed_default_admin() -> None:
    db = SessionLocal()
    try:
        UserService(SqlUserStore(db)).ensure_default_admin(
            config.DEFAULT_ADMIN_USERNAME,
            config.DEFAULT_ADMIN_EMAIL,
            config.DEFAULT_ADMIN_PASSWORD,
        )
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Venue booking starting up")
    Base.metadata.create_all(bind=engine)
    seed_default_admin()
    yield
    logger.info("Venue booking shutting down")


config.STATIC_DIR.mkdir(parents=True, exist_ok=True)
config.IMAGE_DIR.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="Venue Booking", lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=config.SECRET_KEY)
app.mount("/static", StaticFiles(directory=str(config.STATIC_DIR)), name="static")

for router in routers:
    app.include_router(router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(url="/login", status_code=303)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = status_for(exc)
    logger.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc)
    return render(request, "error.html", {"message": error_message(exc)}, status_code=status_code)


@app.exception_handler(SchemaValidationError)
async def schema_error_handler(request: Request, exc: SchemaValidationError):
    return render(request, "error.html", {"message": error_message(exc)}, status_code=400)


@app.exception_handler(Exception)
async def internal_server_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # The failed request may have left the session user expired and detached.
    context = {"message": "Internal Server Error", "current_user": None}
    return render(request, "error.html", context, status_code=500)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("venue_booking.main:app", host="0.0.0.0", port=8000)

"""
HotelDesk application entry point
Front-desk service: rooms, guests, reservations, owners, promo codes,
invoices, transactions and settings
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hoteldesk import __version__
from hoteldesk.config import settings
from hoteldesk.database import init_db, SessionLocal
from hoteldesk.models.schemas import validation_message
from hoteldesk.routers import (
    auth, admin, rooms, guests, reservations, owners, promo_codes, transactions, invoices, tax
)
from hoteldesk.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the first admin"""
    configure_logging()
    init_db()

    db = SessionLocal()
    try:
        EmployeeService(db).ensure_default_admin()
    finally:
        db.close()

    logger.info("%s %s started", settings.APP_NAME, __version__)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Hotel front-desk service",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============== Error rendering ==============

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": validation_message(exc.errors())},
    )


app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(rooms.router)
app.include_router(guests.router)
app.include_router(reservations.router)
app.include_router(owners.router)
app.include_router(promo_codes.router)
app.include_router(transactions.router)
app.include_router(invoices.router)
app.include_router(tax.router)


@app.get("/")
def root():
    return {"name": settings.APP_NAME, "version": __version__, "status": "running"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}

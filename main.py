import logging
from contextlib import asynccontextmanager

from decouple import config, Csv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from legalmatters.database import SessionLocal, init_db
from legalmatters.exceptions import LegalMattersError
from legalmatters.seed import ensure_admin_user
from legalmatters.auth.routes import router as auth_router
from legalmatters.customers.routes import router as customers_router
from legalmatters.matters.routes import router as matters_router
from legalmatters.admin.routes import router as admin_router

logging.basicConfig(
    level=config("LOG_LEVEL", default="INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables and make sure the admin account exists
    init_db()
    db = SessionLocal()
    try:
        ensure_admin_user(db)
    finally:
        db.close()
    logger.info("Legal Matters API ready")
    yield


app = FastAPI(
    title="Legal Matters API",
    description="Track law firm customers and their legal matters",
    version="1.0.0",
    lifespan=lifespan,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config("CORS_ORIGINS", default="http://localhost:3000", cast=Csv()),
    allow_credentials=True,  # session cookie
    allow_methods=["*"],
    allow_headers=["*"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "same-origin"
        return response

app.add_middleware(SecurityHeadersMiddleware)


# Error responses all share the {"message": ...} shape
@app.exception_handler(LegalMattersError)
async def legal_matters_error_handler(request: Request, exc: LegalMattersError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix from the location
        location = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(location) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content={"message": "One or more validation errors occurred.", "errors": errors},
    )


# Include routers
app.include_router(auth_router)
app.include_router(customers_router)
app.include_router(matters_router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {
        "message": "Legal Matters API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check failed")
        return JSONResponse(status_code=503, content={"status": "unhealthy"})
    finally:
        db.close()
    return {"status": "healthy"}

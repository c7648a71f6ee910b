# src/app.py
import logging
import os
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi

from routes.user import router as user_router
from routes.connections import router as connections_router
from routes.social.routes import router as social_router
from routes.notifications import router as notifications_router
from routes.admin import router as admin_router

from config.db import engine
from config.settings import APP_ENV, CORS_ORIGINS, LOG_LEVEL
from model.base import Base
from src.errors import SocialError

from model import load_all_models
load_all_models()

logger = logging.getLogger(__name__)


app = FastAPI(title="Social API", version="1.0.0")

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Social API",
        version="1.0.0",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema
app.openapi = custom_openapi

logging.basicConfig(level=LOG_LEVEL)
logger.info(f"Social API starting… (env={APP_ENV})")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

app.include_router(user_router)
app.include_router(connections_router)
app.include_router(social_router)  # already has /v1/social prefix inside
app.include_router(notifications_router)
app.include_router(admin_router, prefix="/v1/admin")


# --- Exception handlers and security headers ---
@app.exception_handler(SocialError)
async def social_error_handler(request: Request, exc: SocialError):
    level = logging.WARNING if 400 <= exc.status_code < 500 else logging.ERROR
    logger.log(level, "%s %s on %s %s: %s", type(exc).__name__, exc.status_code, request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.message},
        headers=headers,
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={
        "code": "validation_error",
        "message": "Invalid request",
        "errors": jsonable_encoder(exc.errors()),
    })

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # 4xx/5xx raised intentionally in code
    level = logging.WARNING if 400 <= exc.status_code < 500 else logging.ERROR
    logger.log(level, "HTTPException %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={
        "code": "http_error",
        "message": exc.detail,
    })

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    return response


# NOTE: FastAPI recommends lifespan context for newer apps; startup event is fine for dev.
@app.on_event("startup")
def _startup():
    # No migration tool: schema is created on demand
    if os.getenv("SOCIAL_DEV_CREATE_SCHEMA") == "1":
        Base.metadata.create_all(engine)
        logger.info("DB metadata ensured via SQLAlchemy (dev mode).")
    else:
        logger.info("Skipping Base.metadata.create_all(); set SOCIAL_DEV_CREATE_SCHEMA=1 to create tables.")

# Optional quick health route
@app.get("/health")
def health():
    return {"ok": True}

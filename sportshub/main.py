from fastapi import FastAPI, Request, APIRouter, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sportshub.api.v1.routes import events as events_router, sports as sports_router, reviews as reviews_router, health as health_router
from sportshub.cache.redis_client import cache
from sportshub.core.config import settings
from sportshub.core.exceptions import AppError, ValidationError
from sportshub.core.logging import logger
from sportshub.db.session import Database
from sportshub.geo.resolver import build_geo_resolver
from sportshub.middleware.request_logging import RequestLoggingMiddleware

app = FastAPI(title="SportsHub")

app.add_middleware(RequestLoggingMiddleware)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(events_router.router)
api_router.include_router(sports_router.router)
api_router.include_router(reviews_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    body = {"success": False, "error": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = [e.model_dump() for e in exc.errors]
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Server Error"},
    )


@app.on_event("startup")
async def on_startup():
    database = Database(settings.DATABASE_URL)
    database.init()
    # create tables (simple approach; migrations live in alembic/)
    await database.create_all()
    app.state.database = database
    app.state.geo_resolver = build_geo_resolver()
    logger.info(f"SportsHub started in {settings.ENVIRONMENT} mode")


@app.on_event("shutdown")
async def on_shutdown():
    await app.state.geo_resolver.aclose()
    await app.state.database.dispose()
    cache.close()

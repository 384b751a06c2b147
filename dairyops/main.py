import fastapi
import fastapi_swagger_dark as fsd
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from dairyops.core.configs import settings
from dairyops.core.db import get_db
from dairyops.core.errors import FarmError
from dairyops.routes import (
    auth_router,
    cattle_router,
    checkup_router,
    feed_router,
    feed_stock_router,
    milk_router,
    staff_router,
    vaccination_router,
)
from dairyops.utils.logging import get_logger

logger = get_logger(__name__)

FARM_ROUTERS = (
    auth_router,
    cattle_router,
    milk_router,
    feed_router,
    feed_stock_router,
    checkup_router,
    vaccination_router,
    staff_router,
)


async def farm_error_handler(request: Request, exc: FarmError):
    route = f"{request.method} {request.url.path}"
    if exc.status_code >= 500:
        logger.error(f"{route} failed: {exc.message}")
    else:
        logger.warning(f"{route} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def bearer_openapi(app: FastAPI):
    """OpenAPI generator advertising the JWT bearer scheme on every operation."""

    def generate():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})["BearerAuth"] = {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
        schema["security"] = [{"BearerAuth": []}]
        app.openapi_schema = schema
        return schema

    return generate


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.app_name,
        description=settings.description,
        version=settings.version,
        docs_url=None,
        redoc_url=settings.redoc_url,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # dark swagger UI at /docs
    docs = fastapi.APIRouter()
    fsd.install(docs)
    application.include_router(docs)

    for farm_router in FARM_ROUTERS:
        application.include_router(farm_router)

    application.add_exception_handler(FarmError, farm_error_handler)
    application.openapi = bearer_openapi(application)
    logger.info(f"{settings.app_name} {settings.version} ready with {len(FARM_ROUTERS)} routers")
    return application


app = create_app()


@app.get("/")
async def root():
    return {
        "message": f"{settings.app_name} farm records API",
        "version": settings.version,
        "docs": settings.docs_url,
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness plus a round trip to the database."""
    db.execute(text("SELECT 1"))
    return {"status": "healthy", "service": settings.app_name, "database": "reachable"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("dairyops.main:app", host="0.0.0.0", port=8000, reload=True)

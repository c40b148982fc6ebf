"""FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.routes.age_groups import router as age_groups_router
from backend.app.api.routes.athletes import router as athletes_router
from backend.app.api.routes.auth import router as auth_router
from backend.app.api.routes.clubs import router as clubs_router
from backend.app.api.routes.disciplines import router as disciplines_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.lookups import router as lookups_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.performances import router as performances_router
from backend.app.api.routes.seasons import router as seasons_router
from backend.app.authz.errors import AccessError
from backend.app.config import get_settings
from backend.app.utils.logging import configure_logging
from backend.app.validators.errors import DomainError

configure_logging(get_settings().log_level)

app = FastAPI(title="Athletics Club API", version="0.1.0")


@app.exception_handler(AccessError)
async def access_error_handler(_request: Request, exc: AccessError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.detail}, headers=headers
    )


@app.exception_handler(DomainError)
async def domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(auth_router)
app.include_router(clubs_router)
app.include_router(age_groups_router)
app.include_router(athletes_router)
app.include_router(performances_router)
app.include_router(seasons_router)
app.include_router(disciplines_router)
app.include_router(lookups_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Athletics Club API", "version": "0.1.0"}

"""Neo RBAC API application.

FastAPI application exposing the permission and role catalogs, the grant
and assignment graphs and permission resolution. Every router under the
API prefix runs the route permission guard.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from .__version__ import __version__
from .config.settings import Settings, get_settings
from .database import DatabaseManager, create_schema
from .models.base import APIResponse
from .api.dependencies import ServiceContainer, build_container, enforce_route_permissions
from .api.exception_handlers import register_exception_handlers
from .api.models.response import HealthResponse
from .api.route_permissions import ROUTE_PERMISSIONS
from .api.routers import (
    permissions_router,
    roles_router,
    role_permissions_router,
    user_roles_router,
    users_router,
)

logger = logging.getLogger(__name__)


def load_environment() -> None:
    """Load .env, then .env.local overrides, from the project root."""
    project_root = Path.cwd()
    
    env_file = project_root / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        logger.info(f"Loaded environment variables from {env_file}")
    
    env_local_file = project_root / ".env.local"
    if env_local_file.exists():
        load_dotenv(env_local_file, override=True)
        logger.info(f"Loaded local environment overrides from {env_local_file}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    db: Optional[DatabaseManager] = None
    
    if getattr(app.state, "container", None) is None:
        load_environment()
        get_settings.cache_clear()
        settings = get_settings()
        
        db = DatabaseManager(settings.database_url, **settings.get_pool_config())
        await db.create_pool()
        
        if settings.auto_create_schema:
            await create_schema(db, settings.db_schema)
        
        app.state.container = build_container(db, settings)
        logger.info("RBAC services initialized")
    
    yield
    
    # Cleanup
    if db is not None:
        await db.close_pool()


def _check_route_registrations(app: FastAPI, prefix: str) -> None:
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path.startswith(prefix):
            if route.name not in ROUTE_PERMISSIONS:
                logger.warning(f"Route {route.name} ({route.path}) has no permission entry")


def create_app(
    container: Optional[ServiceContainer] = None,
    settings: Optional[Settings] = None
) -> FastAPI:
    """Create the RBAC API.
    
    Args:
        container: Prebuilt services; when omitted they are built at startup
            over a fresh database pool
        settings: Settings to use instead of the environment's
    """
    settings = settings or get_settings()
    
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Role-based access control for the NeoMultiTenant admin backend",
        lifespan=lifespan,
    )
    app.state.container = container
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    register_exception_handlers(app, is_production=settings.is_production)
    
    guarded = [Depends(enforce_route_permissions)]
    prefix = settings.api_prefix
    app.include_router(permissions_router, prefix=f"{prefix}/permissions", tags=["Permissions"], dependencies=guarded)
    app.include_router(roles_router, prefix=f"{prefix}/roles", tags=["Roles"], dependencies=guarded)
    app.include_router(
        role_permissions_router, prefix=f"{prefix}/role-permissions", tags=["Role Permissions"], dependencies=guarded
    )
    app.include_router(user_roles_router, prefix=f"{prefix}/user-roles", tags=["User Roles"], dependencies=guarded)
    app.include_router(users_router, prefix=f"{prefix}/users", tags=["Users"], dependencies=guarded)
    
    @app.get("/health", name="health", response_model=APIResponse[HealthResponse], tags=["System"])
    async def health(request: Request) -> APIResponse[HealthResponse]:
        db = request.app.state.container.db if request.app.state.container else None
        database_ok = await db.health_check() if db is not None else False
        return APIResponse.success_response(
            data=HealthResponse(
                status="healthy" if database_ok else "degraded",
                database=database_ok,
                version=__version__
            )
        )
    
    _check_route_registrations(app, prefix)
    
    logger.info(f"Created {settings.app_name} v{__version__}")
    return app

import logging

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from elkpeak.core.config import get_settings
from elkpeak.core.errors import install_error_handlers
from elkpeak.core.security import GatewayCORSMiddleware
from elkpeak.core.security_headers import SecurityHeadersMiddleware
from elkpeak.core.tracing import init_tracing
from elkpeak.api.routes import admin_contacts as admin_contacts_routes
from elkpeak.api.routes import auth as auth_routes
from elkpeak.api.routes import contact as contact_routes
from elkpeak.api.routes import dashboard as dashboard_routes
from elkpeak.api.routes import goals as goals_routes
from elkpeak.api.routes import health as health_routes
from elkpeak.api.routes import manage_data as manage_data_routes
from elkpeak.api.routes import metrics as metrics_routes
from elkpeak.api.routes import monthly_logs as monthly_logs_routes
from elkpeak.api.routes import overrides as overrides_routes
from elkpeak.db.base import Base
from elkpeak.db.session import engine
from elkpeak.db.migrations import run_migrations_on_startup


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name)

    @app.on_event("startup")
    def _startup_migrations() -> None:
        # In production we optionally stamp/upgrade via env flags.
        run_migrations_on_startup()

    # Observability: logging + optional error tracing
    init_tracing(app)

    # Centralized security headers (HSTS only when https)
    app.add_middleware(SecurityHeadersMiddleware)

    # Added last so it is outermost: preflights never reach the routers
    app.add_middleware(GatewayCORSMiddleware)

    install_error_handlers(app)

    # Routers
    app.include_router(health_routes.router)
    app.include_router(metrics_routes.router)
    app.include_router(auth_routes.router)
    app.include_router(dashboard_routes.router)
    app.include_router(goals_routes.router)
    app.include_router(overrides_routes.router)
    app.include_router(monthly_logs_routes.router)
    app.include_router(contact_routes.router)
    app.include_router(admin_contacts_routes.router)
    app.include_router(manage_data_routes.router)

    # Auto-create tables only in non-production for local/dev convenience.
    # In production all schema changes must go through Alembic migrations.
    if settings.environment != "production":
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            logging.getLogger("elk.store").warning("could not create tables: %s", e)

    return app


app = create_app()

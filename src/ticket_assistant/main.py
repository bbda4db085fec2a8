"""
AI Ticket Assistant - Main Application
=======================================

Support-ticket intake with background AI triage.

Modules:
- Auth: Signup, login and admin user management (JWT)
- Tickets: Ticket intake and role-scoped reads
- Triage: AI analysis, keyword fallback and moderator assignment
- Events: Event bus, job functions and the events webhook

Clean Architecture Layers:
- Interfaces: FastAPI controllers and job functions
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database, LLM, notifications, scheduler
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from ticket_assistant.config import Settings, settings
from ticket_assistant.core import ApplicationException

# Infrastructure
from ticket_assistant.infrastructure.database import (
    init_database, close_database, create_tables, check_database
)
from ticket_assistant.infrastructure.llm import ILLMClient, build_llm_client
from ticket_assistant.infrastructure.notifications import SlackNotifier

# Module services
from ticket_assistant.auth.application import PasswordHasher, TokenService
from ticket_assistant.events.application import EventBus
from ticket_assistant.events.infrastructure import APSchedulerJobScheduler
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.interfaces import TriageFunctions

# Module Routers
from ticket_assistant.auth.interfaces import auth_router
from ticket_assistant.tickets.interfaces import tickets_router
from ticket_assistant.events.interfaces import events_router

# Shared
from ticket_assistant.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler
)
from ticket_assistant.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


async def start_services(
    app: FastAPI,
    config: Settings,
    llm_client: Optional[ILLMClient] = None,
    use_scheduler: bool = True
) -> None:
    """
    Build every service and store it in ``app.state``.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Build auth helpers (password hasher, token service)
    4. Initialize LLM client and triage service
    5. Start the job scheduler and event bus
    6. Register job functions

    Args:
        app: Application receiving the services
        config: Settings to build from
        llm_client: Client to use instead of the configured one
        use_scheduler: False runs job functions inline (tests)
    """
    setup_logging(level=config.log_level, environment=config.environment, log_path=config.log_path)
    logger.info("Starting AI Ticket Assistant", extra={
        "version": config.app_version,
        "environment": config.environment
    })

    logger.info("Initializing database")
    init_database(config.database_url)
    await create_tables()

    app.state.settings = config
    app.state.password_hasher = PasswordHasher()
    app.state.token_service = TokenService(
        secret=config.jwt_secret,
        algorithm=config.jwt_algorithm,
        expire_minutes=config.jwt_expire_minutes
    )

    logger.info("Initializing LLM client")
    app.state.llm_client = llm_client if llm_client is not None else build_llm_client(config)
    triage_service = TriageService(
        app.state.llm_client,
        temperature=config.llm_temperature,
        max_tokens=config.llm_max_tokens
    )

    scheduler = None
    if use_scheduler:
        scheduler = APSchedulerJobScheduler()
        scheduler.start()
    app.state.scheduler = scheduler

    app.state.event_bus = EventBus(scheduler=scheduler, history_size=config.job_history_size)
    app.state.notifier = SlackNotifier.from_settings(config)

    TriageFunctions(triage_service, app.state.notifier).register(app.state.event_bus)

    logger.info("AI Ticket Assistant started successfully")


async def stop_services(app: FastAPI) -> None:
    """
    SHUTDOWN:
    1. Stop the job scheduler
    2. Close the Slack client
    3. Close database connections
    """
    logger.info("Shutting down AI Ticket Assistant")

    scheduler = getattr(app.state, "scheduler", None)
    if scheduler:
        scheduler.stop()

    notifier = getattr(app.state, "notifier", None)
    if notifier:
        await notifier.close()

    await close_database()

    logger.info("AI Ticket Assistant shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    await start_services(app, settings)

    yield  # Application runs here

    await stop_services(app)


# Create FastAPI application
app = FastAPI(
    title="AI Ticket Assistant API",
    description="""
    ## AI-Powered Support Ticket Intake

    Users submit tickets; a background job summarizes them, estimates priority,
    writes notes for moderators and assigns a moderator by skill.

    ---

    ### 🔐 Auth

    - `POST /api/auth/signup` - Create an account
    - `POST /api/auth/login` - Get a token
    - `POST /api/auth/logout` - Log out
    - `POST /api/auth/update-user` - Change role/skills (admin)
    - `GET /api/auth/users` - List users (admin)

    ### 🎫 Tickets

    - `POST /api/tickets` - Submit a ticket (triage starts in the background)
    - `GET /api/tickets` - Own tickets (users) or all tickets (staff)
    - `GET /api/tickets/{id}` - One ticket

    ### ⚙️ Events

    - `GET /api/events` - Registered functions and recent runs
    - `POST /api/events` - Deliver an event

    ---
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(auth_router)
app.include_router(tickets_router)
app.include_router(events_router)

# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "database": "connected",
                        "llm_client": "available",
                        "scheduler": "running"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Returns service health status including:
    - Database connectivity
    - LLM client availability
    - Job scheduler state
    """
    config = getattr(request.app.state, "settings", settings)
    scheduler = getattr(request.app.state, "scheduler", None)

    if scheduler is None:
        scheduler_state = "inline"
    else:
        scheduler_state = "running" if scheduler.is_running else "stopped"

    checks = {
        "database": "connected" if await check_database() else "unavailable",
        "llm_client": "available" if getattr(request.app.state, "llm_client", None) else "not_configured",
        "scheduler": scheduler_state
    }

    return {
        "status": "healthy",
        "version": config.app_version,
        "environment": config.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "auth": {"prefix": "/api/auth"},
            "tickets": {"prefix": "/api/tickets"},
            "events": {"prefix": "/api/events"}
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ticket_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )

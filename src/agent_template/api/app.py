# src/agent_template/api/app.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from agent_template.api.middleware.errors import register_error_handlers
from agent_template.api.middleware.logging import RequestLoggingMiddleware
from agent_template.api.middleware.request_id import RequestIDMiddleware
from agent_template.api.routes import agents
from agent_template.config.settings import Settings, get_settings
from agent_template.container import Container
from agent_template.infrastructure.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    container: Container = app.state.container
    settings = container.settings

    configure_logging(settings)
    seeded = await container.seed_agents()
    logger.info(
        "Application started",
        environment=settings.environment,
        llm_provider=settings.llm_provider,
        memory_backend=settings.memory_backend,
        seeded_agents=seeded,
    )

    yield

    container.llm_service.clear_cache()
    logger.info("Application stopped")


def create_app(
    container: Optional[Container] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        container: Pre-built wiring (tests pass one with fakes)
        settings: Settings used when no container is given
    """
    container = container or Container(settings or get_settings())
    settings = container.settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# LangGraph Agent Template

Create agents backed by a LangChain chat model and run them through
LangGraph state graphs.

- **Agents**: create, list and fetch agent configurations
- **Runs**: run an agent synchronously or stream its graph events (SSE)
- **Sessions**: continue a conversation by passing its `session_id`
        """,
        docs_url="/docs" if not settings.is_production else None,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Agents",
                "description": "Agent management and execution endpoints.",
            },
        ],
    )
    app.state.container = container

    # Middleware (added in reverse order of execution)
    # Request ID is outermost so it is available to the logging middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app, settings)

    app.include_router(agents.router)

    return app

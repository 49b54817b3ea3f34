"""
Service entry point.

Run with:
    agent-template
or:
    uvicorn agent_template.main:app --reload --port 3000
"""

import uvicorn

from agent_template.api.app import create_app
from agent_template.config.settings import get_settings

app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "agent_template.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production and settings.debug,
    )


if __name__ == "__main__":
    run()

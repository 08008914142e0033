"""FastAPI application serving agent, workflow, MCP and template configuration."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentpack.logging_config import setup_logging
from agentpack.settings import Settings
from agentpack.storage import ConfigStore
from agentpack.templates import TemplateEngine
from agentpack_server.agent_routes import router as agent_router
from agentpack_server.config_routes import router as config_router
from agentpack_server.envelope import register_error_handlers
from agentpack_server.mcp_routes import router as mcp_router
from agentpack_server.template_routes import router as template_router
from agentpack_server.workflow_routes import router as workflow_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; the store is created at startup and lives on ``app.state``."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = ConfigStore(settings.config_root)
        store.initialize(seed_defaults=settings.seed_defaults)
        app.state.settings = settings
        app.state.store = store
        app.state.engine = TemplateEngine(store)
        yield
        logger.info("Shutting down config service")

    app = FastAPI(
        title="Agent Pack Config API",
        description="Storage and templating for agent, workflow and MCP server configuration",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # include routes
    app.include_router(agent_router, prefix="/api")
    app.include_router(workflow_router, prefix="/api")
    app.include_router(mcp_router, prefix="/api")
    app.include_router(template_router, prefix="/api")
    app.include_router(config_router, prefix="/api")

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {
            "status": "ok",
            "version": VERSION,
            "config_root": str(settings.config_root),
            "endpoints": {
                "agents": "/api/agents",
                "workflows": "/api/workflows",
                "mcp_servers": "/api/mcp-servers",
                "templates": "/api/agent-templates",
                "llm_providers": "/api/llm-providers",
                "config": "/api/config",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

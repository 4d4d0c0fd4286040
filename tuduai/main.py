from fastapi import FastAPI
from contextlib import asynccontextmanager
from tuduai.core.config import Settings, get_settings
from tuduai.core.db import close_db, init_db
from tuduai.core.logging_config import setup_logging
from tuduai.routers import tasks
from tuduai.services.ai_parse_service import AIParseService, build_parse_service


def create_app(settings: Settings | None = None, parse_service: AIParseService | None = None) -> FastAPI:
    """Настройки и фасад разбора создаются один раз и передаются через app.state"""
    settings = settings or get_settings()
    parse_service = parse_service or build_parse_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await init_db(settings)
        yield
        # Shutdown
        await close_db()

    app = FastAPI(
        title="TuduAI API",
        description="Менеджер задач с разбором естественного языка",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.parse_service = parse_service

    app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()

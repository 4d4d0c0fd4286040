from tortoise import Tortoise, connections
from tuduai.core.config import Settings


MODEL_MODULES = ["tuduai.models.task"]


def tortoise_config(settings: Settings) -> dict:
    return {
        "connections": {"default": settings.database_url},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
        "use_tz": True,
    }


async def init_db(settings: Settings) -> None:
    await Tortoise.init(config=tortoise_config(settings))
    # Схемы генерируются только локально и в тестах (в проде таблицы уже есть)
    if settings.db_generate_schemas:
        await Tortoise.generate_schemas()


async def close_db() -> None:
    await connections.close_all()

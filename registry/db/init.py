import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from registry.core.config import get_settings
from registry.models.user import User

DOCUMENT_MODELS = [
    User,
]


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true)."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


async def init_db() -> None:
    settings = get_settings()
    kwargs = {}
    if _use_tls(settings.mongodb_uri):
        kwargs["tlsCAFile"] = certifi.where()
    client = AsyncIOMotorClient(settings.mongodb_uri, **kwargs)
    database = client[settings.mongodb_db_name]
    # creates the unique index on users.email
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)

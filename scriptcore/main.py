from fastapi import FastAPI
import logging

from scriptcore.api.routes import router
from scriptcore.commands.singleton import init_registry

app = FastAPI(title="scriptcore", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    registry = init_registry()
    logger.info("Loaded %d commands: %s", len(registry.names()), ", ".join(registry.names()))


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "scriptcore", "version": "0.1.0"}

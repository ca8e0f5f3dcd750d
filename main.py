from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from api.v1 import rpc_routes
from config.config import load_settings
from core.provider import ConnexProvider
from infra.thor_client import ThorClient


def create_app(settings=None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        thor = await ThorClient.connect(
            settings["thor_url"],
            timeout=settings["request_timeout"],
            poll_interval=settings["poll_interval"],
        )
        rpc_routes.init_routes(ConnexProvider(thor))
        print(f"[Bridge] Serving JSON-RPC on {settings['host']}:{settings['port']}/rpc")
        try:
            yield
        finally:
            rpc_routes.init_routes(None)
            await thor.close()

    app = FastAPI(title="Thor JSON-RPC Bridge", version="0.1.0", lifespan=lifespan)
    app.include_router(rpc_routes.router)
    return app


if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings["host"], port=settings["port"])

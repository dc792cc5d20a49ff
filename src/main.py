from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI

from src.api.router import router
from src.config import Settings, get_settings
from src.core.logging import setup_logging
from src.services.resizer import ImageResizer, build_resizer
from src.services.storage import S3ObjectStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    resizer: ImageResizer = app.state.resizer
    async with AsyncExitStack() as stack:
        for store in (resizer.origin, resizer.cache):
            if isinstance(store, S3ObjectStore):
                await store.connect(stack)
        yield


def create_app(settings: Settings | None = None, resizer: ImageResizer | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, debug=settings.debug)

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.resizer = resizer or build_resizer(settings)
    app.include_router(router)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()

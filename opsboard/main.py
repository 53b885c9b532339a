import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from opsboard import __version__
from opsboard.core.config import Settings, get_settings
from opsboard.services.finance import FinanceReport, build_finance_report
from opsboard.storage import Storage, open_storage

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting server...")

        # A storage backend that cannot be built aborts startup
        app.state.storage = await open_storage(settings)

        yield

        logger.info("Shutting down, closing connections...")
        try:
            await app.state.storage.close()
        except Exception as e:
            logger.error(f"Error during shutdown: {str(e)}")

    app = FastAPI(
        title="OpsBoard API",
        description="Storage core for the business operations dashboard",
        version=__version__,
        lifespan=lifespan,
    )

    origins = [
        "http://localhost",
        "http://localhost:5000",
        "http://localhost:3000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.get("/", tags=["health"])
    async def health_check(storage: Storage = Depends(get_storage)):
        return {
            "status": "ok",
            "message": "Server is running",
            "storage": storage.backend_name,
            "version": __version__,
        }

    @app.get("/api/finances/report", response_model=FinanceReport, tags=["finances"])
    async def finance_report(year: Optional[int] = None, storage: Storage = Depends(get_storage)):
        return await build_finance_report(storage, year)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.router import api_router
from src.config.settings import get_settings
from src.services.verification import VerificationService
from src.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    setup_logging()
    service = VerificationService.from_settings()
    app.state.verification = service
    yield
    await service.close()


app = FastAPI(
    title="UpRock Verify Client",
    version="0.1.0",
    description="Submits website verifications, reconciles job status and browses scan history",
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("src.server:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    main()

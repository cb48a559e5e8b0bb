from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from watchmatch.api.router import api_router
from watchmatch.core.config import settings
from watchmatch.core.errors import WatchMatchError
from watchmatch.core.logging import setup_logging
from watchmatch.services import TmdbCatalog
from watchmatch.storage import create_storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    storage = create_storage()
    storage.init()
    catalog = TmdbCatalog.create()
    if not settings.TMDB_API_KEY:
        logger.warning("TMDB_API_KEY is not set; catalog requests will fail")

    app.state.storage = storage
    app.state.catalog = catalog
    logger.info("{} started with {} storage", settings.PROJECT_NAME, storage.backend_name)

    yield

    catalog.close()
    storage.close()
    del app.state.catalog
    del app.state.storage
    logger.info("{} shut down", settings.PROJECT_NAME)


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_STR}/openapi.json",
    lifespan=lifespan,
)

# Set all CORS enabled origins
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(WatchMatchError)
async def watchmatch_error_handler(request: Request, exc: WatchMatchError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed payloads are plain 400s
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


app.include_router(api_router, prefix=settings.API_STR)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("watchmatch.main:app", host="0.0.0.0", port=8000)

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api_uploader.config.base_config import settings
from api_uploader.controllers.video_controller import router as video_controller
from api_uploader.database import engine, Base
from api_uploader.storage.local_storage import LocalAssetStorage
from api_uploader.exceptions.handlers import (
    bad_request_handler,
    unauthorized_handler,
    forbidden_handler,
    resource_not_found_handler,
    transcoding_error_handler,
    probe_error_handler,
    storage_error_handler,
    os_exception_handler,
    persistence_error_handler,
    general_exception_handler,
)
from api_uploader.exceptions.exceptions import (
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    ResourceNotFoundError,
    TranscodingError,
    ProbeError,
    StorageError,
    OsException,
    PersistenceError,
)


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Created at import so the static mount below has a directory to serve
LocalAssetStorage(settings.ASSETS_ROOT).ensure_root()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup code
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} serving assets from {settings.ASSETS_ROOT}")
    yield
    # Shutdown code


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust to your frontend URL in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(BadRequestError, bad_request_handler)
app.add_exception_handler(UnauthorizedError, unauthorized_handler)
app.add_exception_handler(ForbiddenError, forbidden_handler)
app.add_exception_handler(ResourceNotFoundError, resource_not_found_handler)
app.add_exception_handler(TranscodingError, transcoding_error_handler)
app.add_exception_handler(ProbeError, probe_error_handler)
app.add_exception_handler(StorageError, storage_error_handler)
app.add_exception_handler(OsException, os_exception_handler)
app.add_exception_handler(PersistenceError, persistence_error_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(video_controller, prefix="/api")
app.mount("/assets", StaticFiles(directory=settings.ASSETS_ROOT), name="assets")


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("api_uploader.main:app", host="0.0.0.0", port=settings.PORT)

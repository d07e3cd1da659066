from fastapi import FastAPI, APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
import logging
from typing import Optional

import config
from routes import auth, backup, complaints, exports, feedbacks, floors, promoters, sales, settings, stats
from scheduler_service import TaskScheduler
from services.access import SessionStore
from services.errors import (
    AuthError,
    BackupParseError,
    DuplicateRecordError,
    InvalidTransitionError,
    PromoterProError,
    StorageFullError,
    SubmissionError,
    WorkflowError,
)
from services.refresh import SnapshotRefresher
from services.repository import BaseRepository, build_repository


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS = [
    (StorageFullError, 507),
    (BackupParseError, 400),
    (DuplicateRecordError, 409),
    (InvalidTransitionError, 409),
    (WorkflowError, 422),
    (SubmissionError, 422),
    (AuthError, 401),
]


def status_for(error: PromoterProError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


async def domain_error_handler(request: Request, exc: PromoterProError):
    status = status_for(exc)
    if status == 507:
        logger.error(f"[API] {request.url.path}: {str(exc)}")
    else:
        logger.warning(f"[API] {request.url.path} -> {status}: {str(exc)}")
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def create_app(repository: Optional[BaseRepository] = None, enable_scheduler: bool = True) -> FastAPI:
    app = FastAPI(title="PromoterPro API")

    # Create a router with the /api prefix
    api_router = APIRouter(prefix="/api")
    for module in (auth, promoters, floors, sales, feedbacks, complaints, stats, exports, backup, settings):
        api_router.include_router(module.router)

    @api_router.get("/")
    async def root():
        return {"message": "PromoterPro API"}

    app.include_router(api_router)
    app.add_exception_handler(PromoterProError, domain_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.repository = repository or build_repository()
    app.state.sessions = SessionStore()
    app.state.refresher = SnapshotRefresher(app.state.repository)
    app.state.scheduler = TaskScheduler(app.state.refresher)

    @app.on_event("startup")
    async def startup():
        await app.state.repository.init()
        logger.info(f"Storage prêt ({type(app.state.repository).__name__})")
        if enable_scheduler:
            app.state.scheduler.start()

    @app.on_event("shutdown")
    async def shutdown():
        app.state.scheduler.stop()
        await app.state.repository.close()

    return app


app = create_app()

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from taskhub.app.config import get_settings
from taskhub.app.core.logging_config import configure_logging
from taskhub.app.db import database_ready, engine, get_db, init_db
from taskhub.app.deps import create_publisher, get_publisher, set_publisher
from taskhub.app.routers import tasks as tasks_router
from taskhub.ports.publisher import IPublisher

settings = get_settings()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Taskhub",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.app_log_level)
    # Schema bootstrap only; safe no-op when the table already exists
    init_db(engine)
    set_publisher(create_publisher(settings))
    logger.info("taskhub ready", extra={"topic": settings.task_updates_topic})


@app.on_event("shutdown")
def on_shutdown() -> None:
    try:
        get_publisher().close()
    except RuntimeError:
        return
    set_publisher(None)


app.include_router(tasks_router.router)


@app.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@app.get("/healthz/ready")
def healthz_ready(
    db: Session = Depends(get_db),
    publisher: IPublisher = Depends(get_publisher),
):
    checks = {"database": database_ready(db.get_bind()), "publisher": publisher.ping()}
    status_code = 200 if all(checks.values()) else 503
    return JSONResponse(status_code=status_code, content=checks)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskhub.app.main:app", host="127.0.0.1", port=3000)

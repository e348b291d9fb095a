import logging

from fastapi import FastAPI

from lessonbook.api.routes.routes import router
from lessonbook.api.store import LessonStore
from lessonbook.infrastructure.settings import Settings, configure_logging

logger = logging.getLogger(__name__)


def create_app(store: LessonStore | None = None) -> FastAPI:
    app = FastAPI(title="LessonBook Reference Backend")
    app.state.store = store if store is not None else LessonStore.with_demo_data()
    app.include_router(router)
    logger.info("Serving %s lessons", len(app.state.store.list_lessons()))
    return app


configure_logging(Settings.from_env())
app = create_app()

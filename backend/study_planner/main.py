import logging
from typing import Dict, Union

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .developer_routes import router as developer_router
from .logging_config import configure_logging
from .planner_routes import router as planner_router
from .progress_routes import router as progress_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="Study Planner Backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(planner_router)
app.include_router(progress_router)
app.include_router(developer_router)

settings_snapshot = get_settings()
logger.info(
    "Backend starting with work window %02d:00-%02d:00 (%s)",
    settings_snapshot.window_start_hour,
    settings_snapshot.window_end_hour,
    settings_snapshot.timezone,
)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, Union[str, int]]:
    return {
        "status": "ok",
        "timezone": settings.timezone,
        "window_start_hour": settings.window_start_hour,
        "window_end_hour": settings.window_end_hour,
        "break_minutes": settings.break_minutes,
    }

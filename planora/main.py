import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from planora.config import LOG_LEVEL
from planora.database import Base, engine
from planora.models import exam, note, pomodoro_session, quick_link, task, user  # noqa: F401 (register tables)
from planora.routers import auth, dashboard, exams, export, health, links, notes, pomodoro, tasks

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Planora")

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(exams.router)
app.include_router(notes.router)
app.include_router(links.router)
app.include_router(pomodoro.router)
app.include_router(dashboard.router)
app.include_router(export.router)
app.include_router(health.router)


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
	logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
	return JSONResponse(status_code=500, content={"detail": "Internal server error"})

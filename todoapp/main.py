import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from todoapp.config import LOG_LEVEL, LOG_DIR
from todoapp.database import init_db
from todoapp.logging_setup import setup_logging
from todoapp.routers import auth, pages, todos

setup_logging(LOG_LEVEL, LOG_DIR or None)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="TodoApp")

# Backend API used by the client
app.include_router(auth.router)
app.include_router(todos.router)

# Browser pages (list, editor dialog, auth)
app.include_router(pages.router)

app.mount("/static", StaticFiles(directory=str(Path(__file__).resolve().parent / "static")), name="static")

# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
	logger.exception("unhandled error on %s %s", request.method, request.url.path)
	return JSONResponse(status_code=500, content={"detail": "Internal server error"})

"""FastAPI application entrypoint.

`create_app` builds the database engine, wires the `/students` and
`/teachers` routers and returns the application. The engine lives on
``app.state.engine``: tables are created when the application starts and
the connection pool is disposed when it shuts down.

Endpoints implemented here:
- GET /
- GET /health
"""

from contextlib import asynccontextmanager
from typing import Optional
import json
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response

from .config import settings
from .database import build_engine, create_db_and_tables
from .routes import students, teachers

logger = logging.getLogger("school_api.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """Build the application bound to `database_url` (or the configured URL)."""
    engine = build_engine(database_url or settings.DATABASE_URL, echo=settings.SQL_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_db_and_tables(engine)
        logger.info("database ready url=%s", engine.url.render_as_string(hide_password=True))
        yield
        engine.dispose()
        logger.info("database connections closed")

    app = FastAPI(title="School Roster API", lifespan=lifespan)
    app.state.engine = engine

    # Wide-open CORS keeps local frontends working without extra config in dev.
    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        request.state.request_id = req_id
        started = time.perf_counter()
        context = {
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            "client": request.client.host if request.client else "unknown",
        }
        response: Response
        try:
            response = await call_next(request)
        except Exception:
            context["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
            logger.exception("request_failed %s", json.dumps(context, ensure_ascii=True))
            raise
        response.headers["X-Request-ID"] = req_id
        context["status_code"] = response.status_code
        context["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
        logger.info("request_done %s", json.dumps(context, ensure_ascii=True))
        return response

    app.include_router(students.router)
    app.include_router(teachers.router)

    @app.get("/", response_class=HTMLResponse)
    def home():
        """Minimal homepage for quick manual testing."""
        return """
        <!DOCTYPE html>
        <html>
        <head><meta charset="UTF-8" /><title>School Roster API</title></head>
        <body>
          <h1>School Roster API</h1>
          <ul>
            <li><a href="/docs">Swagger UI</a></li>
            <li><a href="/students/all">All students</a></li>
            <li><a href="/teachers/all">All teachers</a></li>
          </ul>
        </body>
        </html>
        """

    @app.get("/health")
    def health():
        """Lightweight health check for uptime monitoring."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("school_api.main:app", host="0.0.0.0", port=8000, log_level=settings.LOG_LEVEL.lower())

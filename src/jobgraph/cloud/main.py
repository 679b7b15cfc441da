from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..errors import GraphConstructionError, JobValidationError, PersistenceError
from ..schemas import ErrorResponse, JobRequest, JobResponse, OkResponse
from ..ui.console import Console, get_console, set_console
from ..validator import validate_job_request
from .db import create_tables, make_engine, make_sessionmaker
from .redisq import JobQueue
from .settings import DATABASE_URL, DEBUG, REDIS_URL
from .store import JobStore


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 404, 409, 500)}


def create_app(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    queue: Optional[JobQueue] = None,
) -> FastAPI:
    """
    Build the API app.

    Collaborators that are not passed in are created from settings on
    startup: the database engine (tables included) and, when REDIS_URL is
    set, the job queue.
    """
    app = FastAPI(title="jobgraph")
    app.state.store = JobStore(session_factory) if session_factory is not None else None
    app.state.queue = queue
    app.state.engine = None  # only set when startup created it

    # -------------------- Startup --------------------

    @app.on_event("startup")
    async def startup() -> None:
        set_console(Console(debug=DEBUG))
        if app.state.store is None:
            engine = make_engine(DATABASE_URL)
            await create_tables(engine)
            app.state.engine = engine
            app.state.store = JobStore(make_sessionmaker(engine))
        if app.state.queue is None and REDIS_URL:
            app.state.queue = JobQueue.from_url(REDIS_URL)

    @app.on_event("shutdown")
    async def shutdown() -> None:
        if app.state.queue is not None:
            await app.state.queue.close()
        if app.state.engine is not None:
            await app.state.engine.dispose()
            app.state.engine = None

    # -------------------- Errors --------------------

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        parts = []
        for e in exc.errors():
            loc = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
            parts.append(f"{loc}: {e.get('msg')}" if loc else str(e.get("msg")))
        return error(400, "; ".join(parts) or "invalid request body")

    @app.exception_handler(JobValidationError)
    async def invalid_job(request: Request, exc: JobValidationError):
        if isinstance(exc, GraphConstructionError) and exc.internal:
            console = get_console()
            console.print_error("Graph engine invariant violated", exc.describe())
            console.print_exception(exc)
        return error(400, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_failed(request: Request, exc: PersistenceError):
        get_console().print_debug(exc.describe())
        status = 409 if isinstance(exc.__cause__, IntegrityError) else 500
        return error(status, str(exc))

    # -------------------- Endpoints --------------------

    @app.post("/jobs", response_model=OkResponse, responses=ERROR_RESPONSES)
    async def create_job(req: JobRequest):
        job = validate_job_request(req)
        job_id = await app.state.store.save(job)

        # push to Redis after DB commit; the job is stored either way
        if app.state.queue is not None:
            try:
                await app.state.queue.enqueue_job(job_id)
            except RedisError as e:
                console = get_console()
                console.print_error("Job queue unavailable", f"job {job_id} saved but not enqueued: {e}")

        return OkResponse()

    @app.get("/jobs/{job_id}", response_model=JobResponse, responses=ERROR_RESPONSES)
    async def get_job(job_id: int):
        job = await app.state.store.get(job_id)
        if job is None:
            return error(404, "job not found")
        return JobResponse.from_job(job)

    return app


app = create_app()

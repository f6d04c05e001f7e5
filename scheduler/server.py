"""
FastAPI HTTP server for the single-machine scheduler.

Exposes:
- GET    /api/tasks          - List tasks in insertion order
- POST   /api/tasks          - Add a task
- DELETE /api/tasks/{name}   - Remove a task
- DELETE /api/tasks          - Remove every task
- POST   /api/tasks/example  - Replace tasks with the example set
- POST   /api/schedule       - Evaluate dispatch rules
- POST   /api/recommend      - Recommend a rule for an objective

Rendering (tables, Gantt bars, PDF export) belongs to the client; responses
are plain JSON produced by the serializer.
"""

import logging
import sys
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import get_cors_origins, get_log_level
from .errors import SchedulingError
from .orchestrator import SchedulerService
from .serializer import serialize, serialize_batch

# Configure logging
logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    stream=sys.stdout,
    force=True
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Smart Scheduler API",
    description="Single-machine dispatch rule comparison and recommendation",
    version="1.0.0",
)

allow_origins = get_cors_origins()
logger.info("CORS allow_origins = %r", allow_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

service = SchedulerService()

ERROR_STATUS = {
    "INVALID_TASK": 422,
    "INVALID_RULE": 422,
    "INVALID_OBJECTIVE": 422,
    "TASK_NOT_FOUND": 404,
    "EMPTY_TASK_SET": 409,
    "NO_RESULTS": 409,
}


# =============================================================================
# REQUEST MODELS
# =============================================================================

class AddTaskRequest(BaseModel):
    """Request body for POST /api/tasks."""

    name: Optional[str] = Field(default=None, description="Task name; blank means auto-named")
    duration: float = Field(..., strict=True, description="Processing time in the normalized unit")
    due_date: Optional[float] = Field(default=None, strict=True, description="Deadline in the same unit")
    predecessor: Optional[str] = Field(default=None, description="Name of a task that must finish first")


class ScheduleRequest(BaseModel):
    """Request body for POST /api/schedule."""

    rules: Optional[list[str]] = Field(default=None, description="Rules to evaluate; omit for all")


class RecommendRequest(BaseModel):
    """Request body for POST /api/recommend."""

    objective: Optional[str] = Field(default=None, description="Cmax or Tardiness")
    rules: Optional[list[str]] = Field(
        default=None, description="Recompute these rules first; omit to reuse the last batch"
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    status = ERROR_STATUS.get(exc.code, 400)
    logger.info("%s %s -> %d %s", request.method, request.url.path, status, exc)
    return JSONResponse(
        status_code=status,
        content={"error": exc.code, "message": exc.message, "details": serialize(exc.details)},
    )


@app.get("/api/tasks")
def list_tasks() -> dict:
    return {"tasks": serialize(service.list_tasks())}


@app.post("/api/tasks")
def add_task(req: AddTaskRequest) -> dict:
    task = service.add_task(
        duration=req.duration,
        name=req.name,
        due_date=req.due_date,
        predecessor=req.predecessor,
    )
    logger.info("added task %s", task.name)
    return {"task": serialize(task), "tasks": serialize(service.list_tasks())}


@app.delete("/api/tasks/{name}")
def remove_task(name: str) -> dict:
    # Unknown names would be a silent no-op in the core; HTTP callers get a 404
    service.repository.get(name)
    service.remove_task(name)
    return {"tasks": serialize(service.list_tasks())}


@app.delete("/api/tasks")
def clear_tasks() -> dict:
    service.clear_tasks()
    return {"tasks": []}


@app.post("/api/tasks/example")
def load_example() -> dict:
    return {"tasks": serialize(service.load_example())}


@app.post("/api/schedule")
def schedule(req: ScheduleRequest) -> dict:
    """
    Evaluate the requested dispatch rules on the current task set.

    Rules that fail are listed under 'failures' and omitted from 'results'.
    """
    batch = service.run_schedules(req.rules)
    return serialize_batch(batch)


@app.post("/api/recommend")
def recommend(req: RecommendRequest) -> dict:
    batch = service.run_schedules(req.rules) if req.rules is not None else None
    recommendation = service.recommend(req.objective, batch=batch)
    return {"recommendation": serialize(recommendation)}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}

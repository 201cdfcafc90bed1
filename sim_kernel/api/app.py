"""
Simulation Kernel API — FastAPI endpoints.

Exposes the kernel to the operator UI:
- Clock control (tick, jump, pause, resume, rollback)
- Timeline branches
- Scheduled events and the template catalog
- Day packets

Endpoints are plain functions and run in the server's threadpool. Kernel
calls are serialized by one lock per app, so a tick never interleaves with
a rollback or a schedule.
"""

import threading
from datetime import date
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sim_kernel.config import KernelConfig, configure_logging
from sim_kernel.errors import InvalidOperationError, NotFoundError, PersistenceError
from sim_kernel.events.templates import get_template, list_templates
from sim_kernel.models.events import EventTemplate, EventType
from sim_kernel.runtime import SimulationKernel, build_kernel


# --- Request/Response Models ---

class InitializeRequest(BaseModel):
    start_date: Optional[date] = None


class TickRequest(BaseModel):
    days: int = 1


class DateRequest(BaseModel):
    target_date: date


class BranchCreateRequest(BaseModel):
    name: str
    from_date: Optional[date] = None


class EventScheduleRequest(BaseModel):
    scheduled_for_date: date
    template_name: Optional[str] = None
    template: Optional[EventTemplate] = None


class RescheduleRequest(BaseModel):
    scheduled_for_date: date


# --- Application Factory ---

def create_app(
    kernel: Optional[SimulationKernel] = None,
    config: Optional[KernelConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    config = config or KernelConfig()
    configure_logging(config.log_level)

    app = FastAPI(
        title="Simulation Kernel API",
        description="Simulated clock, timeline branches and scheduled narrative events",
        version="0.1.0",
    )

    k = kernel or build_kernel(config)
    clock = k.clock
    scheduler = k.scheduler
    lock = threading.Lock()

    app.state.kernel = k
    app.state.kernel_lock = lock

    # === ERRORS ===

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": "not_found", "detail": str(exc)})

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation(request: Request, exc: InvalidOperationError):
        return JSONResponse(
            status_code=409, content={"error": "invalid_operation", "detail": str(exc)}
        )

    @app.exception_handler(PersistenceError)
    async def persistence_failure(request: Request, exc: PersistenceError):
        return JSONResponse(
            status_code=503, content={"error": "persistence_failure", "detail": str(exc)}
        )

    # === CLOCK ===

    @app.get("/clock")
    def get_clock():
        """Current clock snapshot."""
        with lock:
            return clock.get_state().model_dump(mode="json")

    @app.post("/clock/initialize")
    def initialize_clock(req: InitializeRequest):
        """Re-seed the clock and reload branches."""
        with lock:
            return clock.initialize(req.start_date).model_dump(mode="json")

    @app.post("/clock/tick")
    def tick(req: TickRequest):
        """Advance the clock; ignored while paused."""
        with lock:
            return clock.tick(req.days).model_dump(mode="json")

    @app.post("/clock/jump")
    def jump(req: DateRequest):
        """Set the date directly (administrative override)."""
        with lock:
            return clock.jump_to(req.target_date).model_dump(mode="json")

    @app.post("/clock/rollback")
    def rollback(req: DateRequest):
        """Destructive jump back in time."""
        with lock:
            return clock.rollback_to(req.target_date).model_dump(mode="json")

    @app.post("/clock/pause")
    def pause():
        with lock:
            return clock.pause().model_dump(mode="json")

    @app.post("/clock/resume")
    def resume():
        with lock:
            return clock.resume().model_dump(mode="json")

    # === BRANCHES ===

    @app.get("/branches")
    def list_branches():
        with lock:
            return [b.model_dump(mode="json") for b in clock.list_branches()]

    @app.post("/branches")
    def create_branch(req: BranchCreateRequest):
        """Create an inactive branch."""
        with lock:
            return clock.create_branch(req.name, req.from_date).model_dump(mode="json")

    @app.get("/branches/{branch_id}")
    def get_branch(branch_id: str):
        with lock:
            return clock.get_branch(branch_id).model_dump(mode="json")

    @app.post("/branches/{branch_id}/activate")
    def activate_branch(branch_id: str):
        """Switch the clock to a branch."""
        with lock:
            return clock.switch_branch(branch_id).model_dump(mode="json")

    # === EVENTS ===

    @app.get("/events/templates")
    def get_templates():
        """The built-in event template catalog."""
        return [t.model_dump(mode="json") for t in list_templates()]

    @app.get("/events")
    def list_events(
        type: Optional[EventType] = None,
        executed: Optional[bool] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ):
        with lock:
            events = scheduler.get_scheduled_events(
                type=type, executed=executed, from_date=from_date, to_date=to_date
            )
            return [e.model_dump(mode="json") for e in events]

    @app.post("/events")
    def schedule_event(req: EventScheduleRequest):
        """Schedule a catalog template (by name) or an inline template."""
        if req.template is not None:
            template = req.template
        elif req.template_name is not None:
            template = get_template(req.template_name)
        else:
            raise InvalidOperationError("Either template or template_name is required")

        with lock:
            event_id = scheduler.schedule_event(template, req.scheduled_for_date)
            return scheduler.get_event(event_id).model_dump(mode="json")

    @app.get("/events/{event_id}")
    def get_event(event_id: str):
        with lock:
            return scheduler.get_event(event_id).model_dump(mode="json")

    @app.put("/events/{event_id}/schedule")
    def reschedule_event(event_id: str, req: RescheduleRequest):
        with lock:
            return scheduler.reschedule(event_id, req.scheduled_for_date).model_dump(mode="json")

    @app.post("/events/{event_id}/execute")
    def execute_event(event_id: str):
        """Fire one event now; a second call is a no-op."""
        with lock:
            fired = k.executor.execute_event(event_id)
            return {"event_id": event_id, "executed_now": fired}

    @app.post("/events/execute-due")
    def execute_due_events():
        """Run the catch-up pass at the current date."""
        with lock:
            return k.executor.check_and_execute_due_events().model_dump(mode="json")

    # === PACKETS ===

    @app.get("/packets")
    def list_packets():
        with lock:
            return [p.model_dump(mode="json") for p in k.packets.list_packets()]

    @app.post("/packets/{day}")
    def generate_packet(day: date):
        """Assemble the packet for a day the clock has reached."""
        with lock:
            return k.packets.generate_packet(day).model_dump(mode="json")

    @app.get("/packets/{day}")
    def get_packet(day: date):
        with lock:
            return k.packets.get_packet(day).model_dump(mode="json")

    return app


# Default application instance
app = create_app(config=KernelConfig.from_env())

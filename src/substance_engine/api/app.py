"""FastAPI application factory."""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, Response, status

from substance_engine.api.models import (
    FlowImpactResponse,
    IntakeRequest,
    IntakeResponse,
    LevelPointResponse,
    SafetyResponse,
    SynergyResponse,
    TimingResponse,
)
from substance_engine.app_logging import configure_logging
from substance_engine.containers import AppContainer
from substance_engine.domain.substances import SubstanceType

MAX_DAILY_LIMIT_MG = 10_000.0


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app exposing the tracker's query API."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Substance Engine")
    app.state.container = container

    def _tracker(request: Request):
        state_container: AppContainer = request.app.state.container
        return state_container.tracker

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/intakes", status_code=status.HTTP_201_CREATED)
    async def log_intake(body: IntakeRequest, request: Request) -> IntakeResponse:
        """Log an intake at the current time."""
        tracker = _tracker(request)
        if body.amount is None:
            event = tracker.quick_log(body.substance_type, source=body.source)
        else:
            event = tracker.log(body.substance_type, body.amount, source=body.source)
        return IntakeResponse.from_event(event)

    @app.delete("/intakes/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_intake(event_id: UUID, request: Request) -> Response:
        """Delete a logged intake."""
        if not _tracker(request).remove(event_id):
            logger.info("Delete for unknown intake: id=%s", event_id)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/intakes/today")
    async def today_intakes(request: Request) -> dict[str, object]:
        """Return today's intakes, most recent first."""
        events = _tracker(request).today_events()
        return {"intakes": [IntakeResponse.from_event(event) for event in events]}

    @app.get("/levels")
    async def levels(request: Request) -> dict[str, object]:
        """Return current active levels for every substance."""
        tracker = _tracker(request)
        now = tracker.current_time()
        return {
            "timestamp": now,
            "levels": {
                substance_type.value: level
                for substance_type, level in tracker.active_levels(now).items()
            },
        }

    @app.get("/levels/{substance_type}/projection")
    async def projection(
        substance_type: SubstanceType,
        request: Request,
        hours: float = Query(default=8.0, gt=0, le=48),
        interval_minutes: int = Query(default=15, ge=1, le=240),
    ) -> dict[str, object]:
        """Return sampled future levels of one substance."""
        points = _tracker(request).project_levels(
            substance_type, hours=hours, interval_minutes=interval_minutes
        )
        return {
            "substance_type": substance_type.value,
            "points": [LevelPointResponse.from_point(point) for point in points],
        }

    @app.get("/synergy")
    async def synergy(request: Request) -> SynergyResponse:
        """Return the caffeine and L-theanine synergy state."""
        return SynergyResponse.from_report(_tracker(request).synergy_report())

    @app.get("/safety")
    async def safety(
        request: Request,
        daily_limit: float | None = Query(
            default=None, gt=0, le=MAX_DAILY_LIMIT_MG, allow_inf_nan=False
        ),
    ) -> SafetyResponse:
        """Classify today's caffeine against the configured or given limit."""
        status_ = _tracker(request).safety_status(daily_limit=daily_limit)
        return SafetyResponse.from_status(status_)

    @app.get("/timing")
    async def timing(session_start: datetime, request: Request) -> TimingResponse:
        """Recommend caffeine timing and dose for an upcoming session."""
        recommendation = _tracker(request).recommend_timing(session_start)
        return TimingResponse.from_recommendation(recommendation)

    @app.get("/flow")
    async def flow(request: Request) -> FlowImpactResponse:
        """Return the flow capacity multiplier for current levels."""
        return FlowImpactResponse.from_impact(_tracker(request).assess_flow_impact())

    @app.get("/totals/{substance_type}")
    async def totals(
        substance_type: SubstanceType, request: Request
    ) -> dict[str, object]:
        """Return today's raw logged amount of one substance."""
        tracker = _tracker(request)
        return {
            "substance_type": substance_type.value,
            "total": tracker.todays_total(substance_type),
            "unit": tracker.profiles[substance_type].unit.value,
        }

    return app

"""FastAPI application: HTTP endpoints for table availability.

Endpoints:

  GET  /health              Health check
  GET  /api/availability    Occupied tables for a date + time slot
  GET  /api/tables/status   Live floor status (staff, bearer token)

The availability endpoint is fail-open: when the booking store cannot be
reached it still answers 200 with empty ``ids`` and the failure in
``error``.  Clients must check ``error`` before showing every table as
free, and the booking insert must re-check on its own.
"""

from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import logging
import time
from typing import Optional

# Configure root logger early so all app loggers have a handler and are
# visible when run via `uvicorn tablebooking.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from tablebooking.auth import require_admin_token
from tablebooking.availability import AvailabilityService
from tablebooking.booking_readers import BookingReader, build_reader
from tablebooking.config import settings
from tablebooking.errors import BookingStoreError
from tablebooking.overlap import combine, day_bounds

log = logging.getLogger("tablebooking.app")

_START_TIME = time.time()


def create_app(reader: Optional[BookingReader] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        reader: Booking store to query.  When omitted, one is built from
                settings on first use, so a misconfigured store shows up
                as a 503 instead of an import error.
    """
    app = FastAPI(
        title="Table Availability",
        description="Table availability and overlap detection for restaurant bookings",
        version="0.1.0",
    )
    app.state.service = AvailabilityService(reader) if reader is not None else None

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check; confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Availability ───────────────────────────────────────────

    @app.get("/api/availability")
    async def availability(
        date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
        time_: Optional[str] = Query(default=None, alias="time", description="HH:MM"),
        duration_hours: Optional[float] = Query(default=None, gt=0, le=24),
        service: AvailabilityService = Depends(_get_service),
    ) -> JSONResponse:
        """Tables already booked for the requested slot."""
        if date:
            try:
                day_bounds(date)
            except ValueError:
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid date: {date!r}. Use YYYY-MM-DD.",
                )
        if date and time_:
            try:
                combine(date, time_)
            except ValueError:
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid time: {time_!r}. Use HH:MM.",
                )

        result = await service.fetch_occupied_tables(date, time_, duration_hours)
        if not result.ok:
            log.warning("Availability degraded for %s %s: %s", date, time_, result.error)
        return JSONResponse(result.model_dump(mode="json"))

    # ── Staff floor view ───────────────────────────────────────

    @app.get("/api/tables/status", dependencies=[Depends(require_admin_token)])
    async def floor_status(
        service: AvailabilityService = Depends(_get_service),
    ) -> JSONResponse:
        """Free / occupied / upcoming state of every table booked today."""
        try:
            statuses = await service.fetch_floor_status()
        except BookingStoreError as e:
            raise HTTPException(status_code=502, detail=str(e))

        return JSONResponse({
            str(table_id): table_status.model_dump(mode="json")
            for table_id, table_status in statuses.items()
        })

    return app


# ── Helper functions ──────────────────────────────────────────────

def _get_service(request: Request) -> AvailabilityService:
    """Return the app's AvailabilityService, building the reader on first use."""
    service = request.app.state.service
    if service is None:
        try:
            service = AvailabilityService(build_reader(settings))
        except ValueError as e:
            log.error("Booking store not configured: %s", e)
            raise HTTPException(status_code=503, detail=str(e))
        request.app.state.service = service
    return service


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    for warning in settings.validate_startup():
        log.warning(warning)

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "tablebooking.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )

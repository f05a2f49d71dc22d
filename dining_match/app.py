from __future__ import annotations

import logging
from datetime import datetime, timezone
from time import monotonic, perf_counter

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import EventLog
from .config import AppConfig
from .data_ingestion.seed import load_seed
from .errors import DiningError, NotFoundError
from .reservations.ledger import ReservationLedger
from .reservations.models import Reservation, ReservationRequest, ReservationResponse
from .restaurants.models import (
    PriceRange,
    RestaurantCreate,
    RestaurantListResponse,
    RestaurantResponse,
    RestaurantUpdate,
    SearchCriteria,
)
from .restaurants.search import search
from .restaurants.store import RestaurantStore

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/health",
    "GET /api/restaurants",
    "GET /api/restaurants/:id",
    "POST /api/restaurants",
    "PUT /api/restaurants/:id",
    "DELETE /api/restaurants/:id",
    "GET /api/restaurants/:id/reservations",
    "POST /api/reservations",
    "GET /api/reservations",
    "GET /api/analytics",
]


def get_store(request: Request) -> RestaurantStore:
    return request.app.state.store


def get_ledger(request: Request) -> ReservationLedger:
    return request.app.state.ledger


def get_event_log(request: Request) -> EventLog:
    return request.app.state.events


def _error_body(message: str, errors: list[str] | None = None) -> dict:
    body: dict = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def _install_error_handlers(app: FastAPI, config: AppConfig) -> None:
    @app.exception_handler(DiningError)
    async def dining_error(request: Request, exc: DiningError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=_error_body(exc.message, exc.errors),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        if any(err["loc"][:1] == ("path",) for err in exc.errors()):
            return JSONResponse(
                status_code=400,
                content=_error_body("Invalid restaurant ID format", errors),
            )
        return JSONResponse(
            status_code=400, content=_error_body("Validation failed", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            body = _error_body(f"Route {request.method} {request.url.path} not found")
            body["availableEndpoints"] = AVAILABLE_ENDPOINTS
            return JSONResponse(status_code=404, content=body)
        return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc,
        )
        body = _error_body("Internal server error")
        if config.is_development:
            body["error"] = repr(exc)
        return JSONResponse(status_code=500, content=body)


def create_app(
    config: AppConfig | None = None,
    store: RestaurantStore | None = None,
) -> FastAPI:
    config = config or AppConfig()
    if store is None:
        store = RestaurantStore(load_seed(config.seed_path))

    app = FastAPI(title="Dining Match API", version="2.0.0")
    app.state.config = config
    app.state.store = store
    app.state.ledger = ReservationLedger(store)
    app.state.events = EventLog()
    app.state.started_at = monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in config.cors_origin.split(",")],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        logger.info("%s %s - IP: %s", request.method, request.url.path, client)
        return await call_next(request)

    _install_error_handlers(app, config)

    # ── Health ───────────────────────────────────────────────────────────

    @app.get("/api/health")
    def health(request: Request) -> dict:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(monotonic() - request.app.state.started_at, 3),
            "environment": config.environment,
        }

    # ── Restaurants ──────────────────────────────────────────────────────

    @app.get("/api/restaurants", response_model=RestaurantListResponse)
    def list_restaurants(
        cuisine: str | None = None,
        date: str | None = None,
        time: str | None = None,
        budget: PriceRange | None = None,
        location: str | None = None,
        rating: float | None = Query(default=None, ge=0.0, le=5.0),
        num_guests: int | None = Query(default=None, alias="numGuests", gt=0),
        store: RestaurantStore = Depends(get_store),
        events: EventLog = Depends(get_event_log),
    ) -> RestaurantListResponse:
        start = perf_counter()
        criteria = SearchCriteria(
            cuisine=cuisine,
            date=date,
            time=time,
            budget=budget,
            location=location,
            rating=rating,
            num_guests=num_guests,
        )
        results = search(store.all(), criteria)
        events.record("search", {
            "cuisine": cuisine,
            "location": location,
            "filters": criteria.active_filters(),
            "results_returned": len(results),
            "response_time_ms": round((perf_counter() - start) * 1000, 3),
        })
        return RestaurantListResponse(count=len(results), data=results)

    @app.get("/api/restaurants/{restaurant_id}", response_model=RestaurantResponse)
    def get_restaurant(
        restaurant_id: int, store: RestaurantStore = Depends(get_store),
    ) -> RestaurantResponse:
        restaurant = store.find_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError(f"Restaurant with ID {restaurant_id} not found")
        return RestaurantResponse(data=restaurant)

    @app.post("/api/restaurants", response_model=RestaurantResponse, status_code=201)
    def create_restaurant(
        body: RestaurantCreate, store: RestaurantStore = Depends(get_store),
    ) -> RestaurantResponse:
        restaurant = store.insert(body)
        return RestaurantResponse(message="Restaurant created successfully", data=restaurant)

    @app.put("/api/restaurants/{restaurant_id}", response_model=RestaurantResponse)
    def update_restaurant(
        restaurant_id: int,
        body: RestaurantUpdate,
        store: RestaurantStore = Depends(get_store),
    ) -> RestaurantResponse:
        restaurant = store.update(restaurant_id, body)
        if restaurant is None:
            raise NotFoundError(f"Restaurant with ID {restaurant_id} not found")
        return RestaurantResponse(message="Restaurant updated successfully", data=restaurant)

    @app.delete("/api/restaurants/{restaurant_id}")
    def delete_restaurant(
        restaurant_id: int,
        store: RestaurantStore = Depends(get_store),
        ledger: ReservationLedger = Depends(get_ledger),
    ) -> dict:
        if not store.delete(restaurant_id):
            raise NotFoundError(f"Restaurant with ID {restaurant_id} not found")
        ledger.forget(restaurant_id)
        return {
            "success": True,
            "message": f"Restaurant with ID {restaurant_id} deleted successfully",
        }

    @app.get(
        "/api/restaurants/{restaurant_id}/reservations",
        response_model=list[Reservation],
    )
    def restaurant_reservations(
        restaurant_id: int,
        store: RestaurantStore = Depends(get_store),
        ledger: ReservationLedger = Depends(get_ledger),
    ) -> list[Reservation]:
        if store.find_by_id(restaurant_id) is None:
            raise NotFoundError(f"Restaurant with ID {restaurant_id} not found")
        return ledger.reservations_for(restaurant_id)

    # ── Reservations ─────────────────────────────────────────────────────

    @app.post("/api/reservations", response_model=ReservationResponse, status_code=201)
    def create_reservation(
        body: ReservationRequest,
        ledger: ReservationLedger = Depends(get_ledger),
        events: EventLog = Depends(get_event_log),
    ) -> ReservationResponse:
        try:
            restaurant, reservation = ledger.book(
                body.restaurant_id, body.date, body.time, body.num_guests,
            )
        except DiningError as exc:
            events.record("reservation", {
                "restaurant_id": body.restaurant_id,
                "num_guests": body.num_guests,
                "outcome": type(exc).__name__,
            })
            raise

        events.record("reservation", {
            "restaurant_id": body.restaurant_id,
            "num_guests": body.num_guests,
            "outcome": "accepted",
        })
        return ReservationResponse(
            message="Reservation confirmed",
            data=restaurant,
            reservation=reservation,
        )

    @app.get("/api/reservations", response_model=list[Reservation])
    def list_reservations(
        ledger: ReservationLedger = Depends(get_ledger),
    ) -> list[Reservation]:
        return ledger.all()

    # ── Analytics ────────────────────────────────────────────────────────

    @app.get("/api/analytics")
    def analytics(events: EventLog = Depends(get_event_log)) -> dict:
        return compute_analytics(events.events())

    return app


app = create_app()

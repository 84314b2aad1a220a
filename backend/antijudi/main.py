"""Anti-Judi Simulator FastAPI Application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from antijudi.config import settings
from antijudi.content import PATTERN_NOTES, build_share_poster, education_content
from antijudi.errors import ErrorCode, GameError
from antijudi.logic import analytics
from antijudi.logic.engine import SpinEngine
from antijudi.logic.models import GameState, SpinResult
from antijudi.logic.rng import ProductionRNG
from antijudi.middleware import ErrorHandlerMiddleware, PlayerIdMiddleware
from antijudi.protocol import (
    AnalyticsResponse,
    EducationResponse,
    InitResponse,
    LocationCheckRequest,
    LocationCheckResponse,
    ResetResponse,
    ResultResponse,
    RiskZonesResponse,
    SessionView,
    SpinRequest,
    SpinResponse,
    SpinView,
)
from antijudi.risk_zones import (
    RISK_ZONES,
    check_province_risk,
    find_risk_zone,
    pick_demo_location,
)
from antijudi.session_store import session_store
from antijudi.validators import validate_spin_request


# Number of history entries echoed back in session snapshots
RECENT_SPINS = 10


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and manage the Redis connection lifecycle."""
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    await session_store.connect()
    yield
    await session_store.close()


app = FastAPI(
    title="Anti-Judi Simulator",
    version="0.1.0",
    description="Educational slot simulator showing house edge and near-miss effects",
    lifespan=lifespan,
)

app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(PlayerIdMiddleware)

# Game engine instance
engine = SpinEngine()

# Demo-location picker, separate from the game RNG
demo_rng = ProductionRNG()


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies use the protocol error shape instead of FastAPI's 422."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    return GameError(ErrorCode.INVALID_REQUEST, message).to_response()


def _spin_view(result: SpinResult) -> SpinView:
    return SpinView(
        id=result.id,
        bet=result.bet,
        win=result.win,
        isWin=result.is_win,
        nearMiss=result.near_miss,
        timestamp=result.timestamp,
        symbols=[int(s) for s in result.symbols],
    )


def _session_view(state: GameState) -> SessionView:
    """Snapshot of the session, newest spins first."""
    return SessionView(
        balance=state.balance,
        houseEdge=state.house_edge,
        effectiveHouseEdge=state.effective_house_edge(),
        baseWinProbability=state.base_win_probability,
        dynamicWinProbability=state.dynamic_win_probability(),
        spinCount=state.spin_counter,
        currentSymbols=[int(s) for s in state.current_symbols],
        lossRatio=analytics.loss_ratio(state.history, settings.loss_ratio_cap),
        recentSpins=[_spin_view(s) for s in reversed(state.history[-RECENT_SPINS:])],
    )


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/init")
async def init(request: Request) -> dict:
    """Configuration plus the player's current session."""
    state = await session_store.load_session(request.state.player_id)
    return InitResponse(session=_session_view(state)).model_dump()


@app.post("/spin")
async def spin(request: Request, body: SpinRequest) -> dict:
    """
    POST /spin.

    Implements:
    - Request validation
    - Per-player locking (ROUND_IN_PROGRESS on concurrent spin)
    - Engine execution against the stored session
    - Session persistence, then spin recording
    """
    player_id = request.state.player_id

    validate_spin_request(body)

    async with session_store.player_lock(player_id):
        state = await session_store.load_session(player_id)
        result = engine.settle(state, body.bet)
        await session_store.save_session(player_id, state)
        engine.record(state, result, device_id=player_id)

    return SpinResponse(
        result=_spin_view(result),
        session=_session_view(state),
    ).model_dump()


@app.post("/reset")
async def reset(request: Request) -> dict:
    """Restore the starting balance and clear history."""
    player_id = request.state.player_id

    async with session_store.player_lock(player_id):
        state = await session_store.load_session(player_id)
        await session_store.clear_session(player_id)
        engine.reset(state, device_id=player_id)

    return ResetResponse(session=_session_view(state)).model_dump()


@app.get("/analytics")
async def loss_analytics(request: Request) -> dict:
    """Loss chart data for the player's session."""
    state = await session_store.load_session(request.state.player_id)
    summary = analytics.summarize(state.history, settings.loss_ratio_cap)
    return AnalyticsResponse(summary=summary).model_dump()


@app.get("/result")
async def simulation_result(request: Request) -> dict:
    """End-of-simulation summary with shareable poster."""
    state = await session_store.load_session(request.state.player_id)
    loss = analytics.total_loss(state.history)
    tally = analytics.counts(state.history)
    return ResultResponse(
        totalLoss=loss,
        totalSpins=tally.total,
        finalBalance=state.balance,
        wins=tally.wins,
        nearMisses=tally.near_misses,
        patternNotes=list(PATTERN_NOTES),
        poster=build_share_poster(loss, tally.total),
    ).model_dump()


@app.get("/risk-zones")
async def risk_zones() -> dict:
    return RiskZonesResponse(zones=RISK_ZONES).model_dump()


def _evaluate_location(
    latitude: float, longitude: float, province: str | None = None
) -> LocationCheckResponse:
    return LocationCheckResponse(
        latitude=latitude,
        longitude=longitude,
        nearestZone=find_risk_zone(latitude, longitude),
        province=check_province_risk(latitude, longitude, province),
    )


@app.post("/risk-zones/check")
async def check_location(body: LocationCheckRequest) -> dict:
    """Evaluate a device location against zones and province flags."""
    return _evaluate_location(body.latitude, body.longitude, body.province).model_dump()


@app.get("/risk-zones/demo")
async def demo_location() -> dict:
    """Evaluate a random demo location (no GPS)."""
    latitude, longitude = pick_demo_location(demo_rng)
    return _evaluate_location(latitude, longitude).model_dump()


@app.get("/education")
async def education() -> dict:
    return EducationResponse(content=education_content()).model_dump()

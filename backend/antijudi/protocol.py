"""Request/response models for the simulator HTTP protocol."""
from pydantic import BaseModel, Field, StrictInt

from antijudi.config import settings
from antijudi.content import EducationContent
from antijudi.logic.analytics import LossSummary
from antijudi.logic.models import SYMBOL_GLYPHS
from antijudi.risk_zones import ProvinceRisk, RiskZone, RiskZoneMatch


# === Request Models ===


class SpinRequest(BaseModel):
    """POST /spin request body."""

    bet: StrictInt = Field(..., description="Positive integer stake; UI presets are bet_presets")


class LocationCheckRequest(BaseModel):
    """POST /risk-zones/check request body."""

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    province: str | None = Field(default=None, description="Client-geocoded province name")


# === Response Models ===


class Configuration(BaseModel):
    """Configuration object in /init response."""

    currency: str = "Rp"
    initialBalance: int = settings.initial_balance
    betPresets: list[int] = settings.bet_presets
    symbols: list[str] = Field(default_factory=lambda: list(SYMBOL_GLYPHS.values()))
    lossRatioCap: int = settings.loss_ratio_cap
    animationFrames: int = settings.animation_frames
    animationIntervalMs: int = settings.animation_interval_ms


class SpinView(BaseModel):
    """A settled spin as the client renders it."""

    id: int
    bet: int
    win: int
    isWin: bool
    nearMiss: bool
    timestamp: int
    symbols: list[int]


class SessionView(BaseModel):
    """Current session snapshot."""

    balance: int
    houseEdge: float
    effectiveHouseEdge: float
    baseWinProbability: float
    dynamicWinProbability: float
    spinCount: int
    currentSymbols: list[int]
    lossRatio: float
    recentSpins: list[SpinView] = Field(default_factory=list)


class InitResponse(BaseModel):
    """GET /init response."""

    protocolVersion: str = settings.protocol_version
    configuration: Configuration = Field(default_factory=Configuration)
    session: SessionView


class SpinResponse(BaseModel):
    """POST /spin response."""

    protocolVersion: str = settings.protocol_version
    result: SpinView
    session: SessionView


class ResetResponse(BaseModel):
    """POST /reset response."""

    protocolVersion: str = settings.protocol_version
    session: SessionView


class AnalyticsResponse(BaseModel):
    """GET /analytics response."""

    protocolVersion: str = settings.protocol_version
    summary: LossSummary


class ResultResponse(BaseModel):
    """GET /result response (end-of-simulation screen)."""

    protocolVersion: str = settings.protocol_version
    totalLoss: int
    totalSpins: int
    finalBalance: int
    wins: int
    nearMisses: int
    patternNotes: list[str]
    poster: str


class RiskZonesResponse(BaseModel):
    protocolVersion: str = settings.protocol_version
    zones: list[RiskZone]


class LocationCheckResponse(BaseModel):
    """Risk evaluation of one location."""

    protocolVersion: str = settings.protocol_version
    latitude: float
    longitude: float
    nearestZone: RiskZoneMatch | None = None
    province: ProvinceRisk


class EducationResponse(BaseModel):
    protocolVersion: str = settings.protocol_version
    content: EducationContent

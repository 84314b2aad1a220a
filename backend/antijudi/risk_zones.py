"""Location risk zones and province risk lookup.

Zones and province flags are static demo data. Geocoding happens on the
client; callers pass the resolved province name when they have one.
"""
import math
import re

from pydantic import BaseModel

from antijudi.logic.rng import RNGBase


EARTH_RADIUS_M = 6_371_000.0


class RiskZone(BaseModel):
    """A circular area flagged as a gambling trigger."""
    name: str
    latitude: float
    longitude: float
    radius_meters: float
    warning: str


class RiskZoneMatch(BaseModel):
    zone: RiskZone
    distance_meters: float


class ProvinceRisk(BaseModel):
    province: str | None
    is_risk: bool
    source: str  # "client" | "bounding_box" | "unknown"


RISK_ZONES: list[RiskZone] = [
    RiskZone(
        name="Mall Besar Jakarta",
        latitude=-6.2088,
        longitude=106.8456,
        radius_meters=500,
        warning="Caution: shopping malls are a common access point for online gambling.",
    ),
    RiskZone(
        name="Kawasan Hiburan Malam Kemang",
        latitude=-6.1751,
        longitude=106.8650,
        radius_meters=300,
        warning="High-risk zone: many gambling addictions start around nightlife areas.",
    ),
    RiskZone(
        name="Game Center Mangga Dua",
        latitude=-6.2293,
        longitude=106.8140,
        radius_meters=200,
        warning="Attention: game centers can be a gateway to online gambling.",
    ),
    RiskZone(
        name="Pusat Perbelanjaan Sudirman",
        latitude=-6.2250,
        longitude=106.8200,
        radius_meters=400,
        warning="Crowded area with easy internet access, a known gambling trigger zone.",
    ),
    RiskZone(
        name="Kawasan Hiburan Blok M",
        latitude=-6.2443,
        longitude=106.7988,
        radius_meters=350,
        warning="Risk zone: a gathering place often linked to gambling activity.",
    ),
]

# Demo device positions (lat, lon)
DEMO_LOCATIONS: list[tuple[float, float]] = [
    (-6.2088, 106.8456),  # Jakarta
    (-6.1751, 106.8650),  # Jakarta
    (-6.2000, 106.8300),  # Jakarta area
    (-7.2575, 112.7521),  # Surabaya, Jawa Timur
    (-2.5489, 140.6917),  # Papua
]

# True = risk province
PROVINCE_RISK: dict[str, bool] = {
    # Sumatera
    "Aceh": True,
    "Sumatera Utara": True,
    "Sumatera Barat": True,
    "Riau": True,
    "Kepulauan Riau": True,
    "Jambi": True,
    "Bengkulu": True,
    "Sumatera Selatan": True,
    "Bangka Belitung": True,
    "Lampung": True,
    # Jawa
    "Banten": True,
    "DKI Jakarta": True,
    "Jawa Barat": True,
    "Jawa Tengah": True,
    "DI Yogyakarta": True,
    "Jawa Timur": True,
    # Kalimantan
    "Kalimantan Barat": True,
    "Kalimantan Tengah": True,
    "Kalimantan Selatan": True,
    "Kalimantan Timur": True,
    "Kalimantan Utara": True,
    # Sulawesi
    "Sulawesi Utara": False,
    "Sulawesi Tengah": False,
    "Sulawesi Selatan": False,
    "Sulawesi Tenggara": False,
    "Sulawesi Barat": False,
    "Gorontalo": False,
    # Bali & Nusa Tenggara
    "Bali": True,
    "Nusa Tenggara Barat": True,
    "Nusa Tenggara Timur": True,
    # Maluku
    "Maluku": True,
    "Maluku Utara": True,
    # Papua
    "Papua": False,
    "Papua Barat": False,
}

# Common English geocoder names -> Indonesian province names
ENGLISH_TO_INDONESIAN: dict[str, str] = {
    "east java": "Jawa Timur",
    "central java": "Jawa Tengah",
    "west java": "Jawa Barat",
    "yogyakarta": "DI Yogyakarta",
    "jakarta": "DKI Jakarta",
    "north sumatra": "Sumatera Utara",
    "south sumatra": "Sumatera Selatan",
    "west sumatra": "Sumatera Barat",
    "west papua": "Papua Barat",
    "papua": "Papua",
    "north sulawesi": "Sulawesi Utara",
    "south sulawesi": "Sulawesi Selatan",
    "central sulawesi": "Sulawesi Tengah",
    "southeast sulawesi": "Sulawesi Tenggara",
    "west sulawesi": "Sulawesi Barat",
    "gorontalo": "Gorontalo",
}

# (min_lat, max_lat, min_lon, max_lon)
FALLBACK_REGIONS: dict[str, tuple[float, float, float, float]] = {
    "Sulawesi": (-6.0, 3.5, 118.5, 125.5),
    "Papua": (-10.0, 0.0, 129.0, 141.0),
}

_PREFIX_RE = re.compile(r"^(provinsi|province)\s+", re.IGNORECASE)


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def find_risk_zone(latitude: float, longitude: float) -> RiskZoneMatch | None:
    """First zone (in list order) whose radius contains the point."""
    for zone in RISK_ZONES:
        distance = haversine_meters(latitude, longitude, zone.latitude, zone.longitude)
        if distance <= zone.radius_meters:
            return RiskZoneMatch(zone=zone, distance_meters=distance)
    return None


def normalize_province_name(raw: str | None) -> str | None:
    """Strip "Provinsi"/"Province" prefixes and map English names."""
    if raw is None or not raw.strip():
        return None
    name = _PREFIX_RE.sub("", raw.strip())
    return ENGLISH_TO_INDONESIAN.get(name.lower(), name)


def province_risk(name: str | None) -> bool | None:
    """Risk flag for a province name, None if unknown."""
    normalized = normalize_province_name(name)
    if normalized is None:
        return None
    for province, is_risk in PROVINCE_RISK.items():
        if province.lower() == normalized.lower():
            return is_risk
    return None


def fallback_province(latitude: float, longitude: float) -> str | None:
    """Coarse region name from bounding boxes when geocoding gave nothing."""
    for region, (min_lat, max_lat, min_lon, max_lon) in FALLBACK_REGIONS.items():
        if min_lat <= latitude <= max_lat and min_lon <= longitude <= max_lon:
            return region
    return None


def check_province_risk(
    latitude: float, longitude: float, province: str | None = None
) -> ProvinceRisk:
    """
    Decide whether a location lies in a risk province.

    Uses the client-resolved province when given, else the bounding-box
    fallback. Unknown provinces default to risk.
    """
    source = "client"
    if province is None or not province.strip():
        province = fallback_province(latitude, longitude)
        source = "bounding_box" if province else "unknown"

    mapped = province_risk(province)
    if mapped is None:
        # Region-level fallback names ("Sulawesi", "Papua") are not provinces
        if province in FALLBACK_REGIONS:
            mapped = False
        else:
            mapped = True
    return ProvinceRisk(province=province, is_risk=mapped, source=source)


def pick_demo_location(rng: RNGBase) -> tuple[float, float]:
    return DEMO_LOCATIONS[rng.randint(0, len(DEMO_LOCATIONS) - 1)]

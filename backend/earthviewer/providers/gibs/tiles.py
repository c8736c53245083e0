from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from earthviewer.config import GIBS_ENDPOINT

TILE_SIZE = 256
DEFAULT_LAYER = "VIIRS_SNPP_CorrectedReflectance_TrueColor"
ATTRIBUTION = "Imagery courtesy NASA GIBS, Blue Marble, MODIS/VIIRS"

# {z}/{y}/{x} are left for the map widget to fill per tile.
TILE_TEMPLATE = (
    "{endpoint}?service=WMTS&request=GetTile&version=1.0.0&layer={layer}&style=default"
    "&tilematrixset=GoogleMapsCompatible_Level&format=image/jpeg&time={time}"
    "&tilematrix={{z}}&tilerow={{y}}&tilecol={{x}}"
)


@dataclass(frozen=True)
class TileLayer:
    id: str
    name: str


GIBS_LAYERS = [
    TileLayer("BlueMarble_ShadedRelief_Bathymetry", "Blue Marble (Bathymetry)"),
    TileLayer("MODIS_Terra_CorrectedReflectance_TrueColor", "MODIS Terra True Color"),
    TileLayer("MODIS_Aqua_CorrectedReflectance_TrueColor", "MODIS Aqua True Color"),
    TileLayer("VIIRS_SNPP_CorrectedReflectance_TrueColor", "VIIRS SNPP True Color"),
    TileLayer("VIIRS_NOAA20_CorrectedReflectance_TrueColor", "VIIRS NOAA-20 True Color"),
    TileLayer("MODIS_Terra_Aerosol", "Aerosol (Terra)"),
    TileLayer("MODIS_Terra_Cloud_Top_Temperature_Day", "Cloud Top Temp (Day)"),
    TileLayer("MODIS_Terra_Chlorophyll_A", "Chlorophyll (Terra)"),
]


def format_tile_date(value: Union[date, str]) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)


def build_tile_url(layer: str, day: Union[date, str], endpoint: str = GIBS_ENDPOINT) -> str:
    return TILE_TEMPLATE.format(endpoint=endpoint, layer=layer, time=format_tile_date(day))


def today_utc(now: Optional[datetime] = None) -> date:
    return (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date()


def default_tile_date(now: Optional[datetime] = None) -> date:
    """Yesterday in UTC; today's imagery is usually incomplete."""
    return today_utc(now) - timedelta(days=1)

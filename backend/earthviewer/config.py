from __future__ import annotations

import os

EONET_BASE_URL = os.getenv("EONET_BASE_URL", "https://eonet.gsfc.nasa.gov/api/v3").rstrip("/")
GIBS_ENDPOINT = os.getenv("GIBS_ENDPOINT", "https://gibs.earthdata.nasa.gov/wmts/epsg3857/best/wmts.cgi")

EVENTS_LIMIT = 250
DEFAULT_RANGE_DAYS = 45
DEFAULT_STATUS = "open"

FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")

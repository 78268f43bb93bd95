from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import pandas as pd
import structlog

from ..asserts import require_in_range, require_instance_of, require_url
from ..config import AppSettings
from ..ingestion.client import ErrorCallback, RequestClient, SuccessCallback
from ..ingestion.request import Request
from ..schemas.location import Location

logger = structlog.get_logger(__name__)

MAX_DAILY_DAYS = 16

FRAME_COLUMNS = [
    "temperature_c",
    "humidity_pct",
    "pressure_hpa",
    "windspeed_mps",
    "cloudcover_pct",
]


class ForecastService:
    def __init__(self, settings: Optional[AppSettings] = None, client: Optional[RequestClient] = None) -> None:
        self._settings = settings or AppSettings()
        require_url(self._settings.base_url, "Weather API base URL is invalid: @")
        self._client = client or RequestClient(self._settings)

    def get_current_weather(
        self,
        location: Location,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Request:
        return self._client.parse(self.build_url("weather", location), on_success, on_error)

    def get_hourly_forecast(
        self,
        location: Location,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Request:
        """Fetch the 5 day forecast in 3 hour steps."""
        return self._client.parse(self.build_url("forecast", location), on_success, on_error)

    def get_daily_forecast(
        self,
        location: Location,
        days: int = 7,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Request:
        require_in_range(days, 1, MAX_DAILY_DAYS, "Forecast days value should be between @1 and @2")
        url = self.build_url("forecast/daily", location, cnt=days)
        return self._client.parse(url, on_success, on_error)

    def build_url(self, endpoint: str, location: Location, **extra: Any) -> str:
        require_instance_of(location, Location, "Location is invalid.")
        params: Dict[str, Any] = dict(location.query_params())
        params.update(extra)
        params["units"] = self._settings.units
        if self._settings.api_key:
            params["appid"] = self._settings.api_key
        else:
            logger.warning("api_key_missing", endpoint=endpoint)
        return f"{self._settings.base_url.rstrip('/')}/{endpoint}?{urlencode(params)}"

    @staticmethod
    def to_frame(payload: Dict[str, Any]) -> pd.DataFrame:
        """Normalize a forecast payload into a DataFrame indexed by UTC time.

        Accepts both the 3-hour forecast layout (measurements under ``main``,
        ``wind`` and ``clouds``) and the daily layout (measurements at the top
        level of each entry, day temperature under ``temp.day``).
        """
        if not isinstance(payload, dict):
            raise ValueError("payload must be a JSON object")
        entries = payload.get("list")
        if not isinstance(entries, list):
            raise ValueError("payload.list missing or invalid")

        times: List[int] = []
        rows: List[Dict[str, float]] = []
        for entry in entries:
            if "dt" not in entry:
                raise ValueError("forecast entry without dt")
            times.append(entry["dt"])
            if "main" in entry:
                main = entry.get("main") or {}
                temperature = main.get("temp")
                humidity = main.get("humidity")
                pressure = main.get("pressure")
                wind = (entry.get("wind") or {}).get("speed")
                clouds = (entry.get("clouds") or {}).get("all")
            else:
                temp = entry.get("temp")
                temperature = temp.get("day") if isinstance(temp, dict) else temp
                humidity = entry.get("humidity")
                pressure = entry.get("pressure")
                wind = entry.get("speed")
                clouds = entry.get("clouds")
            rows.append(
                {
                    "temperature_c": _to_float(temperature),
                    "humidity_pct": _to_float(humidity),
                    "pressure_hpa": _to_float(pressure),
                    "windspeed_mps": _to_float(wind),
                    "cloudcover_pct": _to_float(clouds),
                }
            )

        df = pd.DataFrame(rows, columns=FRAME_COLUMNS, index=pd.to_datetime(times, unit="s", utc=True))
        df.index.name = "time"
        return df.sort_index()


def _to_float(value: Optional[Any]) -> float:
    return float(value) if value is not None else float("nan")

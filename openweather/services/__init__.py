from .forecast_service import ForecastService

__all__ = ["ForecastService"]

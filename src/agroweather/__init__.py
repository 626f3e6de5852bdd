"""
Agroclimatic indicator estimation

This package retrieves daily weather for georeferenced sites from Daymet,
NASA POWER or CHIRPS, derives agronomic indicators and summarizes them
per season interval.
"""

__version__ = "0.1.0"
__description__ = "Agroclimatic indicators from daily provider weather"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "AgroWeatherApp":
        from .main import AgroWeatherApp
        return AgroWeatherApp
    if name == "PipelineDriver":
        from .pipeline import PipelineDriver
        return PipelineDriver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AgroWeatherApp",
    "PipelineDriver",
]

"""
Exception types raised by the agroweather pipeline.
"""

from typing import Optional


class AgroWeatherError(Exception):
    """Base class for all pipeline errors."""


class ProviderFetchError(AgroWeatherError):
    """A provider could not be reached or returned an error for a site."""

    def __init__(self, site_id: str, reason: str):
        self.site_id = site_id
        self.reason = reason
        super().__init__(f"Fetch failed for site {site_id}: {reason}")


class DataValidityError(AgroWeatherError, ValueError):
    """A record or reduction is physically impossible or undefined."""

    def __init__(
        self,
        message: str,
        site_id: Optional[str] = None,
        key: Optional[str] = None
    ):
        self.site_id = site_id
        self.key = key
        context = ", ".join(
            part for part in (
                f"site={site_id}" if site_id is not None else "",
                f"at={key}" if key is not None else "",
            ) if part
        )
        super().__init__(f"{message} ({context})" if context else message)


class SchemaMismatchError(AgroWeatherError):
    """A provider payload lacks a structural element every derivation needs."""

    def __init__(self, provider: str, field: str):
        self.provider = provider
        self.field = field
        super().__init__(f"{provider} payload is missing '{field}'")

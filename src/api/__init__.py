"""Printyx backend API client — alerts, breaches, KPIs and DoD validation."""

from src.api.client import TENANT_HEADER, PrintyxClient, TenantProvider
from src.api.exceptions import ApiError, ApiNotConnectedError, ApiParseError, FetchError

__all__ = [
    "TENANT_HEADER",
    "ApiError",
    "ApiNotConnectedError",
    "ApiParseError",
    "FetchError",
    "PrintyxClient",
    "TenantProvider",
]

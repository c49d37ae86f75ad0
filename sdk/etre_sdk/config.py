"""
Configuration for Etre SDK clients.

Uses pydantic-settings for environment variable loading (prefix ETRE_).
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .constants import API_ROOT, QUERY_TIMEOUT_HEADER, TRACE_HEADER, VERSION, VERSION_HEADER


def format_trace(trace: Mapping[str, str]) -> str:
    """Format trace values as key=value pairs, comma separated, sorted by key."""
    return ",".join(f"{k}={trace[k]}" for k in sorted(trace))


def parse_trace(value: str) -> Dict[str, str]:
    """Parse a key=value,key=value trace string. Malformed pairs are skipped."""
    trace: Dict[str, str] = {}
    for pair in value.split(","):
        key, sep, val = pair.partition("=")
        key = key.strip()
        if sep and key:
            trace[key] = val.strip()
    return trace


def request_headers(
    trace: Optional[Mapping[str, str]] = None,
    query_timeout: Optional[float] = None,
) -> Dict[str, str]:
    """Build the Etre request headers.

    Args:
        trace: Trace values sent in TRACE_HEADER
        query_timeout: Per-query timeout override in seconds

    Returns:
        Header dict; the version header is always present
    """
    headers = {VERSION_HEADER: VERSION}
    if trace:
        headers[TRACE_HEADER] = format_trace(trace)
    if query_timeout is not None:
        headers[QUERY_TIMEOUT_HEADER] = f"{query_timeout:g}s"
    return headers


class ClientSettings(BaseSettings):
    """Client configuration loaded from environment."""

    addr: str = Field(default="http://127.0.0.1:32084", description="Etre API address")
    entity_type: str = Field(default="", description="Entity type the client is bound to")
    query_timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-query timeout override, seconds"
    )
    trace: str = Field(default="", description="Trace values, key=value,key=value")
    debug: bool = Field(default=False, description="Enable SDK debug logging")

    model_config = {"env_prefix": "ETRE_"}

    @property
    def api_url(self) -> str:
        """Full API URL."""
        return self.addr.rstrip("/") + API_ROOT

    def headers(self) -> Dict[str, str]:
        """Request headers for these settings."""
        return request_headers(parse_trace(self.trace), self.query_timeout)

"""Client IP resolution for the attestation audit trail."""

import logging

import httpx

from locum.core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_IP = "unknown"


class IpLookupClient:
    """Resolves the applicant's public IP address.

    A lookup failure never blocks a submission: any error or timeout
    yields ``"unknown"``.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        enabled: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.ip_lookup_url
        self.timeout = timeout or settings.ip_lookup_timeout_seconds
        self.enabled = settings.ip_lookup_enabled if enabled is None else enabled
        self._transport = transport

    async def resolve(self, forwarded_for: str | None = None) -> str:
        """Return the client IP, preferring the address the request came from."""
        if forwarded_for:
            first = forwarded_for.split(",")[0].strip()
            if first:
                return first

        if not self.enabled:
            return UNKNOWN_IP

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self._transport
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                ip = response.json().get("ip")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"IP lookup failed, recording unknown: {e}")
            return UNKNOWN_IP

        if not isinstance(ip, str) or not ip:
            logger.warning("IP lookup returned no address, recording unknown")
            return UNKNOWN_IP
        return ip


ip_lookup_client = IpLookupClient()

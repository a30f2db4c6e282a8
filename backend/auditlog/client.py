"""HTTP client used by other inventory services to record audit entries."""
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger("auditlog.client")


class LogClient:
    """Posts entries to ``POST /logs`` on a running audit log API.

    ``log_action`` is fire-and-forget: transport errors and non-2xx replies
    are logged and reported as ``None``, never raised, so a failed audit
    write cannot abort the caller's own operation.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "LogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def log_action(
        self,
        action: str,
        description: str,
        user_id: Optional[int] = None,
        user_email: Optional[str] = None,
        product_code: Optional[str] = None,
        product_name: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        payload = {
            "action": action,
            "description": description,
            "user_id": user_id,
            "user_email": user_email,
            "product_code": product_code,
            "product_name": product_name,
            "ip_address": ip_address,
        }
        try:
            resp = self._client.post("/logs", json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to log action %r: %s", action, exc)
            return None
        return resp.json()

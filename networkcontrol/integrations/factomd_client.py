# networkcontrol/integrations/factomd_client.py
"""
factomd Client - JSON-RPC 2.0 access to a factomd node

Serves two roles for the governance pipeline:
  - Roster source: `authorities` on the debug endpoint
  - Broadcaster: `send-raw-message` on the v2 API endpoint

Every transport, HTTP, RPC or response-shape failure is raised as
NetworkError with the original exception attached.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from networkcontrol.config import settings
from networkcontrol.errors import NetworkError
from networkcontrol.roster.models import Authority

logger = logging.getLogger("networkcontrol.integrations.factomd")


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class FactomdConfig:
    """factomd endpoint configuration loaded from settings"""
    url: str = field(default_factory=lambda: settings.FACTOMD_URL)
    api_path: str = field(default_factory=lambda: settings.FACTOMD_API_PATH)
    debug_path: str = field(default_factory=lambda: settings.FACTOMD_DEBUG_PATH)
    timeout: float = field(default_factory=lambda: settings.FACTOMD_TIMEOUT)


# =============================================================================
# factomd Client
# =============================================================================

class FactomdClient:
    """
    Async client for the factomd node API.

    Implements both RosterSource (fetch_authorities) and
    MessageBroadcaster (send_raw_message).
    """

    def __init__(
        self,
        config: Optional[FactomdConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or FactomdConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._ids = itertools.count(1)

        logger.info(f"FactomdClient initialized: url={self.config.url}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create httpx async client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.url,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the httpx client"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("FactomdClient closed")

    async def __aenter__(self) -> "FactomdClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # JSON-RPC
    # -------------------------------------------------------------------------

    async def _call(self, path: str, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        payload: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
        }
        if params is not None:
            payload["params"] = params

        logger.debug(f"factomd call: path={path}, method={method}")

        try:
            client = await self._get_client()
            response = await client.post(
                path,
                json=payload,
                timeout=httpx.Timeout(self.config.timeout)
            )
            response.raise_for_status()
            data = response.json()

        except httpx.TimeoutException as e:
            raise NetworkError(
                f"factomd {method} timed out after {self.config.timeout}s",
                error_code="TIMEOUT",
                original_error=e,
                context={"method": method}
            )
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"factomd {method} returned HTTP {e.response.status_code}: {e.response.text[:200]}",
                error_code=f"HTTP_{e.response.status_code}",
                original_error=e,
                context={"method": method}
            )
        except httpx.HTTPError as e:
            raise NetworkError(
                f"factomd {method} failed: {e}",
                error_code="TRANSPORT_ERROR",
                original_error=e,
                context={"method": method}
            )
        except ValueError as e:
            raise NetworkError(
                f"factomd {method} returned invalid JSON",
                error_code="BAD_RESPONSE",
                original_error=e,
                context={"method": method}
            )

        if not isinstance(data, dict):
            raise NetworkError(
                f"factomd {method} returned an unexpected response",
                error_code="BAD_RESPONSE",
                context={"method": method}
            )

        error = data.get("error")
        if error:
            detail = error.get("message", error) if isinstance(error, dict) else error
            raise NetworkError(
                f"factomd {method} error: {detail}",
                error_code="RPC_ERROR",
                context={"method": method, "error": error}
            )

        return data.get("result")

    # -------------------------------------------------------------------------
    # Roster Source
    # -------------------------------------------------------------------------

    async def fetch_authorities(self) -> List[Authority]:
        """Return the current authority set as reported by the node"""
        result = await self._call(self.config.debug_path, "authorities")

        records = result.get("authorities") if isinstance(result, dict) else None
        if not isinstance(records, list):
            raise NetworkError(
                "factomd authorities response has no authority list",
                error_code="BAD_RESPONSE",
                context={"method": "authorities"}
            )

        malformed = [r for r in records if not isinstance(r, dict)]
        if malformed:
            raise NetworkError(
                f"factomd authorities response has {len(malformed)} non-object entries",
                error_code="BAD_RESPONSE",
                context={"method": "authorities", "entry": repr(malformed[0])[:200]}
            )

        authorities = [Authority.from_dict(r) for r in records]
        logger.info(f"Fetched {len(authorities)} authorities from {self.config.url}")
        return authorities

    # -------------------------------------------------------------------------
    # Broadcaster
    # -------------------------------------------------------------------------

    async def send_raw_message(self, message_hex: str) -> str:
        """Broadcast a raw hex-encoded message; returns the node's reply text"""
        result = await self._call(
            self.config.api_path,
            "send-raw-message",
            {"message": message_hex}
        )
        if isinstance(result, dict):
            return str(result.get("message", ""))
        return "" if result is None else str(result)

    # -------------------------------------------------------------------------
    # Network Info
    # -------------------------------------------------------------------------

    async def get_heights(self) -> Dict[str, Any]:
        """Current block heights of the node"""
        result = await self._call(self.config.api_path, "heights")
        if not isinstance(result, dict):
            raise NetworkError(
                "factomd heights response is not an object",
                error_code="BAD_RESPONSE",
                context={"method": "heights"}
            )
        return result

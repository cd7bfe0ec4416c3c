"""
Block explorer client for a mempool.space-style REST API.

Lookups are advisory: every failure (timeout, connection error, non-2xx,
malformed body) surfaces as NetworkAdvisory so callers can fall back to
local-only validation. There is no retry; one attempt per call.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from satslab.validation.errors import NetworkAdvisory

logger = structlog.get_logger()

SATS_PER_BTC = 100_000_000


class ExplorerClient:
    """Async client for transaction and address lookups."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))

    async def get_transaction(self, txid: str) -> dict[str, Any]:
        """Fetch a transaction record. Raises NetworkAdvisory."""
        return await self._get_json(f"/tx/{txid}")

    async def get_address(self, address: str) -> dict[str, Any]:
        """Fetch an address record. Raises NetworkAdvisory."""
        return await self._get_json(f"/address/{address}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, path: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.info("explorer_unreachable", url=url, error=str(e))
            msg = f"Explorer request failed: {e.__class__.__name__}"
            raise NetworkAdvisory(msg) from e

        if not response.is_success:
            logger.info("explorer_non_success", url=url, status=response.status_code)
            msg = f"Explorer returned HTTP {response.status_code}"
            raise NetworkAdvisory(msg, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            msg = "Explorer returned a malformed body"
            raise NetworkAdvisory(msg, status_code=response.status_code) from e
        if not isinstance(payload, dict):
            msg = "Explorer returned an unexpected payload"
            raise NetworkAdvisory(msg, status_code=response.status_code)
        return payload


def format_sbtc(satoshis: int | float) -> str:
    """Format a satoshi amount as signet BTC."""
    return f"{satoshis / SATS_PER_BTC:.8f} sBTC"


def summarize_transaction(tx: dict[str, Any]) -> str:
    """One-line summary of a transaction record for learner feedback."""
    outputs = tx.get("vout") or []
    total_out = sum(int(o.get("value") or 0) for o in outputs if isinstance(o, dict))
    status = tx.get("status") or {}
    if status.get("confirmed"):
        state = f"confirmed in block {status.get('block_height', '?')}"
    else:
        state = "unconfirmed"
    return (
        f"{len(outputs)} output(s) totalling {format_sbtc(total_out)}, "
        f"fee {format_sbtc(int(tx.get('fee') or 0))}, {state}"
    )


def summarize_address(info: dict[str, Any]) -> str:
    """One-line summary of an address record for learner feedback."""
    chain = info.get("chain_stats") or {}
    mempool = info.get("mempool_stats") or {}
    tx_count = int(chain.get("tx_count") or 0) + int(mempool.get("tx_count") or 0)
    balance = (
        int(chain.get("funded_txo_sum") or 0)
        - int(chain.get("spent_txo_sum") or 0)
        + int(mempool.get("funded_txo_sum") or 0)
        - int(mempool.get("spent_txo_sum") or 0)
    )
    return f"{tx_count} transaction(s), balance {format_sbtc(balance)}"

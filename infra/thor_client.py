import asyncio
import json
import time
from typing import Dict, Any, Optional, Union
from urllib.parse import quote

import aiohttp

# A head younger than this is considered in sync
HEAD_FRESH_SECONDS = 30


def _segment(value: Any) -> str:
    # caller input must stay inside one path segment
    return quote(str(value), safe="")


class ThorAPIError(Exception):
    """Non-2xx answer from the Thor node (e.g. malformed address)."""

    def __init__(self, status: int, body: str, url: str):
        super().__init__(f"HTTP {status} from {url}: {body}")
        self.status = status
        self.body = body
        self.url = url


class ThorClient:
    """
    Async client for the Thor node REST API.

    Exposes the lookups the bridge needs (blocks, accounts, transactions,
    receipts) plus two descriptors kept in memory:

        genesis: block 0, fetched once on start
        status:  {"progress": 0..1, "head": {...}}, refreshed by a
                 background task every `poll_interval` seconds

    Lookups of missing blocks/transactions/receipts return None. Transport
    failures raise TimeoutError / ConnectionError, HTTP errors raise
    ThorAPIError. Nothing is retried or cached.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        poll_interval: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            base_url: Thor node url, e.g. http://localhost:8669
            timeout: Per-request timeout in seconds
            poll_interval: Seconds between head refreshes (<= 0 disables polling)
            session: Optional externally managed aiohttp session
        """
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self.poll_interval = poll_interval

        self._session = session
        self._owns_session = session is None
        self._poll_task: Optional[asyncio.Task] = None

        self.genesis: Optional[Dict[str, Any]] = None
        self.status: Dict[str, Any] = {"progress": 0.0, "head": None}

    @classmethod
    async def connect(cls, base_url: str, **kwargs) -> "ThorClient":
        client = cls(base_url, **kwargs)
        try:
            await client.start()
        except BaseException:
            await client.close()
            raise
        return client

    async def start(self):
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Accept": "application/json", "User-Agent": "Thor-RPC-Bridge/1.0"},
            )

        genesis = await self.get_block(0)
        if genesis is None:
            raise ConnectionError(f"Genesis block not available from {self.base_url}")
        self.genesis = genesis

        await self.refresh_status()

        if self.poll_interval > 0:
            self._poll_task = asyncio.create_task(self._poll_head())

        print(f"[ThorClient] Connected to {self.base_url}, genesis {genesis['id']}")

    async def close(self):
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            print(f"[ThorClient] Closed connection to {self.base_url}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ------------------------------------------------------------------
    # Lookups

    async def get_block(
        self, revision: Union[int, str] = "latest", expanded: bool = False
    ) -> Optional[Dict[str, Any]]:
        """revision: block number, block id or "latest"."""
        if revision == "latest":
            revision = "best"
        params = {"expanded": "true"} if expanded else None
        return await self._get(f"/blocks/{_segment(revision)}", params=params)

    async def get_account(self, address: str) -> Dict[str, Any]:
        return await self._get(f"/accounts/{_segment(address)}")

    async def get_code(self, address: str) -> Dict[str, Any]:
        return await self._get(f"/accounts/{_segment(address)}/code")

    async def get_storage(self, address: str, key: str) -> Dict[str, Any]:
        return await self._get(f"/accounts/{_segment(address)}/storage/{_segment(key)}")

    async def get_transaction(self, tx_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(f"/transactions/{_segment(tx_id)}")

    async def get_receipt(self, tx_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(f"/transactions/{_segment(tx_id)}/receipt")

    # ------------------------------------------------------------------
    # Status

    async def refresh_status(self) -> Dict[str, Any]:
        head = await self.get_block("latest")
        if head is not None:
            self.status = {
                "progress": self.sync_progress(head),
                "head": {
                    "id": head["id"],
                    "number": head["number"],
                    "timestamp": head["timestamp"],
                    "parentID": head["parentID"],
                    "txsFeatures": head.get("txsFeatures"),
                    "gasLimit": head.get("gasLimit"),
                },
            }
        return self.status

    def sync_progress(self, head: Dict[str, Any], now: Optional[float] = None) -> float:
        now = time.time() if now is None else now
        if now - head["timestamp"] < HEAD_FRESH_SECONDS:
            return 1.0

        genesis_ts = self.genesis["timestamp"]
        span = now - genesis_ts
        if span <= 0:
            return 1.0
        return max(0.0, min(1.0, (head["timestamp"] - genesis_ts) / span))

    async def _poll_head(self):
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.refresh_status()
            except (TimeoutError, ConnectionError, ThorAPIError) as e:
                print(f"[ThorClient] Head refresh failed, keeping last status: {e}")

    # ------------------------------------------------------------------

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        if self._session is None:
            raise ConnectionError("ThorClient is not started")

        url = f"{self.base_url}{path}"
        try:
            async with self._session.get(url, params=params) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise ThorAPIError(response.status, body.strip(), url)
                body = await response.text(errors="replace")
                try:
                    return json.loads(body) if body.strip() else None
                except ValueError as e:
                    raise ThorAPIError(response.status, body.strip()[:200], url) from e

        except asyncio.TimeoutError as e:
            raise TimeoutError(f"Request to {url} timed out") from e

        except aiohttp.ClientError as e:
            raise ConnectionError(f"Failed to connect to {url}: {str(e)}") from e

"""Async client a peer uses to talk to the discovery registry."""
import httpx
import logging
import os

from node_registry import Node
from registry_service import NO_ACTIVE_NODES

REGISTRY_URL = os.getenv("REGISTRY_URL", "http://127.0.0.1:8080")

logger = logging.getLogger(__name__)


class BootstrapClient:
    def __init__(self, base_url: str = REGISTRY_URL, timeout: float = 3,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "BootstrapClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def ping(self) -> str:
        r = await self._client.get("/")
        r.raise_for_status()
        return r.text

    async def register(self, address: str, port: int) -> str:
        r = await self._client.post("/register", json={"address": address, "port": port})
        r.raise_for_status()
        logger.info("announced %s:%d to %s", address, port, self.base_url)
        return r.text

    async def deregister(self, address: str, port: int) -> str:
        r = await self._client.post("/deregister", json={"address": address, "port": port})
        r.raise_for_status()
        logger.info("withdrew %s:%d from %s", address, port, self.base_url)
        return r.text

    # None when the registry reports no active nodes
    async def query(self) -> Node | None:
        r = await self._client.get("/query")
        r.raise_for_status()
        data = r.json()
        if data == NO_ACTIVE_NODES:
            return None
        return Node.model_validate(data)

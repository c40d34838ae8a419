from pydantic import AliasChoices, BaseModel, Field
import asyncio
import logging
import random

logger = logging.getLogger(__name__)


class Node(BaseModel):
    address: str = Field(
        strict=True,
        validation_alias=AliasChoices("address", "ipv4_address"),
    )
    # reserved for ipv6, not used yet
    ipv6_address: str | None = None
    port: int = Field(strict=True, ge=0, le=65535)

    @property
    def key(self) -> tuple[str, int]:
        return (self.address, self.port)

    def matches(self, other: "Node") -> bool:
        return self.key == other.key

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


class Registry:
    """In-memory list of announced nodes.

    Every operation holds one lock over the whole list. The same
    (address, port) may be registered more than once; each copy counts
    when picking at random.
    """

    def __init__(self, rng: random.Random | None = None):
        self._nodes: list[Node] = []
        self._lock = asyncio.Lock()
        self._rng = rng or random.Random()

    async def register(self, node: Node) -> None:
        entry = node.model_copy(update={"ipv6_address": None})
        async with self._lock:
            self._nodes.append(entry)
            total = len(self._nodes)
        logger.info("registered %s (%d entries)", entry, total)

    # removes every entry with the same address and port
    async def deregister(self, node: Node) -> None:
        async with self._lock:
            before = len(self._nodes)
            self._nodes = [n for n in self._nodes if not n.matches(node)]
            removed = before - len(self._nodes)
        logger.info("deregistered %s (removed %d)", node, removed)

    async def pick_random(self) -> Node | None:
        async with self._lock:
            if not self._nodes:
                return None
            picked = self._nodes[self._rng.randrange(len(self._nodes))]
            node = picked.model_copy()
        logger.debug("picked %s", node)
        return node

    async def size(self) -> int:
        async with self._lock:
            return len(self._nodes)

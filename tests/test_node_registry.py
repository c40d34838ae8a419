import asyncio
import random

from node_registry import Node, Registry


def node(address="10.0.0.1", port=9000, **kw):
    return Node(address=address, port=port, **kw)


def test_empty_registry_picks_nothing():
    registry = Registry()
    assert asyncio.run(registry.pick_random()) is None


def test_register_then_pick_returns_same_node():
    async def scenario():
        registry = Registry()
        await registry.register(node())
        return [await registry.pick_random() for _ in range(10)]

    for picked in asyncio.run(scenario()):
        assert picked.key == ("10.0.0.1", 9000)


def test_register_clears_ipv6_address():
    async def scenario():
        registry = Registry()
        await registry.register(node(ipv6_address="::1"))
        return await registry.pick_random()

    assert asyncio.run(scenario()).ipv6_address is None


def test_register_keeps_duplicates():
    async def scenario():
        registry = Registry()
        for _ in range(3):
            await registry.register(node())
        return await registry.size()

    assert asyncio.run(scenario()) == 3


def test_deregister_removes_every_match():
    async def scenario():
        registry = Registry()
        for _ in range(4):
            await registry.register(node())
        await registry.deregister(node())
        return await registry.size(), await registry.pick_random()

    size, picked = asyncio.run(scenario())
    assert size == 0
    assert picked is None


def test_deregister_matches_address_and_port_only():
    async def scenario():
        registry = Registry()
        await registry.register(node("10.0.0.1", 9000))
        await registry.register(node("10.0.0.1", 9001))
        await registry.register(node("10.0.0.2", 9000))
        # ipv6 field plays no part in matching
        await registry.deregister(node("10.0.0.1", 9000, ipv6_address="::1"))
        return await registry.size()

    assert asyncio.run(scenario()) == 2


def test_deregister_unknown_node_is_noop():
    async def scenario():
        registry = Registry()
        await registry.register(node("10.0.0.1", 9000))
        await registry.register(node("10.0.0.2", 9000))
        await registry.deregister(node("10.9.9.9", 1))
        return await registry.size()

    assert asyncio.run(scenario()) == 2


def test_pick_returns_a_copy():
    async def scenario():
        registry = Registry()
        await registry.register(node())
        picked = await registry.pick_random()
        picked.port = 1
        return await registry.pick_random()

    assert asyncio.run(scenario()).port == 9000


# statistical: B registered twice should be picked about twice as often as A
def test_duplicates_weigh_selection():
    async def scenario():
        registry = Registry(rng=random.Random(1234))
        await registry.register(node("10.0.0.1", 9000))
        await registry.register(node("10.0.0.2", 9000))
        await registry.register(node("10.0.0.2", 9000))
        counts = {"10.0.0.1": 0, "10.0.0.2": 0}
        for _ in range(3000):
            picked = await registry.pick_random()
            counts[picked.address] += 1
        return counts

    counts = asyncio.run(scenario())
    ratio = counts["10.0.0.2"] / counts["10.0.0.1"]
    assert 1.6 < ratio < 2.4


def test_concurrent_register_and_deregister():
    nodes = [node(f"10.0.{i // 256}.{i % 256}", 9000 + i) for i in range(200)]

    async def scenario():
        registry = Registry()
        await asyncio.gather(*(registry.register(n) for n in nodes), *(registry.pick_random() for _ in range(50)))
        full = await registry.size()
        await asyncio.gather(*(registry.deregister(n) for n in nodes), *(registry.size() for _ in range(50)))
        return full, await registry.size()

    full, after = asyncio.run(scenario())
    assert full == len(nodes)
    assert after == 0


def test_node_accepts_legacy_field_name():
    n = Node.model_validate({"ipv4_address": "10.0.0.1", "port": 9000})
    assert n.address == "10.0.0.1"
    assert str(n) == "10.0.0.1:9000"

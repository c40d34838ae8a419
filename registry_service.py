from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
import argparse
import logging
import os
import uvicorn

from node_registry import Node, Registry

REGISTRY_HOST = os.getenv("REGISTRY_HOST", "127.0.0.1")
REGISTRY_PORT = int(os.getenv("REGISTRY_PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NO_ACTIVE_NODES = "no active nodes in the network"

logger = logging.getLogger(__name__)


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


# missing or malformed bodies never reach the registry
async def reject_malformed(request: Request, exc: RequestValidationError):
    logger.warning("rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app(registry: Registry | None = None) -> FastAPI:
    app = FastAPI(title="Node Discovery Registry")
    app.state.registry = registry if registry is not None else Registry()
    app.add_exception_handler(RequestValidationError, reject_malformed)

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "Hello World!"

    @app.post("/register", response_class=PlainTextResponse)
    async def register(node: Node, registry: Registry = Depends(get_registry)):
        await registry.register(node)
        return f"register node {node.address}:{node.port} successfully"

    @app.post("/deregister", response_class=PlainTextResponse)
    async def deregister(node: Node, registry: Registry = Depends(get_registry)):
        await registry.deregister(node)
        return f"deregister node {node.address}:{node.port} successfully"

    # one active node at random, or the sentinel string when empty
    @app.get("/query")
    async def query(registry: Registry = Depends(get_registry)):
        node = await registry.pick_random()
        if node is None:
            return JSONResponse(content=NO_ACTIVE_NODES)
        return JSONResponse(content=node.model_dump(exclude_none=True))

    return app


app = create_app()


def main():
    p = argparse.ArgumentParser(prog="node-registry")
    p.add_argument("--host", default=REGISTRY_HOST)
    p.add_argument("--port", type=int, default=REGISTRY_PORT)
    p.add_argument("--log-level", default=LOG_LEVEL)
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)

    logger.info("registry listening on http://%s:%d", args.host, args.port)
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()

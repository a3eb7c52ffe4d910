"""`elmfmt serve`: registry operations as FastMCP tools over stdio."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, cast

import structlog
from mcp.server.fastmcp import FastMCP

from elmfmt.lib.logging import configure_logging
from elmfmt.lib.ops.codec import coerce_input_payload, signature_from_dataclass
from elmfmt.lib.ops.registry import OperationSpec, get_mcp_operations
from elmfmt.lib.serialization import to_jsonable

logger = structlog.get_logger(__name__)

_TOOL_OPERATIONS: dict[str, str] = {}


@asynccontextmanager
async def lifespan(_: FastMCP[Any]):
    configure_logging(json_mode=True)
    logger.info("elmfmt MCP server started.", tools=sorted(_TOOL_OPERATIONS))
    yield {"ready": True}


mcp = FastMCP("elmfmt", lifespan=lifespan)


def _make_tool(op: OperationSpec[Any, Any]) -> Any:
    # FastMCP builds the tool schema from __signature__, so the tool takes the
    # input dataclass fields as keyword arguments.
    async def _tool(**kwargs: object) -> object:
        payload = coerce_input_payload(op.input_type, kwargs)
        logger.debug("Tool call.", tool=op.mcp_name, operation=op.name)
        return to_jsonable(await op.handler(payload))

    _tool.__name__ = f"tool_{op.mcp_name}"
    _tool.__doc__ = op.description
    cast("Any", _tool).__signature__ = signature_from_dataclass(op.input_type)
    return _tool


for _op in get_mcp_operations():
    mcp.tool(name=_op.mcp_name, description=_op.description)(_make_tool(_op))
    _TOOL_OPERATIONS[_op.mcp_name] = _op.name


def get_registered_mcp_tools() -> set[str]:
    """MCP tool names, for parity checks against the registry."""

    return set(_TOOL_OPERATIONS)


def run_server() -> None:
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()

"""Registry of elmfmt operations; the CLI and MCP server are built from it."""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

# Each module calls `operation(...)` at import time.
_OPERATION_MODULES: tuple[str, ...] = (
    "elmfmt.lib.ops.config",
    "elmfmt.lib.ops.diag",
    "elmfmt.lib.ops.format",
)


@dataclass(frozen=True, slots=True)
class OperationSpec(Generic[InputT, OutputT]):
    """One operation: typed input/output plus its CLI and MCP names.

    `handler` runs `sync_handler` off the event loop for the MCP server; the
    CLI calls `sync_handler` directly. `cli_only` keeps an operation that
    writes into the project (such as scaffolding config) off the tool list.
    """

    name: str
    handler: Callable[[InputT], Coroutine[Any, Any, OutputT]]
    sync_handler: Callable[[InputT], OutputT]
    input_type: type[InputT]
    output_type: type[OutputT]
    cli_group: str
    cli_name: str
    mcp_name: str
    description: str
    cli_only: bool = False


_REGISTRY: dict[str, OperationSpec[Any, Any]] = {}
_loaded = False


def operation(spec: OperationSpec[InputT, OutputT]) -> OperationSpec[InputT, OutputT]:
    """Register `spec`; names and MCP tool names must both be unique."""

    if spec.name in _REGISTRY:
        raise ValueError(
            f"Duplicate operation name '{spec.name}': already registered by "
            f"{_REGISTRY[spec.name].handler}"
        )
    clash = next((op.name for op in _REGISTRY.values() if op.mcp_name == spec.mcp_name), None)
    if clash is not None:
        raise ValueError(f"MCP tool name '{spec.mcp_name}' is already used by '{clash}'")
    _REGISTRY[spec.name] = spec
    return spec


def _load_operation_modules() -> None:
    global _loaded
    if _loaded:
        return
    for module_name in _OPERATION_MODULES:
        importlib.import_module(module_name)
    _loaded = True


def get_all_operations() -> list[OperationSpec[Any, Any]]:
    """All operations, sorted by name."""

    _load_operation_modules()
    return [_REGISTRY[name] for name in sorted(_REGISTRY)]


def get_mcp_operations() -> list[OperationSpec[Any, Any]]:
    """Operations exposed as MCP tools."""

    return [op for op in get_all_operations() if not op.cli_only]


def get_operation(name: str) -> OperationSpec[Any, Any]:
    _load_operation_modules()
    return _REGISTRY[name]

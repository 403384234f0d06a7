"""FastAPI entrypoint for block execution, tag cells and trace endpoints."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from vault_workflow.blocks.google_vault import register_builtin_blocks
from vault_workflow.blocks.registry import BlockRegistry
from vault_workflow.config import ExecutorConfig, TagCellConfig, load_vault_api_config
from vault_workflow.errors import BlockExecutionError, ToolNotFoundError, WorkflowError
from vault_workflow.executor.executor import BlockExecutor
from vault_workflow.executor.handlers.google_vault import GoogleVaultBlockHandler
from vault_workflow.knowledge.tags_cell import TagDefinition, build_tags_cell, render_tags_cell_html
from vault_workflow.obs.tracing import TraceStore
from vault_workflow.tools.builtin import register_builtin_tools
from vault_workflow.tools.registry import ToolRegistry
from vault_workflow.types import BlockMetadata, BlockToolConfig, ExecutionContext, SerializedBlock

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())


class ContextPayload(BaseModel):
    workflow_id: str | None = None
    workspace_id: str | None = None
    execution_id: str | None = None


class BlockExecuteRequest(BaseModel):
    block_id: str = Field(min_length=1)
    block_type: str = "google_vault"
    block_name: str | None = None
    tool: str | None = None
    inputs: dict[str, Any] = Field(default_factory=dict)
    context: ContextPayload = Field(default_factory=ContextPayload)


class TagsCellRequest(BaseModel):
    document: dict[str, Any]
    tag_definitions: list[TagDefinition] = Field(default_factory=list)


app = FastAPI(title="Vault Workflow Service", version="0.1.0")

_api_config = load_vault_api_config()
_executor_config = ExecutorConfig()
_tag_cell_config = TagCellConfig()

_trace_store = TraceStore()
_tool_registry = ToolRegistry(
    timeout_seconds=_api_config.timeout_seconds,
    max_output_preview=_executor_config.max_output_preview,
)
register_builtin_tools(_tool_registry, _api_config)
_tool_registry.set_observer(_trace_store.record_tool_trace)

_block_registry = BlockRegistry()
register_builtin_blocks(_block_registry)

_executor = BlockExecutor(
    [GoogleVaultBlockHandler(_tool_registry, _block_registry)],
    trace_store=_trace_store,
)


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "vault_api": _api_config.base_url,
        "tool_count": len(_tool_registry.specs()),
        "block_types": [block.type for block in _block_registry.blocks()],
    }


@app.get("/tools")
def tools() -> dict[str, Any]:
    return {
        "items": [
            {
                "id": tool.id,
                "name": tool.name,
                "description": tool.description,
                "params": {key: param.model_dump() for key, param in tool.params.items()},
                "outputs": tool.outputs,
            }
            for tool in _tool_registry.specs()
        ]
    }


@app.post("/blocks/execute")
async def execute_block(request: BlockExecuteRequest) -> dict[str, Any]:
    block = SerializedBlock(
        id=request.block_id,
        config=BlockToolConfig(tool=_resolve_tool_id(request)),
        metadata=BlockMetadata(id=request.block_type, name=request.block_name),
    )
    context = ExecutionContext(**request.context.model_dump())

    try:
        output, trace_id = await _executor.execute(context, block, request.inputs)
    except ToolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except BlockExecutionError as exc:
        raise HTTPException(status_code=502, detail=exc.as_dict()) from exc
    except WorkflowError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"output": output, "trace_id": trace_id}


@app.post("/knowledge/tags-cell")
def tags_cell(request: TagsCellRequest) -> dict[str, Any]:
    view = build_tags_cell(request.document, request.tag_definitions, _tag_cell_config)
    return {"view": view.model_dump(), "html": render_tags_cell_html(view)}


@app.get("/traces")
def traces(limit: int = 20) -> dict[str, Any]:
    return {
        "items": [asdict(record) for record in _trace_store.list_recent(limit=limit)],
        "tool_calls": [asdict(trace) for trace in _trace_store.recent_tool_traces(limit=limit)],
    }


@app.get("/traces/{trace_id}")
def trace_detail(trace_id: str) -> dict[str, Any]:
    try:
        record = _trace_store.get(trace_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return asdict(record)


@app.get("/metrics")
def metrics() -> dict[str, Any]:
    return _trace_store.summary()


def _resolve_tool_id(request: BlockExecuteRequest) -> str:
    if request.tool:
        return request.tool
    block_config = _block_registry.get_block(request.block_type)
    if block_config is None:
        raise HTTPException(status_code=400, detail=f"Unknown block type: {request.block_type}")
    try:
        return block_config.select_tool(request.inputs)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

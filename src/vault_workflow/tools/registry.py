"""Tool registry built on Pydantic v2 models."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any, Literal

import httpx
from langchain_core.tools import StructuredTool
from pydantic import BaseModel, ConfigDict, Field, create_model

from vault_workflow.errors import ToolRequestError
from vault_workflow.types import ExecutionContext, ToolResult, ToolTrace

logger = logging.getLogger(__name__)

ParamBuilder = Callable[[dict[str, Any]], Any]
ResponseTransform = Callable[[httpx.Response, dict[str, Any]], Awaitable[ToolResult]]
TokenResolver = Callable[[str, str, ExecutionContext | None], Awaitable[str]]

_PYTHON_TYPES: dict[str, type] = {
    "string": str,
    "number": float,
    "boolean": bool,
    "json": dict,
    "array": list,
}


class ToolParam(BaseModel):
    """Declared input of a tool."""

    type: Literal["string", "number", "boolean", "json", "array"] = "string"
    required: bool = False
    visibility: Literal["hidden", "user-only", "user-or-llm"] = "user-or-llm"
    description: str = ""


class ToolRequest(BaseModel):
    """Builders for the single HTTP request a tool issues."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: ParamBuilder
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "GET"
    headers: ParamBuilder = Field(default=lambda params: {})
    body: ParamBuilder | None = None
    query: ParamBuilder | None = None


class ToolConfig(BaseModel):
    """Declarative tool specification for registration and execution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    name: str
    description: str
    version: str = "1.0"
    oauth_provider: str | None = None
    params: dict[str, ToolParam] = Field(default_factory=dict)
    request: ToolRequest
    transform_response: ResponseTransform
    outputs: dict[str, str] = Field(default_factory=dict)
    args_schema: type[BaseModel] | None = None

    def validate_params(self, params: dict[str, Any]) -> None:
        missing = [
            key
            for key, param in self.params.items()
            if param.required and params.get(key) in (None, "")
        ]
        if missing:
            raise ValueError(f"Missing required parameter(s) for {self.id}: {', '.join(missing)}")
        if self.args_schema is not None:
            self.args_schema.model_validate(params)

    def build_request(self, params: dict[str, Any]) -> httpx.Request:
        spec = self.request
        body = spec.body(params) if spec.body is not None else None
        query = spec.query(params) if spec.query is not None else None
        return httpx.Request(
            spec.method,
            spec.url(params),
            headers=spec.headers(params),
            params=query,
            json=body,
        )


class ToolRegistry:
    """Stores tool configs, executes them over HTTP and exports LangChain tools."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        max_output_preview: int = 320,
        token_resolver: TokenResolver | None = None,
    ) -> None:
        self._tools: dict[str, ToolConfig] = {}
        self._observer: Callable[[ToolTrace], None] | None = None
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._max_output_preview = max_output_preview
        self._token_resolver = token_resolver

    def register(self, tool: ToolConfig) -> None:
        if tool.id in self._tools:
            raise ValueError(f"Tool already registered: {tool.id}")
        self._tools[tool.id] = tool

    def get_tool(self, tool_id: str) -> ToolConfig | None:
        return self._tools.get(tool_id)

    def specs(self) -> list[ToolConfig]:
        return list(self._tools.values())

    def set_observer(self, observer: Callable[[ToolTrace], None] | None) -> None:
        """Set an optional callback invoked after each tool execution."""
        self._observer = observer

    async def execute_tool(
        self,
        tool_id: str,
        params: dict[str, Any],
        skip_proxy: bool = False,
        skip_post_process: bool = False,
        context: ExecutionContext | None = None,
    ) -> ToolResult:
        """Run one tool and report the outcome as a `ToolResult`.

        Failures never raise: unknown tools, missing parameters, transport
        errors and errors raised by the response transform are all returned
        with `success=False`. `skip_proxy` and `skip_post_process` are
        accepted for engine compatibility; this registry never proxies and
        has no post-processing stage.
        """
        del skip_proxy, skip_post_process
        tool = self._tools.get(tool_id)
        if tool is None:
            return ToolResult(success=False, error=f"Tool not found: {tool_id}")

        request_params = {key: value for key, value in params.items() if key != "_context"}
        start = perf_counter()
        result = await self._run(tool, request_params, context)
        latency_ms = (perf_counter() - start) * 1000.0

        if self._observer is not None:
            preview = str(result.output) if result.success else str(result.error)
            self._observer(
                ToolTrace(
                    name=tool.id,
                    input_payload=_redact(tool, request_params),
                    output_preview=preview[: self._max_output_preview],
                    latency_ms=latency_ms,
                    success=result.success,
                )
            )
        return result

    def as_langchain_tools(self) -> list[StructuredTool]:
        tools: list[StructuredTool] = []
        for tool in self._tools.values():
            tools.append(
                StructuredTool.from_function(
                    name=tool.id,
                    description=tool.description,
                    args_schema=_visible_args_schema(tool),
                    coroutine=self._build_coroutine(tool),
                )
            )
        return tools

    def _build_coroutine(self, tool: ToolConfig) -> Callable[..., Awaitable[dict[str, Any]]]:
        async def _callable(**kwargs: Any) -> dict[str, Any]:
            result = await self.execute_tool(tool.id, kwargs)
            if not result.success:
                return {"error": result.error}
            return result.output

        return _callable

    async def _run(
        self,
        tool: ToolConfig,
        params: dict[str, Any],
        context: ExecutionContext | None,
    ) -> ToolResult:
        try:
            if tool.oauth_provider and not params.get("accessToken") and params.get("credential"):
                params = {**params, "accessToken": await self._resolve_token(tool, params, context)}
            tool.validate_params(params)
            request = tool.build_request(params)
            if self._client is not None:
                response = await self._client.send(request)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.send(request)
            return await tool.transform_response(response, params)
        except ToolRequestError as exc:
            logger.warning("Tool %s failed with HTTP %s", tool.id, exc.status)
            return ToolResult(success=False, error=exc.message, status=exc.status)
        except Exception as exc:
            logger.warning(
                "Tool %s failed: %s",
                tool.id,
                exc,
                extra={"execution_id": context.execution_id if context else None},
            )
            return ToolResult(success=False, error=str(exc))

    async def _resolve_token(
        self,
        tool: ToolConfig,
        params: dict[str, Any],
        context: ExecutionContext | None,
    ) -> str:
        if self._token_resolver is None:
            raise ValueError(f"No access token available for {tool.oauth_provider} credential")
        return await self._token_resolver(tool.oauth_provider or "", str(params["credential"]), context)


def _redact(tool: ToolConfig, params: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "***" if key in tool.params and tool.params[key].visibility == "hidden" else value
        for key, value in params.items()
    }


def _visible_args_schema(tool: ToolConfig) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for key, param in tool.params.items():
        if param.visibility == "hidden":
            continue
        python_type = _PYTHON_TYPES[param.type]
        if param.required:
            fields[key] = (python_type, Field(description=param.description))
        else:
            fields[key] = (python_type | None, Field(default=None, description=param.description))
    model_name = "".join(part.title() for part in tool.id.split("_")) + "Args"
    return create_model(model_name, **fields)

"""Tool wrappers around the search service.

A tool takes loosely typed parameters from a caller (the CLI or an agent),
validates them against a pydantic model, runs one service operation and
always answers with a ToolResult, never an exception.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError

from websearch.exceptions import WebSearchError
from websearch.logging import get_logger, request_context

logger = get_logger("websearch.tools")

TParams = TypeVar("TParams", bound=BaseModel)

_REQUIRED_ATTRS = ("name", "description", "parameters_schema")


class ToolResult(BaseModel):
    """Outcome of one tool call."""

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success_result(cls, data: Any, **metadata: Any) -> "ToolResult":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(cls, error: str, **metadata: Any) -> "ToolResult":
        return cls(success=False, error=error, metadata=metadata)

    def __str__(self) -> str:
        return f"Success: {self.data}" if self.success else f"Error: {self.error}"


class BaseTool(ABC, Generic[TParams]):
    """A named, schema-described operation.

    Subclasses set ``name``, ``description`` and ``parameters_schema`` and
    implement ``execute``. Callers go through ``run``, which validates the
    raw parameters, tags the log context with the tool name and converts
    failures into error results:

    - invalid parameters: "Parameter validation failed: ..."
    - WebSearchError: the error's own message
    - anything else: "Tool execution failed: <Type>: <message>"
    """

    name: str
    description: str
    parameters_schema: type[BaseModel]

    def __init__(self):
        missing = [attr for attr in _REQUIRED_ATTRS if not hasattr(self, attr)]
        if missing:
            raise ValueError(
                f"{type(self).__name__} does not define required tool "
                f"attribute(s): {', '.join(missing)}"
            )
        if not (isinstance(self.parameters_schema, type) and issubclass(self.parameters_schema, BaseModel)):
            raise ValueError(f"{type(self).__name__}.parameters_schema is not a pydantic model")

    @abstractmethod
    async def execute(self, params: TParams) -> ToolResult:
        """Run the operation with already validated parameters.

        May raise; ``run`` turns exceptions into error results.
        """

    def to_schema(self) -> dict[str, Any]:
        """Name, description and parameter JSON Schema, ready to publish."""
        input_schema = self.parameters_schema.model_json_schema()
        input_schema.pop("title", None)
        return {"name": self.name, "description": self.description, "inputSchema": input_schema}

    async def run(self, raw_params: dict[str, Any], track_time: bool = True) -> ToolResult:
        """Validate ``raw_params``, execute, and wrap the outcome.

        Args:
            raw_params: Parameters as received from the caller
            track_time: Record ``execution_time`` (seconds) in the metadata

        Returns:
            ToolResult: Never raises
        """
        started = time.perf_counter()
        with request_context(tool=self.name):
            result = await self._guarded_execute(raw_params)
        if track_time:
            result.metadata["execution_time"] = time.perf_counter() - started
        return result

    async def _guarded_execute(self, raw_params: dict[str, Any]) -> ToolResult:
        try:
            params = self.parameters_schema.model_validate(raw_params)
        except ValidationError as e:
            logger.info(f"Rejected {self.name} parameters", errors=e.error_count())
            return ToolResult.error_result(f"Parameter validation failed: {e}")

        try:
            return await self.execute(params)
        except WebSearchError as e:
            logger.error(f"{self.name} failed: {e}", exc_info=True)
            return ToolResult.error_result(str(e))
        except Exception as e:
            logger.error(f"{self.name} crashed", exc_info=True)
            return ToolResult.error_result(f"Tool execution failed: {type(e).__name__}: {e}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

"""
Base Tool Class

Abstract base class that all agent tools inherit from.

Usage:
    from wallet_agent.tools.base import BaseTool, ToolResult

    class MyTool(BaseTool):
        @property
        def name(self) -> str:
            return "my_tool"

        @property
        def description(self) -> str:
            return "Description of what the tool does"

        def _execute_impl(self, **kwargs) -> ToolResult:
            return ToolResult(success=True, data=result)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type
import logging

from pydantic import BaseModel, Field
from langchain_core.tools import StructuredTool

logger = logging.getLogger(__name__)


class ToolResult(BaseModel):
    """Standardized result from tool execution."""
    success: bool = Field(..., description="Whether the tool execution succeeded")
    data: Any = Field(default=None, description="The result data")
    error: Optional[str] = Field(default=None, description="Error message if failed")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional metadata")


class NoArgs(BaseModel):
    """Argument schema for tools that take no input."""


class BaseTool(ABC):
    """
    Abstract base class for all tools.

    All tools must implement:
    - name: Tool identifier for LangChain
    - description: What the tool does (for LLM to understand)
    - _execute_impl: The actual tool logic
    """

    args_schema: Type[BaseModel] = NoArgs

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name for LangChain registration."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description for LLM to understand when to use it."""
        pass

    @abstractmethod
    def _execute_impl(self, **kwargs) -> ToolResult:
        """Execute the tool logic."""
        pass

    def execute(self, **kwargs) -> ToolResult:
        """
        Public execute method with error handling.

        Tool failures are reported back to the agent as a failed
        ToolResult instead of aborting the turn.
        """
        try:
            return self._execute_impl(**kwargs)
        except Exception as e:
            logger.warning(f"[{self.name}] failed: {type(e).__name__}")
            return ToolResult(success=False, error=f"Error executing {self.name}: {e}")

    def format_result(self, result: ToolResult) -> str:
        """
        Format result for LLM consumption.

        Args:
            result: The ToolResult to format

        Returns:
            str: Formatted result string
        """
        if result.success:
            return str(result.data)
        else:
            return f"Error: {result.error}"

    def as_langchain_tool(self) -> StructuredTool:
        """
        Convert this tool to a LangChain tool.

        Returns:
            A LangChain tool that can be used with LangGraph
        """
        tool_instance = self

        def tool_function(**kwargs) -> str:
            result = tool_instance.execute(**kwargs)
            return tool_instance.format_result(result)

        return StructuredTool.from_function(
            func=tool_function,
            name=self.name,
            description=self.description,
            args_schema=self.args_schema,
        )

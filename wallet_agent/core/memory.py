"""
Memory Service - Conversation memory for the session

Uses LangGraph's in-process MemorySaver checkpointer. History lives only
as long as the process; it is keyed by one fixed conversation thread.

For LangGraph checkpointing docs:
https://langchain-ai.github.io/langgraph/how-tos/persistence/
"""

from typing import Any, Dict
from langgraph.checkpoint.memory import MemorySaver
import logging

logger = logging.getLogger(__name__)


class MemoryService:
    """
    Memory service for one agent session.

    Provides the checkpointer and the run config that binds every turn
    to the same conversation thread.
    """

    def __init__(self, thread_id: str):
        """
        Initialize memory service.

        Args:
            thread_id: Conversation identifier shared by all turns
        """
        self.thread_id = thread_id
        self._checkpointer = MemorySaver()
        logger.info(f"Memory service initialized for thread: {thread_id}")

    def get_checkpointer(self) -> MemorySaver:
        """
        Get the LangGraph checkpointer for use with the workflow.

        Returns:
            MemorySaver instance
        """
        return self._checkpointer

    def get_session_config(self) -> Dict[str, Any]:
        """
        Get configuration dict for the conversation thread.

        Returns:
            Config dict for LangGraph .stream() / .astream()

        Usage:
            config = memory.get_session_config()
            async for chunk in app.astream({"messages": [...]}, config=config):
                ...
        """
        return {
            "configurable": {
                "thread_id": self.thread_id
            }
        }

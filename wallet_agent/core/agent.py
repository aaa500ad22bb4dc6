"""
Agent - Session agent construction and turn streaming

AgentFactory wires the LLM, wallet tools, memory and LangGraph workflow
into an AgentHandle with explicitly injected credentials.

TurnAggregator drives one conversational turn against a handle and folds
the streamed trace into an ordered TurnResult.
"""

from typing import Any, Dict, List, Optional
import asyncio
import logging

from langchain_core.messages import HumanMessage

from wallet_agent.core.config import Settings
from wallet_agent.core.exceptions import AgentError, redact
from wallet_agent.core.graph import create_workflow
from wallet_agent.core.memory import MemoryService
from wallet_agent.models.session import KeyMaterial, SessionConfig
from wallet_agent.models.turn import TurnEvent, TurnEventKind, TurnResult
from wallet_agent.services.llm_service import LLMService
from wallet_agent.tools.wallet import create_wallet_tools

logger = logging.getLogger(__name__)

NODE_KINDS = {
    "agent": TurnEventKind.AGENT,
    "tools": TurnEventKind.TOOL,
}


class AgentHandle:
    """
    Ready-to-run agent for the session.

    Immutable once built. Turns are serialized through turn_lock because
    every turn writes to the same conversation thread.
    """

    def __init__(
        self,
        workflow: Any,
        run_config: Dict[str, Any],
        tool_names: Optional[List[str]] = None,
        tools: Optional[List[Any]] = None,
        credentials: Optional[List[str]] = None
    ):
        self.workflow = workflow
        self.run_config = run_config
        self.tools = tools or []
        self.tool_names = tool_names or [tool.name for tool in self.tools]
        # Values scrubbed from anything a failed turn logs
        self.credentials = credentials or []
        self.turn_lock = asyncio.Lock()

    @property
    def thread_id(self) -> str:
        return self.run_config["configurable"]["thread_id"]


class AgentFactory:
    """Builds AgentHandles from a validated config and fresh key material."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def create(self, config: SessionConfig, keys: KeyMaterial) -> AgentHandle:
        """
        Construct the agent for a session.

        Args:
            config: Validated session configuration
            keys: Session key material

        Returns:
            AgentHandle bound to the configured conversation thread
        """
        tools = create_wallet_tools(
            address=keys.address,
            rpc_url=config.rpc_url.get_secret_value(),
            secret=keys.secret,
            timeout=self.settings.rpc_timeout
        )
        langchain_tools = [tool.as_langchain_tool() for tool in tools]

        llm_service = LLMService(config.llm, api_key=config.model_api_key)
        model_with_tools = llm_service.get_model_with_tools(langchain_tools)

        memory = MemoryService(self.settings.thread_id)
        workflow = create_workflow(
            tools=langchain_tools,
            model_with_tools=model_with_tools,
            checkpointer=memory.get_checkpointer()
        )

        logger.info(
            f"Agent created with model {config.llm.modelName} "
            f"and tools {[tool.name for tool in tools]}"
        )
        return AgentHandle(
            workflow=workflow,
            run_config=memory.get_session_config(),
            tools=tools,
            credentials=config.credentials() + [keys.export_secret()]
        )


def message_text(message: Any) -> str:
    """
    Extract text content from a LangChain message.

    Gemini may return content as a list of parts; text parts are joined.
    """
    content = getattr(message, "content", message)
    if isinstance(content, list):
        text_parts = []
        for item in content:
            if isinstance(item, str):
                text_parts.append(item)
            elif isinstance(item, dict) and item.get('type') == 'text':
                text_parts.append(item.get('text', ''))
        return ' '.join(text_parts).strip()
    return str(content)


def classify_chunk(chunk: Any) -> Optional[TurnEvent]:
    """
    Classify one streamed update chunk.

    Args:
        chunk: Node update from workflow.astream(stream_mode="updates")

    Returns:
        TurnEvent for agent/tools updates, None for anything else
    """
    if not isinstance(chunk, dict):
        return None

    for node, kind in NODE_KINDS.items():
        if node in chunk:
            update = chunk[node]
            messages = update.get("messages") if isinstance(update, dict) else None
            if not messages:
                return None
            return TurnEvent(kind=kind, text=message_text(messages[0]))
    return None


class TurnAggregator:
    """
    Runs turns against an AgentHandle.

    The stream is drained to exhaustion. With a timeout the whole drain is
    bounded; on error, timeout or cancellation no partial result escapes.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    async def run(self, handle: AgentHandle, message: str, turn: int = 0) -> TurnResult:
        """
        Execute one turn.

        Args:
            handle: Ready agent handle
            message: User message
            turn: Session turn number, for logging and the result

        Returns:
            TurnResult with contributions in arrival order

        Raises:
            AgentError: when the agent fails mid-stream or the deadline passes
        """
        async with handle.turn_lock:
            logger.info(f"Turn {turn} started on thread {handle.thread_id}")
            try:
                if self.timeout is not None:
                    result = await asyncio.wait_for(
                        self._drain(handle, message, turn), timeout=self.timeout
                    )
                else:
                    result = await self._drain(handle, message, turn)
            except asyncio.TimeoutError:
                logger.error(f"Turn {turn} exceeded {self.timeout}s")
                raise AgentError(f"Turn exceeded {self.timeout}s")
            except Exception as e:
                detail = redact(str(e), handle.credentials)
                logger.error(f"Turn {turn} failed: {type(e).__name__}: {detail}")
                raise AgentError(f"Agent turn failed: {type(e).__name__}") from e

        logger.info(f"Turn {turn} completed with {len(result.responses)} contributions")
        return result

    async def _drain(self, handle: AgentHandle, message: str, turn: int) -> TurnResult:
        result = TurnResult(turn=turn)
        async for chunk in handle.workflow.astream(
            {"messages": [HumanMessage(content=message)]},
            config=handle.run_config,
            stream_mode="updates"
        ):
            event = classify_chunk(chunk)
            if event is None:
                shape = list(chunk) if isinstance(chunk, dict) else type(chunk).__name__
                logger.debug(f"Ignoring stream chunk {shape}")
                continue
            result.add(event)
        return result

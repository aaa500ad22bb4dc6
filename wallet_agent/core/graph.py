"""
LangGraph Workflow - ReAct-style agent workflow definition

Agent node decides, tools node executes, loop until the agent answers
without tool calls. Streaming in "updates" mode yields one chunk per
node step, keyed "agent" or "tools".

For LangGraph docs: https://langchain-ai.github.io/langgraph/
"""

from typing import List, Any, Optional
from langchain_core.messages import AIMessage, SystemMessage
from langgraph.graph import StateGraph, END, MessagesState
from langgraph.prebuilt import ToolNode
from langgraph.checkpoint.base import BaseCheckpointSaver


SYSTEM_PROMPT = (
    "You are a helpful agent that can interact onchain using the Solana Agent Kit. "
    "Be concise and helpful with your responses."
)


def create_workflow(
    tools: List[Any],
    model_with_tools: Any,
    checkpointer: BaseCheckpointSaver,
    system_prompt: Optional[str] = SYSTEM_PROMPT
):
    """
    Create a LangGraph workflow for agent reasoning.

    Args:
        tools: List of LangChain tools
        model_with_tools: LLM model with tools bound
        checkpointer: Memory checkpointer for conversation persistence
        system_prompt: Instruction prepended to every model call (not stored in history)

    Returns:
        Compiled LangGraph application ready for execution

    Usage:
        app = create_workflow(
            tools=tools,
            model_with_tools=model,
            checkpointer=memory.get_checkpointer(),
        )

        config = {"configurable": {"thread_id": "session-123"}}
        async for chunk in app.astream({"messages": [HumanMessage(content="Hello")]}, config):
            ...
    """

    def should_continue(state: MessagesState):
        """
        Decides whether to continue the loop or end.

        If the last message has tool calls, continue to tools node.
        Otherwise, end the workflow.
        """
        last_message = state['messages'][-1]

        if isinstance(last_message, AIMessage) and last_message.tool_calls:
            return "continue"
        return "end"

    async def call_model(state: MessagesState):
        """Agent node - invokes the LLM to decide the next action."""
        messages = state['messages']
        if system_prompt:
            messages = [SystemMessage(content=system_prompt)] + list(messages)

        response = await model_with_tools.ainvoke(messages)
        return {"messages": [response]}

    workflow = StateGraph(MessagesState)

    workflow.add_node("agent", call_model)
    workflow.add_node("tools", ToolNode(tools))

    workflow.set_entry_point("agent")

    workflow.add_conditional_edges(
        "agent",
        should_continue,
        {
            "continue": "tools",
            "end": END,
        },
    )

    workflow.add_edge("tools", "agent")

    return workflow.compile(checkpointer=checkpointer)

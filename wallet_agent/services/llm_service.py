"""
LLM Service

Builds the chat model for a session. Credentials are passed to the
model constructor explicitly and are never read from or written to
the process environment.

Usage:
    from wallet_agent.services.llm_service import LLMService

    llm_service = LLMService(config.llm, api_key=config.model_api_key)
    model_with_tools = llm_service.get_model_with_tools(tools)
"""

from typing import Any, List, Optional
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import SecretStr

from wallet_agent.models.message import LLMConfig


class LLMService:
    """Service for creating the session's Gemini chat model."""

    def __init__(self, llm_config: LLMConfig, api_key: SecretStr):
        """
        Initialize LLM service.

        Args:
            llm_config: Model name and temperature
            api_key: Model access token
        """
        self.llm_config = llm_config
        self._api_key = api_key
        self._model: Optional[ChatGoogleGenerativeAI] = None

    def get_model(self) -> ChatGoogleGenerativeAI:
        """
        Get the basic LLM model instance.

        Returns:
            Configured LLM model
        """
        if self._model is None:
            self._model = ChatGoogleGenerativeAI(
                model=self.llm_config.modelName,
                temperature=self.llm_config.temperature,
                google_api_key=self._api_key,
                max_output_tokens=8192,
            )
        return self._model

    def get_model_with_tools(self, tools: List[Any]) -> Any:
        """
        Get LLM model bound with tools.

        Args:
            tools: List of LangChain tools to bind to the model

        Returns:
            LLM model with tools bound
        """
        return self.get_model().bind_tools(tools)

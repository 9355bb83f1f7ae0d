"""LangChain chat model construction for intent extraction."""

import logging
from typing import Any, Protocol

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from taskbot.core.config.models import LLMConfig

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Prompt in, completion text out."""

    async def complete(self, prompt: str) -> str: ...


def create_chat_model(config: LLMConfig) -> BaseChatModel:
    """Create the appropriate chat model based on provider.

    Provider-side retries are disabled: rate limits are retried by the
    extractor's own backoff policy so the worst case stays bounded.

    Supported providers: openai (including OpenAI-compatible gateways such as
    OpenRouter via ``base_url``), anthropic.

    Raises:
        ValueError: If provider is not supported.
    """
    if ":" in config.model:
        provider, model_name = config.model.split(":", 1)
    else:
        provider = "openai"
        model_name = config.model

    kwargs: dict[str, Any] = {
        "model": model_name,
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
        "max_retries": 0,
    }
    if config.api_key:
        kwargs["api_key"] = config.api_key

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if config.base_url:
            kwargs["base_url"] = config.base_url
        logger.info(f"Creating ChatOpenAI: model={model_name}, base_url={config.base_url}")
        return ChatOpenAI(**kwargs)

    if provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        logger.info(f"Creating ChatAnthropic: model={model_name}")
        return ChatAnthropic(**kwargs)

    raise ValueError(
        f"Unsupported model provider: '{provider}'. "
        f"Supported: openai, anthropic"
    )


class LangChainCompletion:
    """``CompletionClient`` backed by a LangChain chat model."""

    def __init__(self, model: BaseChatModel):
        self._model = model

    async def complete(self, prompt: str) -> str:
        response = await self._model.ainvoke([HumanMessage(content=prompt)])
        content = response.content
        if isinstance(content, str):
            return content
        # Content blocks (Anthropic): keep the text parts only
        parts = [
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        ]
        return "".join(parts)

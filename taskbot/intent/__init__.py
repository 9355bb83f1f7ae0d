"""Language-model intent extraction."""

from taskbot.intent.extractor import (
    ExtractionContext,
    IntentExtractor,
    fallback_intent,
    fallback_title,
    parse_response,
)
from taskbot.intent.llm import CompletionClient, LangChainCompletion, create_chat_model

__all__ = [
    "CompletionClient",
    "ExtractionContext",
    "IntentExtractor",
    "LangChainCompletion",
    "create_chat_model",
    "fallback_intent",
    "fallback_title",
    "parse_response",
]

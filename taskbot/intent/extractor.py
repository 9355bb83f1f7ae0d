"""Intent extraction: free text to one or more structured task intents."""

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date

from taskbot.core.errors import ExtractionError
from taskbot.core.retry import RetryConfig, is_rate_limited, retry_async
from taskbot.intent.llm import CompletionClient
from taskbot.intent.prompts import build_extraction_prompt
from taskbot.model.task import IntentBatch, Person, ProjectRef, TaskIntent

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 80
ELLIPSIS = "..."

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

# "Sarah - fix the login page" / "Jon Smith - ..."
_LEADING_NAME = re.compile(r"^\s*([A-Z][\w'.]*(?:\s+[A-Z][\w'.]*){0,2})\s+[-–]\s+\S")


@dataclass
class ExtractionContext:
    """Directory context embedded in the prompt so the model can match real names."""

    projects: list[ProjectRef] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)


def fallback_title(message: str) -> str:
    """Title for the deterministic fallback: the message, truncated to 80 chars."""
    if len(message) <= MAX_TITLE_LENGTH:
        return message
    return message[: MAX_TITLE_LENGTH - len(ELLIPSIS)] + ELLIPSIS


def fallback_intent(message: str) -> IntentBatch:
    """Deterministic single-task intent used whenever the model path fails.

    Never raises.
    """
    assignees: list[str] = []
    match = _LEADING_NAME.match(message)
    if match:
        assignees.append(match.group(1).strip())

    task = TaskIntent(
        title=fallback_title(message) if message.strip() else "New task",
        description=message if message.strip() else "New task",
        assignee_names=assignees,
    )
    return IntentBatch(tasks=[task], is_multi=False, from_fallback=True)


def _strip_code_fences(raw: str) -> str:
    return _CODE_FENCE.sub("", raw.strip()).strip()


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("null", "none"):
        return None
    return text


def _names(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return []


def _to_intent(raw: object, index: int) -> TaskIntent:
    if not isinstance(raw, dict):
        raise ExtractionError(f"Task {index} is not an object")

    title = raw.get("title")
    description = raw.get("description")
    if not isinstance(title, str) or not title.strip():
        raise ExtractionError(f"Task {index} has no title")
    if not isinstance(description, str) or not description.strip():
        raise ExtractionError(f"Task {index} has no description")

    names = _names(raw.get("assignee_names"))
    if not names:
        names = _names(raw.get("assignee_name"))

    return TaskIntent(
        title=title.strip()[:MAX_TITLE_LENGTH],
        description=description.strip(),
        project_name=_optional_str(raw.get("project_name")),
        assignee_names=names,
        due_date_expression=_optional_str(raw.get("due_date")),
    )


def parse_response(raw: str) -> IntentBatch:
    """Parse and validate a model response.

    Accepts the single shape ``{title, description, ...}`` or the multi shape
    ``{tasks: [...]}``. Code fences around the JSON are tolerated.

    Raises:
        ExtractionError: On invalid JSON, an unknown shape or any task without
            a non-empty title and description.
    """
    cleaned = _strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ExtractionError("Response is not a JSON object")

    if "tasks" in data:
        items = data["tasks"]
        if not isinstance(items, list) or not items:
            raise ExtractionError("'tasks' must be a non-empty list")
        tasks = [_to_intent(item, i) for i, item in enumerate(items)]
        return IntentBatch(tasks=tasks, is_multi=len(tasks) > 1)

    return IntentBatch(tasks=[_to_intent(data, 0)])


class IntentExtractor:
    """Turns a chat message into an ``IntentBatch``.

    The model call is retried on rate limits only. Anything else that goes
    wrong (transport failure, invalid JSON, missing fields) falls back to a
    deterministic single-task intent, so ``extract`` never raises.
    """

    def __init__(
        self,
        client: CompletionClient,
        retry_config: RetryConfig | None = None,
        today: Callable[[], date] = date.today,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the extractor.

        Args:
            client: Completion client wrapping the language model.
            retry_config: Backoff policy for rate-limited calls.
            today: Returns the reference date embedded in the prompt.
            sleep: Awaitable sleep used between retries (injectable for tests).
        """
        self._client = client
        self._retry_config = retry_config or RetryConfig(max_retries=3, base_delay=1.0)
        self._today = today
        self._sleep = sleep

    async def extract(self, message: str, context: ExtractionContext | None = None) -> IntentBatch:
        """Extract one or more task intents from ``message``.

        Args:
            message: Raw user text.
            context: Known projects and people to embed in the prompt.

        Returns:
            IntentBatch from the model, or the deterministic fallback.
        """
        context = context or ExtractionContext()
        prompt = build_extraction_prompt(message, context.projects, context.people, self._today())

        try:
            raw = await retry_async(
                lambda: self._client.complete(prompt),
                config=self._retry_config,
                is_retryable=is_rate_limited,
                sleep=self._sleep,
                operation="Intent extraction",
            )
            batch = parse_response(raw)
        except ExtractionError as e:
            logger.warning(f"Unusable extraction response, using fallback: {e}")
            return fallback_intent(message)
        except Exception as e:
            logger.error(f"Intent extraction failed, using fallback: {e}", exc_info=True)
            return fallback_intent(message)

        logger.info(
            f"Extracted {len(batch.tasks)} task(s) "
            f"({'multi' if batch.is_multi else 'single'}): {[t.title for t in batch.tasks]}"
        )
        return batch

    async def rewrite(self, original_message: str, context: ExtractionContext | None = None) -> TaskIntent:
        """Re-run extraction for the Confirming "rewrite" action.

        Only the first task is used; the wizard is single-task at that point.
        """
        batch = await self.extract(original_message, context)
        return batch.first

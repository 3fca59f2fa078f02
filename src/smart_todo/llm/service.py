# src/smart_todo/llm/service.py

from __future__ import annotations

import logging

from ..core.ports import CompletionTransport
from ..tasks.task_models import (
    CategorizationResult,
    Profile,
    SuggestionContext,
    SuggestionsResult,
    default_categorization,
)
from .client import ProxyCallError
from .parsing import UnparsableModelReply, parse_categorization, parse_suggestions, reply_text
from .prompts import build_categorization_prompt, build_suggestions_prompt

logger = logging.getLogger(__name__)

CATEGORIZE_MAX_TOKENS = 300
SUGGEST_MAX_TOKENS = 400


class AIService:
    """
    Categorize / suggest through the proxy endpoint.

    Built once per credential and passed explicitly to whatever needs it
    (see core.state.AppState.set_credential). Neither operation raises: every
    failure is logged and absorbed into the operation's default result.
    """

    def __init__(self, api_key: str, transport: CompletionTransport, *, model: str | None = None) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("AIService requires a non-empty API key.")
        self._api_key = api_key.strip()
        self._transport = transport
        self._model = model

    async def _ask(self, prompt: str, max_tokens: int) -> str:
        body = await self._transport.complete(
            api_key=self._api_key,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            model=self._model,
        )
        return reply_text(body)

    async def categorize(self, task_text: str, profile: Profile | None = None) -> CategorizationResult:
        prompt = build_categorization_prompt(task_text, profile or Profile())
        try:
            text = await self._ask(prompt, CATEGORIZE_MAX_TOKENS)
            return parse_categorization(text)
        except UnparsableModelReply as e:
            logger.warning("Categorization reply unusable (%s); using defaults", e)
        except ProxyCallError as e:
            logger.warning("Categorization call failed status=%s; using defaults", e.status)
        except Exception:
            logger.exception("AI categorization failed; using defaults")
        return default_categorization()

    async def suggest(self, context: SuggestionContext) -> SuggestionsResult:
        prompt = build_suggestions_prompt(context)
        try:
            text = await self._ask(prompt, SUGGEST_MAX_TOKENS)
            return SuggestionsResult(suggestions=parse_suggestions(text))
        except UnparsableModelReply as e:
            logger.warning("Suggestions reply unusable (%s)", e)
        except ProxyCallError as e:
            logger.warning("Suggestions call failed status=%s", e.status)
        except Exception:
            logger.exception("Failed to generate suggestions")
        return SuggestionsResult()

"""
AI Assistant - forwards a traveller's question to a chat-completion model.

The OpenAI SDK talks to OpenRouter's OpenAI-compatible endpoint. The service
never raises for upstream trouble: a missing key, an error status or a
transport failure each map to a fixed, human-readable reply.
"""

import logging
from typing import Optional

from openai import APIError, APIStatusError, APITimeoutError, OpenAI

from onejourney.config import Settings

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are an AI urban mobility assistant for OneJourney. Help users with route planning, "
    "transport options, cost optimization, and eco-friendly travel. Be concise and helpful. "
    "Focus on practical advice for Indian cities like Chennai, Bangalore, Mumbai, Delhi."
)

UNAVAILABLE_REPLY = (
    "AI service unavailable - API key not configured. Set OPENROUTER_API_KEY in .env file."
)
UPSTREAM_ERROR_REPLY = (
    "Sorry, I'm having trouble connecting to AI services right now. Please try again later."
)
FAILURE_REPLY = "Sorry, I encountered an error. Please try again."


def build_assistant_client(settings: Settings) -> Optional[OpenAI]:
    """OpenAI client pointed at OpenRouter, or None when no key is configured."""
    if not settings.openrouter_api_key:
        logger.warning(
            "OPENROUTER_API_KEY not set. AI assistant will reply with a fixed "
            "'service unavailable' message."
        )
        return None
    return OpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
        default_headers={
            "HTTP-Referer": settings.llm_referer,
            "X-Title": settings.llm_app_title,
        },
    )


class AssistantService:
    """
    Usage:
        service = AssistantService(build_assistant_client(settings), model=settings.llm_model)
        reply = service.ask("Cheapest way from T Nagar to Guindy?")
    """

    def __init__(self, client: Optional[OpenAI], model: str = Settings.llm_model):
        self.client = client
        self.model = model

    @property
    def available(self) -> bool:
        return self.client is not None

    def ask(self, message: str) -> str:
        if self.client is None:
            return UNAVAILABLE_REPLY

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": message},
                ],
            )
        except APIStatusError as e:
            logger.error("OpenRouter error (status %s): %s, using fallback reply", e.status_code, e.message)
            return UPSTREAM_ERROR_REPLY
        except APITimeoutError:
            logger.warning("AI request timeout, using fallback reply")
            return FAILURE_REPLY
        except APIError as e:
            logger.error("AI request failed: %s, using fallback reply", e)
            return FAILURE_REPLY
        except Exception as e:
            logger.error("Unexpected error during AI request: %s, using fallback reply", e)
            return FAILURE_REPLY

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.error("Malformed AI response: %s, using fallback reply", e)
            return FAILURE_REPLY
        if content is None:
            logger.warning("AI returned an empty reply, using fallback reply")
            return FAILURE_REPLY
        return content

"""OpenAI API integration for nexushub.

This module provides the assistant features: chat over the user's data,
link categorization, natural-language event parsing and productivity tips.
Every call degrades to a safe fallback value instead of raising.
"""

import os
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional
from openai import OpenAI, APIError
from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv

from nexushub.engine.context import parse_event_date
from nexushub.models.constants import MAX_LINK_TAGS
from nexushub.models.event import EventType
from nexushub.models.link import Category

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

CHAT_ERROR_FALLBACK = "Sorry, I encountered an error processing your request."
CHAT_EMPTY_FALLBACK = "I'm having trouble connecting to my neural network right now."
TIP_ERROR_FALLBACK = "Stay organized to save time."
TIP_EMPTY_FALLBACK = "Focus on one big task per day."

ASSISTANT_SYSTEM_TEMPLATE = """You are "Nexus", an intelligent personal digital assistant for the Nexus personal hub.
Your goal is to help the user organize their digital life, find saved links, check password health (generically), and manage their schedule.

You have access to the following context about the user's data:
{context}

Rules:
1. Be concise, friendly, and professional.
2. Do NOT reveal actual password characters. If asked, say "I can see you have a password saved for [Site], but I cannot read the password itself for security."
3. If the user asks to add a link or event, guide them to the respective page, do not try to execute it (as you are a chat interface).
4. Offer productivity tips based on their data."""

LINK_PROMPT_TEMPLATE = """Analyze this URL: {url}
Title hint: {title}

1. Suggest a clean, readable title.
2. Categorize it into one of: Work, Personal, Entertainment, Finance, Education, Social, Other.
3. Generate up to 4 relevant short tags.

Respond with a JSON object containing:
- "suggestedTitle": string
- "category": one of the categories above
- "tags": array of strings

Respond only with the JSON object, no other text."""

EVENT_PROMPT_TEMPLATE = """Extract calendar event details from this text: "{text}"
Current Date context: {now}

Return a JSON object with:
- "title": string
- "date": ISO string (calculate based on 'tomorrow', 'next friday', etc. relative to current date)
- "type": one of 'Meeting', 'Birthday', 'Deadline', 'Reminder'

Respond only with the JSON object, no other text."""

TIP_PROMPT = "Give me one short, unique, actionable productivity tip for a digital worker."


class LinkAnalysis(BaseModel):
    """Suggested metadata for a bookmark."""
    suggested_title: str = Field(..., description="Clean, readable title")
    category: Category = Field(Category.OTHER, description="Suggested category")
    tags: List[str] = Field(default_factory=list, description="Up to four short tags")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True


class ParsedEvent(BaseModel):
    """Calendar event fields extracted from free text."""
    title: str
    date: str = Field(..., description="ISO-8601 date")
    type: EventType = EventType.REMINDER

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        validate_default = True


def _strip_code_fences(content: str) -> str:
    """Remove markdown code fences the model sometimes wraps JSON in."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _log_api_error(e: APIError, operation: str) -> None:
    error_code = getattr(e, 'code', None)
    status_code = getattr(e, 'status_code', None)

    if error_code == 'insufficient_quota':
        logger.warning(f"OpenAI API quota insufficient for {operation}. Please check billing in the OpenAI dashboard.")
    elif status_code == 429:
        logger.warning(f"OpenAI API rate limit exceeded for {operation}. Please wait before retrying.")
    else:
        # Don't log full error message as it might contain sensitive info
        logger.error(f"OpenAI API error during {operation}: {status_code or 'unknown'} ({error_code or 'unknown'})")


class AssistantClient:
    """Client for the assistant features backed by the OpenAI API."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.

        Note:
            Without an API key the client still initializes and every call
            returns its fallback value.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. Assistant features will use fallbacks.")

    def _complete(self, messages: List[dict], temperature: float, json_mode: bool = False) -> str:
        kwargs = {
            "model": OPENAI_MODEL,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = self.client.chat.completions.create(**kwargs)
        return (response.choices[0].message.content or "").strip()

    def chat(self, message: str, context: str) -> str:
        """Answer a user message with the user's data summary as context.

        Args:
            message: The user's chat message
            context: Summary built by build_assistant_context()

        Returns:
            The assistant's reply, or a fallback sentence on any failure
        """
        if not self.client:
            logger.debug("OpenAI client not initialized. Returning chat fallback.")
            return CHAT_ERROR_FALLBACK

        try:
            reply = self._complete(
                [
                    {"role": "system", "content": ASSISTANT_SYSTEM_TEMPLATE.format(context=context)},
                    {"role": "user", "content": message},
                ],
                temperature=0.7,
            )
            return reply or CHAT_EMPTY_FALLBACK
        except APIError as e:
            _log_api_error(e, "chat")
            return CHAT_ERROR_FALLBACK
        except Exception as e:
            logger.error(f"Error calling OpenAI API for chat: {type(e).__name__}")
            return CHAT_ERROR_FALLBACK

    def analyze_link(self, url: str, title: Optional[str] = None) -> LinkAnalysis:
        """Suggest a title, category and tags for a URL.

        Returns:
            LinkAnalysis. Unknown categories map to Other. On failure the
            title falls back to the hint (or the URL) with tag "uncategorized".
        """
        fallback = LinkAnalysis(suggested_title=title or url, category=Category.OTHER, tags=["uncategorized"])

        if not self.client:
            logger.debug("OpenAI client not initialized. Returning link fallback.")
            return fallback

        try:
            content = self._complete(
                [
                    {"role": "system", "content": "You are a bookmark organization assistant. Respond only with valid JSON."},
                    {"role": "user", "content": LINK_PROMPT_TEMPLATE.format(url=url, title=title or "Unknown")},
                ],
                temperature=0.3,
                json_mode=True,
            )
            result = json.loads(_strip_code_fences(content) or "{}")
            if not isinstance(result, dict):
                logger.warning("OpenAI link analysis returned a non-object JSON value")
                return fallback

            try:
                category = Category(result.get("category"))
            except ValueError:
                logger.debug(f"Unknown category {result.get('category')!r} from OpenAI. Using Other.")
                category = Category.OTHER

            raw_tags = result.get("tags") or []
            tags = [str(tag) for tag in raw_tags if str(tag).strip()][:MAX_LINK_TAGS] if isinstance(raw_tags, list) else []

            return LinkAnalysis(
                suggested_title=result.get("suggestedTitle") or title or url,
                category=category,
                tags=tags,
            )
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse OpenAI link analysis JSON: {e}")
            return fallback
        except APIError as e:
            _log_api_error(e, "link analysis")
            return fallback
        except Exception as e:
            logger.error(f"Error analyzing link with OpenAI API: {type(e).__name__}")
            return fallback

    def parse_event(self, text: str, now: Optional[datetime] = None) -> Optional[ParsedEvent]:
        """Turn free text such as "dentist next friday at 3pm" into event fields.

        Args:
            text: Natural-language description
            now: Reference time for relative dates (defaults to current UTC time)

        Returns:
            ParsedEvent, or None if the text could not be parsed
        """
        if not self.client:
            logger.debug("OpenAI client not initialized. Event parsing unavailable.")
            return None

        if not text or not text.strip():
            return None

        reference = now or datetime.now(timezone.utc)
        try:
            content = self._complete(
                [
                    {"role": "system", "content": "You are a calendar assistant. Respond only with valid JSON."},
                    {"role": "user", "content": EVENT_PROMPT_TEMPLATE.format(text=text, now=reference.isoformat())},
                ],
                temperature=0.2,
                json_mode=True,
            )
            result = json.loads(_strip_code_fences(content) or "null")
            if not isinstance(result, dict):
                return None

            parsed = ParsedEvent.model_validate(result)
            if parse_event_date(parsed.date) is None:
                logger.warning("OpenAI returned an event date that is not ISO-8601")
                return None
            return parsed
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse OpenAI event response: {type(e).__name__}")
            return None
        except APIError as e:
            _log_api_error(e, "event parsing")
            return None
        except Exception as e:
            logger.error(f"Error parsing event with OpenAI API: {type(e).__name__}")
            return None

    def productivity_tip(self) -> str:
        """One short productivity tip, or a canned tip on failure."""
        if not self.client:
            return TIP_ERROR_FALLBACK

        try:
            tip = self._complete([{"role": "user", "content": TIP_PROMPT}], temperature=0.9)
            return tip or TIP_EMPTY_FALLBACK
        except APIError as e:
            _log_api_error(e, "productivity tip")
            return TIP_ERROR_FALLBACK
        except Exception as e:
            logger.error(f"Error generating tip with OpenAI API: {type(e).__name__}")
            return TIP_ERROR_FALLBACK

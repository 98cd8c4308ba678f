# event_planner/agents/llm_agent.py
from openai import OpenAI, OpenAIError
from typing import List, Dict, Optional, Any, Protocol
from event_planner.config.settings import Settings
from event_planner.exceptions import CompletionError, MalformedResponseError
import json
import re
import logging

logger = logging.getLogger(__name__)

API_KEY_SETTING = "openai.api_key"


class CompletionClient(Protocol):
    """Anything that turns role-tagged messages into a single reply."""

    def chat(self, messages: List[dict], json_response: bool = False, **kwargs) -> str:
        ...


def resolve_api_key(config: Settings, store=None) -> Optional[str]:
    """
    Look up the OpenAI key in the system_settings table first, then fall back to config.

    Args:
        config: Application settings
        store: Optional EventStore used for the system_settings lookup

    Returns:
        The API key, or None if neither source has one
    """
    if store is not None:
        stored = store.get_system_setting(API_KEY_SETTING)
        if stored:
            return stored
        logger.info("No OpenAI key in system_settings, using configured key")
    return config.openai_api_key


def parse_json_object(response: str) -> Dict[str, Any]:
    """Parse a completion that must be a JSON object."""
    # Remove markdown code blocks if present
    cleaned = re.sub(r'```json\s*|\s*```', '', response).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Completion is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class ChatAgent:
    """OpenAI chat completion client."""

    def __init__(self, config: Settings, api_key: Optional[str] = None):
        self.config = config
        api_key = api_key or config.openai_api_key
        if not api_key:
            raise CompletionError("No OpenAI API key configured")
        self.client = OpenAI(api_key=api_key)
        self.model = config.openai_llm_model
        self.temperature = config.openai_temperature
        self.max_tokens = config.openai_max_tokens

    def chat(
        self,
        messages: List[dict],
        json_response: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Send a list of messages to the OpenAI chat model and get the response.
        Errors are not retried.

        Args:
            messages: List of message dicts (e.g., [{"role": "user", "content": "Hello"}])
            json_response: Ask the model to answer with a JSON object
            temperature: Overrides the configured temperature
            max_tokens: Overrides the configured token limit

        Returns:
            The assistant's reply as a string.
        """
        request = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        if json_response:
            request["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**request)
        except OpenAIError as e:
            logger.error(f"Chat completion failed: {e}")
            raise CompletionError(f"OpenAI API error: {e}", upstream_message=str(e)) from e

        content = response.choices[0].message.content
        if content is None:
            raise MalformedResponseError("Completion returned no content")
        return content

    def chat_single(self, prompt: str) -> str:
        """
        Send a single prompt to the OpenAI chat model and get the response.

        Args:
            prompt: The user's prompt as a string.

        Returns:
            The assistant's reply as a string.
        """
        messages = [{"role": "user", "content": prompt}]
        return self.chat(messages)

    def chat_json(self, messages: List[dict], **kwargs) -> Dict[str, Any]:
        """Send messages in JSON mode and parse the reply into a dict."""
        return parse_json_object(self.chat(messages, json_response=True, **kwargs))

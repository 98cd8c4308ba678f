# event_planner/agents/event_assistant.py
from typing import List, Dict, Optional
import json
import logging

from event_planner.agents.llm_agent import CompletionClient
from event_planner.models.schemas import Event

logger = logging.getLogger(__name__)


class EventAssistant:
    """Conversational helper for one event; every reply comes from the completion client."""

    def __init__(self, agent: CompletionClient, max_tokens: int = 500):
        self.agent = agent
        self.max_tokens = max_tokens

    @staticmethod
    def event_context(event: Event) -> Dict[str, object]:
        return {
            "id": event.id,
            "title": event.title,
            "type": event.event_type,
            "date": event.start_date.date().isoformat(),
            "budget": event.budget,
            "guests": event.estimated_guests,
            "location": event.location,
            "status": event.status,
        }

    def build_messages(self, event: Event, user_message: str, history: Optional[List[dict]] = None) -> List[dict]:
        """
        Assemble the system prompt, prior turns and the new question.

        History entries are dicts with `type` ("user" or anything else for the
        assistant) and `content`.
        """
        system_prompt = (
            f"You are an AI event assistant helping with a {event.event_type} event. "
            f"Here are the event details: {json.dumps(self.event_context(event))}. "
            "Provide helpful, concise responses to help the event organizer."
        )
        messages = [{"role": "system", "content": system_prompt}]
        for turn in history or []:
            role = "user" if turn.get("type") == "user" else "assistant"
            messages.append({"role": role, "content": turn.get("content", "")})
        messages.append({"role": "user", "content": user_message})
        return messages

    def respond(self, event: Event, user_message: str, history: Optional[List[dict]] = None) -> str:
        """Get the assistant's reply. Completion errors propagate to the caller."""
        if not user_message or not user_message.strip():
            raise ValueError("user_message must not be empty")

        messages = self.build_messages(event, user_message.strip(), history)
        logger.info(f"Asking assistant about event {event.id} ({len(messages) - 2} prior turns)")
        return self.agent.chat(messages, max_tokens=self.max_tokens)

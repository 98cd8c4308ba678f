# event_planner/engines/lead_matching.py
"""
Vendor lead generation.

Upcoming events are sent to the completion endpoint together with the
vendor's service categories; the scored matches that come back are stored
as leads for the vendor.
"""

from typing import List, Optional
from datetime import datetime, timezone
from pydantic import ValidationError
import argparse
import json
import logging

from event_planner.config.settings import Settings
from event_planner.data_access.postgres_client import PostgresClient
from event_planner.data_access.event_store import EventStore
from event_planner.agents.llm_agent import ChatAgent, CompletionClient, parse_json_object, resolve_api_key
from event_planner.exceptions import MalformedResponseError
from event_planner.models.schemas import Event, LeadMatch, VendorLead, LeadStatus


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert event planning AI assistant. Respond only with valid JSON."


class LeadMatchingEngine:
    """Scores upcoming events for a vendor and keeps the results as leads."""

    def __init__(self, store: EventStore, agent: CompletionClient, events_limit: Optional[int] = None):
        self.store = store
        self.agent = agent
        self.events_limit = events_limit

    def find_upcoming_events(self, now: Optional[datetime] = None) -> List[Event]:
        return self.store.get_upcoming_events(now=now or datetime.now(timezone.utc), limit=self.events_limit)

    @staticmethod
    def event_summary(event: Event) -> dict:
        return {
            "id": event.id,
            "title": event.title,
            "type": event.event_type,
            "date": event.start_date.date().isoformat(),
            "budget": event.budget,
            "guests": event.estimated_guests,
            "location": event.location,
        }

    def build_messages(self, service_categories: List[str], events: List[Event]) -> List[dict]:
        """Build the scoring request for one vendor."""
        events_json = json.dumps([self.event_summary(e) for e in events], indent=2)

        prompt = f"""As an AI event planning assistant, analyze these upcoming events and identify which ones would be a good match for a vendor offering these services: {', '.join(service_categories)}.

Events:
{events_json}

For each matching event, provide:
1. Event ID
2. Match score (0-100)
3. Brief explanation of why it's a good match
4. Suggested approach for the vendor

Format your response as JSON in this structure:
{{
  "matches": [
    {{"eventId": "...", "matchScore": 85, "explanation": "...", "approach": "..."}}
  ]
}}
"""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    @staticmethod
    def parse_matches(response: str) -> List[LeadMatch]:
        """
        Parse and validate the whole completion before anything is stored.

        Raises:
            MalformedResponseError: Not JSON, no `matches` array, or an entry
                missing its id or with a score outside 0-100
        """
        data = parse_json_object(response)
        matches = data.get("matches")
        if not isinstance(matches, list):
            raise MalformedResponseError("Completion has no 'matches' array")

        try:
            return [LeadMatch.model_validate(m) for m in matches]
        except ValidationError as e:
            raise MalformedResponseError(f"Invalid lead match in completion: {e}") from e

    def generate_leads(
        self,
        vendor_id: str,
        vendor_services: Optional[List[dict]] = None,
        now: Optional[datetime] = None
    ) -> List[VendorLead]:
        """
        Score upcoming events for a vendor and upsert one lead per match.

        Args:
            vendor_id: Vendor the leads belong to
            vendor_services: Service rows with a `category` key; loaded from
                vendor_services when omitted

        Returns:
            Stored leads joined with their event. Matches pointing at an event
            that was not in the candidate list are stored but not returned.
        """
        if vendor_services is None:
            categories = self.store.get_vendor_service_categories(vendor_id)
        else:
            categories = [service["category"] for service in vendor_services]

        events = self.find_upcoming_events(now)
        if not events:
            logger.info(f"No upcoming events to score for vendor {vendor_id}")
            return []

        logger.info(f"Scoring {len(events)} upcoming events for vendor {vendor_id} ({', '.join(categories)})")
        response = self.agent.chat(self.build_messages(categories, events), json_response=True)
        matches = self.parse_matches(response)

        events_by_id = {event.id: event for event in events}
        leads = []
        for match in matches:
            lead = VendorLead(
                vendor_id=vendor_id,
                event_id=match.event_id,
                match_score=match.match_score,
                match_reason=match.explanation,
                suggested_approach=match.approach,
                status=LeadStatus.NEW
            )
            self.store.upsert_vendor_lead(lead)

            event = events_by_id.get(match.event_id)
            if event is None:
                logger.warning(f"Match for unknown event {match.event_id}; stored but not returned")
                continue
            leads.append(lead.model_copy(update={"event": event}))

        logger.info(f"Saved {len(matches)} leads for vendor {vendor_id}")
        return leads

    def get_saved_leads(self, vendor_id: str) -> List[VendorLead]:
        """Leads stored for a vendor, best match first."""
        return self.store.get_vendor_leads(vendor_id)


def main():
    """Main entry point for generating leads for one vendor."""
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # Suppress verbose HTTP logs from OpenAI client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    parser = argparse.ArgumentParser(description='Generate AI vendor leads from upcoming events.')
    parser.add_argument('--vendor-id', required=True, help='Vendor to generate leads for')
    parser.add_argument('--saved', action='store_true', help='Only list leads already stored')
    args = parser.parse_args()

    config = Settings()
    logging.getLogger().setLevel(config.log_level.upper())

    with PostgresClient(config) as client:
        store = EventStore(client)
        if args.saved:
            leads = store.get_vendor_leads(args.vendor_id)
        else:
            agent = ChatAgent(config, api_key=resolve_api_key(config, store))
            engine = LeadMatchingEngine(store, agent, events_limit=config.upcoming_events_limit)
            leads = engine.generate_leads(args.vendor_id)

    print("\n" + "="*60)
    print(f"LEADS FOR VENDOR {args.vendor_id}")
    print("="*60)
    for lead in leads:
        title = lead.event.title if lead.event else lead.event_id
        print(f"{lead.match_score:5.1f}  {title}")
        print(f"       {lead.match_reason}")
    print("="*60)


if __name__ == "__main__":
    main()

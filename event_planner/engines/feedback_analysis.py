# event_planner/engines/feedback_analysis.py
"""
Heuristic analysis of attendee feedback.

Each entry gets a sentiment score in [0, 1] from its rating and a keyword
count over its comment. Scores are rolled up into a positive / neutral /
negative distribution, per-topic sentiment and improvement advice, and the
result is stored as the event's single analysis row.
"""

from typing import List, Optional, Tuple
from datetime import datetime, timezone
import argparse
import logging

from event_planner.config.settings import Settings
from event_planner.data_access.postgres_client import PostgresClient
from event_planner.data_access.event_store import EventStore
from event_planner.models.schemas import (
    FeedbackEntry, FeedbackAnalysis, SentimentResult, SentimentLabel, SentimentDistribution,
    TopicSummary, ImprovementRecommendation
)


logger = logging.getLogger(__name__)

POSITIVE_WORDS = ["great", "excellent", "amazing", "good", "wonderful", "fantastic", "enjoyed", "love", "perfect"]
NEGATIVE_WORDS = ["bad", "poor", "terrible", "awful", "disappointing", "disappointed", "issue", "problem", "fail"]

RATING_WEIGHT = 0.7
TEXT_WEIGHT = 0.3
POSITIVE_THRESHOLD = 0.6
NEGATIVE_THRESHOLD = 0.4
# Topics below this average sentiment get advice
TOPIC_ADVICE_THRESHOLD = 0.5
GENERAL_ADVICE_THRESHOLD = 0.7

# Order matters: ties in mention count keep this order
TOPIC_KEYWORDS = {
    "Service": ["service", "staff", "waiter", "waitress", "attendant"],
    "Food": ["food", "meal", "catering", "dish", "menu", "drink", "beverage"],
    "Venue": ["venue", "location", "place", "room", "hall", "space"],
    "Staff": ["staff", "team", "employee", "server", "helper"],
    "Music": ["music", "dj", "band", "song", "dance", "playlist"],
    "Decorations": ["decoration", "decor", "flower", "centerpiece", "theme", "design"],
    "Organization": ["organized", "planning", "schedule", "timing", "coordination"],
}

TOPIC_ADVICE = {
    "Service": "Consider additional training for service staff to improve guest experience.",
    "Food": "Review catering options and consider taste testing with different vendors.",
    "Venue": "Explore alternative venues or improve the setup of your current venue.",
    "Staff": "Provide more detailed briefing to staff about event expectations and roles.",
    "Music": "Create a more curated playlist or consider hiring a professional DJ/band.",
    "Decorations": "Work with a professional decorator to enhance the visual appeal of your events.",
    "Organization": "Implement a more detailed event timeline and assign a dedicated coordinator.",
}

GENERAL_AREA = "General Experience"
GENERAL_ADVICE = "Consider sending follow-up surveys to gather more specific feedback for improvement."


def label_for(score: float) -> str:
    if score > POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE.value
    if score < NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE.value
    return SentimentLabel.NEUTRAL.value


def score_sentiment(rating: int, comment: Optional[str]) -> SentimentResult:
    """
    Score one feedback entry.

    Without a comment the score is rating / 5, labelled by the rating alone.
    With a comment the rating share is blended with the fraction of matched
    sentiment words that are positive (0.5 when none match).
    """
    if not comment:
        if rating > 3:
            label = SentimentLabel.POSITIVE
        elif rating == 3:
            label = SentimentLabel.NEUTRAL
        else:
            label = SentimentLabel.NEGATIVE
        return SentimentResult(score=rating / 5, label=label)

    text = comment.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in text)
    negative = sum(1 for word in NEGATIVE_WORDS if word in text)
    text_score = positive / (positive + negative) if positive or negative else 0.5

    score = RATING_WEIGHT * (rating / 5) + TEXT_WEIGHT * text_score
    return SentimentResult(score=score, label=label_for(score))


def extract_topics(entries: List[FeedbackEntry], scores: List[float]) -> List[TopicSummary]:
    """Count keyword mentions per topic; each matching keyword is one mention."""
    totals = {name: [0, 0.0] for name in TOPIC_KEYWORDS}

    for entry, score in zip(entries, scores):
        if not entry.comment:
            continue
        text = entry.comment.lower()
        for name, keywords in TOPIC_KEYWORDS.items():
            for keyword in keywords:
                if keyword in text:
                    totals[name][0] += 1
                    totals[name][1] += score

    topics = [
        TopicSummary(name=name, mentions=mentions, sentiment=total / mentions)
        for name, (mentions, total) in totals.items()
        if mentions > 0
    ]
    return sorted(topics, key=lambda t: t.mentions, reverse=True)


def derive_recommendations(topics: List[TopicSummary], scores: List[float]) -> List[ImprovementRecommendation]:
    """Advice for weak topics, or a general follow-up when no topic is weak but overall sentiment is lukewarm."""
    weak = sorted((t for t in topics if t.sentiment < TOPIC_ADVICE_THRESHOLD), key=lambda t: t.sentiment)
    recommendations = [
        ImprovementRecommendation(
            area=topic.name,
            sentiment=topic.sentiment,
            recommendation=TOPIC_ADVICE.get(
                topic.name, f"Review feedback related to {topic.name} to identify specific improvements."
            )
        )
        for topic in weak
    ]

    if not recommendations and scores:
        mean = sum(scores) / len(scores)
        if mean < GENERAL_ADVICE_THRESHOLD:
            recommendations.append(ImprovementRecommendation(
                area=GENERAL_AREA,
                sentiment=mean,
                recommendation=GENERAL_ADVICE
            ))
    return recommendations


def bucket_counts(scores: List[float]) -> Tuple[int, int, int]:
    """(positive, neutral, negative) counts; every score lands in exactly one bucket."""
    labels = [label_for(score) for score in scores]
    return (
        labels.count(SentimentLabel.POSITIVE.value),
        labels.count(SentimentLabel.NEUTRAL.value),
        labels.count(SentimentLabel.NEGATIVE.value),
    )


class FeedbackAnalysisEngine:
    """Analyzes an event's feedback and stores the result."""

    def __init__(self, store: Optional[EventStore] = None):
        self.store = store

    def analyze(
        self, event_id: str, entries: List[FeedbackEntry], now: Optional[datetime] = None
    ) -> FeedbackAnalysis:
        """
        Build the analysis for one event.

        Raises:
            ValueError: If there is no feedback to analyze
        """
        if not entries:
            raise ValueError(f"No feedback to analyze for event {event_id}")

        total = len(entries)
        scores = [score_sentiment(entry.rating, entry.comment).score for entry in entries]
        positive, neutral, negative = bucket_counts(scores)
        topics = extract_topics(entries, scores)

        return FeedbackAnalysis(
            event_id=event_id,
            average_rating=sum(entry.rating for entry in entries) / total,
            total_feedback=total,
            positive_count=positive,
            neutral_count=neutral,
            negative_count=negative,
            sentiment_scores=SentimentDistribution(
                positive=positive / total * 100,
                neutral=neutral / total * 100,
                negative=negative / total * 100
            ),
            key_topics=topics,
            recommendations=derive_recommendations(topics, scores),
            analyzed_at=now or datetime.now(timezone.utc)
        )

    def run(self, event_id: str) -> FeedbackAnalysis:
        """Load an event's feedback, analyze it and upsert the analysis row."""
        if self.store is None:
            raise ValueError("FeedbackAnalysisEngine.run needs a store")

        entries = self.store.get_feedback(event_id)
        logger.info(f"Analyzing {len(entries)} feedback entries for event {event_id}")

        analysis = self.analyze(event_id, entries)
        self.store.upsert_feedback_analysis(analysis)

        logger.info(
            f"Saved feedback analysis for event {event_id}: average rating {analysis.average_rating:.2f}, "
            f"{analysis.positive_count}/{analysis.neutral_count}/{analysis.negative_count} positive/neutral/negative"
        )
        return analysis


def main():
    """Main entry point for analyzing one event's feedback."""
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    parser = argparse.ArgumentParser(description='Analyze attendee feedback for an event.')
    parser.add_argument('--event-id', required=True, help='Event whose feedback to analyze')
    args = parser.parse_args()

    config = Settings()
    logging.getLogger().setLevel(config.log_level.upper())

    with PostgresClient(config) as client:
        analysis = FeedbackAnalysisEngine(EventStore(client)).run(args.event_id)

    print("\n" + "="*60)
    print("FEEDBACK ANALYSIS")
    print("="*60)
    print(f"Average rating: {analysis.average_rating:.1f} ({analysis.total_feedback} responses)")
    scores = analysis.sentiment_scores
    print(f"Positive {scores.positive:.0f}% / Neutral {scores.neutral:.0f}% / Negative {scores.negative:.0f}%")
    for topic in analysis.key_topics:
        print(f"  {topic.name}: {topic.mentions} mentions, sentiment {topic.sentiment:.2f}")
    for rec in analysis.recommendations:
        print(f"  -> {rec.area}: {rec.recommendation}")
    print("="*60)


if __name__ == "__main__":
    main()

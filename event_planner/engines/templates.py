# event_planner/engines/templates.py
"""
Fixed planning templates per event type.

Lookups for an unknown event type fall back to DEFAULT_EVENT_TYPE, except for
the vendor samples which have no fallback.
"""

DEFAULT_EVENT_TYPE = "Wedding"

# Share of the total budget per category
BUDGET_ALLOCATIONS = {
    "Wedding": {
        "Venue": 0.4,
        "Catering": 0.3,
        "Photography": 0.1,
        "Decor": 0.1,
        "Entertainment": 0.05,
        "Attire": 0.05,
    },
    "Corporate": {
        "Venue": 0.3,
        "Catering": 0.25,
        "Technology": 0.2,
        "Speakers": 0.15,
        "Marketing": 0.1,
    },
    "Birthday": {
        "Venue": 0.3,
        "Food": 0.4,
        "Entertainment": 0.2,
        "Decor": 0.1,
    },
    "Conference": {
        "Venue": 0.35,
        "Catering": 0.25,
        "Technology": 0.2,
        "Speakers": 0.1,
        "Marketing": 0.1,
    },
}

# Multipliers applied per budget sensitivity before normalizing.
# Categories not listed use the "other" factor.
SENSITIVITY_FACTORS = {
    "high": {"Venue": 0.8, "Catering": 0.8, "Decor": 1.3, "Entertainment": 1.3, "other": 1.0},
    "medium": {"other": 1.0},
    "low": {"Venue": 1.2, "Catering": 1.2, "other": 0.9},
}

SAMPLE_VENDORS = {
    "Wedding": [
        {"name": "Elegant Venues", "category": "Venue", "rating": 4.8, "price": "$$$$",
         "description": "Luxury wedding venues with exceptional service"},
        {"name": "Divine Catering", "category": "Catering", "rating": 4.7, "price": "$$$",
         "description": "Gourmet catering specializing in wedding receptions"},
        {"name": "Moments Photography", "category": "Photography", "rating": 4.9, "price": "$$$",
         "description": "Award-winning wedding photography"},
    ],
    "Corporate": [
        {"name": "Business Centers Inc", "category": "Venue", "rating": 4.6, "price": "$$$",
         "description": "Professional venues for corporate events"},
        {"name": "Executive Catering", "category": "Catering", "rating": 4.5, "price": "$$",
         "description": "Business-focused catering services"},
        {"name": "Tech Solutions", "category": "Technology", "rating": 4.8, "price": "$$$",
         "description": "Full AV and technology services for corporate events"},
    ],
    "Birthday": [
        {"name": "Fun Spaces", "category": "Venue", "rating": 4.4, "price": "$$",
         "description": "Vibrant venues for birthday celebrations"},
        {"name": "Party Catering", "category": "Food", "rating": 4.3, "price": "$$",
         "description": "Delicious food for birthday parties"},
        {"name": "Entertainment Plus", "category": "Entertainment", "rating": 4.7, "price": "$$",
         "description": "DJs, games, and entertainment for birthdays"},
    ],
    "Conference": [
        {"name": "Convention Centers", "category": "Venue", "rating": 4.5, "price": "$$$",
         "description": "Spacious venues for conferences and conventions"},
        {"name": "Conference Catering", "category": "Catering", "rating": 4.4, "price": "$$",
         "description": "Specialized catering for conference attendees"},
        {"name": "AV Professionals", "category": "Technology", "rating": 4.9, "price": "$$$",
         "description": "Complete technology solutions for conferences"},
    ],
}

# long: more than 90 days out, medium: 30-90 days, short: under 30 days
TIMELINE_TEMPLATES = {
    "Wedding": {
        "long": [
            {"title": "Book venue", "deadline": "Immediately", "priority": "high"},
            {"title": "Hire photographer", "deadline": "6 months before", "priority": "medium"},
            {"title": "Choose wedding attire", "deadline": "5 months before", "priority": "medium"},
            {"title": "Send save-the-dates", "deadline": "4 months before", "priority": "medium"},
            {"title": "Book catering", "deadline": "4 months before", "priority": "high"},
        ],
        "medium": [
            {"title": "Send invitations", "deadline": "Immediately", "priority": "high"},
            {"title": "Finalize menu", "deadline": "3 weeks before", "priority": "medium"},
            {"title": "Create seating chart", "deadline": "2 weeks before", "priority": "medium"},
            {"title": "Confirm all vendors", "deadline": "2 weeks before", "priority": "high"},
        ],
        "short": [
            {"title": "Follow up with guests who haven't RSVP'd", "deadline": "Immediately", "priority": "high"},
            {"title": "Final venue walkthrough", "deadline": "1 week before", "priority": "high"},
            {"title": "Confirm final headcount with caterer", "deadline": "3 days before", "priority": "high"},
        ],
    },
    "Corporate": {
        "long": [
            {"title": "Book venue", "deadline": "Immediately", "priority": "high"},
            {"title": "Secure speakers/presenters", "deadline": "2 months before", "priority": "high"},
            {"title": "Plan agenda", "deadline": "6 weeks before", "priority": "medium"},
            {"title": "Send invitations", "deadline": "1 month before", "priority": "high"},
        ],
        "medium": [
            {"title": "Confirm all presenters", "deadline": "Immediately", "priority": "high"},
            {"title": "Finalize catering order", "deadline": "2 weeks before", "priority": "medium"},
            {"title": "Prepare presentation materials", "deadline": "1 week before", "priority": "high"},
        ],
        "short": [
            {"title": "Send event reminder", "deadline": "Immediately", "priority": "high"},
            {"title": "Test all AV equipment", "deadline": "1 day before", "priority": "high"},
            {"title": "Print name badges", "deadline": "1 day before", "priority": "medium"},
        ],
    },
    "Birthday": {
        "long": [
            {"title": "Choose theme", "deadline": "Immediately", "priority": "medium"},
            {"title": "Book venue", "deadline": "1 month before", "priority": "high"},
            {"title": "Send invitations", "deadline": "3 weeks before", "priority": "high"},
        ],
        "medium": [
            {"title": "Order cake", "deadline": "Immediately", "priority": "high"},
            {"title": "Buy decorations", "deadline": "1 week before", "priority": "medium"},
            {"title": "Plan activities/games", "deadline": "1 week before", "priority": "medium"},
        ],
        "short": [
            {"title": "Confirm attendance", "deadline": "Immediately", "priority": "high"},
            {"title": "Pick up cake", "deadline": "1 day before", "priority": "high"},
            {"title": "Set up decorations", "deadline": "Day of event", "priority": "medium"},
        ],
    },
    "Conference": {
        "long": [
            {"title": "Book venue", "deadline": "Immediately", "priority": "high"},
            {"title": "Secure keynote speakers", "deadline": "3 months before", "priority": "high"},
            {"title": "Create conference schedule", "deadline": "2 months before", "priority": "high"},
            {"title": "Open registration", "deadline": "2 months before", "priority": "high"},
        ],
        "medium": [
            {"title": "Confirm all speakers", "deadline": "Immediately", "priority": "high"},
            {"title": "Arrange accommodations", "deadline": "3 weeks before", "priority": "medium"},
            {"title": "Finalize catering", "deadline": "2 weeks before", "priority": "medium"},
        ],
        "short": [
            {"title": "Send final instructions to attendees", "deadline": "Immediately", "priority": "high"},
            {"title": "Prepare registration materials", "deadline": "2 days before", "priority": "high"},
            {"title": "Test all technology", "deadline": "1 day before", "priority": "high"},
        ],
    },
}

GUEST_EXPERIENCE_IDEAS = {
    "Wedding": [
        {"title": "Photo booth with props", "description": "Create lasting memories with a fun photo booth"},
        {"title": "Signature cocktail", "description": "Offer a unique signature drink that represents the couple"},
        {"title": "Welcome bags for out-of-town guests", "description": "Make travelers feel special with welcome gifts"},
    ],
    "Corporate": [
        {"title": "Networking activity", "description": "Structured networking to help attendees connect"},
        {"title": "Digital event app", "description": "Custom app for schedules, maps, and networking"},
        {"title": "Professional headshot station", "description": "Offer complimentary professional headshots"},
    ],
    "Birthday": [
        {"title": "Personalized party favors", "description": "Thank guests with customized mementos"},
        {"title": "Interactive food station", "description": "Let guests customize their own treats"},
        {"title": "Memory sharing activity", "description": "Create an opportunity for guests to share memories"},
    ],
    "Conference": [
        {"title": "Comfortable break areas", "description": "Create spaces for attendees to relax between sessions"},
        {"title": "Charging stations", "description": "Provide convenient places to charge devices"},
        {"title": "Interactive Q&A technology", "description": "Use technology to make sessions more engaging"},
    ],
}

from decimal import Decimal

SEVAS = [
    {"key": "annapurna", "name": "Annapurna Seva", "amount": Decimal("1000"),
     "description": "Sponsor food offering to the deity and devotees."},
    {"key": "deep", "name": "Deep Seva (Lighting Lamps)", "amount": Decimal("500"),
     "description": "Light oil lamps for the deity during evening aarti."},
    {"key": "vastra", "name": "Vastra Seva", "amount": Decimal("2000"),
     "description": "Offer new clothes and ornaments to the deity."},
    {"key": "abhishekam", "name": "Abhishekam Seva", "amount": Decimal("1500"),
     "description": "Sacred bath ritual for the deity with milk, honey, and water."},
    {"key": "bhog", "name": "Bhog/Prasad Seva", "amount": Decimal("800"),
     "description": "Offer special food to the deity which is then distributed as prasad."},
]

SPECIAL_PUJAS = [
    {"key": "sankalp", "name": "Sankalp Puja", "amount": Decimal("1500")},
    {"key": "navgrah", "name": "Navgrah Shanti Puja", "amount": Decimal("2500")},
    {"key": "health", "name": "Health & Wellbeing Puja", "amount": Decimal("1200")},
    {"key": "studies", "name": "Studies / Exam Success Puja", "amount": Decimal("1000")},
]

TIME_SLOTS = [
    ("morning", "6:00 AM - 9:00 AM"),
    ("evening", "6:00 PM - 8:00 PM"),
]

DAILY_TIMINGS = [
    ("Morning Aarti", "6:00 AM"),
    ("Evening Aarti", "7:00 PM"),
]

MORNING_AARTI_TIMINGS = [
    ("Summer", "6:00 AM - 6:30 AM"),
    ("Winter", "6:30 AM - 7:00 AM"),
]

ABHISHEKAM_SCHEDULE = "Monday & Friday, 7:30 AM"
PRASAD_DISTRIBUTION_TIME = "After Morning Aarti"


def seva_by_name(name):
    return next((s for s in SEVAS if s["name"] == name), None)


def puja_by_key(key):
    return next((p for p in SPECIAL_PUJAS if p["key"] == key), None)

"""Reference tagging taxonomy and the seed job."""

import logging

from src.db import CatalogStore
from src.logger import log_function


logger = logging.getLogger("maintenance")

CATEGORIES = [
    ("Overtake", "Radio messages about overtaking maneuvers"),
    ("Strategy", "Pit stop strategy and race tactics"),
    ("Rage", "Frustrated or angry radio messages"),
    ("Celebration", "Victory celebrations and achievements"),
    ("Team Orders", "Team instructions to drivers"),
    ("Technical Issue", "Car problems and technical difficulties"),
    ("Safety Car", "Safety car and VSC related messages"),
    ("Pit Stop", "Pit stop communications"),
    ("Weather", "Weather conditions and tire choices"),
    ("Incident", "Crashes, penalties, and incidents"),
    ("Funny", "Humorous or entertaining moments"),
    ("Motivational", "Encouraging and motivational messages"),
    ("Complaint", "Complaints about other drivers or conditions"),
    ("Information", "General race information and updates"),
    ("Viral", "Super popular and widely shared radio moments"),
]


@log_function(logger_name="maintenance", log_execution_time=True)
def seed_categories(store: CatalogStore) -> dict[str, int]:
    """
    Upsert the reference taxonomy keyed by name. Safe to re-run.

    Returns:
        Dict with "seeded" and "errors" counts
    """
    stats = {"seeded": 0, "errors": 0}
    for name, description in CATEGORIES:
        try:
            store.upsert_category(name, description)
            print(f"  ✓ Added: {name}")
            stats["seeded"] += 1
        except Exception as e:
            print(f"  ✗ Error adding {name}: {e}")
            logger.error(f"Error seeding category {name}: {e}")
            stats["errors"] += 1
    return stats

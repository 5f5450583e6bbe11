#!/usr/bin/env python3
"""
Seed script for the Incident Reviewer demo.

This script stores sample data through the application services, so every
record is validated and timestamped exactly as it would be through the API:
- A few contributing causes and triggers for the catalogs
- Sample reviews with causes and triggers bound to them

The backend is the one configured for the application (STORAGE_BACKEND,
DATABASE_URL). With the in-memory backend the data only lives as long as
this script, which is still useful to check the sample data is valid.

Usage:
    cd backend
    python ../demo/seed_data.py

Or from the project root:
    PYTHONPATH=backend python demo/seed_data.py
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
backend_path = Path(__file__).parent.parent / "backend"
if backend_path.exists():
    sys.path.insert(0, str(backend_path))

from incident_reviewer.config import get_settings
from incident_reviewer.database import close_engine, make_engine, make_session_maker
from incident_reviewer.entities import Cause, Review, Trigger
from incident_reviewer.main import build_services, seed_defaults
from incident_reviewer.services import CauseService, ReviewService, TriggerService


# Sample catalog entries
SAMPLE_CAUSES = [
    {
        "name": "Missing alert",
        "description": "The system degraded without any alert reaching the on-call engineer",
        "category": "Observability",
    },
    {
        "name": "Untested configuration change",
        "description": "A configuration change went out without being exercised in a test environment",
        "category": "Change management",
    },
    {
        "name": "Capacity limit",
        "description": "A component ran out of headroom (connections, memory, disk, quota)",
        "category": "Design",
    },
]

SAMPLE_TRIGGERS = [
    {
        "name": "Deploy",
        "description": "A new release went out shortly before the incident",
    },
    {
        "name": "Scheduled job",
        "description": "A batch or cron job started",
    },
]

# Sample reviews; bindings refer to catalog entries by name
SAMPLE_REVIEWS = [
    {
        "review": {
            "url": "https://status.example.com/incidents/2024-11-29-checkout",
            "title": "Checkout unavailable during sale",
            "description": "Checkout returned errors for 40 minutes after the sale started",
            "impact": "Roughly 30% of orders failed",
            "where": "Checkout service, payments database",
            "report_proximal_cause": "Connection pool to the payments database exhausted",
            "report_trigger": "Traffic spike when the sale opened",
        },
        "causes": [
            ("Capacity limit", "Pool size was sized for normal traffic", True),
            ("Missing alert", "Pool saturation wasn't alerted on", False),
        ],
        "triggers": [
            ("Traffic increase", "Sale announcement sent to all customers"),
        ],
    },
    {
        "review": {
            "url": "https://status.example.com/incidents/2024-12-03-login",
            "title": "Login failures after identity provider change",
            "description": "Users couldn't log in after the identity provider settings were rotated",
            "impact": "All new sessions failed for 15 minutes",
            "where": "Authentication gateway",
            "report_proximal_cause": "Stale signing certificate",
            "report_trigger": "Certificate rotation",
        },
        "causes": [
            ("Untested configuration change", "Rotation was applied directly in production", True),
            ("Third party outage", "Identity provider propagated the new key late", False),
        ],
        "triggers": [
            ("Deploy", "Gateway release with the new configuration"),
        ],
    },
]


async def seed_catalog(
    cause_service: CauseService,
    trigger_service: TriggerService,
) -> tuple[dict[str, Cause], dict[str, Trigger]]:
    """Store the sample causes and triggers, returning the whole catalog by name."""
    print("Creating catalog entries...")

    for data in SAMPLE_CAUSES:
        cause = await cause_service.save(Cause.new(**data))
        print(f"  Created cause: {cause.name} ({cause.category})")

    for data in SAMPLE_TRIGGERS:
        trigger = await trigger_service.save(Trigger.new(**data))
        print(f"  Created trigger: {trigger.name}")

    causes = {c.name: c for c in await cause_service.all()}
    triggers = {t.name: t for t in await trigger_service.all()}
    return causes, triggers


async def seed_reviews(
    review_service: ReviewService,
    causes: dict[str, Cause],
    triggers: dict[str, Trigger],
) -> list[Review]:
    """Store the sample reviews and bind their causes and triggers."""
    print("Creating reviews...")

    reviews = []
    for sample in SAMPLE_REVIEWS:
        review = await review_service.save(Review.new(**sample["review"]))
        print(f"  Created review: {review.title} (ID: {review.id})")

        for name, why, is_proximal_cause in sample["causes"]:
            review = await review_service.add_contributing_cause(
                review.id, causes[name].id, why, is_proximal_cause=is_proximal_cause
            )
            print(f"    Bound cause: {name}{' (proximal)' if is_proximal_cause else ''}")

        for name, why in sample["triggers"]:
            review = await review_service.bind_trigger(review.id, triggers[name].id, why)
            print(f"    Bound trigger: {name}")

        reviews.append(review)

    return reviews


async def main() -> None:
    """Main function to seed the configured storage."""
    print("=" * 60)
    print("Incident Reviewer - Demo Data Seeder")
    print("=" * 60)
    print()

    settings = get_settings()
    engine = None
    session_maker = None
    if settings.storage_backend == "postgres":
        engine = make_engine(settings)
        session_maker = make_session_maker(engine)

    cause_service, trigger_service, review_service = build_services(settings, session_maker)

    try:
        await seed_defaults(cause_service, trigger_service)
        causes, triggers = await seed_catalog(cause_service, trigger_service)
        reviews = await seed_reviews(review_service, causes, triggers)

        print()
        print("=" * 60)
        print("Demo data seeded successfully!")
        print("=" * 60)
        print()
        print("Summary:")
        print(f"  - Storage backend: {settings.storage_backend}")
        print(f"  - {len(causes)} contributing causes")
        print(f"  - {len(triggers)} triggers")
        print(f"  - {len(reviews)} reviews")
        print(f"    - {sum(len(r.bound_causes) for r in reviews)} bound causes")
        print(f"    - {sum(len(r.bound_triggers) for r in reviews)} bound triggers")
        print()

    except Exception as e:
        print(f"Error seeding data: {e}")
        raise

    finally:
        if engine is not None:
            await close_engine(engine)


if __name__ == "__main__":
    asyncio.run(main())

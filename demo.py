"""
End-to-end walkthrough of the care companion core.

This script exercises:
1. Configuration loading and validation
2. Medication reminders and the due list
3. Emergency contacts
4. Community events, RSVPs, posts and comments
5. The home dashboard and one reminder refresh
6. Clearing all local data

Run with: uv run python demo.py
"""

import asyncio
from datetime import datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from carecompanion.app import CareCompanion
from carecompanion.config import AppConfig, StorageConfig, print_config_summary, validate_config
from carecompanion.formatting import format_relative_timestamp, format_time_12h

console = Console()


def seed(app: CareCompanion) -> None:
    """Fill an empty device with a realistic week of data."""
    now = datetime.now()

    app.medications.add(
        {
            "name": "Lisinopril",
            "dosage": "10mg",
            "instructions": "Take with water",
            "schedule": ["08:00"],
        }
    )
    app.medications.add(
        {"name": "Metformin", "dosage": "500mg", "schedule": ["20:00", "08:30", "08:30"]}
    )
    app.medications.add({"name": "Vitamin D", "dosage": "1000 IU", "schedule": ["23:59"]})

    app.contacts.add(
        {"name": "Mary Smith", "relationship": "Daughter", "phone": "(555) 987-6543"}
    )
    app.contacts.add({"name": "Dr. Patel", "relationship": "Doctor", "phone": "(555) 222-1000"})

    tomorrow = (now + timedelta(days=1)).date().isoformat()
    bingo = app.community.add_event(
        {"title": "Bingo Night", "date": tomorrow, "time": "18:00", "location": "Main Hall"}
    )
    app.community.add_event(
        {"title": "Garden Club", "date": (now - timedelta(days=3)).replace(microsecond=0)}
    )
    app.community.rsvp(bingo.id, attending=True)

    post = app.community.add_post({"title": "Hi", "content": "Hello all"})
    app.community.add_comment(post.id, {"text": "Welcome!", "author": "Alex"})
    app.community.like_post(post.id)


def render_dashboard(app: CareCompanion) -> None:
    snapshot = app.dashboard.snapshot()

    meds_table = Table(title="Medication Reminders")
    meds_table.add_column("Name", style="cyan")
    meds_table.add_column("Dosage", style="white")
    meds_table.add_column("Schedule", style="magenta")
    for med in snapshot.due_medications:
        schedule = ", ".join(format_time_12h(t) for t in med.schedule)
        meds_table.add_row(med.name, med.dosage, schedule)
    console.print(meds_table)

    events_table = Table(title="Upcoming Events")
    events_table.add_column("Title", style="cyan")
    events_table.add_column("When", style="white")
    events_table.add_column("Attendees", style="green")
    for event in snapshot.upcoming_events:
        events_table.add_row(
            event.title, event.date.strftime("%a, %b %d at %I:%M %p"), str(len(event.attendees))
        )
    console.print(events_table)

    contacts_table = Table(title="Emergency Contacts")
    contacts_table.add_column("Name", style="cyan")
    contacts_table.add_column("Relationship", style="white")
    contacts_table.add_column("Phone", style="yellow")
    for contact in snapshot.contacts:
        contacts_table.add_row(contact.name, contact.relationship, contact.phone)
    console.print(contacts_table)

    for post in app.community.sorted_posts():
        console.print(
            f"📝 {post.title} by {post.author} "
            f"({format_relative_timestamp(post.created_at, snapshot.generated_at)}) "
            f"👍 {post.likes} 💬 {len(post.comments)}"
        )


async def run_demo() -> None:
    console.print(Panel("💊 CareCompanion - Walkthrough", style="bold blue"))

    validate_config()
    print_config_summary()

    config = AppConfig(storage=StorageConfig(backend="memory"))
    app = CareCompanion(config)
    seed(app)

    console.print(f"\n{'=' * 60}")
    render_dashboard(app)

    console.print(f"\n{'=' * 60}")
    console.print("🔄 Running one reminder refresh...", style="yellow")
    async with app.reminders.session():
        async for due in app.reminders.watch():
            console.print(f"{len(due)} medication(s) due right now", style="green")
            break

    for med in app.medications.get_due_medications():
        app.medications.mark_as_taken(med.id)
    console.print(
        f"✅ Marked all as taken; due now: {len(app.medications.get_due_medications())}",
        style="green",
    )

    removed = app.clear_all_data()
    console.print(f"🧹 Cleared {removed} stored document(s)", style="yellow")


if __name__ == "__main__":
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        console.print("\n👋 Demo stopped by user", style="yellow")

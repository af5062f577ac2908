"""Schedule analysis through a hosted text-generation model."""

import json
import logging

from capacity_board.db.models import AvailabilityBlock, Developer, Ticket

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a senior technical program manager specializing in agile resource allocation."

MISSING_KEY_TEXT = "API Key is missing. Please check your environment configuration."
EMPTY_TEXT = "No insights generated."
FAILED_TEXT = "Failed to analyze schedule. Please try again later."


def get_client(api_key: str | None):
    """Get an OpenAI client. Returns None if no key provided."""
    if not api_key:
        return None
    from openai import OpenAI
    return OpenAI(api_key=api_key)


def build_payload(
    developers: list[Developer],
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
) -> dict:
    return {
        "developers": [{"name": d.name, "role": d.role} for d in developers],
        "tickets": [
            {
                "key": t.key,
                "assignee": t.assignee_id,
                "status": t.status.value,
                "start": t.start_date.isoformat(),
                "end": t.end_date.isoformat(),
            }
            for t in tickets
        ],
        "blocks": [
            {
                "developer": b.developer_id,
                "type": b.type.value,
                "start": b.start_date.isoformat(),
                "end": b.end_date.isoformat(),
            }
            for b in blocks
        ],
    }


def build_prompt(payload: dict) -> str:
    return (
        "Analyze the following developer schedule and resource allocation data.\n"
        "Identify potential bottlenecks, overbooked developers, or underutilized resources.\n"
        "Suggest specific actions to optimize the workflow.\n\n"
        "Data:\n"
        f"Developers: {json.dumps(payload['developers'])}\n"
        f"Active Tickets: {json.dumps(payload['tickets'])}\n"
        f"Availability Blocks (Time Off): {json.dumps(payload['blocks'])}\n\n"
        "Please provide a concise, bulleted list of insights and recommendations.\n"
        "Format the output as Markdown."
    )


def analyze_schedule(
    api_key: str | None,
    developers: list[Developer],
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
    model: str = "gpt-4o-mini",
) -> str:
    """Ask the model for scheduling insights. Never raises; failures become fixed text."""
    client = get_client(api_key)
    if not client:
        return MISSING_KEY_TEXT

    prompt = build_prompt(build_payload(developers, tickets, blocks))
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
        )
        text = response.choices[0].message.content
    except Exception:
        logger.exception("Schedule analysis failed")
        return FAILED_TEXT
    return (text or "").strip() or EMPTY_TEXT

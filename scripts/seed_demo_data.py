#!/usr/bin/env python3
"""Seed realistic demo data into a running Herald backend.

Usage:
    # Start the backend first:
    uvicorn herald.web.app:create_app --factory --port 8080

    # Seed demo data:
    python3 scripts/seed_demo_data.py

    # Seed against a different host:
    python3 scripts/seed_demo_data.py --base-url http://localhost:9000

All data goes through the public API, so preference checks, DND and
template validation apply exactly as they would for real traffic.

Data created:
    - Preferences for 4 demo recipients (one with SOCIAL disabled, one in DND)
    - Notifications rendered from the seed templates plus a few free-form ones
    - Opens and clicks on a subset, so analytics have something to show
"""

from __future__ import annotations

import argparse
import random
import sys
from datetime import datetime, timezone

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"

RECIPIENTS = ["alice", "bob", "carol", "dave"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def api(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json: dict | None = None,
    params: dict | None = None,
) -> dict | list | None:
    """Make an API call and return parsed JSON, or None on failure."""
    resp = client.request(method, path, json=json, params=params)
    if resp.status_code >= 400:
        print(f"  FAILED {method} {path} -> {resp.status_code}: {resp.text[:200]}")
        return None
    if resp.headers.get("content-type", "").startswith("application/json"):
        return resp.json()
    return None


def section(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------


def seed_preferences(client: httpx.Client) -> None:
    section("Preferences")
    for rid in RECIPIENTS:
        api(client, "POST", f"/api/recipients/{rid}/preferences/reset")

    api(client, "PUT", "/api/recipients/bob/preferences/SOCIAL", json={"enabled": False})
    print("  bob: SOCIAL disabled")

    # Whole-day window so carol's non-urgent notifications are always held.
    api(client, "PUT", "/api/recipients/carol/preferences/dnd", json={
        "enabled": True,
        "start_time": "00:00",
        "end_time": "00:00",
        "days": [],
    })
    print("  carol: DND all day")


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

TEMPLATED = [
    ("security_new_login", {"device": "Firefox on Linux", "location": "Berlin", "time": "09:14"}),
    ("security_password_changed", {"account": "{rid}@example.com"}),
    ("system_maintenance", {"date": "Saturday", "start": "02:00", "end": "04:00"}),
    ("social_new_follower", {"follower": "erin"}),
    ("social_mention", {"author": "frank", "context": "#general", "excerpt": "ping {rid}"}),
    ("billing_payment_receipt", {"name": "{rid}", "amount": "$42.00", "order_id": "A-1001"}),
    ("content_weekly_digest", {"name": "{rid}", "count": 7}),
    ("workflow_task_assigned", {"task": "Review Q3 report", "assigner": "grace", "due_date": "Friday"}),
]

FREE_FORM = [
    {
        "title": "Welcome to Herald",
        "message": "Your notification inbox is ready.",
        "category": "SYSTEM",
        "priority": "LOW",
    },
    {
        "title": "Server rack 4 over temperature",
        "message": "Inlet temperature reached 41C.",
        "category": "SYSTEM",
        "priority": "URGENT",
        "action_url": "/ops/racks/4",
        "action_label": "Open dashboard",
    },
]


def _fill(variables: dict, rid: str) -> dict:
    return {
        k: v.replace("{rid}", rid) if isinstance(v, str) else v
        for k, v in variables.items()
    }


def seed_notifications(client: httpx.Client) -> list[str]:
    section("Notifications")
    sent: list[str] = []
    for rid in RECIPIENTS:
        for key, variables in TEMPLATED:
            r = api(client, "POST", "/api/notifications", json={
                "recipient_id": rid,
                "template_key": key,
                "variables": _fill(variables, rid),
            })
            if r and r["status"] == "SENT":
                sent.append(r["id"])
        for body in FREE_FORM:
            r = api(client, "POST", "/api/notifications", json={"recipient_id": rid, **body})
            if r and r["status"] == "SENT":
                sent.append(r["id"])
    print(f"  Sent {len(sent)} notifications (the rest were held by preferences or DND)")
    return sent


def seed_engagement(client: httpx.Client, notification_ids: list[str]) -> None:
    section("Engagement")
    rng = random.Random(7)
    opened = clicked = 0
    for nid in notification_ids:
        roll = rng.random()
        if roll < 0.25:
            api(client, "POST", f"/api/notifications/{nid}/click", json={"action_id": "primary"})
            clicked += 1
        elif roll < 0.6:
            api(client, "POST", f"/api/notifications/{nid}/open")
            opened += 1
    print(f"  Opened {opened}, clicked {clicked}")


def verify_data(client: httpx.Client) -> None:
    section("Verification")
    metrics = api(client, "GET", "/api/analytics/metrics")
    if metrics:
        print(f"  Delivered: {metrics['total_delivered']}")
        print(f"  Open rate: {metrics['open_rate']:.0%}  Click rate: {metrics['click_rate']:.0%}")
    for stats in api(client, "GET", "/api/analytics/categories") or []:
        print(f"  {stats['category']:<12} count={stats['count']:<3} open_rate={stats['open_rate']:.0%}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed demo data into a running Herald backend"
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Backend base URL (default: {DEFAULT_BASE_URL})",
    )
    args = parser.parse_args()

    print("Herald Demo Data Seeder")
    print(f"Target: {args.base_url}")
    print(f"Time:   {datetime.now(timezone.utc).isoformat()}")

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        try:
            health = api(client, "GET", "/api/health")
        except httpx.ConnectError:
            print(f"\nERROR: Cannot connect to {args.base_url}")
            print("Start the backend first:")
            print("  uvicorn herald.web.app:create_app --factory --port 8080")
            sys.exit(1)
        if not health:
            print("\nERROR: Backend is not responding.")
            sys.exit(1)

        print(f"Backend: {health.get('status', 'unknown')} (v{health.get('version', '?')})")

        seed_preferences(client)
        sent = seed_notifications(client)
        seed_engagement(client, sent)
        verify_data(client)


if __name__ == "__main__":
    main()

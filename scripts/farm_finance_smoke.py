#!/usr/bin/env python3
"""
Farm finance smoke test script

Runs fetch -> save -> fetch -> (optional) clear against a running API with
a real Supabase access token, printing the client state after each step.

Usage:
    python scripts/farm_finance_smoke.py --token "$SUPABASE_ACCESS_TOKEN"
    python scripts/farm_finance_smoke.py --base-url http://localhost:8000 --token ... --crop rice --clear
"""

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from agri_backend.client import AuthSession, FarmFinanceClient, Notification

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_notification(notification: Notification) -> None:
    marker = "!!" if notification.variant == "destructive" else "--"
    print(f"{marker} {notification.title}: {notification.description}")


def sample_record(crop: str) -> dict:
    """A small expense sheet with two required lines and one extra."""
    categories = [
        {"id": "seeds", "name": "Seeds", "amount": 1200, "isRequired": True},
        {"id": "fertilizer", "name": "Fertilizer", "amount": 800, "isRequired": True},
    ]
    others = [{"id": "transport", "name": "Transport", "amount": 150}]
    total = sum(item["amount"] for item in categories + others)
    return {
        "expense_categories": categories,
        "other_expenses": others,
        "total_expense": total,
        "crop_type": crop,
    }


def print_state(step: str, client: FarmFinanceClient) -> None:
    state = client.state
    print(f"\n[{step}] loading={state.loading} saving={state.saving} error={state.error!r}")
    print(json.dumps(state.data, indent=2, default=str))


def main():
    parser = argparse.ArgumentParser(
        description="Exercise the farm finance API end to end",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--base-url", default=os.getenv("FARM_FINANCE_API_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.getenv("SUPABASE_ACCESS_TOKEN"), help="Supabase access token")
    parser.add_argument("--crop", default="rice", help="crop_type to save")
    parser.add_argument("--clear", action="store_true", help="delete the record at the end")
    args = parser.parse_args()

    if not args.token:
        parser.error("--token (or SUPABASE_ACCESS_TOKEN) is required")

    auth = AuthSession()
    client = FarmFinanceClient(args.base_url, auth, notify=print_notification, timeout=30)

    try:
        # Signing in triggers the first fetch
        auth.set_session(args.token)
        print_state("fetch", client)

        if not client.save_data(sample_record(args.crop)):
            sys.exit(1)
        print_state("save", client)

        client.fetch_data()
        print_state("refetch", client)

        if args.clear:
            if not client.clear_data():
                sys.exit(1)
            print_state("clear", client)
    finally:
        client.close()


if __name__ == "__main__":
    main()

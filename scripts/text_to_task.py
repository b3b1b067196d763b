"""Convert text lines into tasks from the command line, optionally storing them."""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from taskflow.config import settings
from taskflow.extraction.rules import extract
from taskflow.extraction.service import extraction_config_from_settings, text_to_task
from taskflow.storage import find_campaign_id, get_supabase_client, store_task


def convert_lines(lines: list[str], rules_only: bool = False, store: bool = False) -> None:
    """Print one JSON task per non-blank input line."""
    config = extraction_config_from_settings(settings)
    client = get_supabase_client() if store else None

    converted = 0
    for i, line in enumerate(lines):
        text = line.strip()
        if not text:
            continue

        if rules_only:
            task, source = extract(text), "rules"
        else:
            outcome = text_to_task(text, config)
            task, source = outcome.task, outcome.source.value

        record = {**task.to_dict(), "source": source}
        if client is not None:
            campaign_id = None
            try:
                campaign_id = find_campaign_id(client, task.campaign)
            except Exception as e:
                print(f"  [{i + 1}] WARN campaign lookup failed, storing without: {e}", file=sys.stderr)
            try:
                record["id"] = store_task(client, task, campaign_id=campaign_id)
            except Exception as e:
                print(f"  [{i + 1}] ERROR storing task: {e}", file=sys.stderr)

        print(json.dumps(record))
        converted += 1

    print(f"Done! Converted {converted} tasks.", file=sys.stderr)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("text", nargs="*", help="task text; reads stdin lines when omitted")
    parser.add_argument("--rules-only", action="store_true", help="skip the LLM entirely")
    parser.add_argument("--store", action="store_true", help="insert each task into Supabase")
    args = parser.parse_args()

    lines = [" ".join(args.text)] if args.text else sys.stdin.read().splitlines()
    convert_lines(lines, rules_only=args.rules_only, store=args.store)

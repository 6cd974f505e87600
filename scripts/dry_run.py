#!/usr/bin/env python3
"""dry_run.py

Replay a planner action log through the firewall without a browser.

Example:
  python scripts/dry_run.py --task-type booking --goal "Book a table" \
      --domain opentable.com --actions data/actions.json

The actions file is a JSON list of objects like
  {"type": "fill", "domain": "opentable.com", "target": "#name", "value": "Ada"}

Exits with status 1 if any action is rejected.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

REPO_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_DIR))

from action_firewall.config import FirewallConfig  # noqa: E402
from action_firewall.replay import replay_actions  # noqa: E402
from action_firewall.security import create_locked_intent, get_task_type_from_classification  # noqa: E402


def _load_actions(path: Path) -> list[dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("actions", [])
    if not isinstance(data, list):
        raise SystemExit(f"{path}: expected a JSON list of actions")
    return data


def main() -> None:
    env_file = REPO_DIR / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    ap = argparse.ArgumentParser(description="Replay planner actions through the action firewall")
    ap.add_argument("--task-type", required=True, help="Catalog category or classifier label")
    ap.add_argument("--goal", default="", help="Task goal text")
    ap.add_argument("--user-id", default="dry-run")
    ap.add_argument("--actions", type=Path, required=True, help="JSON file with the action log")
    ap.add_argument("--domain", action="append", default=[], help="Allowed domain (repeatable)")
    ap.add_argument("--allow", action="append", default=[], help="Extra allowed verb (repeatable)")
    ap.add_argument("--forbid", action="append", default=[], help="Extra forbidden verb (repeatable)")
    ap.add_argument("--max-actions", type=int, default=None)
    ap.add_argument("--max-duration", type=int, default=None)
    ap.add_argument("--json", action="store_true", help="Print the full report as JSON")
    args = ap.parse_args()

    config = FirewallConfig.from_env()
    task_type = get_task_type_from_classification(args.task_type)
    if task_type != args.task_type:
        logger.info(f"Classification '{args.task_type}' mapped to category '{task_type}'")

    intent = create_locked_intent(
        user_id=args.user_id,
        task_type=task_type,
        goal=args.goal,
        allowed_domains=args.domain,
        allowed_actions=args.allow,
        forbidden_actions=args.forbid,
        max_duration=args.max_duration,
        max_actions=args.max_actions,
        config=config,
    )
    report = replay_actions(intent, _load_actions(args.actions))

    if args.json:
        print(json.dumps(report, indent=2, default=str))
    else:
        for d in report["decisions"]:
            verdict = "ALLOW" if d["approved"] else "DENY "
            line = f"{d['step']:4d}  {verdict}  {d['type']:15s} {d.get('domain') or '-':30.30s}"
            if not d["approved"]:
                line += f"  {d.get('reason')}"
            print(line)
        print(f"\n{report['approved']} approved, {report['rejected']} rejected")

    if report["rejected"]:
        logger.warning(f"{report['rejected']} action(s) rejected for task type '{task_type}'")
        raise SystemExit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .config import get_settings
from .engine.errors import ConfigError
from .engine.loader import load_config_result
from .engine.types import Comment
from .rule_engine import RuleEngine


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Comment scoring helper commands")
    parser.add_argument(
        "--log-level",
        default=settings.log_level.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Validate a scoring configuration file")
    validate.add_argument("--config", type=Path, default=settings.config_path, required=settings.config_path is None)
    validate.add_argument("--mode", choices=["warn", "strict"], help="Override validation mode")
    validate.add_argument("--json", action="store_true", help="Emit validation result as JSON")
    validate.add_argument(
        "--treat-warnings-as-errors",
        action="store_true",
        help="Return exit code 2 when warnings are present",
    )

    score = subparsers.add_parser("score", help="Score a single comment")
    score.add_argument("--config", type=Path, default=settings.config_path, help="Scoring config (defaults if omitted)")
    score.add_argument("--mode", choices=["warn", "strict"], default=settings.config_mode)
    source = score.add_mutually_exclusive_group()
    source.add_argument("--input", type=Path, help="JSON file holding the comment fields")
    source.add_argument("--body", help="Comment body")
    score.add_argument("--author")
    score.add_argument("--email")
    score.add_argument("--url")
    score.add_argument("--accepted", type=int, help="Previously accepted comments for this email")
    score.add_argument("--rejected", type=int, help="Previously rejected comments for this email")
    score.add_argument("--previous", action="append", help="Body of a previous comment (repeatable)")
    score.add_argument("--json", action="store_true", help="Emit the result as JSON")
    return parser


def _handle_validate(args: argparse.Namespace) -> int:
    result = load_config_result(args.config, override_mode=args.mode)

    if args.json:
        payload = {
            "status": result.status,
            "mode": result.mode,
            "counts": result.counts,
            "issues": [asdict(issue) for issue in result.issues],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        counts = result.counts
        print(
            f"status={result.status} mode={result.mode} lists={counts['lists']} "
            f"terms={counts['terms']} limits={counts['limits']}"
        )
        for issue in result.issues:
            print(f"{issue.level.upper():7} {issue.code} {issue.where}: {issue.msg}")
            if issue.hint:
                print(f"        hint: {issue.hint}")

    if result.status != "ok":
        return 2
    if args.treat_warnings_as_errors and result.counts.get("warnings", 0) > 0:
        return 2
    return 0


def _comment_payload(args: argparse.Namespace) -> dict[str, Any] | None:
    if args.input is not None:
        data = json.loads(args.input.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else None
    if args.body is None:
        return None
    return {
        "body": args.body,
        "author": args.author,
        "email": args.email,
        "url": args.url,
        "previously_accepted_for_email": args.accepted,
        "previously_rejected_for_email": args.rejected,
        "previous_comment_bodies": args.previous,
    }


def _handle_score(args: argparse.Namespace) -> int:
    try:
        payload = _comment_payload(args)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"error: cannot read comment input: {exc}", file=sys.stderr)
        return 2
    if payload is None:
        print("error: supply --body or --input with a 'body' field", file=sys.stderr)
        return 2
    try:
        comment = Comment.from_mapping(payload)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        engine = RuleEngine(args.config, mode=args.mode)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    result = engine.evaluate(comment)
    if args.json:
        print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"score={result.score} status={result.status.value}")
        for hit in result.hits:
            print(f"  {hit.delta:+3d} {hit.rule_id}: {hit.detail}")
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level, logging.WARNING))
    if args.command == "validate":
        exit_code = _handle_validate(args)
    elif args.command == "score":
        exit_code = _handle_score(args)
    else:  # pragma: no cover
        parser.error(f"Unknown command: {args.command}")
        return
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

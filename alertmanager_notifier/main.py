"""Command line entrypoint.

Usage:
    alertmanager-notifier compile snapshot.json [--mode single]
    alertmanager-notifier send snapshot.json --url http://localhost:9093
    alertmanager-notifier test --url http://localhost:9093
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from . import config
from .logger import setup_logging
from .models.evaluation import EvalContext
from .models.notification import AlertNotification
from .notifiers import AlertmanagerNotifier, ValidationError, build_registry
from .payload import PAYLOAD_MODES, compile_alerts, serialize_alerts
from .service import build_test_context
from .webhook import WebhookError

logger = logging.getLogger(__name__)


def _load_context(path: str) -> EvalContext:
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    return EvalContext.from_dict(data)


def _build_notifier(args: argparse.Namespace) -> AlertmanagerNotifier:
    settings: dict[str, object] = {"mode": args.mode}
    if args.url:
        settings["url"] = args.url
    model = AlertNotification(name=args.name, type="alertmanager", settings=settings)
    return build_registry().create(model)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alertmanager-notifier",
        description="Compile alert evaluations and push them to Alertmanager",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--mode",
            choices=PAYLOAD_MODES,
            default=config.ALERT_PAYLOAD_MODE,
            help=f"Payload mode (default: {config.ALERT_PAYLOAD_MODE})",
        )

    p_compile = sub.add_parser("compile", help="Print the payload for a snapshot")
    p_compile.add_argument("snapshot", help="Snapshot JSON file, or - for stdin")
    add_common(p_compile)

    for name, help_text in (
        ("send", "Send a snapshot to Alertmanager"),
        ("test", "Send a test notification to Alertmanager"),
    ):
        p = sub.add_parser(name, help=help_text)
        if name == "send":
            p.add_argument("snapshot", help="Snapshot JSON file, or - for stdin")
        p.add_argument(
            "--url",
            default=config.ALERTMANAGER_URL,
            help="Alertmanager base URL (default: $ALERTMANAGER_URL)",
        )
        p.add_argument("--name", default="alertmanager", help="Notifier name")
        add_common(p)
    return parser


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "compile":
        try:
            context = _load_context(args.snapshot)
        except (OSError, ValueError) as exc:
            logger.error("Could not load snapshot %s: %s", args.snapshot, exc)
            return 1
        print(serialize_alerts(compile_alerts(context, args.mode)))
        return 0

    if not args.url:
        config.validate_settings()
    try:
        notifier = _build_notifier(args)
        if args.command == "send":
            context = _load_context(args.snapshot)
        else:
            context = build_test_context()
    except ValidationError as exc:
        logger.error("Invalid notifier settings: %s", exc.reason)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Could not load snapshot %s: %s", getattr(args, "snapshot", "-"), exc)
        return 1

    try:
        asyncio.run(notifier.notify(context))
    except WebhookError:
        return 1
    logger.info("Sent rule %s to %s", context.rule.name, notifier.url)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()

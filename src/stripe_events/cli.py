"""CLI entry point for inspecting and verifying event payloads."""

import argparse
import sys
from pathlib import Path

from stripe_events.config import settings
from stripe_events.errors.exceptions import StripeEventsError
from stripe_events.logging_config import configure_logging, event_log_context
from stripe_events.services.serializer import parse_event, serialize_event
from stripe_events.webhooks.signature import construct_event


def _read_payload(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _cmd_get(args: argparse.Namespace) -> int:
    event = parse_event(_read_payload(args.file))
    with event_log_context(event):
        if args.previous:
            value = event.get_previous_value(*args.keys)
        else:
            value = event.get_object_value(*args.keys)
    print(value)
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    print(serialize_event(parse_event(_read_payload(args.file))))
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    secret = args.secret or settings.webhook_secret
    if not secret:
        print("error: no webhook secret given (--secret or STRIPE_EVENTS_WEBHOOK_SECRET)", file=sys.stderr)
        return 2
    event = construct_event(
        _read_payload(args.file),
        args.signature,
        secret,
        tolerance=args.tolerance,
    )
    print(f"{event.id} {event.type}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stripe-events",
        description="Inspect, re-serialize and verify webhook event payloads",
    )
    parser.add_argument("--log-level", default=None, help=f"Log level (default: {settings.log_level})")
    sub = parser.add_subparsers(dest="command", required=True)

    get = sub.add_parser("get", help="Print the value at a path inside data.object")
    get.add_argument("file", help="Event JSON file, or - for stdin")
    get.add_argument("keys", nargs="+", help="Path segments: mapping keys or list indices")
    get.add_argument(
        "--previous",
        action="store_true",
        help="Read from data.previous_attributes instead of data.object",
    )
    get.set_defaults(func=_cmd_get)

    dump = sub.add_parser("dump", help="Print the canonical JSON form of an event")
    dump.add_argument("file", help="Event JSON file, or - for stdin")
    dump.set_defaults(func=_cmd_dump)

    verify = sub.add_parser("verify", help="Verify a signed webhook payload")
    verify.add_argument("file", help="Raw webhook body, or - for stdin")
    verify.add_argument("--signature", required=True, help="Signature header value")
    verify.add_argument("--secret", default=None, help="Endpoint signing secret")
    verify.add_argument(
        "--tolerance",
        type=int,
        default=None,
        help=f"Maximum signature age in seconds (default: {settings.webhook_tolerance_seconds})",
    )
    verify.set_defaults(func=_cmd_verify)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level or settings.log_level, json_output=settings.json_logs)

    try:
        return args.func(args)
    except StripeEventsError as exc:
        print(f"error: {exc.code}: {exc.message}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

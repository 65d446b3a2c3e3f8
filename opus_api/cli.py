import argparse
import json
import os
import sys
from typing import Any, List, Optional

from opus_api.client import DEFAULT_BASE_URL, OpusAPIClient, OpusAPIError
from opus_api.config import load_settings
from opus_api.core import ConfigError, configure_logging, log_error, log_step
from opus_api.data import InMemoryStyleStore


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _client_from_args(args: argparse.Namespace) -> OpusAPIClient:
    base_url = args.base_url or os.getenv("OPUS_API_BASE_URL") or DEFAULT_BASE_URL
    api_key = args.api_key or os.getenv("OPUS_INTERNAL_API_KEY", "")
    return OpusAPIClient(base_url, api_key)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from opus_api.api.fastapi_app import create_app

    use_memory = args.memory or bool(args.seed)
    try:
        settings = load_settings(require_store=not use_memory)
    except ConfigError as e:
        log_error(str(e))
        return 1

    store = None
    if use_memory:
        log_step("Using in-memory store" + (f" seeded from {args.seed}" if args.seed else ""))
        store = InMemoryStyleStore.from_json(args.seed) if args.seed else InMemoryStyleStore()

    app = create_app(settings, store)
    uvicorn.run(app, host=args.host, port=args.port or settings.port)
    return 0


def cmd_styles(args: argparse.Namespace) -> int:
    _print_json(_client_from_args(args).get_styles())
    return 0


def cmd_profile(args: argparse.Namespace) -> int:
    client = _client_from_args(args)
    _print_json(client.get_playback_profile(args.style_id, include_track_ids=args.track_ids))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opus-api", description="Opus style API")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 8787")
    serve.add_argument("--memory", action="store_true", help="Use the in-memory store")
    serve.add_argument("--seed", default=None, help="JSON fixture for the in-memory store")
    serve.set_defaults(func=cmd_serve)

    for name, func, help_text in (
        ("styles", cmd_styles, "List styles from a running API"),
        ("profile", cmd_profile, "Show the playback profile of a style"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--base-url", default=None, help="Defaults to $OPUS_API_BASE_URL")
        p.add_argument("--api-key", default=None, help="Defaults to $OPUS_INTERNAL_API_KEY")
        if name == "profile":
            p.add_argument("style_id")
            p.add_argument("--track-ids", action="store_true", help="Include track ids per pool")
        p.set_defaults(func=func)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except OpusAPIError as e:
        log_error(f"API error {e.status}: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

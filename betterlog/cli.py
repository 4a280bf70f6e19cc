"""
betterlog command line: send one log event to check a token and endpoint.

Usage:
    python -m betterlog "deploy finished" --context ci --level info
    python -m betterlog "smoke test" --environment qa --token "$TOKEN" --max-retries 0
"""

import argparse
import asyncio
import json
import sys

from rich.console import Console

from . import __version__
from .config import Environment, LoggerConfig
from .errors import ConfigError, DeliveryError
from .logger import Logger
from .records import LogLevel, LogRecord
from .retry import RetryConfig
from .transport import Transport

console = Console(stderr=True)

EXIT_OK = 0
EXIT_DELIVERY_FAILED = 1
EXIT_BAD_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="betterlog", description="Send a log event to Better Stack"
    )
    parser.add_argument("message", help="Log message")
    parser.add_argument("--context", "-c", default="", help="Log context")
    parser.add_argument("--level", "-l", default="info",
                        choices=[level.label for level in LogLevel],
                        help="Log level (default: info)")
    parser.add_argument("--environment", "-e",
                        choices=[env.label for env in Environment],
                        help="Environment (default: $ENVIRONMENT)")
    parser.add_argument("--token", help="Source token (default: $LOGS_SOURCE_TOKEN)")
    parser.add_argument("--endpoint", help="Collector URL (default: $LOGS_ENDPOINT or Better Stack)")
    parser.add_argument("--app-version", default=__version__,
                        help="App version attached to the event")
    parser.add_argument("--max-retries", type=int, default=3,
                        help="Retries after the first attempt")
    parser.add_argument("--base-delay", type=float, default=1.0,
                        help="First backoff delay in seconds")
    parser.add_argument("--max-delay", type=float, default=5.0,
                        help="Backoff cap in seconds")
    parser.add_argument("--no-jitter", action="store_true",
                        help="Use exact backoff delays")
    parser.add_argument("--deadline", type=float,
                        help="Give up after this many seconds overall")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Do not echo the event to the console")
    return parser


def load_config(args: argparse.Namespace) -> LoggerConfig:
    """Resolve configuration, with command line flags overriding the environment."""
    return LoggerConfig.from_env(
        app_version=args.app_version,
        verbose=not args.quiet,
        environment=args.environment,
        logs_source_token=args.token,
        endpoint=args.endpoint,
    )


async def send(args: argparse.Namespace, transport: Transport | None = None) -> int:
    """Send the event described by `args` and return the exit code."""
    try:
        config = load_config(args)
        retry_config = RetryConfig(
            max_retries=args.max_retries,
            base_delay=args.base_delay,
            max_delay=args.max_delay,
            jitter=not args.no_jitter,
            deadline=args.deadline,
        )
    except (ConfigError, ValueError) as e:
        console.print(f"[red]✗[/red] Configuration error: {e}")
        return EXIT_BAD_CONFIG

    level = LogLevel.from_label(args.level)
    record = LogRecord(message=args.message, context=args.context)

    async with Logger(config, transport=transport, retry_config=retry_config) as log:
        try:
            response = await log.log(level, record)
        except DeliveryError as e:
            console.print(f"[red]✗[/red] Delivery failed: {e}")
            return EXIT_DELIVERY_FAILED

    if level is LogLevel.DEBUG or config.is_local:
        console.print(f"[yellow]•[/yellow] {level.label} log not sent ({config.environment.label})")
    else:
        console.print(f"[green]✓[/green] {level.label} log delivered to {config.endpoint}")
        if response is not None:
            console.print(json.dumps(response, indent=2))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(send(args))


if __name__ == "__main__":
    sys.exit(main())

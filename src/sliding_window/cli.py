"""
CLI for the sliding window counter backed by Redis.

Usage:
    python -m src.sliding_window.cli [options] <command> KEY
"""

import argparse
import json
import math
import os
import sys

import structlog

from src.core.logger import LOG_LEVELS, level_from_env, setup_logging

from .cache import RedisCounterCache
from .counter import SlidingWindowCounter
from .exceptions import SlidingWindowError
from .models import CounterConfig

logger = structlog.get_logger(__name__)


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Sliding window counter with anomaly detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Count an event for an IP address
        python -m src.sliding_window.cli increment 192.168.1.1

        # Hourly buckets over the last day, low sensitivity
        python -m src.sliding_window.cli \\
            --window-size 3600 \\
            --observation-period 86400 \\
            detect 192.168.1.1 --sensitivity 3
        """,
    )

    # Counter settings
    parser.add_argument(
        "--namespace",
        default=os.getenv("COUNTER_NAMESPACE", "sliding-window"),
        help="Cache namespace for the buckets (default: sliding-window)",
    )
    parser.add_argument(
        "--window-size",
        type=int,
        default=int(os.getenv("COUNTER_WINDOW_SIZE", "3600")),
        help="Bucket size in seconds (default: 3600)",
    )
    parser.add_argument(
        "--observation-period",
        type=int,
        default=int(os.getenv("COUNTER_OBSERVATION_PERIOD", "86400")),
        help="Bucket lifetime and lookback in seconds (default: 86400)",
    )

    # Redis configuration
    parser.add_argument(
        "--redis-host",
        default=os.getenv("REDIS_HOST", "localhost"),
        help="Redis host (default: localhost or REDIS_HOST env var)",
    )
    parser.add_argument(
        "--redis-port",
        type=int,
        default=int(os.getenv("REDIS_PORT", "6379")),
        help="Redis port (default: 6379)",
    )
    parser.add_argument(
        "--redis-db",
        type=int,
        default=int(os.getenv("REDIS_DB", "0")),
        help="Redis database (default: 0)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL env var or WARNING)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    increment = commands.add_parser("increment", help="Increment the counter for a key")
    increment.add_argument("key", help="Bucket key (IP address, user ID, ASN, ...)")
    increment.add_argument("--step", type=int, default=1, help="Increment step (default: 1)")
    increment.add_argument("--at", type=int, help="Unix time to increment at (default: now)")

    series = commands.add_parser("series", help="Print the extrapolated time series")
    series.add_argument("key", help="Bucket key")
    series.add_argument("--start", type=int, help="Start time (default: first non-empty bucket)")
    series.add_argument("--end", type=int, help="End time (default: now)")

    variance = commands.add_parser("variance", help="Print the historic mean and standard deviation")
    variance.add_argument("key", help="Bucket key")
    variance.add_argument("--start", type=int, help="Start time (default: first non-empty bucket)")
    variance.add_argument("--end", type=int, help="End time (default: now)")

    detect = commands.add_parser("detect", help="Test the latest value for an anomaly")
    detect.add_argument("key", help="Bucket key")
    detect.add_argument(
        "--sensitivity",
        type=int,
        default=int(os.getenv("COUNTER_SENSITIVITY", "2")),
        help="Standard deviations defining the bounds: 3 = low, 2 = standard, 1 = high (default: 2)",
    )
    detect.add_argument("--start", type=int, help="Start time (default: first non-empty bucket)")

    return parser.parse_args(argv)


def build_config(args) -> CounterConfig:
    """Build configuration from arguments"""
    return CounterConfig(
        namespace=args.namespace,
        window_size=args.window_size,
        observation_period=args.observation_period,
        sensitivity=getattr(args, "sensitivity", 2),
        redis_host=args.redis_host,
        redis_port=args.redis_port,
        redis_db=args.redis_db,
        redis_password=os.getenv("REDIS_PASSWORD"),
    )


def run_command(args, counter: SlidingWindowCounter, config: CounterConfig) -> dict:
    """Execute the selected command and return its JSON-serializable output"""
    if args.command == "increment":
        result = counter.increment(args.key, args.step, args.at)
        if not result.ok:
            raise RuntimeError(f"Cache increment failed: {result.error}")
        return {"key": args.key, "value": result.value}

    if args.command == "series":
        return {
            "key": args.key,
            "series": [
                {"timestamp": timestamp, "value": round(value, 4)}
                for timestamp, value in counter.time_series(args.key, args.start, args.end)
            ],
        }

    if args.command == "variance":
        return {"key": args.key, **counter.historic_variance(args.key, args.start, args.end).to_dict()}

    result = counter.detect_anomaly(args.key, config.sensitivity, args.start)
    return {"key": args.key, "is_anomaly": result.is_anomaly(), **result.to_dict()}


def _json_safe(value):
    """Replace undefined statistics (NaN) with None, which JSON can carry"""
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    # Setup logging
    if args.log_level:
        log_level = LOG_LEVELS[args.log_level]
    else:
        log_level = level_from_env("WARNING")
    setup_logging(level=log_level)

    try:
        config = build_config(args)

        cache = RedisCounterCache(config)
        counter = SlidingWindowCounter.from_config(config, cache)

        print(json.dumps(_json_safe(run_command(args, counter, config))))
        return 0

    except SlidingWindowError as e:
        logger.error("Invalid request", command=args.command, error=str(e))
        return 1

    except Exception as e:
        logger.error("Command failed", command=args.command, error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

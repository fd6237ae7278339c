import argparse
import logging
import sys

from .benchmarks import print_results, run_benchmark, write_json_summary
from .config import BenchmarkConfig, load_config
from .exceptions import ConfigError, UnexpectedOutcomeError
from .timing import format_micros

logger = logging.getLogger('simbench.cli')

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Compare thread-pool vs asyncio latency of Solana simulateTransaction calls')

    parser.add_argument('--config', help='YAML file with benchmark settings')
    parser.add_argument('--endpoint', help='JSON-RPC endpoint URL')
    parser.add_argument('--tx-sims', type=int, default=None, help='Simulations per strategy')
    parser.add_argument('--workers', type=int, default=None, help='Thread pool size for the sync strategy')
    parser.add_argument('--cooldown', type=float, default=None,
                        help='Seconds to sleep between batches (rate limit cooldown)')
    parser.add_argument('--timeout', type=float, default=None, help='Per-request timeout in seconds')
    parser.add_argument('--commitment', help='Commitment level sent with each simulation')
    parser.add_argument('--locale', help='Locale used to group digits in the report')
    parser.add_argument('--output-file', help='Also write the results as JSON to this path')
    parser.add_argument('--log', default='WARNING', type=str.upper, choices=LOG_LEVELS,
                        help='Logging level')

    return parser.parse_args(argv)


def build_config(args):
    """Defaults, then the YAML file, then explicit flags"""
    config = load_config(args.config) if args.config else BenchmarkConfig()
    return config.updated(
        endpoint=args.endpoint,
        tx_sims=args.tx_sims,
        workers=args.workers,
        cooldown=args.cooldown,
        timeout=args.timeout,
        commitment=args.commitment,
        locale=args.locale,
        output_file=args.output_file,
    )


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        config = build_config(args)
        # raises ConfigError for a locale that is not installed
        format_micros(0, config.locale)
        logger.info(f"Benchmark configuration: {config}")
        result = run_benchmark(config)
        print_results(result, config.locale)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except UnexpectedOutcomeError as e:
        logger.error(f"Benchmark aborted: {e.describe()}")
        return 1

    if config.output_file:
        try:
            write_json_summary(result, config.output_file)
        except OSError as e:
            logger.error(f"Cannot write results to {config.output_file}: {e}")
            return 2

    return 0


if __name__ == '__main__':
    sys.exit(main())

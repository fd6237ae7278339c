"""
Runs the sync-vs-async comparison and reports it

- BenchmarkResult holding the two elapsed times
- run_benchmark: sync batch, cooldown, async batch, strictly in that order
- Console and JSON reporting
"""
import json
import logging
import os
import sys
import time

from .client import RpcClient
from .client_async import AsyncRpcClient
from .performance import run_sync_simulations
from .performance_async import execute_async_simulations
from .progress import ProgressBar
from .timing import Timer, format_micros

logger = logging.getLogger('simbench.benchmarks')


class BenchmarkResult:
    """Elapsed microseconds for each strategy plus the run parameters"""

    def __init__(self, sync_micros, async_micros, tx_sims, workers, endpoint):
        self.sync_micros = sync_micros
        self.async_micros = async_micros
        self.tx_sims = tx_sims
        self.workers = workers
        self.endpoint = endpoint

    def as_dict(self):
        return {
            "endpoint": self.endpoint,
            "tx_sims": self.tx_sims,
            "workers": self.workers,
            "sync_micros": self.sync_micros,
            "async_micros": self.async_micros,
        }

    def __str__(self):
        return json.dumps(self.as_dict())


def run_benchmark(config, sync_client=None, async_client=None, sleep=time.sleep,
                  stream=None, progress_stream=None):
    """
    Time both strategies against config.endpoint

    Args:
        config: BenchmarkConfig
        sync_client: Optional blocking client, defaults to RpcClient
        async_client: Optional async client, defaults to AsyncRpcClient
        sleep: Used for the inter-batch cooldown
        stream: Where status lines go (default stdout)
        progress_stream: Where progress bars render (default stderr)

    Returns:
        BenchmarkResult

    Raises:
        UnexpectedOutcomeError: some simulation did not fail as required
    """
    stream = stream if stream is not None else sys.stdout
    if sync_client is None:
        sync_client = RpcClient(config.endpoint, timeout=config.timeout,
                                commitment=config.commitment, pool_size=config.workers)
    if async_client is None:
        async_client = AsyncRpcClient(config.endpoint, timeout=config.timeout,
                                      commitment=config.commitment)

    count = config.tx_sims

    sync_pb = ProgressBar(count, label='sync ', stream=progress_stream)
    sync_timer = Timer()
    try:
        with sync_timer:
            run_sync_simulations(sync_client, count, workers=config.workers, progress=sync_pb)
    finally:
        sync_client.close()
        sync_pb.finish()
    logger.info(f"Synchronous batch finished in {sync_timer.elapsed_micros} us")

    print("Sleeping to wait for mb rpc rate limits", file=stream)
    sleep(config.cooldown)

    async_pb = ProgressBar(count, label='async', stream=progress_stream)
    async_timer = Timer()
    try:
        execute_async_simulations(async_client, count, progress=async_pb, timer=async_timer)
    finally:
        async_pb.finish()
    logger.info(f"Asynchronous batch finished in {async_timer.elapsed_micros} us")

    return BenchmarkResult(sync_timer.elapsed_micros, async_timer.elapsed_micros,
                           count, config.workers, config.endpoint)


def print_results(result, locale_name='en', stream=None):
    stream = stream if stream is not None else sys.stdout
    print(file=stream)
    print("Results", file=stream)
    print(f"    synchronous sims: {format_micros(result.sync_micros, locale_name)}", file=stream)
    print(f"   asynchronous sims: {format_micros(result.async_micros, locale_name)}", file=stream)


def write_json_summary(result, path):
    """Write the result as JSON, creating the parent directory if needed"""
    odir = os.path.dirname(path)
    if odir and not os.path.exists(odir):
        os.makedirs(odir)
    with open(path, 'w', encoding='utf-8') as fh:
        json.dump(result.as_dict(), fh, indent=2)
    logger.info(f"Wrote benchmark summary JSON to {path}")

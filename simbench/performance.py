import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from .exceptions import RpcError
from .outcome import check_outcome, classify_error, classify_result
from .transaction import build_invalid_transaction

logger = logging.getLogger('simbench.performance')

STRATEGY = 'synchronous'


def simulate_once(client, call_index):
    """
    Simulate one fresh invalid transaction and verify it was rejected

    Args:
        client: Object exposing a blocking simulate_transaction(tx)
        call_index: Position of the call in the batch, used for diagnostics

    Returns:
        The expected-failure Outcome

    Raises:
        UnexpectedOutcomeError: the simulation succeeded or failed the wrong way
    """
    try:
        result = client.simulate_transaction(build_invalid_transaction())
    except RpcError as e:
        outcome = classify_error(e)
    else:
        outcome = classify_result(result)
    logger.debug(f"{STRATEGY} call #{call_index}: {outcome.kind}")
    return check_outcome(outcome, STRATEGY, call_index)


def run_sync_simulations(client, count, workers=1, progress=None):
    """
    Run count simulations through a bounded thread pool

    Args:
        client: Shared blocking client
        count: Number of simulations
        workers: Thread pool size (1 serializes the calls but still goes
            through the pool)
        progress: Optional callable invoked once per completed call

    Raises:
        UnexpectedOutcomeError: propagated from the first bad call, after the
            calls that have not started yet are cancelled
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if count <= 0:
        return

    logger.info(f"Running {count} {STRATEGY} simulations on {workers} worker(s)")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(simulate_once, client, i) for i in range(count)]
        try:
            for future in as_completed(futures):
                future.result()
                if progress is not None:
                    progress()
        except BaseException:
            for future in futures:
                future.cancel()
            raise

import asyncio
import logging
from contextlib import nullcontext

from .exceptions import RpcError
from .outcome import check_outcome, classify_error, classify_result
from .transaction import build_invalid_transaction

logger = logging.getLogger('simbench.performance_async')

STRATEGY = 'asynchronous'


async def async_simulate_once(client, call_index):
    """Coroutine twin of performance.simulate_once"""
    try:
        result = await client.simulate_transaction(build_invalid_transaction())
    except RpcError as e:
        outcome = classify_error(e)
    else:
        outcome = classify_result(result)
    logger.debug(f"{STRATEGY} call #{call_index}: {outcome.kind}")
    return check_outcome(outcome, STRATEGY, call_index)


async def run_async_simulations(client, count, progress=None):
    """
    Run count simulations as tasks on the current event loop

    Does not return until every task has finished. When one task hits an
    unexpected outcome the others are cancelled and awaited before the error
    is re-raised.

    Args:
        client: Shared client exposing a coroutine simulate_transaction(tx)
        count: Number of simulations
        progress: Optional callable invoked once per completed call
    """
    if count <= 0:
        return

    logger.info(f"Running {count} {STRATEGY} simulations on one event loop")

    async def worker(call_index):
        outcome = await async_simulate_once(client, call_index)
        if progress is not None:
            progress()
        return outcome

    tasks = [asyncio.create_task(worker(i)) for i in range(count)]
    done, pending = set(), set(tasks)
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # Retrieve every exception so none is reported as unretrieved, then
    # surface the failure from the lowest call index
    errors = [task.exception() for task in tasks if task in done and not task.cancelled()]
    errors = [e for e in errors if e is not None]
    if errors:
        raise errors[0]


def execute_async_simulations(client, count, progress=None, timer=None):
    """
    Entry point for the asynchronous strategy

    Runs the batch in a fresh event loop and closes the client there. When a
    timer is given it wraps the batch only, not loop start-up or client close.
    """
    async def run():
        try:
            with timer or nullcontext():
                await run_async_simulations(client, count, progress)
        finally:
            await client.close()

    return asyncio.run(run())

"""
Classification of simulation outcomes

A simulation is supposed to fail with the node's "invalid transaction"
rejection. Anything else means the timings are not comparable and the run
has to stop.
"""
import logging

from .exceptions import RpcResponseError, UnexpectedOutcomeError

logger = logging.getLogger('simbench.outcome')

# JSON-RPC "invalid params", used by the node for sanitize failures:
#   invalid transaction: Transaction failed to sanitize accounts offsets correctly
EXPECTED_ERROR_CODES = frozenset([-32602])
EXPECTED_MESSAGE_PREFIX = 'invalid transaction'


class OutcomeKind:
    EXPECTED_FAILURE = 'expected_failure'
    UNEXPECTED_SUCCESS = 'unexpected_success'
    UNEXPECTED_ERROR = 'unexpected_error'


class Outcome:
    def __init__(self, kind, error=None, result=None):
        self.kind = kind
        self.error = error
        self.result = result

    @property
    def expected(self):
        return self.kind == OutcomeKind.EXPECTED_FAILURE

    def __repr__(self):
        return f"Outcome({self.kind!r}, error={self.error!r})"


def is_expected_error(error):
    return (isinstance(error, RpcResponseError)
            and error.code in EXPECTED_ERROR_CODES
            and str(error.message).startswith(EXPECTED_MESSAGE_PREFIX))


def classify_result(result):
    """A decoded simulation result is never what the benchmark wants"""
    return Outcome(OutcomeKind.UNEXPECTED_SUCCESS, result=result)


def classify_error(error):
    if is_expected_error(error):
        return Outcome(OutcomeKind.EXPECTED_FAILURE, error=error)
    return Outcome(OutcomeKind.UNEXPECTED_ERROR, error=error)


def check_outcome(outcome, strategy, call_index):
    """Abort the run unless the outcome is the expected rejection"""
    if outcome.expected:
        return outcome
    error = UnexpectedOutcomeError(strategy, call_index, outcome)
    logger.warning(f"Unexpected outcome: {error.describe()}")
    raise error

"""
Exception hierarchy for simbench

Errors propagate up to the CLI, which is the only place that turns them
into exit codes.
"""


class SimbenchError(Exception):
    """Base class for every error raised by simbench"""


class ConfigError(SimbenchError):
    """Invalid benchmark configuration (bad value, unknown key, bad locale)"""


class RpcError(SimbenchError):
    """Failure reported while talking to the RPC endpoint"""

    def __init__(self, message, request=None):
        super(RpcError, self).__init__(message)
        self.message = message
        self.request = request


class RpcResponseError(RpcError):
    """The endpoint answered with a JSON-RPC error object"""

    def __init__(self, code, message, data=None, request=None):
        super(RpcResponseError, self).__init__(message, request=request)
        self.code = code
        self.data = data

    def __str__(self):
        return f"RPC error {self.code}: {self.message}"


class RpcTransportError(RpcError):
    """HTTP or network level failure (timeout, rate limit, bad body, ...)"""

    def __init__(self, message, status=None, request=None):
        super(RpcTransportError, self).__init__(message, request=request)
        self.status = status

    def __str__(self):
        if self.status is not None:
            return f"HTTP {self.status}: {self.message}"
        return self.message


class UnexpectedOutcomeError(SimbenchError):
    """A simulation did not fail the way the benchmark requires

    Carries enough detail to diagnose which call broke the run.
    """

    def __init__(self, strategy, call_index, outcome):
        self.strategy = strategy
        self.call_index = call_index
        self.outcome = outcome
        super(UnexpectedOutcomeError, self).__init__(self.describe())

    @property
    def code(self):
        return getattr(self.outcome.error, 'code', None)

    @property
    def request(self):
        return getattr(self.outcome.error, 'request', None)

    def describe(self):
        detail = self.outcome.error if self.outcome.error is not None else self.outcome.result
        return (f"{self.strategy} call #{self.call_index} produced {self.outcome.kind} "
                f"(request={self.request}, code={self.code}): {detail}")

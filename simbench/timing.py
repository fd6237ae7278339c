"""
Wall-clock measurement and number formatting for the report
"""
import locale
import threading
import time

from .exceptions import ConfigError

_locale_lock = threading.Lock()


class Timer:
    """
    Context manager measuring elapsed time on a monotonic clock

    Args:
        clock: Callable returning nanoseconds from a monotonic source
    """

    def __init__(self, clock=time.perf_counter_ns):
        self.clock = clock
        self.start_ns = None
        self.end_ns = None

    def __enter__(self):
        self.start_ns = self.clock()
        self.end_ns = None
        return self

    def __exit__(self, exc_type, exc, tb):
        self.end_ns = self.clock()
        return False

    @property
    def elapsed_micros(self):
        if self.start_ns is None:
            return 0
        end = self.end_ns if self.end_ns is not None else self.clock()
        return max(0, (end - self.start_ns) // 1000)


def format_micros(value, locale_name='en'):
    """Group the digits of value per locale_name, e.g. 1234567 -> '1,234,567'"""
    if locale_name is None or locale_name.lower().split('_')[0] == 'en':
        return f"{value:,}"

    with _locale_lock:
        previous = locale.setlocale(locale.LC_NUMERIC)
        try:
            locale.setlocale(locale.LC_NUMERIC, locale_name)
        except locale.Error:
            raise ConfigError(f"Locale {locale_name!r} is not available")
        try:
            return locale.format_string('%d', value, grouping=True)
        finally:
            locale.setlocale(locale.LC_NUMERIC, previous)

import sys


class ProgressBar:
    """Single-line console progress indicator, callable as a progress hook"""

    def __init__(self, total, label='', width=40, stream=None):
        self.total = total
        self.label = label
        self.width = width
        self.stream = stream if stream is not None else sys.stderr
        self.count = 0
        self.finished = False

    def inc(self, n=1):
        self.count += n
        self.render()

    __call__ = inc

    def render(self):
        filled = self.width if self.total <= 0 else min(self.width, self.width * self.count // self.total)
        bar = '#' * filled + '.' * (self.width - filled)
        prefix = f"{self.label} " if self.label else ''
        self.stream.write(f"\r{prefix}[{bar}] {self.count}/{self.total}")
        self.stream.flush()

    def finish(self):
        if self.finished:
            return
        self.render()
        self.stream.write('\n')
        self.stream.flush()
        self.finished = True

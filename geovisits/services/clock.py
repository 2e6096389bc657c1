"""
Clock

Ledger timestamps are epoch milliseconds. Services take the clock as a
callable so tests can pin time.
"""

import time


def now_millis():
    return int(time.time() * 1000)


class FixedClock:
    """A settable clock for simulations and tests."""

    def __init__(self, now=0):
        self.now = now

    def advance(self, millis):
        self.now += millis
        return self.now

    def __call__(self):
        return self.now

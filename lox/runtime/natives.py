"""Native functions seeded into the global environment of every Interpreter."""

import time

from lox.runtime.objects import NativeFunction


def clock():
    """Seconds since the epoch, as a lox number."""
    return float(time.time())


NATIVES = [
    NativeFunction("clock", 0, clock),
]


def define_natives(env):
    for native in NATIVES:
        env.define(native.name, native)

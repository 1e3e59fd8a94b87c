"""
Wall clock access.
Read once per request and passed down so every figure in a response shares one instant.
"""

import time


def current_time_ms() -> int:
    """Current time as integer epoch milliseconds"""
    return int(time.time() * 1000)


def get_now() -> int:
    """
    FastAPI dependency that provides the request's `now`.
    Overridden in tests to pin the clock.
    """
    return current_time_ms()

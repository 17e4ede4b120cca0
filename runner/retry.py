# runner/retry.py
import functools
import time
import random
from typing import Callable, Tuple

def exp_backoff_with_jitter(attempt: int, base: float = 0.5, cap: float = 8.0, jitter: float = 0.1) -> float:
    """
    Exponential backoff with small jitter.
    attempt: 0-based attempt number
    base: base seconds
    cap: max backoff seconds
    jitter: max random jitter, as a fraction of the backoff
    """
    backoff = min(cap, base * (2 ** attempt))
    return max(0.0, backoff + random.uniform(-jitter, jitter) * backoff)

def retry(
    attempts: int = 3,
    allowed_exceptions: Tuple = (Exception,),
    before_try: Callable[[int, BaseException], None] = None,
    base: float = 0.5,
    cap: float = 8.0,
):
    """
    Decorator factory to retry a function `attempts` times.
    allowed_exceptions: tuple of exception classes to catch and retry on.
    before_try: optional callable(attempt_index, exc) called before each retry wait (for logging)
    base/cap: backoff parameters passed to exp_backoff_with_jitter
    """
    def deco(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            for attempt in range(attempts):
                try:
                    return fn(*args, **kwargs)
                except allowed_exceptions as e:
                    if attempt + 1 >= attempts:
                        raise
                    if before_try:
                        before_try(attempt, e)
                    time.sleep(exp_backoff_with_jitter(attempt, base=base, cap=cap))
        return wrapper
    return deco

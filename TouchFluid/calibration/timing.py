# -- Wall-Clock Timing Helpers -- #

'''
Timing helpers shared by calibration and the runner.

timedRun measures a single call against a budget and reports the
outcome as data rather than raising. timeit prints how long a block
took.

Sean Bowman [02/10/2026]
'''

from __future__ import annotations

import time as timeModule
from contextlib import contextmanager
from typing import Callable, Iterator

Clock = Callable[[], float]


def timedRun(
    fn: Callable[[], object],
    budgetSeconds: float,
    clock: Clock = timeModule.perf_counter,
) -> tuple[bool, float]:
    '''
    Run fn once and compare its wall-clock duration to a budget.

    The call is never interrupted: a single slow call is detected
    after it returns. Exceptions raised by fn propagate.

    Parameters:
    -----------
    fn : Callable[[], object]
        Work to time
    budgetSeconds : float
        Allowed duration [s]
    clock : Clock
        Monotonic clock returning seconds

    Returns:
    --------
    tuple[bool, float] : (withinBudget, elapsedSeconds)
    '''
    start = clock()
    fn()
    elapsed = clock() - start
    return (elapsed <= budgetSeconds, elapsed)


@contextmanager
def timeit(name: str, clock: Clock = timeModule.perf_counter) -> Iterator[None]:
    '''Print the duration of the enclosed block as "name: seconds s".'''
    start = clock()
    try:
        yield
    finally:
        print(f'  {name}: {clock() - start:.6f} s')

# -- Fixed-Timestep Accumulator -- #

'''
Wall-clock accumulator that drives the fluid at a fixed timestep.

The host calls update() once per frame to bank the elapsed wall
time, then calls tick(step) in a loop; each True result means one
fixed step of simulation should be run.

Sean Bowman [02/10/2026]
'''

from __future__ import annotations

import time as timeModule
from typing import Callable


class TimeAccumulator:
    '''
    Banks elapsed wall time and pays it out in fixed steps.

    Parameters:
    -----------
    clock : Callable[[], float]
        Monotonic clock returning seconds
    '''

    def __init__(self, clock: Callable[[], float] = timeModule.perf_counter) -> None:
        self._clock = clock
        self._lastTime = clock()
        self._accumulatorSeconds = 0.0

    @property
    def accumulatorSeconds(self) -> float:
        '''Banked time not yet consumed by tick() [s].'''
        return self._accumulatorSeconds

    def reset(self) -> None:
        '''Restart timing from now; already banked time is kept.'''
        self._lastTime = self._clock()

    def update(self) -> None:
        '''Bank the wall time elapsed since the last update or reset.'''
        now = self._clock()
        self._accumulatorSeconds += now - self._lastTime
        self._lastTime = now

    def tick(self, stepSeconds: float) -> bool:
        '''
        Consume one fixed step if more than one step is banked.

        Parameters:
        -----------
        stepSeconds : float
            Fixed step length [s]

        Returns:
        --------
        bool : True if a step was consumed
        '''
        if self._accumulatorSeconds > stepSeconds:
            self._accumulatorSeconds -= stepSeconds
            return True
        return False

# -- Touch Point Sources -- #

'''
Sources of touch/pointer interaction points for the fluid.

A real host reads up to `maxTouchPoints` active pointers per frame
and converts them from screen space (y down) to world space (y up).
For headless runs this module also provides synthetic sources: a
set of fixed points and a point orbiting the domain centre.

Sean Bowman [02/10/2026]
'''

from __future__ import annotations

import math
from typing import Protocol, Sequence

import numpy as np

from TouchFluid import constants as const


#--------------------------------------------------------------------#
# -- Touch Source Protocol -- #
#--------------------------------------------------------------------#

class TouchPointSource(Protocol):
    '''Protocol for per-frame touch point providers.'''

    def touchPoints(self, time: float) -> np.ndarray:
        '''Active touch points at the given time, shape (K, 2).'''
        ...


def normalizeTouchPoints(
    points: Sequence | np.ndarray,
    maxPoints: int = const.maxTouchPoints,
) -> np.ndarray:
    '''
    Shape-check touch points and keep at most maxPoints of them.

    Parameters:
    -----------
    points : Sequence | np.ndarray
        Zero or more (x, y) points
    maxPoints : int
        Maximum number of points kept (extra points are dropped)

    Returns:
    --------
    np.ndarray : Touch points, shape (K, 2) with K <= maxPoints
    '''
    array = np.asarray(points, dtype=float)
    if array.size == 0:
        return np.zeros((0, 2))
    array = array.reshape(-1, 2) if array.ndim == 1 else array
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError(f'Touch points must have shape (K, 2), got {array.shape}')
    return array[:maxPoints].copy()


def flipScreenY(x: float, y: float, screenHeight: float) -> np.ndarray:
    '''Convert a y-down screen pointer to y-up world coordinates.'''
    return np.array([x, screenHeight - y], dtype=float)


#--------------------------------------------------------------------#
# -- Synthetic Sources -- #
#--------------------------------------------------------------------#

class StaticTouchSource:
    '''
    Touch points that never move.

    Parameters:
    -----------
    points : Sequence | np.ndarray
        Fixed touch points, shape (K, 2)
    '''

    def __init__(self, points: Sequence | np.ndarray = ()) -> None:
        self._points = normalizeTouchPoints(points)

    def touchPoints(self, time: float) -> np.ndarray:
        '''The fixed points, independent of time.'''
        return self._points.copy()


class OrbitingTouchSource:
    '''
    A single touch point circling a centre at constant speed.

    Parameters:
    -----------
    center : np.ndarray
        Orbit centre, shape (2,)
    radius : float
        Orbit radius
    period : float
        Time for one revolution [s]
    '''

    def __init__(self, center: np.ndarray, radius: float, period: float = 4.0) -> None:
        if period <= 0.0:
            raise ValueError(f'Orbit period must be positive, got {period}')
        self._center = np.asarray(center, dtype=float).reshape(2)
        self._radius = radius
        self._period = period

    def touchPoints(self, time: float) -> np.ndarray:
        '''Position of the orbiting point at time, shape (1, 2).'''
        angle = 2.0 * math.pi * time / self._period
        offset = self._radius * np.array([math.cos(angle), math.sin(angle)])
        return (self._center + offset)[np.newaxis, :]

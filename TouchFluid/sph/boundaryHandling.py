# -- SPH Boundary Conditions -- #

'''
Reflecting walls for the rectangular fluid domain.

A particle whose candidate position leaves the domain along an axis
is clamped onto the violated wall and the velocity component along
that axis is negated. The x and y axes are handled independently,
so a particle leaving through a corner bounces off both walls in
the same step.

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

import numpy as np


class ReflectingBoundary:
    '''
    Axis-aligned reflecting box.

    Parameters:
    -----------
    topLeft : np.ndarray
        Lower corner of the domain, shape (2,)
    bottomRight : np.ndarray
        Upper corner of the domain, shape (2,)
    '''

    def __init__(self, topLeft: np.ndarray, bottomRight: np.ndarray) -> None:
        self._topLeft = np.array(topLeft, dtype=float)
        self._bottomRight = np.array(bottomRight, dtype=float)

    @property
    def topLeft(self) -> np.ndarray:
        '''Lower corner of the domain.'''
        return self._topLeft.copy()

    @property
    def bottomRight(self) -> np.ndarray:
        '''Upper corner of the domain.'''
        return self._bottomRight.copy()

    def reflect(
        self, positions: np.ndarray, velocities: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Clamp positions into the box and reflect escaping velocities.

        Parameters:
        -----------
        positions : np.ndarray
            Candidate positions, shape (N, 2)
        velocities : np.ndarray
            Candidate velocities, shape (N, 2)

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : Corrected (positions, velocities)
        '''
        positions = np.array(positions, dtype=float)
        velocities = np.array(velocities, dtype=float)

        for d in range(2):
            belowMin = positions[:, d] < self._topLeft[d]
            positions[belowMin, d] = self._topLeft[d]
            velocities[belowMin, d] = -velocities[belowMin, d]

            aboveMax = positions[:, d] > self._bottomRight[d]
            positions[aboveMax, d] = self._bottomRight[d]
            velocities[aboveMax, d] = -velocities[aboveMax, d]

        return (positions, velocities)

    def contains(self, positions: np.ndarray) -> np.ndarray:
        '''Boolean mask of positions inside the box, shape (N,).'''
        positions = np.asarray(positions, dtype=float).reshape(-1, 2)
        return np.all(
            (positions >= self._topLeft) & (positions <= self._bottomRight), axis=1
        )

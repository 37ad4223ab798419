# -- Neighbor Search for SPH Sums -- #

'''
Neighbor queries behind the SPH density and force sums.

The solver never loops over particles itself; it asks a
NeighborSearch for every (query, source) pair within a radius and
scatters the per-pair terms back onto the queries. The reference
backend, AllPairsSearch, is brute force: every query is tested
against every source, O(N * M) per call. A cell grid or tree could
be dropped in behind the same protocol without touching the force
formulas.

Self pairs are reported: a particle queried against the snapshot
that contains it sees itself at distance zero, which is how SPH
density includes the self contribution.

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


#--------------------------------------------------------------------#
# -- Neighbor Search Protocol -- #
#--------------------------------------------------------------------#

class NeighborSearch(Protocol):
    '''Protocol for neighbor search backends.'''

    def queryPairs(
        self,
        queryPositions: np.ndarray,
        sourcePositions: np.ndarray,
        radius: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all (query, source) pairs no further apart than radius.

        Parameters:
        -----------
        queryPositions : np.ndarray
            Query points, shape (M, 2)
        sourcePositions : np.ndarray
            Particle positions, shape (N, 2)
        radius : float
            Inclusive search radius

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (queryIdx, sourceIdx) integer arrays of equal length
        '''
        ...


#--------------------------------------------------------------------#
# -- Brute-Force All-Pairs Search -- #
#--------------------------------------------------------------------#

class AllPairsSearch:
    '''
    Brute-force neighbor search.

    Builds the full (M, N) squared-distance matrix with NumPy
    broadcasting and keeps the pairs inside the radius. Cost and
    memory are O(M * N), which is what bounds the particle count
    found by calibration.
    '''

    def queryPairs(
        self,
        queryPositions: np.ndarray,
        sourcePositions: np.ndarray,
        radius: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all (query, source) pairs with |q - s| <= radius.

        Parameters:
        -----------
        queryPositions : np.ndarray
            Query points, shape (M, 2)
        sourcePositions : np.ndarray
            Particle positions, shape (N, 2)
        radius : float
            Inclusive search radius

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (queryIdx, sourceIdx)
        '''
        queryPositions = np.asarray(queryPositions, dtype=float).reshape(-1, 2)
        sourcePositions = np.asarray(sourcePositions, dtype=float).reshape(-1, 2)

        # (M, N, 2) displacement tensor -> (M, N) squared distances
        dr = queryPositions[:, np.newaxis, :] - sourcePositions[np.newaxis, :, :]
        distSq = np.einsum('mnk,mnk->mn', dr, dr)

        queryIdx, sourceIdx = np.nonzero(distSq <= radius * radius)
        return (queryIdx, sourceIdx)


def scatterSum(indices: np.ndarray, values: np.ndarray, length: int) -> np.ndarray:
    '''
    Sum per-pair values onto their owning rows.

    Parameters:
    -----------
    indices : np.ndarray
        Owning row of each pair, shape (P,)
    values : np.ndarray
        Per-pair values, shape (P,) or (P, dim)
    length : int
        Number of output rows

    Returns:
    --------
    np.ndarray : Summed values, shape (length,) or (length, dim)
    '''
    if values.ndim == 1:
        return np.bincount(indices, weights=values, minlength=length)[:length]

    result = np.zeros((length, values.shape[1]))
    np.add.at(result, indices, values)
    return result

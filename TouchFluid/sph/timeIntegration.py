# -- SPH Time Integration Schemes -- #

'''
Time integration methods for the interactive SPH fluid.

Both schemes advance positions with the velocity the particle had
at the start of the step, then build the new velocity from the
acceleration and apply gravity to the scaled result:

    x' = x + v * dt
    v' = v + a * dt - g * dt * e_y      (SemiImplicitEuler)
    v' =     a * dt - g * dt * e_y      (ExplicitEuler)

SemiImplicitEuler accumulates onto the previous velocity and keeps
momentum continuous between steps; it is the default. ExplicitEuler
replaces the velocity outright, reproducing the earliest behaviour
of the application, and is kept for comparison runs.

Integrators never modify their inputs; they return new arrays.

References:
-----------
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for time integration schemes.'''

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        accelerations: np.ndarray,
        dt: float,
        gravity: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Compute candidate positions and velocities after one step.

        Parameters:
        -----------
        positions : np.ndarray
            Positions at the start of the step, shape (N, 2)
        velocities : np.ndarray
            Velocities at the start of the step, shape (N, 2)
        accelerations : np.ndarray
            SPH accelerations, shape (N, 2)
        dt : float
            Time step size [s]
        gravity : float
            Gravitational acceleration magnitude, acting in -y

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (positions, velocities)
        '''
        ...


######################################################################
# -- Semi-Implicit Euler -- #
######################################################################

class SemiImplicitEuler:
    '''
    Semi-implicit Euler: velocity accumulates a * dt each step.

    Update sequence:
        x(t+dt) = x(t) + v(t) * dt
        v(t+dt) = v(t) + a(t) * dt - g * dt
    '''

    name = 'semiImplicit'

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        accelerations: np.ndarray,
        dt: float,
        gravity: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''Return (positions, velocities) after one step.'''
        newPositions = positions + velocities * dt
        newVelocities = velocities + accelerations * dt
        newVelocities[:, 1] -= gravity * dt
        return (newPositions, newVelocities)


######################################################################
# -- Explicit (Replacing) Euler -- #
######################################################################

class ExplicitEuler:
    '''
    Explicit Euler that replaces velocity with a * dt each step.

    Update sequence:
        x(t+dt) = x(t) + v(t) * dt
        v(t+dt) = a(t) * dt - g * dt
    '''

    name = 'explicit'

    def integrate(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        accelerations: np.ndarray,
        dt: float,
        gravity: float,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''Return (positions, velocities) after one step.'''
        newPositions = positions + velocities * dt
        newVelocities = accelerations * dt
        newVelocities[:, 1] -= gravity * dt
        return (newPositions, newVelocities)


######################################################################
# -- Integrator Factory -- #
######################################################################

def createIntegrator(scheme: str) -> TimeIntegrator:
    '''
    Create an integrator by scheme name.

    Parameters:
    -----------
    scheme : str
        'semiImplicit' or 'explicit'

    Returns:
    --------
    TimeIntegrator : Integrator instance

    Raises:
    -------
    ValueError : If the scheme is unknown
    '''
    if scheme == 'semiImplicit':
        return SemiImplicitEuler()
    elif scheme == 'explicit':
        return ExplicitEuler()
    else:
        raise ValueError(f'Unknown integration scheme: {scheme}')

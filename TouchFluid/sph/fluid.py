# -- Interactive SPH Fluid Solver -- #

'''
Brute-force SPH solver for an interactive 2D fluid.

Pressure follows an ideal-gas equation of state, p = k (rho - rho_0).
Every particle interacts with every other particle (and itself)
through the kernels of Muller et al. (2003); touch points push
particles away with a Gaussian falloff, and gravity pulls in -y.

Algorithm per time step (against the frozen previous snapshot):
    1. Accelerations: pressure gradient / rho + viscosity + touch
    2. Integrate: x' = x + v dt, v' from the configured scheme,
       gravity applied to the scaled velocity
    3. Reflect at the domain walls, per axis
    4. Density and pressure at x', summed over the old snapshot
    5. Replace the snapshot with the new particle collection

Every sum goes through a NeighborSearch, and the per-particle
queries (forceDensity, forceViscosity, ...) run the same batch code
on a single query row, so the formulas exist in exactly one place.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-based fluid simulation
    for interactive applications
Monaghan (1992) -- Smoothed Particle Hydrodynamics

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from TouchFluid import constants as const
from TouchFluid.sph.protocols import FluidConfig, SimulationState
from TouchFluid.sph.kernels import createKernels
from TouchFluid.sph.particles import Particle, ParticleSystem
from TouchFluid.sph.neighborSearch import NeighborSearch, AllPairsSearch, scatterSum
from TouchFluid.sph.boundaryHandling import ReflectingBoundary
from TouchFluid.sph.timeIntegration import TimeIntegrator, createIntegrator
from TouchFluid.sph.errors import InvalidDomain, validateFinite


def inverseDensity(densities: np.ndarray) -> np.ndarray:
    '''
    Elementwise 1 / rho, zero where rho <= minimumDensity.

    A particle that has drifted out of reach of every neighbor of the
    previous snapshot has density 0; it then contributes no pressure
    or viscosity term instead of a 0 / 0.
    '''
    occupied = densities > const.minimumDensity
    safeDensities = np.where(occupied, densities, 1.0)
    return np.where(occupied, 1.0 / safeDensities, 0.0)


def asTouchArray(touchPoints: Sequence | np.ndarray) -> np.ndarray:
    '''
    Convert a sequence of touch points to an array of shape (K, 2).

    Parameters:
    -----------
    touchPoints : Sequence | np.ndarray
        Zero or more (x, y) points

    Returns:
    --------
    np.ndarray : Touch points, shape (K, 2)
    '''
    points = np.asarray(touchPoints, dtype=float)
    if points.size == 0:
        return np.zeros((0, 2))
    if points.ndim == 1:
        points = points[np.newaxis, :]
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f'Touch points must have shape (K, 2), got {points.shape}')
    return points


def validateDomain(topLeft: np.ndarray, bottomRight: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    '''
    Check a domain rectangle and return it as float arrays.

    Raises:
    -------
    InvalidDomain : If the rectangle is non-finite, degenerate or inverted
    '''
    topLeft = np.asarray(topLeft, dtype=float).reshape(-1)
    bottomRight = np.asarray(bottomRight, dtype=float).reshape(-1)

    if topLeft.shape != (2,) or bottomRight.shape != (2,):
        raise InvalidDomain('Domain corners must be 2D points')
    if not (np.all(np.isfinite(topLeft)) and np.all(np.isfinite(bottomRight))):
        raise InvalidDomain(f'Domain corners must be finite: {topLeft}, {bottomRight}')
    if not np.all(topLeft < bottomRight):
        raise InvalidDomain(
            f'Domain must satisfy topLeft < bottomRight per axis: {topLeft}, {bottomRight}'
        )
    return (topLeft, bottomRight)


class Fluid:
    '''
    Interactive SPH fluid over an axis-aligned rectangle.

    The particle count is fixed at construction. The fluid holds
    exactly one read-only ParticleSystem, which step() replaces
    wholesale; a step that raises leaves it untouched.

    Parameters:
    -----------
    numParticles : int
        Number of particles (> 0)
    topLeft : np.ndarray
        Lower corner of the domain, shape (2,)
    bottomRight : np.ndarray
        Upper corner of the domain, shape (2,)
    config : FluidConfig | None
        Physical parameters (defaults to FluidConfig())
    rng : np.random.Generator | None
        Random source for the initial particle layout
    neighborSearch : NeighborSearch | None
        Neighbor backend (defaults to brute-force AllPairsSearch)
    integrator : TimeIntegrator | None
        Time integrator (defaults to config.integrationScheme)
    '''

    def __init__(
        self,
        numParticles: int,
        topLeft: np.ndarray,
        bottomRight: np.ndarray,
        config: FluidConfig | None = None,
        rng: np.random.Generator | None = None,
        neighborSearch: NeighborSearch | None = None,
        integrator: TimeIntegrator | None = None,
    ) -> None:
        if isinstance(numParticles, bool) or int(numParticles) != numParticles or numParticles <= 0:
            raise ValueError(f'numParticles must be a positive integer, got {numParticles}')

        self._topLeft, self._bottomRight = validateDomain(topLeft, bottomRight)
        self._config = config or FluidConfig()
        self._neighborSearch = neighborSearch or AllPairsSearch()
        self._integrator = integrator or createIntegrator(self._config.integrationScheme)
        self._boundary = ReflectingBoundary(self._topLeft, self._bottomRight)

        self._poly6, self._spiky, self._viscosityKernel, self._touchKernel = createKernels(
            self._config.supportRadius,
            self._config.touchSupportRadius,
            touchSigma=self._config.touchSigma,
            validate=self._config.validateNumerics,
        )

        self._particles = ParticleSystem.createRandom(
            int(numParticles), self._topLeft, self._bottomRight, rng=rng
        )
        self._time: float = 0.0
        self._step: int = 0
        self._dt: float = 0.0

    @classmethod
    def fromParticles(
        cls,
        particles: ParticleSystem | Sequence[Particle],
        topLeft: np.ndarray,
        bottomRight: np.ndarray,
        config: FluidConfig | None = None,
        **kwargs,
    ) -> Fluid:
        '''
        Build a fluid around an explicit particle collection.

        Parameters:
        -----------
        particles : ParticleSystem | Sequence[Particle]
            Initial particles (at least one)
        topLeft : np.ndarray
            Lower corner of the domain
        bottomRight : np.ndarray
            Upper corner of the domain
        config : FluidConfig | None
            Physical parameters
        **kwargs
            Forwarded to the constructor (neighborSearch, integrator)

        Returns:
        --------
        Fluid : Fluid holding the given particles
        '''
        if not isinstance(particles, ParticleSystem):
            particles = ParticleSystem.fromParticles(particles)

        fluid = cls(particles.nParticles, topLeft, bottomRight, config=config, **kwargs)
        fluid._particles = particles
        return fluid

    ######################################################################
    # -- Density and Pressure -- #
    ######################################################################

    def density(self, positions: np.ndarray) -> float | np.ndarray:
        '''
        SPH density at one or more positions.

        rho(x) = sum_i m_i * Poly6(|x - x_i|^2)

        Parameters:
        -----------
        positions : np.ndarray
            A single point, shape (2,), or points of shape (M, 2)

        Returns:
        --------
        float | np.ndarray : Density (float for one point, (M,) otherwise)
        '''
        positions = np.asarray(positions, dtype=float)
        densities = self._densityAt(positions.reshape(-1, 2), self._particles)
        if positions.ndim == 1:
            return float(densities[0])
        return densities

    def pressure(self, density: float | np.ndarray) -> float | np.ndarray:
        '''Ideal-gas equation of state: p = k * (rho - rho_0).'''
        return self._config.gasConstant * (density - self._config.restDensity)

    def _densityAt(self, queryPositions: np.ndarray, source: ParticleSystem) -> np.ndarray:
        '''Density at each query position, summed over source, shape (M,).'''
        queryIdx, sourceIdx = self._neighborSearch.queryPairs(
            queryPositions, source.positions, self._config.supportRadius
        )
        dr = queryPositions[queryIdx] - source.positions[sourceIdx]
        distSq = np.sum(dr * dr, axis=1)
        weights = source.masses[sourceIdx] * self._poly6.evaluateBatch(distSq)
        return scatterSum(queryIdx, weights, len(queryPositions))

    ######################################################################
    # -- Forces (Vectorized) -- #
    ######################################################################

    def _pairs(self, queryPositions: np.ndarray, source: ParticleSystem):
        '''Neighbor pairs and their displacements x_q - x_s.'''
        queryIdx, sourceIdx = self._neighborSearch.queryPairs(
            queryPositions, source.positions, self._config.supportRadius
        )
        dr = queryPositions[queryIdx] - source.positions[sourceIdx]
        return (queryIdx, sourceIdx, dr)

    def _pressureForces(self, pairs, pressures: np.ndarray, source: ParticleSystem) -> np.ndarray:
        '''
        Symmetric pressure-gradient force for each query.

        F_p = -sum_j grad_W(x - x_j) * (p + p_j) / (2 * rho_j)
        (rho_j <= minimumDensity contributes nothing)
        '''
        queryIdx, sourceIdx, dr = pairs
        gradW = self._spiky.gradientBatch(dr)
        scale = (
            0.5 * (pressures[queryIdx] + source.pressures[sourceIdx])
            * inverseDensity(source.densities)[sourceIdx]
        )
        return -scatterSum(queryIdx, gradW * scale[:, np.newaxis], len(pressures))

    def _viscosityForces(self, pairs, velocities: np.ndarray, source: ParticleSystem) -> np.ndarray:
        '''
        Viscous drag toward the neighbors' velocities for each query.

        F_v = mu * sum_j (v_j - v) * m_j * lap_W(x - x_j) / rho_j
        '''
        queryIdx, sourceIdx, dr = pairs
        dv = source.velocities[sourceIdx] - velocities[queryIdx]
        coeff = (
            source.masses[sourceIdx]
            * self._viscosityKernel.laplacianBatch(dr)
            * inverseDensity(source.densities)[sourceIdx]
        )
        force = scatterSum(queryIdx, dv * coeff[:, np.newaxis], len(velocities))
        return self._config.viscosity * force

    def _touchForces(self, positions: np.ndarray, touchPoints: np.ndarray) -> np.ndarray:
        '''
        Repulsion away from every touch point for each query.

        F_t = s * sum_t (x - t) * Touch(x - t)
        '''
        if len(touchPoints) == 0:
            return np.zeros_like(positions)

        # (M, K, 2) displacements from each touch point
        dr = positions[:, np.newaxis, :] - touchPoints[np.newaxis, :, :]
        falloff = self._touchKernel.evaluateBatch(dr.reshape(-1, 2)).reshape(dr.shape[:2])
        force = np.sum(dr * falloff[:, :, np.newaxis], axis=1)
        return self._config.touchStrength * force

    def _accelerationsFor(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        densities: np.ndarray,
        pressures: np.ndarray,
        touchPoints: np.ndarray,
        source: ParticleSystem,
    ) -> np.ndarray:
        '''
        Acceleration of each query, shape (M, 2).

        a = F_p / rho + F_v + F_t
        (F_p / rho is zero for an empty-space query)
        '''
        pairs = self._pairs(positions, source)

        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            pressureTerm = (
                self._pressureForces(pairs, pressures, source)
                * inverseDensity(densities)[:, np.newaxis]
            )
            viscosityTerm = self._viscosityForces(pairs, velocities, source)
            touchTerm = self._touchForces(positions, touchPoints)
            accelerations = pressureTerm + viscosityTerm + touchTerm

        if self._config.validateNumerics:
            validateFinite(accelerations, 'acceleration')
        return accelerations

    ######################################################################
    # -- Per-Particle Queries -- #
    ######################################################################

    def forceDensity(self, particle: Particle) -> np.ndarray:
        '''Pressure-gradient force on one particle, shape (2,).'''
        positions = particle.position[np.newaxis, :]
        pairs = self._pairs(positions, self._particles)
        with np.errstate(divide='ignore', invalid='ignore'):
            force = self._pressureForces(pairs, np.array([particle.pressure]), self._particles)
        return self._finite(force[0], 'pressure force')

    def forceViscosity(self, particle: Particle) -> np.ndarray:
        '''Viscosity force on one particle, shape (2,).'''
        positions = particle.position[np.newaxis, :]
        pairs = self._pairs(positions, self._particles)
        with np.errstate(divide='ignore', invalid='ignore'):
            force = self._viscosityForces(pairs, particle.velocity[np.newaxis, :], self._particles)
        return self._finite(force[0], 'viscosity force')

    def forceTouch(self, position: np.ndarray, touchPoints: Sequence | np.ndarray) -> np.ndarray:
        '''Touch repulsion at one position, shape (2,).'''
        positions = np.asarray(position, dtype=float).reshape(1, 2)
        force = self._touchForces(positions, asTouchArray(touchPoints))
        return self._finite(force[0], 'touch force')

    def acceleration(self, particle: Particle, touchPoints: Sequence | np.ndarray = ()) -> np.ndarray:
        '''
        Acceleration of one particle against the current snapshot.

        Parameters:
        -----------
        particle : Particle
            Particle record (need not belong to this fluid)
        touchPoints : Sequence | np.ndarray
            Active touch points, shape (K, 2)

        Returns:
        --------
        np.ndarray : Acceleration, shape (2,)
        '''
        accelerations = self._accelerationsFor(
            particle.position[np.newaxis, :],
            particle.velocity[np.newaxis, :],
            np.array([particle.density]),
            np.array([particle.pressure]),
            asTouchArray(touchPoints),
            self._particles,
        )
        return accelerations[0]

    def accelerations(self, touchPoints: Sequence | np.ndarray = ()) -> np.ndarray:
        '''Accelerations of every particle in the current snapshot, shape (N, 2).'''
        p = self._particles
        return self._accelerationsFor(
            p.positions, p.velocities, p.densities, p.pressures,
            asTouchArray(touchPoints), p,
        )

    def _finite(self, value: np.ndarray, what: str) -> np.ndarray:
        if self._config.validateNumerics:
            validateFinite(value, what)
        return value

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self, dt: float, touchPoints: Sequence | np.ndarray = ()) -> SimulationState:
        '''
        Advance every particle by one time step.

        All particles are updated against the same frozen snapshot;
        the new collection replaces the old one only after every
        quantity has been computed (and validated, if enabled).

        Parameters:
        -----------
        dt : float
            Time step size [s] (> 0)
        touchPoints : Sequence | np.ndarray
            Active touch points, shape (K, 2); may be empty

        Returns:
        --------
        SimulationState : Diagnostics after the step

        Raises:
        -------
        ValueError : If dt is not positive and finite
        NumericFault : If validation is enabled and a value is NaN/Inf
        '''
        if not (math.isfinite(dt) and dt > 0.0):
            raise ValueError(f'Time step must be positive and finite, got {dt}')

        snapshot = self._particles
        touch = asTouchArray(touchPoints)

        # 1. Accelerations against the snapshot
        accelerations = self._accelerationsFor(
            snapshot.positions, snapshot.velocities,
            snapshot.densities, snapshot.pressures,
            touch, snapshot,
        )

        # 2. Integrate
        positions, velocities = self._integrator.integrate(
            snapshot.positions, snapshot.velocities, accelerations, dt, self._config.gravity
        )

        # 3. Reflect at the walls
        positions, velocities = self._boundary.reflect(positions, velocities)

        # 4. Density and pressure at the new positions, old neighbors
        densities = self._densityAt(positions, snapshot)
        pressures = self.pressure(densities)

        if self._config.validateNumerics:
            validateFinite(positions, 'position')
            validateFinite(velocities, 'velocity')
            validateFinite(densities, 'density')
            validateFinite(pressures, 'pressure')

        # 5. Replace the snapshot
        self._particles = ParticleSystem(
            positions=positions,
            velocities=velocities,
            masses=snapshot.masses,
            densities=densities,
            pressures=pressures,
        )
        self._time += dt
        self._step += 1
        self._dt = dt

        return self.currentState

    ######################################################################
    # -- Properties -- #
    ######################################################################

    def snapshot(self) -> tuple[Particle, ...]:
        '''Particle records for rendering; valid until the next step.'''
        return self._particles.asParticles()

    @property
    def particles(self) -> ParticleSystem:
        '''Current read-only particle collection.'''
        return self._particles

    @property
    def numParticles(self) -> int:
        '''Number of particles.'''
        return self._particles.nParticles

    @property
    def config(self) -> FluidConfig:
        '''Physical parameters.'''
        return self._config

    @property
    def topLeft(self) -> np.ndarray:
        '''Lower corner of the domain.'''
        return self._topLeft.copy()

    @property
    def bottomRight(self) -> np.ndarray:
        '''Upper corner of the domain.'''
        return self._bottomRight.copy()

    @property
    def time(self) -> float:
        '''Accumulated simulation time [s].'''
        return self._time

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        p = self._particles
        return SimulationState(
            time=self._time,
            step=self._step,
            dt=self._dt,
            nParticles=p.nParticles,
            kineticEnergy=p.kineticEnergy(),
            maxVelocity=p.maxSpeed(),
            maxDensity=p.maxDensity(),
            maxPressure=p.maxPressure(),
        )

# -- SPH Particle System -- #

'''
Particle records and the read-only particle collection.

Particle is a single immutable record handed to renderers and
per-particle force queries. ParticleSystem stores the whole
collection as contiguous NumPy arrays for vectorized operations.

A ParticleSystem is never modified after construction: its arrays
are flagged read-only, and each simulation step builds a fresh
system from the previous one. This makes the "read the old
snapshot, write a new one" rule of the solver mechanical.

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from TouchFluid import constants as const


def _frozen(array: np.ndarray) -> np.ndarray:
    '''Return a read-only float copy of array.'''
    result = np.array(array, dtype=float, copy=True)
    result.setflags(write=False)
    return result


######################################################################
# -- Particle Record -- #
######################################################################

@dataclass(frozen=True, eq=False)
class Particle:
    '''
    State of a single SPH particle.

    Parameters:
    -----------
    position : np.ndarray
        World-space position, shape (2,)
    velocity : np.ndarray
        Velocity, shape (2,)
    mass : float
        Particle mass
    density : float
        SPH density at position
    pressure : float
        Pressure from the equation of state
    '''

    position: np.ndarray
    velocity: np.ndarray
    mass: float = const.particleMass
    density: float = const.initialSentinel
    pressure: float = const.initialSentinel

    def __post_init__(self) -> None:
        object.__setattr__(self, 'position', _frozen(np.reshape(self.position, 2)))
        object.__setattr__(self, 'velocity', _frozen(np.reshape(self.velocity, 2)))
        object.__setattr__(self, 'mass', float(self.mass))
        object.__setattr__(self, 'density', float(self.density))
        object.__setattr__(self, 'pressure', float(self.pressure))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Particle):
            return NotImplemented
        return (
            np.array_equal(self.position, other.position)
            and np.array_equal(self.velocity, other.velocity)
            and self.mass == other.mass
            and self.density == other.density
            and self.pressure == other.pressure
        )

    __hash__ = None

    @classmethod
    def random(
        cls,
        topLeft: np.ndarray,
        bottomRight: np.ndarray,
        rng: np.random.Generator | None = None,
    ) -> Particle:
        '''
        Spawn a particle at a uniformly random point of the domain.

        Velocity is uniform in [-1, 1] per axis, mass is 1 and the
        density/pressure fields hold the initial sentinel.

        Parameters:
        -----------
        topLeft : np.ndarray
            Lower corner of the domain, shape (2,)
        bottomRight : np.ndarray
            Upper corner of the domain, shape (2,)
        rng : np.random.Generator | None
            Random source (defaults to a fresh generator)

        Returns:
        --------
        Particle : Randomly placed particle
        '''
        rng = rng or np.random.default_rng()
        return cls(
            position=rng.uniform(topLeft, bottomRight),
            velocity=rng.uniform(-1.0, 1.0, size=2),
        )


######################################################################
# -- Particle Collection -- #
######################################################################

@dataclass(frozen=True, eq=False)
class ParticleSystem:
    '''
    Read-only SPH particle collection.

    Vector quantities have shape (N, 2), scalar quantities (N,).

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    velocities : np.ndarray
        Particle velocities, shape (N, 2)
    masses : np.ndarray
        Particle masses, shape (N,)
    densities : np.ndarray
        Particle densities, shape (N,)
    pressures : np.ndarray
        Particle pressures, shape (N,)
    '''

    positions: np.ndarray
    velocities: np.ndarray
    masses: np.ndarray
    densities: np.ndarray
    pressures: np.ndarray

    def __post_init__(self) -> None:
        positions = _frozen(self.positions).reshape(-1, 2)
        n = positions.shape[0]
        object.__setattr__(self, 'positions', positions)
        object.__setattr__(self, 'velocities', _frozen(self.velocities).reshape(n, 2))
        for name in ('masses', 'densities', 'pressures'):
            values = _frozen(getattr(self, name)).reshape(-1)
            if values.shape[0] != n:
                raise ValueError(f'{name} has {values.shape[0]} entries, expected {n}')
            object.__setattr__(self, name, values)

    def __len__(self) -> int:
        return self.nParticles

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParticleSystem):
            return NotImplemented
        return all(
            np.array_equal(getattr(self, name), getattr(other, name))
            for name in ('positions', 'velocities', 'masses', 'densities', 'pressures')
        )

    __hash__ = None

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self.positions.shape[0]

    def particle(self, index: int) -> Particle:
        '''Return particle `index` as an immutable record.'''
        return Particle(
            position=self.positions[index],
            velocity=self.velocities[index],
            mass=self.masses[index],
            density=self.densities[index],
            pressure=self.pressures[index],
        )

    def asParticles(self) -> tuple[Particle, ...]:
        '''Return the whole collection as a tuple of Particle records.'''
        return tuple(self.particle(i) for i in range(self.nParticles))

    def kineticEnergy(self) -> float:
        '''
        Total kinetic energy.

        KE = (1/2) * sum_i m_i * |v_i|^2
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * np.sum(self.masses * speedsSq))

    def maxSpeed(self) -> float:
        '''Maximum velocity magnitude (0 for an empty system).'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    def maxDensity(self) -> float:
        '''Maximum particle density (0 for an empty system).'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(self.densities))

    def maxPressure(self) -> float:
        '''Maximum particle pressure (0 for an empty system).'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(self.pressures))

    def isFinite(self) -> bool:
        '''True if every stored quantity is finite.'''
        return all(
            bool(np.all(np.isfinite(getattr(self, name))))
            for name in ('positions', 'velocities', 'masses', 'densities', 'pressures')
        )

    def withinDomain(self, topLeft: np.ndarray, bottomRight: np.ndarray) -> bool:
        '''True if every position lies inside [topLeft, bottomRight].'''
        return bool(np.all(
            (self.positions >= np.asarray(topLeft)) & (self.positions <= np.asarray(bottomRight))
        ))

    @classmethod
    def fromParticles(cls, particles: Iterable[Particle]) -> ParticleSystem:
        '''
        Build a collection from Particle records.

        Parameters:
        -----------
        particles : Iterable[Particle]
            Particle records

        Returns:
        --------
        ParticleSystem : Collection holding the same state
        '''
        records: Sequence[Particle] = list(particles)
        return cls(
            positions=np.array([p.position for p in records], dtype=float).reshape(-1, 2),
            velocities=np.array([p.velocity for p in records], dtype=float).reshape(-1, 2),
            masses=np.array([p.mass for p in records], dtype=float),
            densities=np.array([p.density for p in records], dtype=float),
            pressures=np.array([p.pressure for p in records], dtype=float),
        )

    @classmethod
    def createRandom(
        cls,
        nParticles: int,
        topLeft: np.ndarray,
        bottomRight: np.ndarray,
        rng: np.random.Generator | None = None,
    ) -> ParticleSystem:
        '''
        Spawn nParticles uniformly at random inside the domain.

        Each particle gets a random position inside the rectangle, a
        random velocity in [-1, 1] per axis, unit mass, and the
        initial sentinel as density and pressure.

        Parameters:
        -----------
        nParticles : int
            Number of particles
        topLeft : np.ndarray
            Lower corner of the domain, shape (2,)
        bottomRight : np.ndarray
            Upper corner of the domain, shape (2,)
        rng : np.random.Generator | None
            Random source (defaults to a fresh generator)

        Returns:
        --------
        ParticleSystem : Randomly initialized collection
        '''
        rng = rng or np.random.default_rng()
        topLeft = np.asarray(topLeft, dtype=float)
        bottomRight = np.asarray(bottomRight, dtype=float)

        return cls(
            positions=rng.uniform(topLeft, bottomRight, size=(nParticles, 2)),
            velocities=rng.uniform(-1.0, 1.0, size=(nParticles, 2)),
            masses=np.full(nParticles, const.particleMass),
            densities=np.full(nParticles, const.initialSentinel),
            pressures=np.full(nParticles, const.initialSentinel),
        )

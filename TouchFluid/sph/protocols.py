# -- SPH Simulation Protocols -- #

'''
Configuration, state dataclasses and solver protocol for the
interactive SPH fluid.

FluidConfig gathers every physical parameter in one immutable
record, so several fluids (for example the throwaway fluids built
during calibration) can run side by side with different settings.

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Protocol, Sequence, TYPE_CHECKING

import numpy as np

from TouchFluid import constants as const

if TYPE_CHECKING:
    from TouchFluid.sph.particles import Particle, ParticleSystem


######################################################################
# -- Fluid Configuration -- #
######################################################################

@dataclass(frozen=True)
class FluidConfig:
    '''
    Physical and numerical parameters of a fluid.

    Parameters:
    -----------
    gasConstant : float
        Gas constant k in p = k * (rho - rho_0)
    restDensity : float
        Rest density rho_0
    viscosity : float
        Viscosity coefficient mu
    gravity : float
        Gravitational acceleration magnitude, acting in -y
    supportRadius : float
        Support radius of the Poly6, Spiky and Viscosity kernels
    touchSupportRadius : float
        Support radius of the touch kernel
    touchSigma : float
        Gaussian width of the touch kernel, fraction of its support
    touchStrength : float
        Strength of the touch repulsion
    integrationScheme : str
        'semiImplicit' (default) or 'explicit'
    validateNumerics : bool
        Check kernel and force outputs for NaN/Inf
    '''

    gasConstant: float = const.gasConstant
    restDensity: float = const.restDensity
    viscosity: float = const.viscosity
    gravity: float = const.gravity
    supportRadius: float = const.supportRadius
    touchSupportRadius: float = const.touchSupportRadius
    touchSigma: float = const.touchSigma
    touchStrength: float = const.touchStrength
    integrationScheme: str = 'semiImplicit'
    validateNumerics: bool = True

    def withOverrides(self, **changes) -> FluidConfig:
        '''Return a copy with the given fields replaced.'''
        return replace(self, **changes)

    @classmethod
    def scaled(cls, scale: float, **overrides) -> FluidConfig:
        '''
        Build a configuration for a different world scale.

        Every dimensional parameter is expressed per metre and
        multiplied by scale (world units per metre).

        Parameters:
        -----------
        scale : float
            World units per metre
        **overrides
            Fields to set explicitly after scaling

        Returns:
        --------
        FluidConfig : Scaled configuration
        '''
        ratio = scale / const.scale
        config = cls(
            gasConstant=const.gasConstant * ratio,
            gravity=const.gravity * ratio,
            supportRadius=const.supportRadius * ratio,
            touchSupportRadius=const.touchSupportRadius * ratio,
            touchStrength=const.touchStrength * ratio,
        )
        return replace(config, **overrides)

    @classmethod
    def fromJson(cls, configPath: str) -> FluidConfig:
        '''
        Load configuration from a JSON file.

        Reads the 'physics', 'kernels' and 'integration' sections;
        missing keys fall back to the defaults in constants.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        FluidConfig : Loaded configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        physicsSection = data.get('physics', {})
        kernelSection = data.get('kernels', {})
        integrationSection = data.get('integration', {})

        scale = physicsSection.get('scale', const.scale)
        base = cls.scaled(scale)

        return replace(
            base,
            gasConstant=physicsSection.get('gasConstant', base.gasConstant),
            restDensity=physicsSection.get('restDensity', base.restDensity),
            viscosity=physicsSection.get('viscosity', base.viscosity),
            gravity=physicsSection.get('gravity', base.gravity),
            supportRadius=kernelSection.get('supportRadius', base.supportRadius),
            touchSupportRadius=kernelSection.get('touchSupportRadius', base.touchSupportRadius),
            touchSigma=kernelSection.get('touchSigma', base.touchSigma),
            touchStrength=kernelSection.get('touchStrength', base.touchStrength),
            integrationScheme=integrationSection.get('scheme', base.integrationScheme),
            validateNumerics=integrationSection.get('validateNumerics', base.validateNumerics),
        )


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Scalar diagnostics of the fluid after a step.

    Parameters:
    -----------
    time : float
        Accumulated simulation time [s]
    step : int
        Number of steps taken
    dt : float
        Size of the last time step [s]
    nParticles : int
        Number of particles
    kineticEnergy : float
        Total kinetic energy
    maxVelocity : float
        Maximum particle speed
    maxDensity : float
        Maximum particle density
    maxPressure : float
        Maximum particle pressure
    '''

    time: float
    step: int
    dt: float
    nParticles: int
    kineticEnergy: float
    maxVelocity: float
    maxDensity: float
    maxPressure: float


######################################################################
# -- Solver Protocol -- #
######################################################################

class FluidSolver(Protocol):
    '''Protocol for the public surface of an SPH fluid.'''

    def step(self, dt: float, touchPoints: Sequence | np.ndarray = ()) -> SimulationState:
        '''Advance one time step and return the new state.'''
        ...

    def density(self, positions: np.ndarray) -> float | np.ndarray:
        '''SPH density at one or more positions.'''
        ...

    def snapshot(self) -> tuple[Particle, ...]:
        '''Read-only particle records for rendering.'''
        ...

    @property
    def particles(self) -> ParticleSystem:
        '''Current read-only particle collection.'''
        ...

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        ...

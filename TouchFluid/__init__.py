# -- TouchFluid Package -- #

'''
Interactive 2D fluid using Smoothed Particle Hydrodynamics (SPH).

A brute-force SPH fluid that particles can be pushed around in with
touch input, plus the self-calibration that picks how many particles
a machine can step in real time.

Sean Bowman [02/09/2026]
'''

__version__ = '0.1.0'

from TouchFluid.sph.protocols import FluidConfig, SimulationState
from TouchFluid.sph.fluid import Fluid
from TouchFluid.sph.particles import Particle, ParticleSystem
from TouchFluid.sph.errors import NumericFault, InvalidDomain
from TouchFluid.calibration.particleCount import determineOptimalParticleCount
from TouchFluid.runner import FluidRunner

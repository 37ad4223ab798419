# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides the kernel family, particle records, neighbor search,
boundary reflection, time integration, and the brute-force
interactive fluid solver.

Sean Bowman [02/09/2026]
'''

from TouchFluid.sph.errors import NumericFault, InvalidDomain
from TouchFluid.sph.protocols import FluidConfig, SimulationState
from TouchFluid.sph.kernels import Poly6Kernel, SpikyKernel, ViscosityKernel, TouchKernel, createKernels
from TouchFluid.sph.particles import Particle, ParticleSystem
from TouchFluid.sph.fluid import Fluid

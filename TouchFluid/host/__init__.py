# -- Host Collaborators Package -- #

'''
Host-side pieces around the fluid: the fixed-timestep accumulator,
touch point sources, and the resizable interactive session.

Sean Bowman [02/10/2026]
'''

from TouchFluid.host.timeAccumulator import TimeAccumulator
from TouchFluid.host.touchInput import (
    TouchPointSource,
    StaticTouchSource,
    OrbitingTouchSource,
    normalizeTouchPoints,
    flipScreenY,
)
from TouchFluid.host.session import FluidSession

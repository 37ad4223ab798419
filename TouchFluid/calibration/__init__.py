# -- Calibration Package -- #

'''
Self-calibration of the particle count against a real-time budget.

Sean Bowman [02/10/2026]
'''

from TouchFluid.calibration.timing import timedRun, timeit
from TouchFluid.calibration.particleCount import (
    ProbeResult,
    ParticleCountCalibrator,
    determineOptimalParticleCount,
)

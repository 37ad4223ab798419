# -- Interactive Fluid Session -- #

'''
Host-side lifecycle of one interactive fluid.

A session owns the live Fluid for a viewport. Resizing the
viewport throws the fluid away, recalibrates the particle count for
the current machine, and builds a fresh fluid filling the new
rectangle. Each rendered frame then runs as many fixed timesteps as
the wall clock has banked, feeding in the current touch points.

Sean Bowman [02/10/2026]
'''

from __future__ import annotations

import time as timeModule
from typing import Callable

import numpy as np

from TouchFluid import constants as const
from TouchFluid.sph.protocols import FluidConfig
from TouchFluid.sph.fluid import Fluid
from TouchFluid.calibration.particleCount import determineOptimalParticleCount
from TouchFluid.host.timeAccumulator import TimeAccumulator
from TouchFluid.host.touchInput import TouchPointSource, normalizeTouchPoints


class FluidSession:
    '''
    Owns the live fluid of a resizable viewport.

    Parameters:
    -----------
    timestep : float
        Fixed simulation step [s]
    config : FluidConfig | None
        Physical parameters of the live fluid
    particleCount : int | None
        Fixed particle count; None calibrates on every resize
    clock : Callable[[], float]
        Monotonic clock for the accumulator and calibration
    rng : np.random.Generator | None
        Random source for particle placement
    calibrationOptions : dict | None
        Extra keyword arguments for determineOptimalParticleCount
    '''

    def __init__(
        self,
        timestep: float = const.timestep,
        config: FluidConfig | None = None,
        particleCount: int | None = None,
        clock: Callable[[], float] = timeModule.perf_counter,
        rng: np.random.Generator | None = None,
        calibrationOptions: dict | None = None,
    ) -> None:
        self._timestep = timestep
        self._config = config or FluidConfig()
        self._fixedCount = particleCount
        self._clock = clock
        self._rng = rng or np.random.default_rng()
        self._calibrationOptions = calibrationOptions or {}
        self._accumulator = TimeAccumulator(clock)
        self._fluid: Fluid | None = None

    @property
    def fluid(self) -> Fluid | None:
        '''The live fluid, or None before the first resize.'''
        return self._fluid

    @property
    def timestep(self) -> float:
        '''Fixed simulation step [s].'''
        return self._timestep

    def calibrate(self) -> int:
        '''Particle count for the next fluid (fixed or calibrated).'''
        if self._fixedCount is not None:
            return self._fixedCount

        options = {
            'timestep': self._timestep,
            'config': self._config,
            'clock': self._clock,
            'rng': self._rng,
        }
        options.update(self._calibrationOptions)
        return determineOptimalParticleCount(
            self._timestep * const.calibrationStepBudgetFraction, **options
        )

    def resize(self, width: float, height: float) -> Fluid:
        '''
        Rebuild the fluid for a viewport of the given size.

        Parameters:
        -----------
        width : float
            Viewport width in world units
        height : float
            Viewport height in world units

        Returns:
        --------
        Fluid : The new live fluid
        '''
        count = self.calibrate()
        self._fluid = Fluid(
            count,
            np.array([0.0, 0.0]),
            np.array([float(width), float(height)]),
            config=self._config,
            rng=self._rng,
        )
        self._accumulator.reset()
        return self._fluid

    def frame(self, touchSource: TouchPointSource | None = None) -> int:
        '''
        Run every fixed step the wall clock has banked.

        Touch points are sampled once per frame and reused for each
        step of that frame.

        Parameters:
        -----------
        touchSource : TouchPointSource | None
            Provider of the frame's touch points

        Returns:
        --------
        int : Number of steps run
        '''
        if self._fluid is None:
            raise RuntimeError('FluidSession.frame() called before resize()')

        touchPoints = np.zeros((0, 2))
        if touchSource is not None:
            touchPoints = normalizeTouchPoints(touchSource.touchPoints(self._fluid.time))

        self._accumulator.update()
        nSteps = 0
        while self._accumulator.tick(self._timestep):
            self._fluid.step(self._timestep, touchPoints)
            nSteps += 1
        return nSteps

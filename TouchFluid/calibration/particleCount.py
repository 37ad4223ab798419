# -- Particle Count Calibration -- #

'''
Find the largest particle count that still steps in real time.

Probing starts from a small seed count and grows it by a fixed
factor. Each probe builds a throwaway fluid on the unit square,
times one step with a few synthetic touch points against the step
budget, and optionally times a batch of density queries (the
workload of a density-field overlay). The first probe that misses
its budget ends the search and the last count that passed is
returned.

Because the per-step cost of the brute-force solver grows
quadratically with the particle count while the budget is fixed,
some probe eventually misses its budget and the loop ends.

A missed budget is an ordinary ProbeResult, not an exception. Any
exception raised by the fluid itself (for example NumericFault)
propagates and aborts the calibration.

Sean Bowman [02/10/2026]
'''

from __future__ import annotations

import math
import time as timeModule
from dataclasses import dataclass
from typing import Callable

import numpy as np

from TouchFluid import constants as const
from TouchFluid.sph.protocols import FluidConfig, FluidSolver
from TouchFluid.sph.fluid import Fluid
from TouchFluid.calibration.timing import Clock, timedRun

FluidFactory = Callable[[int], FluidSolver]


######################################################################
# -- Probe Result -- #
######################################################################

@dataclass(frozen=True)
class ProbeResult:
    '''
    Outcome of timing one trial particle count.

    Parameters:
    -----------
    count : int
        Particle count that was probed
    withinBudget : bool
        True if every timed workload finished within its budget
    elapsedSeconds : float
        Duration of the timed step [s]
    densityElapsedSeconds : float | None
        Duration of the density-query workload [s], if it ran
    '''

    count: int
    withinBudget: bool
    elapsedSeconds: float
    densityElapsedSeconds: float | None = None

    @classmethod
    def completedWithinBudget(cls, count: int, elapsedSeconds: float, **kwargs) -> ProbeResult:
        '''Probe that met its budget.'''
        return cls(count=count, withinBudget=True, elapsedSeconds=elapsedSeconds, **kwargs)

    @classmethod
    def exceededBudget(cls, count: int, elapsedSeconds: float, **kwargs) -> ProbeResult:
        '''Probe that missed its budget.'''
        return cls(count=count, withinBudget=False, elapsedSeconds=elapsedSeconds, **kwargs)


######################################################################
# -- Calibrator -- #
######################################################################

class ParticleCountCalibrator:
    '''
    Grows a trial particle count until a step misses its budget.

    Parameters:
    -----------
    stepBudgetSeconds : float
        Maximum duration of one probe step [s]
    timestep : float
        Time step passed to the probe step [s]
    config : FluidConfig | None
        Physical parameters of the probe fluids
    clock : Clock
        Monotonic clock returning seconds (injectable for tests)
    fluidFactory : FluidFactory | None
        Builds a probe fluid for a count (defaults to the unit square)
    seedCount : int
        Count assumed to be sustainable before probing (>= 4)
    growthFactor : float
        Multiplier between probes (> 1)
    nTouchPoints : int
        Number of synthetic touch points at the square's centre
    densityQueryCount : int
        Random density queries timed after the step (0 disables)
    densityBudgetSeconds : float | None
        Budget for the density queries [s]
    maxParticles : int | None
        Optional upper bound on the returned count
    rng : np.random.Generator | None
        Random source for probe fluids and density queries
    verbose : bool
        Print one line per probe
    '''

    def __init__(
        self,
        stepBudgetSeconds: float,
        timestep: float = const.timestep,
        config: FluidConfig | None = None,
        clock: Clock = timeModule.perf_counter,
        fluidFactory: FluidFactory | None = None,
        seedCount: int = const.calibrationSeedCount,
        growthFactor: float = const.calibrationGrowthFactor,
        nTouchPoints: int = const.calibrationTouchPoints,
        densityQueryCount: int = 0,
        densityBudgetSeconds: float | None = None,
        maxParticles: int | None = None,
        rng: np.random.Generator | None = None,
        verbose: bool = False,
    ) -> None:
        if not (math.isfinite(stepBudgetSeconds) and stepBudgetSeconds > 0.0):
            raise ValueError(f'Step budget must be positive, got {stepBudgetSeconds}')
        if growthFactor <= 1.0:
            raise ValueError(f'Growth factor must exceed 1, got {growthFactor}')
        if math.floor(seedCount * growthFactor) <= seedCount:
            raise ValueError(
                f'Seed count {seedCount} does not grow under factor {growthFactor}'
            )
        if densityQueryCount > 0 and densityBudgetSeconds is None:
            densityBudgetSeconds = const.densityQueryBudget
        if maxParticles is not None and maxParticles < seedCount:
            raise ValueError(f'maxParticles {maxParticles} is below the seed count {seedCount}')

        self._stepBudget = stepBudgetSeconds
        self._timestep = timestep
        self._config = config or FluidConfig()
        self._clock = clock
        self._rng = rng or np.random.default_rng()
        self._fluidFactory = fluidFactory or self._unitSquareFluid
        self._seedCount = int(seedCount)
        self._growthFactor = growthFactor
        self._touchPoints = np.full((nTouchPoints, 2), 0.5)
        self._densityQueryCount = densityQueryCount
        self._densityBudget = densityBudgetSeconds
        self._maxParticles = maxParticles
        self._verbose = verbose
        self._history: list[ProbeResult] = []

    def _unitSquareFluid(self, count: int) -> FluidSolver:
        return Fluid(
            count,
            np.array([0.0, 0.0]),
            np.array([1.0, 1.0]),
            config=self._config,
            rng=self._rng,
        )

    def nextCount(self, count: int) -> int:
        '''Next probe count: floor(count * growthFactor).'''
        return int(math.floor(count * self._growthFactor))

    def probe(self, count: int) -> ProbeResult:
        '''
        Time one step (and the optional density workload) at count.

        Parameters:
        -----------
        count : int
            Trial particle count

        Returns:
        --------
        ProbeResult : Timing outcome
        '''
        fluid = self._fluidFactory(count)

        stepOk, stepElapsed = timedRun(
            lambda: fluid.step(self._timestep, self._touchPoints),
            self._stepBudget,
            self._clock,
        )
        if not stepOk:
            return ProbeResult.exceededBudget(count, stepElapsed)
        if self._densityQueryCount <= 0:
            return ProbeResult.completedWithinBudget(count, stepElapsed)

        queries = self._rng.uniform(0.0, 1.0, size=(self._densityQueryCount, 2))
        densityOk, densityElapsed = timedRun(
            lambda: fluid.density(queries),
            self._densityBudget,
            self._clock,
        )
        if not densityOk:
            return ProbeResult.exceededBudget(
                count, stepElapsed, densityElapsedSeconds=densityElapsed
            )
        return ProbeResult.completedWithinBudget(
            count, stepElapsed, densityElapsedSeconds=densityElapsed
        )

    def run(self) -> int:
        '''
        Probe growing counts until one misses its budget.

        Returns:
        --------
        int : Largest count that met the budget (the seed count if
              the very first probe misses)
        '''
        self._history.clear()
        current = self._seedCount

        if self._verbose:
            print('  Determining optimal particle count')
            print(f'  Step budget:       {self._stepBudget * 1000.0:8.2f} ms')

        while True:
            candidate = self.nextCount(current)
            if self._maxParticles is not None and candidate > self._maxParticles:
                if self._verbose:
                    print(f'  Reached particle cap at {current}')
                break

            result = self.probe(candidate)
            self._history.append(result)

            if self._verbose:
                status = 'ok' if result.withinBudget else 'timed out'
                print(f'  {candidate:8d} particles  {result.elapsedSeconds * 1000.0:10.3f} ms  {status}')

            if not result.withinBudget:
                break
            current = candidate

        if self._verbose:
            print(f'  Optimal particle count: {current}')

        return current

    @property
    def history(self) -> list[ProbeResult]:
        '''Every probe made by the last run, in order.'''
        return list(self._history)


def determineOptimalParticleCount(stepBudgetSeconds: float, **options) -> int:
    '''
    Largest particle count whose step fits in stepBudgetSeconds.

    Parameters:
    -----------
    stepBudgetSeconds : float
        Maximum duration of one simulation step [s]
    **options
        Forwarded to ParticleCountCalibrator

    Returns:
    --------
    int : Calibrated particle count
    '''
    return ParticleCountCalibrator(stepBudgetSeconds, **options).run()

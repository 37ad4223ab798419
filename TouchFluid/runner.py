# -- Interactive Fluid Runner -- #

'''
Command-line entry point for headless runs of the interactive fluid.

Calibrates the particle count for this machine (unless a count is
given), builds a fluid filling a width x height viewport, drives it
for a number of fixed timesteps with synthetic touch input, and
prints progress and a summary.

Usage:
    python -m TouchFluid                                  # 800 x 600, calibrated
    python -m TouchFluid --particles 400 --steps 100      # Skip calibration
    python -m TouchFluid --touch static --explicit        # Fixed touch, explicit Euler
    python -m TouchFluid --config configs/interactive_default.json
    python -m TouchFluid --config configs/interactive_default.json --particles 200 --explicit
    python -m TouchFluid --density-queries 4800           # Time the density overlay too

Sean Bowman [02/10/2026]
'''

from __future__ import annotations

import argparse
import json
import time as timeModule
from contextlib import nullcontext

import numpy as np

from TouchFluid import constants as const
from TouchFluid.sph.protocols import FluidConfig, SimulationState
from TouchFluid.sph.fluid import Fluid
from TouchFluid.calibration.particleCount import ParticleCountCalibrator
from TouchFluid.calibration.timing import timeit
from TouchFluid.host.touchInput import (
    TouchPointSource,
    StaticTouchSource,
    OrbitingTouchSource,
)


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='TouchFluid -- interactive SPH fluid (headless run)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--width', type=float, default=None,
        help='Viewport width in world units (default: 800)',
    )
    parser.add_argument(
        '--height', type=float, default=None,
        help='Viewport height in world units (default: 600)',
    )
    parser.add_argument(
        '--steps', type=int, default=None,
        help='Number of fixed timesteps to run (default: 50)',
    )
    parser.add_argument(
        '--particles', type=int, default=None,
        help='Particle count; skips calibration when given',
    )
    parser.add_argument(
        '--budget', type=float, default=None,
        help='Calibration step budget in seconds (default: timestep / 1.25)',
    )
    parser.add_argument(
        '--density-queries', type=int, default=None,
        help='Density queries timed per calibration probe (default: 0)',
    )
    parser.add_argument(
        '--touch', type=str, default=None,
        choices=['none', 'static', 'orbit'],
        help='Synthetic touch input (default: orbit)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for particle placement',
    )
    parser.add_argument(
        '--explicit', action='store_true',
        help='Use the explicit (velocity-replacing) Euler integrator',
    )
    parser.add_argument(
        '--quiet', action='store_true',
        help='Suppress progress output',
    )

    return parser


def createTouchSource(kind: str, width: float, height: float) -> TouchPointSource | None:
    '''
    Build a synthetic touch source for a viewport.

    Parameters:
    -----------
    kind : str
        'none', 'static' or 'orbit'
    width : float
        Viewport width
    height : float
        Viewport height

    Returns:
    --------
    TouchPointSource | None : Touch source, or None for 'none'
    '''
    center = np.array([width / 2.0, height / 2.0])
    if kind == 'none':
        return None
    elif kind == 'static':
        return StaticTouchSource([center])
    elif kind == 'orbit':
        return OrbitingTouchSource(center, radius=0.25 * min(width, height))
    else:
        raise ValueError(f'Unknown touch source: {kind}')


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class FluidRunner:
    '''
    Runs the interactive fluid headless and reports on it.

    Parameters:
    -----------
    config : FluidConfig | None
        Physical parameters
    timestep : float
        Fixed simulation step [s]
    verbose : bool
        Print progress sections
    '''

    def __init__(
        self,
        config: FluidConfig | None = None,
        timestep: float = const.timestep,
        verbose: bool = True,
    ) -> None:
        self._config = config or FluidConfig()
        self._timestep = timestep
        self._verbose = verbose
        self._states: list[SimulationState] = []

    @property
    def states(self) -> list[SimulationState]:
        '''State after every step of the last run.'''
        return list(self._states)

    def _print(self, text: str = '') -> None:
        if self._verbose:
            print(text)

    def _section(self, title: str) -> None:
        self._print('-' * 62)
        self._print(f'  {title}')
        self._print('-' * 62)

    def runFromConfig(self, configPath: str, explicit: bool = False, **overrides) -> dict:
        '''
        Run from a JSON configuration file.

        The 'simulation' section may set width, height, steps,
        particles, budget, densityQueries, touch, seed and timestep;
        the physics sections are read by FluidConfig.fromJson.
        Keyword overrides (run() argument names) take precedence
        over the file.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file
        explicit : bool
            Force the explicit Euler integrator after loading
        **overrides
            run() arguments replacing the file's values

        Returns:
        --------
        dict : Run summary
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        simSection = data.get('simulation', {})
        self._config = FluidConfig.fromJson(configPath)
        if explicit:
            self._config = self._config.withOverrides(integrationScheme='explicit')
        self._timestep = simSection.get('timestep', self._timestep)

        settings = {
            'width': simSection.get('width', 800.0),
            'height': simSection.get('height', 600.0),
            'nSteps': simSection.get('steps', 50),
            'particleCount': simSection.get('particles'),
            'stepBudgetSeconds': simSection.get('budget'),
            'densityQueryCount': simSection.get('densityQueries', 0),
            'touch': simSection.get('touch', 'orbit'),
            'seed': simSection.get('seed'),
        }
        settings.update(overrides)

        return self.run(**settings)

    def run(
        self,
        width: float = 800.0,
        height: float = 600.0,
        nSteps: int = 50,
        particleCount: int | None = None,
        stepBudgetSeconds: float | None = None,
        densityQueryCount: int = 0,
        touch: str = 'orbit',
        seed: int | None = None,
    ) -> dict:
        '''
        Calibrate (if needed), build the fluid and run nSteps steps.

        Parameters:
        -----------
        width : float
            Viewport width in world units
        height : float
            Viewport height in world units
        nSteps : int
            Number of fixed steps
        particleCount : int | None
            Particle count; None runs calibration
        stepBudgetSeconds : float | None
            Calibration budget (default: timestep / 1.25)
        densityQueryCount : int
            Density queries timed per calibration probe (0 disables)
        touch : str
            Synthetic touch input: 'none', 'static' or 'orbit'
        seed : int | None
            Random seed

        Returns:
        --------
        dict : Run summary
        '''
        rng = np.random.default_rng(seed)
        self._states = []

        self._print()
        self._print('=' * 62)
        self._print('  TOUCHFLUID -- INTERACTIVE SPH FLUID')
        self._print('=' * 62)
        self._print()

        #--------------------------------------------------------------------#
        # Particle Count
        #--------------------------------------------------------------------#
        calibrated = particleCount is None
        if calibrated:
            self._section('CALIBRATING PARTICLE COUNT')
            budget = stepBudgetSeconds
            if budget is None:
                budget = self._timestep * const.calibrationStepBudgetFraction
            calibrator = ParticleCountCalibrator(
                budget,
                timestep=self._timestep,
                config=self._config,
                densityQueryCount=densityQueryCount,
                rng=rng,
                verbose=self._verbose,
            )
            with timeit('Calibration time') if self._verbose else nullcontext():
                particleCount = calibrator.run()
            self._print()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        self._section('SCENARIO SETUP')

        fluid = Fluid(
            particleCount,
            np.array([0.0, 0.0]),
            np.array([width, height]),
            config=self._config,
            rng=rng,
        )
        touchSource = createTouchSource(touch, width, height)

        self._print(f'  Domain:            {width:8.1f} x {height:.1f}')
        self._print(f'  Particles:         {fluid.numParticles:8d}')
        self._print(f'  Calibrated:        {str(calibrated):>8s}')
        self._print(f'  Timestep:          {self._timestep:8.4f} s')
        self._print(f'  Support Radius:    {self._config.supportRadius:8.2f}')
        self._print(f'  Integrator:        {self._config.integrationScheme:>12s}')
        self._print(f'  Touch Input:       {touch:>8s}')
        self._print()

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        self._section('RUNNING SIMULATION')
        self._print()
        self._print(f'  {"Time":>8}  {"Step":>6}  {"StepTime":>10}  {"MaxVel":>10}  {"MaxDens":>10}  {"KE":>12}')
        self._print(f'  {"(s)":>8}  {"":>6}  {"(ms)":>10}  {"":>10}  {"":>10}  {"":>12}')
        self._print('  ' + '-' * 64)

        printInterval = max(1, nSteps // 20)
        slowestStep = 0.0
        wallClockStart = timeModule.perf_counter()

        for i in range(nSteps):
            touchPoints = np.zeros((0, 2))
            if touchSource is not None:
                touchPoints = touchSource.touchPoints(fluid.time)

            stepStart = timeModule.perf_counter()
            state = fluid.step(self._timestep, touchPoints)
            stepSeconds = timeModule.perf_counter() - stepStart
            slowestStep = max(slowestStep, stepSeconds)
            self._states.append(state)

            if (i + 1) % printInterval == 0 or i == nSteps - 1:
                self._print(
                    f'  {state.time:8.3f}  {state.step:6d}  {stepSeconds * 1000.0:10.3f}  '
                    f'{state.maxVelocity:10.3f}  {state.maxDensity:10.3e}  '
                    f'{state.kineticEnergy:12.4e}'
                )

        wallClockSeconds = timeModule.perf_counter() - wallClockStart
        finalState = fluid.currentState

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        self._print()
        self._print('=' * 62)
        self._print('  SIMULATION SUMMARY')
        self._print('=' * 62)
        self._print(f'  Total steps:       {finalState.step:8d}')
        self._print(f'  Wall-clock time:   {wallClockSeconds:8.3f} s')
        self._print(f'  Slowest step:      {slowestStep * 1000.0:8.3f} ms')
        self._print(f'  Real-time:         {str(slowestStep <= self._timestep):>8s}')
        self._print(f'  Final KE:          {finalState.kineticEnergy:12.4e}')
        self._print(f'  Max Velocity:      {finalState.maxVelocity:12.4f}')
        self._print(f'  Max Density:       {finalState.maxDensity:12.4e}')
        self._print('=' * 62)
        self._print()

        return {
            'particleCount': fluid.numParticles,
            'calibrated': calibrated,
            'finalState': finalState,
            'wallClockSeconds': wallClockSeconds,
            'slowestStepSeconds': slowestStep,
            'fluid': fluid,
        }


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> dict:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    config = FluidConfig()
    if args.explicit:
        config = config.withOverrides(integrationScheme='explicit')

    runner = FluidRunner(config=config, verbose=not args.quiet)

    # Only flags given on the command line override the config file
    cliValues = {
        'width': args.width,
        'height': args.height,
        'nSteps': args.steps,
        'particleCount': args.particles,
        'stepBudgetSeconds': args.budget,
        'densityQueryCount': args.density_queries,
        'touch': args.touch,
        'seed': args.seed,
    }
    overrides = {key: value for key, value in cliValues.items() if value is not None}

    if args.config:
        return runner.runFromConfig(args.config, explicit=args.explicit, **overrides)

    return runner.run(**overrides)


if __name__ == '__main__':
    main()

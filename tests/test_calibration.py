# -- Particle Count Calibration Tests -- #

'''
Tests for particle count calibration.

A fake clock and a fake fluid whose step "costs" a known number of
seconds make the probe sequence fully deterministic.

Sean Bowman [02/11/2026]
'''

import numpy as np
import pytest

from TouchFluid.calibration import (
    ParticleCountCalibrator,
    ProbeResult,
    determineOptimalParticleCount,
    timedRun,
    timeit,
)
from TouchFluid.sph.errors import NumericFault

from conftest import FakeClock


class FakeFluid:
    '''Advances a fake clock by a cost that depends on the particle count.'''

    def __init__(self, count, clock, stepCost, densityCost):
        self.count = count
        self.clock = clock
        self.stepCost = stepCost
        self.densityCost = densityCost
        self.stepCalls = []

    def step(self, dt, touchPoints=()):
        self.stepCalls.append((dt, np.asarray(touchPoints)))
        self.clock.advance(self.stepCost(self.count))

    def density(self, positions):
        self.clock.advance(self.densityCost(self.count))
        return np.zeros(len(positions))


def makeCalibrator(clock, budget=0.01, densityCost=lambda n: 0.0, fluids=None, **kwargs):
    def factory(count):
        fluid = FakeFluid(count, clock, lambda n: n * n * 1e-6, densityCost)
        if fluids is not None:
            fluids.append(fluid)
        return fluid

    return ParticleCountCalibrator(budget, clock=clock, fluidFactory=factory, **kwargs)


class TestProbeSequence:

    def testGrowsUntilBudgetMissed(self, fakeClock):
        calibrator = makeCalibrator(fakeClock)
        count = calibrator.run()

        assert count == 97
        probed = [result.count for result in calibrator.history]
        assert probed == [12, 15, 18, 22, 27, 33, 41, 51, 63, 78, 97, 121]
        assert all(result.withinBudget for result in calibrator.history[:-1])
        assert not calibrator.history[-1].withinBudget

    def testFirstProbeFailureReturnsSeed(self, fakeClock):
        calibrator = makeCalibrator(fakeClock, budget=1e-5)
        assert calibrator.run() == 10
        assert len(calibrator.history) == 1
        assert calibrator.history[0].count == 12

    def testDensityWorkloadCanEndSearch(self, fakeClock):
        calibrator = makeCalibrator(
            fakeClock,
            densityCost=lambda n: n * 1e-4,
            densityQueryCount=10,
            densityBudgetSeconds=0.005,
        )
        assert calibrator.run() == 41
        last = calibrator.history[-1]
        assert last.count == 51
        assert not last.withinBudget
        assert last.densityElapsedSeconds == pytest.approx(0.0051)

    def testDensityNotTimedWhenDisabled(self, fakeClock):
        calibrator = makeCalibrator(fakeClock, densityCost=lambda n: 1.0)
        assert calibrator.run() == 97
        assert all(result.densityElapsedSeconds is None for result in calibrator.history)

    def testMaxParticlesCapsResult(self, fakeClock):
        calibrator = makeCalibrator(fakeClock, maxParticles=50)
        assert calibrator.run() == 41
        assert calibrator.history[-1].count == 41
        assert all(result.withinBudget for result in calibrator.history)

    def testProbeStepsOnceWithTouchPoints(self, fakeClock):
        fluids = []
        calibrator = makeCalibrator(fakeClock, fluids=fluids, timestep=0.05, nTouchPoints=4)
        calibrator.run()
        for fluid in fluids:
            assert len(fluid.stepCalls) == 1
            dt, touch = fluid.stepCalls[0]
            assert dt == 0.05
            np.testing.assert_array_equal(touch, np.full((4, 2), 0.5))

    def testNextCount(self, fakeClock):
        calibrator = makeCalibrator(fakeClock)
        assert calibrator.nextCount(10) == 12
        assert calibrator.nextCount(12) == 15
        assert calibrator.nextCount(97) == 121

    def testHistoryResetsBetweenRuns(self, fakeClock):
        calibrator = makeCalibrator(fakeClock)
        calibrator.run()
        calibrator.run()
        assert len(calibrator.history) == 12

    def testVerboseOutput(self, fakeClock, capsys):
        makeCalibrator(fakeClock, verbose=True, maxParticles=20).run()
        out = capsys.readouterr().out
        assert 'Optimal particle count: 18' in out
        assert 'Reached particle cap at 18' in out


class TestErrors:

    def testFluidErrorsPropagate(self, fakeClock):
        class FaultyFluid:
            def step(self, dt, touchPoints=()):
                raise NumericFault('Non-finite acceleration')

        calibrator = ParticleCountCalibrator(
            0.01, clock=fakeClock, fluidFactory=lambda count: FaultyFluid()
        )
        with pytest.raises(NumericFault):
            calibrator.run()

    @pytest.mark.parametrize("options", [
        {'seedCount': 3},
        {'growthFactor': 1.0},
        {'growthFactor': 0.5},
        {'maxParticles': 5},
    ])
    def testRejectsBadOptions(self, options):
        with pytest.raises(ValueError):
            ParticleCountCalibrator(0.01, **options)

    @pytest.mark.parametrize("budget", [0.0, -1.0, float('nan'), float('inf')])
    def testRejectsBadBudget(self, budget):
        with pytest.raises(ValueError):
            ParticleCountCalibrator(budget)


class TestTiming:

    def testEqualToBudgetIsWithin(self):
        clock = FakeClock()
        ok, elapsed = timedRun(lambda: clock.advance(0.5), 0.5, clock)
        assert ok
        assert elapsed == 0.5

    def testOverBudget(self):
        clock = FakeClock()
        ok, elapsed = timedRun(lambda: clock.advance(0.75), 0.5, clock)
        assert not ok
        assert elapsed == 0.75

    def testExceptionsPropagate(self):
        def fail():
            raise RuntimeError('boom')

        with pytest.raises(RuntimeError):
            timedRun(fail, 1.0)

    def testTimeitPrintsDuration(self, capsys):
        clock = FakeClock()
        with timeit('block', clock):
            clock.advance(0.25)
        assert 'block: 0.250000 s' in capsys.readouterr().out

    def testProbeResultConstructors(self):
        ok = ProbeResult.completedWithinBudget(12, 0.001)
        missed = ProbeResult.exceededBudget(15, 0.2, densityElapsedSeconds=0.1)
        assert ok.withinBudget and ok.count == 12 and ok.densityElapsedSeconds is None
        assert not missed.withinBudget and missed.densityElapsedSeconds == 0.1


class TestRealFluid:

    def testRealCalibrationIsBounded(self):
        count = determineOptimalParticleCount(
            0.05, maxParticles=30, rng=np.random.default_rng(0)
        )
        assert 10 <= count <= 30

    def testNonAdvancingClockReachesCap(self):
        count = determineOptimalParticleCount(
            0.01, clock=FakeClock(), maxParticles=30, rng=np.random.default_rng(0)
        )
        assert count == 27

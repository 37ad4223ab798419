# -- Host Session Tests -- #

'''
Tests for the host-side accumulator, touch sources and session.

Sean Bowman [02/11/2026]
'''

import math

import numpy as np
import pytest

from TouchFluid.host import (
    TimeAccumulator,
    FluidSession,
    StaticTouchSource,
    OrbitingTouchSource,
    normalizeTouchPoints,
    flipScreenY,
)

from conftest import FakeClock


class TestTimeAccumulator:

    def testPaysOutWholeSteps(self, fakeClock):
        accumulator = TimeAccumulator(fakeClock)
        fakeClock.advance(0.25)
        accumulator.update()
        ticks = 0
        while accumulator.tick(0.1):
            ticks += 1
        assert ticks == 2
        assert accumulator.accumulatorSeconds == pytest.approx(0.05)

    def testExactlyOneStepIsNotConsumed(self, fakeClock):
        accumulator = TimeAccumulator(fakeClock)
        fakeClock.advance(0.5)
        accumulator.update()
        assert not accumulator.tick(0.5)
        assert accumulator.accumulatorSeconds == 0.5

    def testResetDiscardsElapsedTime(self, fakeClock):
        accumulator = TimeAccumulator(fakeClock)
        fakeClock.advance(1.0)
        accumulator.reset()
        accumulator.update()
        assert accumulator.accumulatorSeconds == 0.0


class TestTouchInput:

    def testNormalizeTruncatesToMaxPoints(self):
        points = normalizeTouchPoints(np.arange(24, dtype=float).reshape(12, 2))
        assert points.shape == (9, 2)
        np.testing.assert_array_equal(points[0], [0.0, 1.0])

    def testNormalizeShapes(self):
        assert normalizeTouchPoints([]).shape == (0, 2)
        assert normalizeTouchPoints([3.0, 4.0]).shape == (1, 2)
        with pytest.raises(ValueError):
            normalizeTouchPoints(np.zeros((2, 3)))

    def testFlipScreenY(self):
        np.testing.assert_array_equal(flipScreenY(10.0, 30.0, 100.0), [10.0, 70.0])

    def testStaticSource(self):
        source = StaticTouchSource([[1.0, 2.0]])
        np.testing.assert_array_equal(source.touchPoints(0.0), source.touchPoints(5.0))
        assert source.touchPoints(0.0).shape == (1, 2)

    def testOrbitingSource(self):
        source = OrbitingTouchSource(np.array([10.0, 10.0]), radius=2.0, period=4.0)
        np.testing.assert_allclose(source.touchPoints(0.0), [[12.0, 10.0]])
        np.testing.assert_allclose(source.touchPoints(1.0), [[10.0, 12.0]], atol=1e-12)
        np.testing.assert_allclose(source.touchPoints(4.0), [[12.0, 10.0]], atol=1e-12)

    def testOrbitRejectsBadPeriod(self):
        with pytest.raises(ValueError):
            OrbitingTouchSource(np.zeros(2), radius=1.0, period=0.0)


class TestFluidSession:

    def testFrameBeforeResizeRaises(self, fakeClock):
        session = FluidSession(particleCount=5, clock=fakeClock)
        assert session.fluid is None
        with pytest.raises(RuntimeError):
            session.frame()

    def testResizeBuildsFluidOverViewport(self, fakeClock, rng):
        session = FluidSession(particleCount=20, clock=fakeClock, rng=rng)
        fluid = session.resize(100, 80)
        assert fluid is session.fluid
        assert fluid.numParticles == 20
        np.testing.assert_array_equal(fluid.topLeft, [0.0, 0.0])
        np.testing.assert_array_equal(fluid.bottomRight, [100.0, 80.0])

        replacement = session.resize(50, 50)
        assert replacement is not fluid
        assert replacement.time == 0.0

    def testFrameRunsBankedSteps(self, fakeClock, rng):
        session = FluidSession(timestep=0.1, particleCount=20, clock=fakeClock, rng=rng)
        session.resize(100, 100)
        fakeClock.advance(0.35)
        assert session.frame(StaticTouchSource([[50.0, 50.0]])) == 3
        assert session.fluid.currentState.step == 3
        assert session.frame() == 0

    def testResizeResetsClockReference(self, fakeClock, rng):
        session = FluidSession(timestep=0.1, particleCount=10, clock=fakeClock, rng=rng)
        fakeClock.advance(10.0)
        session.resize(100, 100)
        assert session.frame() == 0

    def testCalibratesWhenNoCountGiven(self, rng):
        session = FluidSession(
            timestep=0.1,
            clock=FakeClock(),
            rng=rng,
            calibrationOptions={'maxParticles': 30},
        )
        assert session.calibrate() == 27
        assert session.resize(100, 100).numParticles == 27

    def testSessionFluidStaysFinite(self, fakeClock, rng):
        session = FluidSession(timestep=0.1, particleCount=30, clock=fakeClock, rng=rng)
        session.resize(200, 150)
        source = OrbitingTouchSource(np.array([100.0, 75.0]), radius=30.0)
        for _ in range(5):
            fakeClock.advance(0.15)
            session.frame(source)
        assert session.fluid.particles.isFinite()
        assert math.isfinite(session.fluid.currentState.kineticEnergy)

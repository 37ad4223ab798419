# -- SPH Kernel Tests -- #

'''
Tests for the SPH smoothing kernels.

Covers the closed-form values, compact support, non-negativity,
boundary continuity and the zero-distance guard of the Spiky
gradient.

Sean Bowman [02/11/2026]
'''

import math

import numpy as np
import pytest

from TouchFluid.sph.kernels import (
    Poly6Kernel,
    SpikyKernel,
    ViscosityKernel,
    TouchKernel,
    createKernels,
)
from TouchFluid.sph.errors import NumericFault, validateFinite


H = 2.0


class TestPoly6:

    def testValueAtOrigin(self):
        kernel = Poly6Kernel(H)
        expected = 315.0 / (64.0 * math.pi * H ** 9) * H ** 6
        assert kernel.evaluate(0.0) == pytest.approx(expected)

    @pytest.mark.parametrize("distanceSq", [H * H + 1e-9, 10.0, 1e6, -1.0])
    def testZeroOutsideSupport(self, distanceSq):
        assert Poly6Kernel(H).evaluate(distanceSq) == 0.0

    def testContinuousAtSupportBoundary(self):
        kernel = Poly6Kernel(H)
        assert kernel.evaluate(H * H) == 0.0
        assert kernel.evaluate(H * H - 1e-9) == pytest.approx(0.0, abs=1e-20)

    def testBatchMatchesScalarAndIsNonNegative(self):
        kernel = Poly6Kernel(H)
        distancesSq = np.linspace(-1.0, 10.0, 500)
        batch = kernel.evaluateBatch(distancesSq)
        scalar = np.array([kernel.evaluate(d) for d in distancesSq])
        assert np.all(batch >= 0.0)
        np.testing.assert_allclose(batch, scalar)

    def testMonotonicallyDecreasingInsideSupport(self):
        values = Poly6Kernel(H).evaluateBatch(np.linspace(0.0, H * H, 100))
        assert np.all(np.diff(values) <= 0.0)


class TestSpiky:

    def testValueAtOriginAndBoundary(self):
        kernel = SpikyKernel(H)
        assert kernel.evaluate(0.0) == pytest.approx(15.0 / (math.pi * H ** 6) * H ** 3)
        assert kernel.evaluate(H) == 0.0
        assert kernel.evaluate(H + 1e-9) == 0.0
        assert kernel.evaluate(H - 1e-6) == pytest.approx(0.0, abs=1e-15)

    def testBatchNonNegative(self):
        kernel = SpikyKernel(H)
        values = kernel.evaluateBatch(np.linspace(-1.0, 5.0, 300))
        assert np.all(values >= 0.0)
        assert np.all(values[np.linspace(-1.0, 5.0, 300) > H] == 0.0)

    def testGradientAtZeroDistanceIsZero(self):
        gradient = SpikyKernel(H, validate=True).gradient(np.array([0.0, 0.0]))
        assert np.all(np.isfinite(gradient))
        assert np.array_equal(gradient, np.zeros(2))

    def testGradientAtSupportRadiusIsZero(self):
        kernel = SpikyKernel(H)
        assert np.array_equal(kernel.gradient(np.array([H, 0.0])), np.zeros(2))
        assert np.array_equal(kernel.gradient(np.array([0.0, -H])), np.zeros(2))

    def testGradientBeyondSupportIsZero(self):
        assert np.array_equal(SpikyKernel(H).gradient(np.array([3.0, 3.0])), np.zeros(2))

    def testGradientValueAndDirection(self):
        kernel = SpikyKernel(H)
        gradient = kernel.gradient(np.array([1.0, 0.0]))
        expected = -45.0 / (math.pi * H ** 6) * (H - 1.0) ** 2
        assert gradient[0] == pytest.approx(expected)
        assert gradient[1] == 0.0
        # Points against the displacement
        assert gradient[0] < 0.0

    def testGradientBatchMatchesScalar(self):
        kernel = SpikyKernel(H)
        displacements = np.array([
            [0.0, 0.0], [0.5, 0.5], [1.0, -1.0], [H, 0.0], [3.0, 0.0], [-0.1, 0.2],
        ])
        batch = kernel.gradientBatch(displacements)
        scalar = np.array([kernel.gradient(d) for d in displacements])
        np.testing.assert_allclose(batch, scalar)
        assert np.all(np.isfinite(batch))


class TestViscosity:

    def testLinearInDistance(self):
        kernel = ViscosityKernel(H)
        atOrigin = kernel.laplacian(np.array([0.0, 0.0]))
        assert atOrigin == pytest.approx(45.0 / (math.pi * H ** 6) * H)
        assert kernel.laplacian(np.array([1.0, 0.0])) == pytest.approx(atOrigin / 2.0)

    def testZeroAtAndBeyondSupport(self):
        kernel = ViscosityKernel(H)
        assert kernel.laplacian(np.array([H, 0.0])) == 0.0
        assert kernel.laplacian(np.array([3.0, 0.0])) == 0.0

    def testBatchMatchesScalar(self):
        kernel = ViscosityKernel(H)
        displacements = np.array([[0.0, 0.0], [0.3, 0.4], [1.2, 1.6], [5.0, 0.0]])
        batch = kernel.laplacianBatch(displacements)
        scalar = np.array([kernel.laplacian(d) for d in displacements])
        np.testing.assert_allclose(batch, scalar)
        assert np.all(batch >= 0.0)


class TestTouch:

    def testGaussianFalloff(self):
        kernel = TouchKernel(10.0, sigma=0.2)
        assert kernel.evaluate(np.array([0.0, 0.0])) == pytest.approx(1.0)
        # |d| = sigma * h gives exp(-1/2)
        assert kernel.evaluate(np.array([2.0, 0.0])) == pytest.approx(math.exp(-0.5))

    def testZeroAtAndBeyondSupport(self):
        kernel = TouchKernel(10.0)
        assert kernel.evaluate(np.array([10.0, 0.0])) == 0.0
        assert kernel.evaluate(np.array([8.0, 8.0])) == 0.0

    def testBatchMatchesScalar(self):
        kernel = TouchKernel(10.0)
        displacements = np.array([[0.0, 0.0], [1.0, 1.0], [3.0, -4.0], [10.0, 0.0], [20.0, 0.0]])
        batch = kernel.evaluateBatch(displacements)
        scalar = np.array([kernel.evaluate(d) for d in displacements])
        np.testing.assert_allclose(batch, scalar)
        assert np.all(batch >= 0.0)

    def testRejectsNonPositiveSigma(self):
        with pytest.raises(ValueError):
            TouchKernel(10.0, sigma=0.0)


class TestConstruction:

    @pytest.mark.parametrize("kernelType", [Poly6Kernel, SpikyKernel, ViscosityKernel, TouchKernel])
    @pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
    def testRejectsInvalidSupportRadius(self, kernelType, radius):
        with pytest.raises(ValueError):
            kernelType(radius)

    def testRejectsRadiusThatOverflowsNormalization(self):
        with pytest.raises(ValueError):
            Poly6Kernel(1e40)

    def testCreateKernels(self):
        poly6, spiky, viscosity, touch = createKernels(2.0, 5.0, touchSigma=0.3)
        assert poly6.supportRadius == 2.0
        assert spiky.supportRadius == 2.0
        assert viscosity.supportRadius == 2.0
        assert touch.supportRadius == 5.0
        assert touch.sigma == 0.3


class TestValidation:

    def testValidateFinitePassesThrough(self):
        values = np.array([1.0, 2.0])
        assert validateFinite(values, 'values') is values
        assert validateFinite(3.0, 'value') == 3.0

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def testValidateFiniteRaises(self, bad):
        with pytest.raises(NumericFault):
            validateFinite(np.array([0.0, bad]), 'values')

    def testNumericFaultIsArithmeticError(self):
        assert issubclass(NumericFault, ArithmeticError)

    def testValidatingKernelRejectsNonFiniteOutput(self):
        kernel = SpikyKernel(H, validate=True)
        with pytest.raises(NumericFault):
            kernel.gradientBatch(np.array([[math.inf, 0.0]]))

'''
Tests for the SPH smoothing kernels.

Checks normalization, compact support, derivative consistency and
the per-substep scaling constants.
'''

import math

import numpy as np
import pytest

from FluidSim2D.sph.errors import InvalidArgument
from FluidSim2D.sph.kernels import (
    KernelFactors,
    Poly6Kernel,
    SpikyPow2Kernel,
    SpikyPow3Kernel,
)


allKernels = [Poly6Kernel(), SpikyPow3Kernel(), SpikyPow2Kernel()]


def integrateOverDisc(kernel, h, nSamples=20000):
    '''Midpoint rule for the integral of W over the disc of radius h.'''
    dr = h / nSamples
    r = (np.arange(nSamples) + 0.5) * dr
    return float(np.sum(kernel.evaluateBatch(r, h) * 2.0 * math.pi * r * dr))


class TestKernelValues:
    '''Closed-form values and support of each kernel.'''

    @pytest.mark.parametrize('kernel', allKernels)
    @pytest.mark.parametrize('h', [0.35, 1.0, 3.0])
    def testNormalizedOverDisc(self, kernel, h):
        assert integrateOverDisc(kernel, h) == pytest.approx(1.0, rel=1e-4)

    @pytest.mark.parametrize('kernel', allKernels)
    def testZeroBeyondSupport(self, kernel):
        h = 0.8
        assert kernel.evaluate(0.81, h) == 0.0
        assert kernel.derivative(2.0, h) == 0.0
        batch = kernel.evaluateBatch(np.array([0.9, 1.5, 10.0]), h)
        assert np.all(batch == 0.0)

    @pytest.mark.parametrize('kernel', allKernels)
    def testScalarMatchesBatch(self, kernel):
        h = 1.3
        distances = np.linspace(0.0, 1.5, 31)
        scalar = np.array([kernel.evaluate(r, h) for r in distances])
        scalarDerivative = np.array([kernel.derivative(r, h) for r in distances])
        np.testing.assert_allclose(kernel.evaluateBatch(distances, h), scalar, rtol=1e-12)
        np.testing.assert_allclose(kernel.derivativeBatch(distances, h), scalarDerivative, rtol=1e-12)

    @pytest.mark.parametrize('kernel', allKernels)
    def testDerivativeMatchesFiniteDifference(self, kernel):
        h = 2.0
        eps = 1e-6
        for r in (0.3, 0.9, 1.7):
            numeric = (kernel.evaluate(r + eps, h) - kernel.evaluate(r - eps, h)) / (2.0 * eps)
            assert kernel.derivative(r, h) == pytest.approx(numeric, rel=1e-5)

    def testClosedFormValues(self):
        h = 3.0
        assert Poly6Kernel().evaluate(1.0, h) == pytest.approx(4.0 / (math.pi * h ** 8) * 8.0 ** 3)
        assert SpikyPow3Kernel().evaluate(1.0, h) == pytest.approx(10.0 / (math.pi * h ** 5) * 8.0)
        assert SpikyPow2Kernel().evaluate(1.0, h) == pytest.approx(6.0 / (math.pi * h ** 4) * 4.0)
        assert SpikyPow3Kernel().derivative(1.0, h) == pytest.approx(-30.0 / (math.pi * h ** 5) * 4.0)
        assert SpikyPow2Kernel().derivative(1.0, h) == pytest.approx(-12.0 / (math.pi * h ** 4) * 2.0)

    def testPoly6SelfContribution(self):
        h = 0.5
        assert Poly6Kernel().evaluate(0.0, h) == pytest.approx(4.0 / (math.pi * h * h))


class TestKernelFactors:
    '''Per-substep scaling constants.'''

    def testConstantsFromRadius(self):
        h = 0.35
        factors = KernelFactors.fromRadius(h)
        assert factors.poly6 == pytest.approx(4.0 / (math.pi * h ** 8))
        assert factors.spikyPow3 == pytest.approx(10.0 / (math.pi * h ** 5))
        assert factors.spikyPow2 == pytest.approx(6.0 / (math.pi * h ** 4))
        assert factors.spikyPow3Derivative == pytest.approx(30.0 / (math.pi * h ** 5))
        assert factors.spikyPow2Derivative == pytest.approx(12.0 / (math.pi * h ** 4))

    def testBatchHelpersMatchKernels(self):
        h = 1.1
        factors = KernelFactors.fromRadius(h)
        distances = np.linspace(0.0, 1.4, 15)
        np.testing.assert_allclose(factors.densityBatch(distances), Poly6Kernel().evaluateBatch(distances, h))
        np.testing.assert_allclose(factors.nearDensityBatch(distances), SpikyPow2Kernel().evaluateBatch(distances, h))
        np.testing.assert_allclose(
            factors.pressureSlopeBatch(distances),
            -SpikyPow3Kernel().derivativeBatch(distances, h),
        )

    @pytest.mark.parametrize('h', [0.0, -1.0, float('nan'), float('inf')])
    def testInvalidRadiusRaises(self, h):
        with pytest.raises(InvalidArgument):
            KernelFactors.fromRadius(h)


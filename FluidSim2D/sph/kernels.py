# -- SPH Smoothing Kernels -- #

'''
Smoothing kernel functions for double-density relaxation SPH in 2D.

Three compactly supported kernels are used, all with support radius
equal to the smoothing radius h:

- Poly6:          W(r)  = k1 * (h^2 - r^2)^3,  k1 = 4 / (pi * h^8)
- Spiky (cubic):  S3(r) = k2 * (h - r)^3,      k2 = 10 / (pi * h^5)
- Spiky (square): S2(r) = k3 * (h - r)^2,      k3 = 6 / (pi * h^4)

with derivatives

    dS3/dr = -30 / (pi * h^5) * (h - r)^2
    dS2/dr = -12 / (pi * h^4) * (h - r)

Each normalization makes the kernel integrate to 1 over the 2D disc
of radius h. All kernels evaluate to zero for r > h.

References:
-----------
Muller et al. (2003) -- Particle-based fluid simulation for interactive
    applications
Clavet et al. (2005) -- Particle-based viscoelastic fluid simulation

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from FluidSim2D.sph.errors import requirePositive


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SphKernel(Protocol):
    '''Protocol for radial SPH smoothing kernels.'''

    def evaluate(self, r: float, h: float) -> float:
        '''
        Evaluate kernel W(r, h).

        Parameters:
        -----------
        r : float
            Distance between particles
        h : float
            Smoothing radius

        Returns:
        --------
        float : Kernel value
        '''
        ...

    def derivative(self, r: float, h: float) -> float:
        '''Evaluate dW/dr at distance r.'''
        ...

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Evaluate W for an array of distances.'''
        ...

    def derivativeBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''Evaluate dW/dr for an array of distances.'''
        ...


######################################################################
# -- Poly6 Kernel (Density) -- #
######################################################################

class Poly6Kernel:
    '''
    Poly6 density kernel.

    W(r) = 4 / (pi * h^8) * (h^2 - r^2)^3    for 0 <= r <= h

    Smooth at r = 0, so it is used for the density sum where the
    self-contribution W(0) = 4 / (pi * h^2) matters.
    '''

    @staticmethod
    def normalization(h: float) -> float:
        '''Scaling constant k1 = 4 / (pi * h^8).'''
        return 4.0 / (math.pi * h ** 8)

    @staticmethod
    def derivativeNormalization(h: float) -> float:
        '''Scaling constant of dW/dr = -24 / (pi * h^8) * r * (h^2 - r^2)^2.'''
        return 24.0 / (math.pi * h ** 8)

    @staticmethod
    def profile(distances: np.ndarray, h: float) -> np.ndarray:
        '''Unscaled shape (h^2 - r^2)^3, zero beyond h.'''
        v = np.maximum(h * h - distances * distances, 0.0)
        return v * v * v

    @staticmethod
    def slopeProfile(distances: np.ndarray, h: float) -> np.ndarray:
        '''Unscaled slope magnitude r * (h^2 - r^2)^2, zero beyond h.'''
        v = np.maximum(h * h - distances * distances, 0.0)
        return distances * v * v

    def evaluate(self, r: float, h: float) -> float:
        return float(self.evaluateBatch(np.float64(r), h))

    def derivative(self, r: float, h: float) -> float:
        return float(self.derivativeBatch(np.float64(r), h))

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate W(r, h) for an array of distances.

        Parameters:
        -----------
        distances : np.ndarray
            Array of distances, shape (M,)
        h : float
            Smoothing radius

        Returns:
        --------
        np.ndarray : Kernel values, shape (M,)
        '''
        return self.normalization(h) * self.profile(distances, h)

    def derivativeBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        return -self.derivativeNormalization(h) * self.slopeProfile(distances, h)


######################################################################
# -- Spiky Kernels (Pressure / Near Density) -- #
######################################################################

class SpikyPow3Kernel:
    '''
    Cubic spiky kernel used for the pressure gradient.

    S3(r)    = 10 / (pi * h^5) * (h - r)^3
    dS3/dr   = -30 / (pi * h^5) * (h - r)^2

    The gradient does not vanish as r -> 0, which keeps close
    particles apart (no clustering from a flat kernel centre).
    '''

    @staticmethod
    def normalization(h: float) -> float:
        '''Scaling constant k2 = 10 / (pi * h^5).'''
        return 10.0 / (math.pi * h ** 5)

    @staticmethod
    def derivativeNormalization(h: float) -> float:
        '''Magnitude of the derivative constant, 30 / (pi * h^5).'''
        return 30.0 / (math.pi * h ** 5)

    @staticmethod
    def profile(distances: np.ndarray, h: float) -> np.ndarray:
        v = np.maximum(h - distances, 0.0)
        return v * v * v

    @staticmethod
    def slopeProfile(distances: np.ndarray, h: float) -> np.ndarray:
        '''Unscaled slope magnitude (h - r)^2, zero beyond h.'''
        v = np.maximum(h - distances, 0.0)
        return v * v

    def evaluate(self, r: float, h: float) -> float:
        return float(self.evaluateBatch(np.float64(r), h))

    def derivative(self, r: float, h: float) -> float:
        return float(self.derivativeBatch(np.float64(r), h))

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        return self.normalization(h) * self.profile(distances, h)

    def derivativeBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        return -self.derivativeNormalization(h) * self.slopeProfile(distances, h)


class SpikyPow2Kernel:
    '''
    Quadratic spiky kernel used for near density and viscosity weights.

    S2(r)    = 6 / (pi * h^4) * (h - r)^2
    dS2/dr   = -12 / (pi * h^4) * (h - r)
    '''

    @staticmethod
    def normalization(h: float) -> float:
        '''Scaling constant k3 = 6 / (pi * h^4).'''
        return 6.0 / (math.pi * h ** 4)

    @staticmethod
    def derivativeNormalization(h: float) -> float:
        '''Magnitude of the derivative constant, 12 / (pi * h^4).'''
        return 12.0 / (math.pi * h ** 4)

    @staticmethod
    def profile(distances: np.ndarray, h: float) -> np.ndarray:
        v = np.maximum(h - distances, 0.0)
        return v * v

    @staticmethod
    def slopeProfile(distances: np.ndarray, h: float) -> np.ndarray:
        return np.maximum(h - distances, 0.0)

    def evaluate(self, r: float, h: float) -> float:
        return float(self.evaluateBatch(np.float64(r), h))

    def derivative(self, r: float, h: float) -> float:
        return float(self.derivativeBatch(np.float64(r), h))

    def evaluateBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        return self.normalization(h) * self.profile(distances, h)

    def derivativeBatch(self, distances: np.ndarray, h: float) -> np.ndarray:
        return -self.derivativeNormalization(h) * self.slopeProfile(distances, h)


######################################################################
# -- Per-Substep Scaling Factors -- #
######################################################################

@dataclass(frozen=True)
class KernelFactors:
    '''
    Kernel scaling constants derived from one smoothing radius.

    Re-derived at the start of every substep so the batch kernels
    below never recompute powers of h per pair. The kernel shapes
    come from the kernel classes above.

    Parameters:
    -----------
    smoothingRadius : float
        Smoothing radius h
    poly6 : float
        4 / (pi * h^8)
    spikyPow3 : float
        10 / (pi * h^5)
    spikyPow2 : float
        6 / (pi * h^4)
    spikyPow3Derivative : float
        30 / (pi * h^5)
    spikyPow2Derivative : float
        12 / (pi * h^4)
    '''

    smoothingRadius: float
    poly6: float
    spikyPow3: float
    spikyPow2: float
    spikyPow3Derivative: float
    spikyPow2Derivative: float

    @classmethod
    def fromRadius(cls, h: float) -> KernelFactors:
        '''
        Derive all scaling constants for smoothing radius h.

        Raises:
        -------
        InvalidArgument : If h is not a positive finite number
        '''
        requirePositive('smoothingRadius', h)
        return cls(
            smoothingRadius=h,
            poly6=Poly6Kernel.normalization(h),
            spikyPow3=SpikyPow3Kernel.normalization(h),
            spikyPow2=SpikyPow2Kernel.normalization(h),
            spikyPow3Derivative=SpikyPow3Kernel.derivativeNormalization(h),
            spikyPow2Derivative=SpikyPow2Kernel.derivativeNormalization(h),
        )

    def densityBatch(self, distances: np.ndarray) -> np.ndarray:
        '''Poly6 W(r) for each distance.'''
        return self.poly6 * Poly6Kernel.profile(distances, self.smoothingRadius)

    def nearDensityBatch(self, distances: np.ndarray) -> np.ndarray:
        '''Quadratic spiky S2(r) for each distance.'''
        return self.spikyPow2 * SpikyPow2Kernel.profile(distances, self.smoothingRadius)

    def pressureSlopeBatch(self, distances: np.ndarray) -> np.ndarray:
        '''|dS3/dr| for each distance (the derivative itself is <= 0).'''
        return self.spikyPow3Derivative * SpikyPow3Kernel.slopeProfile(distances, self.smoothingRadius)

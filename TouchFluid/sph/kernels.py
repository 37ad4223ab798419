# -- SPH Smoothing Kernels -- #

'''
Smoothing kernel functions for the interactive SPH fluid.

Implements the kernel family of Muller et al. (2003) in 2D:
- Poly6: density estimation (smooth, no singularity at r = 0)
- Spiky: pressure gradient (non-vanishing gradient near r = 0)
- Viscosity: laplacian used by the viscosity force
- Touch: Gaussian falloff of the external touch force

Every kernel is built once with a support radius h and caches the
powers of h it needs. Outside the support radius every kernel
returns exactly zero; no kernel has a negative lobe.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-based fluid simulation
    for interactive applications

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

import math

import numpy as np

from TouchFluid import constants as const
from TouchFluid.sph.errors import validateFinite


######################################################################
# -- Kernel Base -- #
######################################################################

class _KernelBase:
    '''
    Shared construction for all kernels.

    Parameters:
    -----------
    supportRadius : float
        Support radius h (> 0)
    validate : bool
        If True, every output is checked for NaN/Inf
    '''

    def __init__(self, supportRadius: float, validate: bool = False) -> None:
        if not (math.isfinite(supportRadius) and supportRadius > 0.0):
            raise ValueError(f'Support radius must be positive and finite, got {supportRadius}')
        self._support = float(supportRadius)
        self._support2 = self._support ** 2
        self._validate = validate

    @property
    def supportRadius(self) -> float:
        '''Support radius h.'''
        return self._support

    def _normalization(self, numerator: float, power: int) -> float:
        '''numerator / (pi * h^power), rejecting radii that under/overflow.'''
        try:
            denominator = math.pi * self._support ** power
        except OverflowError:
            denominator = math.inf
        if denominator == 0.0 or not math.isfinite(denominator):
            raise ValueError(f'Support radius {self._support} is out of range for h^{power}')
        return numerator / denominator

    def _checked(self, value, what: str):
        if self._validate:
            validateFinite(value, f'{type(self).__name__} {what}')
        return value


######################################################################
# -- Poly6 Kernel (Density) -- #
######################################################################

class Poly6Kernel(_KernelBase):
    '''
    Poly6 kernel, evaluated on squared distance.

    W(r2) = 315 / (64 * pi * h^9) * (h^2 - r2)^3    for 0 <= r2 <= h^2
    '''

    def __init__(self, supportRadius: float, validate: bool = False) -> None:
        super().__init__(supportRadius, validate)
        self._coefficient = self._normalization(315.0 / 64.0, 9)

    def evaluate(self, distanceSq: float) -> float:
        '''
        Evaluate W for a squared distance.

        Parameters:
        -----------
        distanceSq : float
            Squared distance r^2

        Returns:
        --------
        float : Kernel value
        '''
        if 0.0 <= distanceSq <= self._support2:
            diff = self._support2 - distanceSq
            return self._checked(self._coefficient * diff * diff * diff, 'value')
        return 0.0

    def evaluateBatch(self, distancesSq: np.ndarray) -> np.ndarray:
        '''Evaluate W for an array of squared distances, shape (N,).'''
        distancesSq = np.asarray(distancesSq, dtype=float)
        inside = (distancesSq >= 0.0) & (distancesSq <= self._support2)
        diff = np.where(inside, self._support2 - distancesSq, 0.0)
        return self._checked(self._coefficient * diff * diff * diff, 'value')


######################################################################
# -- Spiky Kernel (Pressure) -- #
######################################################################

class SpikyKernel(_KernelBase):
    '''
    Spiky kernel and its gradient.

    W(r) = 15 / (pi * h^6) * (h - r)^3                   for 0 <= r <= h
    grad_W(d) = d * (-45 / (pi * h^6) * (h - r)^2 / r)   for 0 < r <= h

    The gradient is defined as the zero vector at r = 0 so coincident
    particles never divide by zero.
    '''

    def __init__(self, supportRadius: float, validate: bool = False) -> None:
        super().__init__(supportRadius, validate)
        self._valueCoefficient = self._normalization(15.0, 6)
        self._gradientCoefficient = self._normalization(-45.0, 6)

    def evaluate(self, distance: float) -> float:
        '''Evaluate W for a distance r.'''
        if 0.0 <= distance <= self._support:
            diff = self._support - distance
            return self._checked(self._valueCoefficient * diff * diff * diff, 'value')
        return 0.0

    def evaluateBatch(self, distances: np.ndarray) -> np.ndarray:
        '''Evaluate W for an array of distances, shape (N,).'''
        distances = np.asarray(distances, dtype=float)
        inside = (distances >= 0.0) & (distances <= self._support)
        diff = np.where(inside, self._support - distances, 0.0)
        return self._checked(self._valueCoefficient * diff * diff * diff, 'value')

    def gradient(self, displacement: np.ndarray) -> np.ndarray:
        '''
        Evaluate the kernel gradient for one displacement vector.

        Parameters:
        -----------
        displacement : np.ndarray
            Vector r_i - r_j, shape (2,)

        Returns:
        --------
        np.ndarray : Gradient vector, shape (2,)
        '''
        displacement = np.asarray(displacement, dtype=float)
        r = math.hypot(displacement[0], displacement[1])
        if 0.0 < r <= self._support:
            diff = self._support - r
            scale = self._gradientCoefficient * diff * diff / r
            return self._checked(displacement * scale, 'gradient')
        return np.zeros(2)

    def gradientBatch(self, displacements: np.ndarray) -> np.ndarray:
        '''
        Evaluate kernel gradients for an array of displacements.

        Parameters:
        -----------
        displacements : np.ndarray
            Vectors r_i - r_j, shape (N, 2)

        Returns:
        --------
        np.ndarray : Gradient vectors, shape (N, 2)
        '''
        displacements = np.asarray(displacements, dtype=float).reshape(-1, 2)
        r = np.linalg.norm(displacements, axis=1)
        inside = (r > 0.0) & (r <= self._support)

        # Zero-distance pairs get a dummy divisor and are masked out
        safeR = np.where(inside, r, 1.0)
        diff = np.where(inside, self._support - r, 0.0)
        scale = self._gradientCoefficient * diff * diff / safeR
        return self._checked(displacements * scale[:, np.newaxis], 'gradient')


######################################################################
# -- Viscosity Kernel -- #
######################################################################

class ViscosityKernel(_KernelBase):
    '''
    Viscosity kernel laplacian.

    lap_W(d) = 45 / (pi * h^6) * (h - |d|)    for 0 <= |d| <= h

    Linear in |d|; this is the form the fluid's viscosity force is
    tuned against.
    '''

    def __init__(self, supportRadius: float, validate: bool = False) -> None:
        super().__init__(supportRadius, validate)
        self._coefficient = self._normalization(45.0, 6)

    def laplacian(self, displacement: np.ndarray) -> float:
        '''Evaluate the laplacian for one displacement vector, shape (2,).'''
        r = math.hypot(displacement[0], displacement[1])
        if r <= self._support:
            return self._checked(self._coefficient * (self._support - r), 'laplacian')
        return 0.0

    def laplacianBatch(self, displacements: np.ndarray) -> np.ndarray:
        '''Evaluate the laplacian for displacements of shape (N, 2).'''
        displacements = np.asarray(displacements, dtype=float).reshape(-1, 2)
        r = np.linalg.norm(displacements, axis=1)
        diff = np.where(r <= self._support, self._support - r, 0.0)
        return self._checked(self._coefficient * diff, 'laplacian')


######################################################################
# -- Touch Kernel -- #
######################################################################

class TouchKernel(_KernelBase):
    '''
    Gaussian falloff of the touch interaction force.

    T(d) = exp(-(|d| / h)^2 / (2 * sigma^2))    for |d|^2 < h^2

    Parameters:
    -----------
    supportRadius : float
        Touch support radius h
    sigma : float
        Gaussian width as a fraction of h (default 0.2)
    validate : bool
        If True, every output is checked for NaN/Inf
    '''

    def __init__(
        self,
        supportRadius: float,
        sigma: float = const.touchSigma,
        validate: bool = False,
    ) -> None:
        super().__init__(supportRadius, validate)
        if sigma <= 0.0:
            raise ValueError(f'Touch sigma must be positive, got {sigma}')
        self._sigma = sigma
        self._twoSigma2 = 2.0 * sigma * sigma

    @property
    def sigma(self) -> float:
        '''Gaussian width as a fraction of the support radius.'''
        return self._sigma

    def evaluate(self, displacement: np.ndarray) -> float:
        '''Evaluate the falloff for one displacement vector, shape (2,).'''
        distanceSq = float(displacement[0] ** 2 + displacement[1] ** 2)
        if distanceSq < self._support2:
            qSq = distanceSq / self._support2
            return self._checked(math.exp(-qSq / self._twoSigma2), 'value')
        return 0.0

    def evaluateBatch(self, displacements: np.ndarray) -> np.ndarray:
        '''Evaluate the falloff for displacements of shape (N, 2).'''
        displacements = np.asarray(displacements, dtype=float).reshape(-1, 2)
        distancesSq = np.sum(displacements * displacements, axis=1)
        inside = distancesSq < self._support2
        values = np.exp(-(distancesSq / self._support2) / self._twoSigma2)
        return self._checked(np.where(inside, values, 0.0), 'value')


######################################################################
# -- Kernel Set -- #
######################################################################

def createKernels(
    supportRadius: float,
    touchSupportRadius: float,
    touchSigma: float = const.touchSigma,
    validate: bool = False,
) -> tuple[Poly6Kernel, SpikyKernel, ViscosityKernel, TouchKernel]:
    '''
    Create the four kernels used by a fluid.

    Parameters:
    -----------
    supportRadius : float
        Support radius of the Poly6, Spiky and Viscosity kernels
    touchSupportRadius : float
        Support radius of the touch kernel
    touchSigma : float
        Gaussian width of the touch kernel
    validate : bool
        Enable NaN/Inf checks on kernel outputs

    Returns:
    --------
    tuple : (poly6, spiky, viscosity, touch)
    '''
    return (
        Poly6Kernel(supportRadius, validate=validate),
        SpikyKernel(supportRadius, validate=validate),
        ViscosityKernel(supportRadius, validate=validate),
        TouchKernel(touchSupportRadius, sigma=touchSigma, validate=validate),
    )

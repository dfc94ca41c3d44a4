# -- SPH Time Integration -- #

'''
Semi-implicit (symplectic) Euler updates split across the substep.

The velocity is kicked twice per substep (external forces first,
then pressure and viscosity) and the position drifts once at the
end with the fully updated velocity:

    v  += a_ext * dt                 (kick, stage 1)
    x* =  x + v * dt                 (prediction, stage 1)
    v  += a_sph * dt                 (kick, stage 5)
    x  += v * dt                     (drift, stage 6)

The predicted position x* is only used to find neighbors and
evaluate forces; it never replaces x.

References:
-----------
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for the per-stage integration updates.'''

    def kick(self, velocities: np.ndarray, accelerations: np.ndarray, dt: float) -> np.ndarray:
        '''Return velocities advanced by accelerations over dt.'''
        ...

    def predict(self, positions: np.ndarray, velocities: np.ndarray, dt: float) -> np.ndarray:
        '''Return positions extrapolated along velocities over dt.'''
        ...

    def drift(self, positions: np.ndarray, velocities: np.ndarray, dt: float) -> np.ndarray:
        '''Return positions advanced by velocities over dt.'''
        ...


######################################################################
# -- Symplectic Euler Integrator -- #
######################################################################

class SymplecticEuler:
    '''
    Symplectic (semi-implicit) Euler integrator.

    Each update returns a new array instead of writing in place, so
    a stage can finish computing all particles before anything it
    reads is replaced.
    '''

    def kick(self, velocities: np.ndarray, accelerations: np.ndarray, dt: float) -> np.ndarray:
        return velocities + accelerations * dt

    def predict(self, positions: np.ndarray, velocities: np.ndarray, dt: float) -> np.ndarray:
        return positions + velocities * dt

    def drift(self, positions: np.ndarray, velocities: np.ndarray, dt: float) -> np.ndarray:
        '''
        Advance positions with the (already kicked) velocities.

        Using the updated velocity here is what makes the scheme
        symplectic.
        '''
        return positions + velocities * dt

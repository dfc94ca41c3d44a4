# -- SPH Particle State Store -- #

'''
Dataclass holding the per-particle arrays of the fluid.

Stores positions, predicted positions, velocities and the
(density, near density) pairs as contiguous NumPy arrays for
vectorized stage computations. The particle count is fixed when
the store is initialized; no particle is ever added or removed.

Only the stage pipeline writes these arrays. Everything else reads
them through the non-writeable views returned by readPositions()
and readVelocities().

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from FluidSim2D.sph.errors import InvalidArgument, requireFinite


def _readOnly(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


@dataclass
class ParticleState:
    '''
    Particle arrays of the fluid.

    Vector quantities have shape (N, 2). densities has shape (N, 2)
    with the density in column 0 and the near density in column 1.

    Parameters:
    -----------
    positions : np.ndarray
        Authoritative particle positions, shape (N, 2)
    predictedPositions : np.ndarray
        Positions advanced by the current velocity, used for the
        neighbor search of the current substep, shape (N, 2)
    velocities : np.ndarray
        Particle velocities, shape (N, 2)
    densities : np.ndarray
        (density, near density) per particle, shape (N, 2)
    '''

    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    predictedPositions: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    velocities: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    densities: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self.positions.shape[0]

    def initialize(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        '''
        Allocate (or overwrite) all four arrays from spawn data.

        Predicted positions start equal to the positions and the
        densities are zeroed. The inputs are copied, never aliased.

        Parameters:
        -----------
        positions : np.ndarray
            Initial positions, shape (N, 2)
        velocities : np.ndarray
            Initial velocities, shape (N, 2)

        Raises:
        -------
        InvalidArgument : If shapes are not (N, 2) or lengths differ
        '''
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)

        for name, array in (('positions', positions), ('velocities', velocities)):
            if array.ndim != 2 or array.shape[1] != 2:
                raise InvalidArgument(f'{name} must have shape (N, 2), got {array.shape}')
        if len(positions) != len(velocities):
            raise InvalidArgument(
                f'positions and velocities differ in length: '
                f'{len(positions)} != {len(velocities)}'
            )
        requireFinite('positions', positions)
        requireFinite('velocities', velocities)

        nParticles = len(positions)
        self.positions = positions
        self.predictedPositions = positions.copy()
        self.velocities = velocities
        self.densities = np.zeros((nParticles, 2))

    def readPositions(self) -> np.ndarray:
        '''Read-only view of the positions.'''
        return _readOnly(self.positions)

    def readVelocities(self) -> np.ndarray:
        '''Read-only view of the velocities.'''
        return _readOnly(self.velocities)

    def kineticEnergy(self) -> float:
        '''
        Kinetic energy per unit particle mass.

        KE = (1/2) * sum_i |v_i|^2

        Returns:
        --------
        float : Kinetic energy
        '''
        return 0.5 * float(np.sum(self.velocities * self.velocities))

    def maxSpeed(self) -> float:
        '''Maximum velocity magnitude (0 for an empty store).'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    def centroid(self) -> np.ndarray:
        '''Mean particle position (origin for an empty store).'''
        if self.nParticles == 0:
            return np.zeros(2)
        return self.positions.mean(axis=0)

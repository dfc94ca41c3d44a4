# -- SPH Boundary Conditions -- #

'''
Collision response against the bounds box and a static obstacle.

The fluid lives inside an axis-aligned box centered on the origin.
A particle that crosses a wall is clamped back onto the
wall and the velocity component normal to that wall is reflected
and scaled by the restitution coefficient. Each axis is handled
independently, so a particle in a corner reflects on both axes.
A particle resting exactly on a wall has not crossed it and is left
alone.

The obstacle is an axis-aligned solid rectangle. A particle found
inside it is pushed out through the nearest face (the axis with the
smallest penetration depth) and the matching velocity component is
reflected the same way as for the walls.

The obstacle is resolved first and the bounds last, so every
particle ends the substep inside the bounds box even when the
obstacle overlaps a wall.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np


class BoundaryHandler:
    '''
    Reflect-and-clamp collision response for bounds and obstacle.

    Parameters:
    -----------
    boundsSize : np.ndarray
        Full width and height of the bounds box centered on the origin
    obstacleSize : np.ndarray
        Full width and height of the obstacle (zero disables it)
    obstacleCentre : np.ndarray
        Centre of the obstacle
    restitutionCoefficient : float
        Fraction of normal velocity kept after a collision, in [0, 1]
    '''

    def __init__(
        self,
        boundsSize: np.ndarray,
        obstacleSize: np.ndarray,
        obstacleCentre: np.ndarray,
        restitutionCoefficient: float,
    ) -> None:
        self._halfBounds = 0.5 * np.asarray(boundsSize, dtype=np.float64)
        self._halfObstacle = 0.5 * np.asarray(obstacleSize, dtype=np.float64)
        self._obstacleCentre = np.asarray(obstacleCentre, dtype=np.float64)
        self._restitution = restitutionCoefficient

    @property
    def hasObstacle(self) -> bool:
        '''True when the obstacle has a positive area.'''
        return bool(np.all(self._halfObstacle > 0.0))

    def enforceBoundary(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray]:
        '''
        Resolve collisions for all particles.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions after the drift, shape (N, 2)
        velocities : np.ndarray
            Particle velocities, shape (N, 2)

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (positions, velocities) resolved copies
        '''
        positions = positions.copy()
        velocities = velocities.copy()

        if self.hasObstacle:
            self._resolveObstacle(positions, velocities)
        self._resolveBounds(positions, velocities)

        return (positions, velocities)

    def _resolveBounds(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        '''Clamp onto the walls and reflect on every penetrated axis.'''
        edgeDistance = self._halfBounds - np.abs(positions)
        hit = edgeDistance < 0.0

        # Sign of 0 is 0; a particle exactly at the centre cannot hit a wall
        clamped = self._halfBounds * np.sign(positions)
        positions[hit] = clamped[hit]
        velocities[hit] *= -self._restitution

    def _resolveObstacle(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        '''Push particles inside the obstacle out through the nearest face.'''
        offset = positions - self._obstacleCentre
        edgeDistance = self._halfObstacle - np.abs(offset)
        inside = np.all(edgeDistance > 0.0, axis=1)
        if not np.any(inside):
            return

        # Exit through x when the x penetration is the shallower one
        exitX = edgeDistance[:, 0] < edgeDistance[:, 1]
        axis = np.where(exitX, 0, 1)

        rows = np.nonzero(inside)[0]
        cols = axis[rows]
        side = np.where(offset[rows, cols] >= 0.0, 1.0, -1.0)
        positions[rows, cols] = self._obstacleCentre[cols] + side * self._halfObstacle[cols]
        velocities[rows, cols] *= -self._restitution

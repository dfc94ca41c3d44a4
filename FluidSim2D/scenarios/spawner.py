# -- Particle Spawner Scenario -- #

'''
Deterministic initial conditions for the 2D fluid.

Particles are scattered uniformly at random over a rectangular spawn
region. Every particle gets the same initial velocity plus a random
jitter: a unit vector at a uniformly drawn angle, scaled by
jitterIntensity * (u - 0.5) for a uniform draw u.

Four uniform draws are taken per particle, in this order:
    x position, y position, jitter angle, jitter magnitude
from a NumPy generator seeded with the configured seed, so the same
inputs always give bit-identical arrays.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import dataclasses
import json
import math
from dataclasses import dataclass, field

import numpy as np

from FluidSim2D import constants as const
from FluidSim2D.sph.errors import InvalidArgument, requireFinite, requireInteger


######################################################################
# -- Spawn Data -- #
######################################################################

@dataclass
class ParticleSpawnData:
    '''
    Initial particle positions and velocities.

    Parameters:
    -----------
    positions : np.ndarray
        Initial positions, shape (N, 2)
    velocities : np.ndarray
        Initial velocities, shape (N, 2)
    '''

    positions: np.ndarray
    velocities: np.ndarray

    @property
    def nParticles(self) -> int:
        '''Number of spawned particles.'''
        return self.positions.shape[0]

    def copy(self) -> ParticleSpawnData:
        '''Deep copy of the arrays.'''
        return ParticleSpawnData(
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
        )


######################################################################
# -- Spawn Configuration -- #
######################################################################

@dataclass
class SpawnConfig:
    '''
    Configuration of the spawn region.

    Parameters:
    -----------
    count : int
        Number of particles
    center : np.ndarray
        Centre of the spawn rectangle
    size : np.ndarray
        Full width and height of the spawn rectangle
    initialSpeed : np.ndarray
        Velocity shared by all particles before jitter
    jitterIntensity : float
        Scale of the random velocity jitter
    seed : int
        Seed of the random stream
    '''

    count: int = const.spawnCount
    center: np.ndarray = field(default_factory=lambda: np.array(const.spawnCenter))
    size: np.ndarray = field(default_factory=lambda: np.array(const.spawnSize))
    initialSpeed: np.ndarray = field(default_factory=lambda: np.array(const.spawnInitialSpeed))
    jitterIntensity: float = const.spawnJitterIntensity
    seed: int = const.spawnSeed

    @classmethod
    def small(cls) -> SpawnConfig:
        '''
        Small block for quick runs.

        ~400 particles, runs in seconds.
        '''
        return cls(count=400, size=np.array([4.0, 4.0]))

    @classmethod
    def standard(cls) -> SpawnConfig:
        '''Standard block of ~2000 particles.'''
        return cls(count=2000, size=np.array([8.0, 7.0]))

    @classmethod
    def obstacleCourse(cls) -> SpawnConfig:
        '''Block dropped from above the centre with a sideways push.'''
        return cls(
            count=1200,
            center=np.array([0.0, 2.0]),
            size=np.array([6.0, 4.0]),
            initialSpeed=np.array([1.5, 0.0]),
            jitterIntensity=0.5,
        )

    @classmethod
    def fromDict(cls, section: dict) -> SpawnConfig:
        '''
        Build a spawn configuration from a dict of options.

        Raises:
        -------
        InvalidArgument : If an option name is not recognized or a
            whole-number option has a fractional value
        '''
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise InvalidArgument(f'Unknown spawn options: {", ".join(unknown)}')

        values = dict(section)
        for name in ('count', 'seed'):
            if name in values:
                values[name] = requireInteger(name, values[name])
        for name in ('center', 'size', 'initialSpeed'):
            if name in values:
                values[name] = np.array(values[name], dtype=np.float64)
        return cls(**values)

    @classmethod
    def fromJson(cls, configPath: str) -> SpawnConfig:
        '''Load the 'spawn' section of a JSON configuration file.'''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data.get('spawn', {}))


######################################################################
# -- Spawn Generation -- #
######################################################################

def generateSpawnData(
    count: int,
    center: np.ndarray,
    size: np.ndarray,
    initialSpeed: np.ndarray,
    jitterIntensity: float,
    seed: int = const.spawnSeed,
) -> ParticleSpawnData:
    '''
    Scatter particles over a rectangle with jittered velocities.

    position_i = center + (u0 - 0.5) * size        (per component)
    angle_i    = u2 * 2 * pi
    velocity_i = initialSpeed + (cos, sin)(angle_i) * jitterIntensity * (u3 - 0.5)

    Parameters:
    -----------
    count : int
        Number of particles (>= 0)
    center : np.ndarray
        Centre of the spawn rectangle
    size : np.ndarray
        Full width and height of the spawn rectangle
    initialSpeed : np.ndarray
        Shared initial velocity
    jitterIntensity : float
        Scale of the velocity jitter
    seed : int
        Seed of the random stream

    Returns:
    --------
    ParticleSpawnData : Positions and velocities, shape (count, 2) each

    Raises:
    -------
    InvalidArgument : If count is negative or an input is not finite
    '''
    if int(count) != count or count < 0:
        raise InvalidArgument(f'count must be a non-negative integer, got {count}')

    center = np.asarray(center, dtype=np.float64)
    size = np.asarray(size, dtype=np.float64)
    initialSpeed = np.asarray(initialSpeed, dtype=np.float64)
    for name, value in (('center', center), ('size', size),
                        ('initialSpeed', initialSpeed), ('jitterIntensity', jitterIntensity)):
        requireFinite(name, value)

    rng = np.random.default_rng(seed)

    # Row-major draws: the stream order matches a per-particle loop
    draws = rng.random((int(count), 4))

    positions = center + (draws[:, 0:2] - 0.5) * size

    angles = draws[:, 2] * 2.0 * math.pi
    directions = np.column_stack([np.cos(angles), np.sin(angles)])
    jitter = directions * (jitterIntensity * (draws[:, 3] - 0.5))[:, np.newaxis]
    velocities = initialSpeed + jitter

    return ParticleSpawnData(positions=positions, velocities=velocities)


class ParticleSpawner:
    '''
    Spawn data source driven by a SpawnConfig.

    Parameters:
    -----------
    config : SpawnConfig
        Spawn region configuration
    '''

    def __init__(self, config: SpawnConfig | None = None) -> None:
        self._config = config or SpawnConfig()

    @property
    def config(self) -> SpawnConfig:
        '''Spawn configuration.'''
        return self._config

    def getSpawnData(self) -> ParticleSpawnData:
        '''Generate the spawn data for the configured region.'''
        c = self._config
        return generateSpawnData(
            count=c.count,
            center=c.center,
            size=c.size,
            initialSpeed=c.initialSpeed,
            jitterIntensity=c.jitterIntensity,
            seed=c.seed,
        )

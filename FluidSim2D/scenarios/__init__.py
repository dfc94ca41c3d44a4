# -- Simulation Scenarios Package -- #

'''
Initial conditions for the fluid simulation.

Each scenario provides a deterministic particle layout (positions
and velocities) from a seeded random stream.

Sean Bowman [10/19/2026]
'''

from FluidSim2D.scenarios.spawner import (
    ParticleSpawnData,
    ParticleSpawner,
    SpawnConfig,
    generateSpawnData,
)

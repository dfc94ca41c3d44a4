# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides kernel functions, the particle state store, the spatial
hash and key-bucketed sort, boundary handling, time integration and
the six-stage substep pipeline.

Sean Bowman [10/19/2026]
'''

from FluidSim2D.sph.errors import InvalidArgument
from FluidSim2D.sph.protocols import SimulationConfig, SimulationParams, SimulationState
from FluidSim2D.sph.kernels import Poly6Kernel, SpikyPow3Kernel, SpikyPow2Kernel, KernelFactors
from FluidSim2D.sph.particles import ParticleState
from FluidSim2D.sph.spatialHash import SpatialHashGrid, bruteForceNeighbors
from FluidSim2D.sph.parallelSort import sortAndOffsets
from FluidSim2D.sph.pipeline import SimulationPipeline

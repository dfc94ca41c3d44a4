# -- FluidSim2D Package -- #

'''
2D fluid simulation using Smoothed Particle Hydrodynamics (SPH)
with double-density relaxation.

Spatial hashing, key-bucketed sorting, density / pressure /
viscosity stages and collision response, driven one frame at a
time by an embedding application or the headless runner.

Sean Bowman [10/19/2026]
'''

__version__ = '0.1.0'

from FluidSim2D.simulation import FluidSimulation
from FluidSim2D.runner import FluidSimRunner
from FluidSim2D.scenarios.spawner import SpawnConfig
from FluidSim2D.export.frameExporter import FrameExporter

'''Pytest configuration and shared fixtures for the FluidSim2D tests.'''

import dataclasses

import numpy as np
import pytest

from FluidSim2D.sph.protocols import SimulationParams
from FluidSim2D.scenarios.spawner import generateSpawnData


@pytest.fixture
def quietParams():
    '''Parameters with no gravity, no obstacle and no interaction.'''
    return SimulationParams(
        gravity=0.0,
        restitutionCoefficient=1.0,
        smoothingRadius=0.5,
        targetDensity=5.0,
        pressureMultiplier=50.0,
        nearPressureMultiplier=2.0,
        viscosityStrength=0.1,
        boundsSize=(20.0, 20.0),
        obstacleSize=(0.0, 0.0),
        obstacleCentre=(0.0, 0.0),
        interactionStrength=0.0,
        deltaTime=1.0 / 120.0,
    )


@pytest.fixture
def fluidParams(quietParams):
    '''Water-like parameters in a small box with gravity.'''
    return dataclasses.replace(
        quietParams,
        gravity=-10.0,
        restitutionCoefficient=0.9,
        boundsSize=(6.0, 4.0),
    )


@pytest.fixture
def blockSpawn():
    '''Seeded block of 300 particles with jittered velocities.'''
    return generateSpawnData(
        count=300,
        center=np.array([0.0, 0.5]),
        size=np.array([3.0, 2.0]),
        initialSpeed=np.array([0.5, 0.0]),
        jitterIntensity=1.0,
        seed=7,
    )

'''Tests for the particle state store.'''

import numpy as np
import pytest

from FluidSim2D.sph.errors import InvalidArgument
from FluidSim2D.sph.particles import ParticleState


class TestInitialize:

    def testArraysAreCopied(self):
        positions = np.array([[0.0, 1.0], [2.0, 3.0]])
        velocities = np.array([[1.0, 0.0], [0.0, -1.0]])
        state = ParticleState()
        state.initialize(positions, velocities)

        positions[0, 0] = 99.0
        velocities[1, 1] = 99.0
        assert state.positions[0, 0] == 0.0
        assert state.velocities[1, 1] == -1.0

    def testPredictedStartsAtPositions(self):
        state = ParticleState()
        state.initialize(np.array([[0.5, 0.5]]), np.zeros((1, 2)))
        assert np.array_equal(state.predictedPositions, state.positions)
        assert state.predictedPositions is not state.positions

    def testDensitiesZeroed(self):
        state = ParticleState()
        state.initialize(np.zeros((4, 2)), np.zeros((4, 2)))
        assert state.densities.shape == (4, 2)
        assert np.all(state.densities == 0.0)
        assert state.nParticles == 4

    def testLengthMismatchRaises(self):
        with pytest.raises(InvalidArgument):
            ParticleState().initialize(np.zeros((3, 2)), np.zeros((2, 2)))

    def testWrongShapeRaises(self):
        with pytest.raises(InvalidArgument):
            ParticleState().initialize(np.zeros((3, 3)), np.zeros((3, 3)))

    def testNonFiniteRaises(self):
        with pytest.raises(InvalidArgument):
            ParticleState().initialize(np.array([[np.nan, 0.0]]), np.zeros((1, 2)))


class TestReadout:

    def testViewsAreReadOnly(self):
        state = ParticleState()
        state.initialize(np.zeros((2, 2)), np.zeros((2, 2)))
        with pytest.raises(ValueError):
            state.readPositions()[0, 0] = 1.0
        with pytest.raises(ValueError):
            state.readVelocities()[0, 0] = 1.0

    def testViewsTrackTheStore(self):
        state = ParticleState()
        state.initialize(np.zeros((2, 2)), np.zeros((2, 2)))
        view = state.readPositions()
        state.positions[1, 0] = 4.0
        assert view[1, 0] == 4.0

    def testDiagnostics(self):
        state = ParticleState()
        state.initialize(
            np.array([[0.0, 0.0], [2.0, 4.0]]),
            np.array([[3.0, 4.0], [0.0, 1.0]]),
        )
        assert state.kineticEnergy() == pytest.approx(0.5 * (25.0 + 1.0))
        assert state.maxSpeed() == pytest.approx(5.0)
        assert np.allclose(state.centroid(), [1.0, 2.0])

    def testEmptyDiagnostics(self):
        state = ParticleState()
        assert state.nParticles == 0
        assert state.kineticEnergy() == 0.0
        assert state.maxSpeed() == 0.0
        assert np.array_equal(state.centroid(), [0.0, 0.0])

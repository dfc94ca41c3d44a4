'''Tests for deterministic particle spawning.'''

import json
import math

import numpy as np
import pytest

from FluidSim2D.sph.errors import InvalidArgument
from FluidSim2D.scenarios.spawner import (
    ParticleSpawner,
    SpawnConfig,
    generateSpawnData,
)


def spawn(**overrides):
    kwargs = dict(
        count=500,
        center=np.array([1.0, -2.0]),
        size=np.array([4.0, 3.0]),
        initialSpeed=np.array([0.5, 0.25]),
        jitterIntensity=0.8,
        seed=42,
    )
    kwargs.update(overrides)
    return generateSpawnData(**kwargs)


class TestGenerateSpawnData:

    def testSameSeedIsBitIdentical(self):
        a = spawn()
        b = spawn()
        assert np.array_equal(a.positions, b.positions)
        assert np.array_equal(a.velocities, b.velocities)

    def testDifferentSeedsDiffer(self):
        assert not np.array_equal(spawn(seed=1).positions, spawn(seed=2).positions)

    def testPositionsInsideRegion(self):
        data = spawn()
        low = np.array([1.0, -2.0]) - 0.5 * np.array([4.0, 3.0])
        high = np.array([1.0, -2.0]) + 0.5 * np.array([4.0, 3.0])
        assert np.all(data.positions >= low)
        assert np.all(data.positions <= high)

    def testJitterIsBounded(self):
        data = spawn()
        jitter = np.linalg.norm(data.velocities - np.array([0.5, 0.25]), axis=1)
        assert np.all(jitter <= 0.5 * 0.8 + 1e-12)
        assert np.any(jitter > 0.0)

    def testNoJitterGivesUniformVelocity(self):
        data = spawn(jitterIntensity=0.0)
        assert np.all(data.velocities == np.array([0.5, 0.25]))

    def testDrawOrderPerParticle(self):
        data = spawn(count=3)
        draws = np.random.default_rng(42).random((3, 4))

        expectedPositions = np.array([1.0, -2.0]) + (draws[:, :2] - 0.5) * np.array([4.0, 3.0])
        np.testing.assert_allclose(data.positions, expectedPositions, rtol=1e-15)

        angle = draws[0, 2] * 2.0 * math.pi
        magnitude = 0.8 * (draws[0, 3] - 0.5)
        expected = [0.5 + math.cos(angle) * magnitude, 0.25 + math.sin(angle) * magnitude]
        np.testing.assert_allclose(data.velocities[0], expected, rtol=1e-12)

    def testZeroCount(self):
        data = spawn(count=0)
        assert data.positions.shape == (0, 2)
        assert data.velocities.shape == (0, 2)
        assert data.nParticles == 0

    @pytest.mark.parametrize('count', [-1, 2.5])
    def testBadCountRaises(self, count):
        with pytest.raises(InvalidArgument):
            spawn(count=count)

    def testNonFiniteInputRaises(self):
        with pytest.raises(InvalidArgument):
            spawn(center=np.array([np.inf, 0.0]))
        with pytest.raises(InvalidArgument):
            spawn(jitterIntensity=float('nan'))

    def testCopyIsIndependent(self):
        data = spawn(count=4)
        clone = data.copy()
        clone.positions[0] = [99.0, 99.0]
        assert data.positions[0, 0] != 99.0


class TestSpawnConfig:

    def testSpawnerUsesConfig(self):
        config = SpawnConfig(count=25, seed=3)
        data = ParticleSpawner(config).getSpawnData()
        assert data.nParticles == 25
        expected = generateSpawnData(25, config.center, config.size,
                                     config.initialSpeed, config.jitterIntensity, seed=3)
        assert np.array_equal(data.positions, expected.positions)

    def testDefaultSpawner(self):
        spawner = ParticleSpawner()
        assert spawner.config.count == 1000
        assert spawner.config.seed == 42

    def testPresets(self):
        assert SpawnConfig.small().count == 400
        assert SpawnConfig.standard().count == 2000
        assert SpawnConfig.obstacleCourse().count == 1200

    def testFromDict(self):
        config = SpawnConfig.fromDict({'count': 10, 'center': [1, 2], 'jitterIntensity': 0.1})
        assert config.count == 10
        assert config.center.tolist() == [1.0, 2.0]
        assert config.jitterIntensity == 0.1

    def testFromDictAcceptsWholeFloatCounts(self):
        config = SpawnConfig.fromDict({'count': 64.0, 'seed': 9.0})
        assert isinstance(config.count, int) and config.count == 64
        assert isinstance(config.seed, int) and config.seed == 9

    def testFromDictRejectsFractionalCount(self):
        with pytest.raises(InvalidArgument, match='count'):
            SpawnConfig.fromDict({'count': 10.5})

    def testFromDictUnknownKeyRaises(self):
        with pytest.raises(InvalidArgument, match='spawnRadius'):
            SpawnConfig.fromDict({'spawnRadius': 2.0})

    def testFromJson(self, tmp_path):
        path = tmp_path / 'fluid.json'
        path.write_text(json.dumps({
            'simulation': {'gravity': -5.0},
            'spawn': {'count': 64, 'size': [2.0, 2.0], 'seed': 9},
        }))
        config = SpawnConfig.fromJson(str(path))
        assert config.count == 64
        assert config.seed == 9
        assert config.size.tolist() == [2.0, 2.0]

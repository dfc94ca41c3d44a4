'''
Tests for the hashed uniform grid neighbor search.

The hash grid query is compared against an O(N^2) exact search for
random particle clouds, including clouds that straddle the origin
(negative cell coordinates) and clouds much larger than the table.
'''

import numpy as np
import pytest

from FluidSim2D.sph.errors import InvalidArgument
from FluidSim2D.sph.spatialHash import (
    SpatialHashGrid,
    bruteForceNeighbors,
    cellCoordinates,
    hashCell,
    keyFromHash,
    tableSizeFor,
)


def pairSet(pairs):
    iIdx, jIdx = pairs
    return set(zip(iIdx.tolist(), jIdx.tolist()))


def gridPairs(positions, h):
    grid = SpatialHashGrid(len(positions))
    grid.build(positions, h)
    return grid.queryPairs()


class TestCellHashing:

    @pytest.mark.parametrize('n, expected', [(0, 1), (1, 1), (2, 2), (5, 8), (8, 8), (1000, 1024)])
    def testTableSizeIsNextPowerOfTwo(self, n, expected):
        assert tableSizeFor(n) == expected

    def testCellCoordinatesFloorNegatives(self):
        cells = cellCoordinates(np.array([[-0.1, 0.0], [0.99, -1.0], [1.0, 2.5]]), 1.0)
        assert cells.tolist() == [[-1, 0], [0, -1], [1, 2]]

    def testHashMixesCoordinates(self):
        hashes = hashCell(np.array([[1, 0], [0, 1], [2, 3]]))
        assert hashes.tolist() == [15823, 9737333, (2 * 15823 + 3 * 9737333) % 2 ** 32]

    def testNegativeCoordinatesWrap(self):
        hashes = hashCell(np.array([[-1, 0], [0, -1]]))
        assert int(hashes[0]) == ((2 ** 32 - 1) * 15823) % 2 ** 32
        assert int(hashes[1]) == ((2 ** 32 - 1) * 9737333) % 2 ** 32

    def testKeysLieInTable(self):
        rng = np.random.default_rng(3)
        cells = rng.integers(-1000, 1000, size=(500, 2))
        keys = keyFromHash(hashCell(cells), 64)
        assert keys.min() >= 0 and keys.max() < 64


class TestGridBuild:

    def testRangesHoldOnlyTheirKey(self):
        rng = np.random.default_rng(11)
        positions = rng.uniform(-5.0, 5.0, size=(400, 2))
        grid = SpatialHashGrid(len(positions))
        grid.build(positions, 0.4)

        offsets = grid.cellOffsets
        covered = np.zeros(len(positions), dtype=int)
        for k in range(grid.tableSize):
            members = grid.sortedIndex[offsets[k]:offsets[k + 1]]
            assert np.all(grid.cellKeys[members] == k)
            covered[members] += 1
        assert np.all(covered == 1)

    def testWrongLengthRaises(self):
        grid = SpatialHashGrid(4)
        with pytest.raises(InvalidArgument):
            grid.build(np.zeros((5, 2)), 1.0)

    def testNonPositiveRadiusRaises(self):
        grid = SpatialHashGrid(2)
        with pytest.raises(InvalidArgument):
            grid.build(np.zeros((2, 2)), 0.0)


class TestNeighborQuery:

    @pytest.mark.parametrize('seed', [0, 1, 2, 3])
    @pytest.mark.parametrize('h', [0.1, 0.35, 1.0])
    def testMatchesBruteForce(self, seed, h):
        rng = np.random.default_rng(seed)
        positions = rng.uniform(-3.0, 3.0, size=(250, 2))
        assert pairSet(gridPairs(positions, h)) == pairSet(bruteForceNeighbors(positions, h))

    def testMatchesBruteForceWithHeavyKeyCollisions(self):
        # Far more occupied cells than table slots
        rng = np.random.default_rng(5)
        positions = rng.uniform(-50.0, 50.0, size=(64, 2))
        h = 0.25
        assert pairSet(gridPairs(positions, h)) == pairSet(bruteForceNeighbors(positions, h))

    def testClusteredParticles(self):
        rng = np.random.default_rng(9)
        positions = np.vstack([
            rng.normal(0.0, 0.05, size=(100, 2)),
            rng.normal(2.0, 0.05, size=(100, 2)),
        ])
        h = 0.2
        assert pairSet(gridPairs(positions, h)) == pairSet(bruteForceNeighbors(positions, h))

    def testSelfPairsIncluded(self):
        positions = np.array([[0.0, 0.0], [5.0, 5.0], [-5.0, 2.0]])
        pairs = pairSet(gridPairs(positions, 1.0))
        assert pairs == {(0, 0), (1, 1), (2, 2)}

    def testPairsAreSymmetric(self):
        rng = np.random.default_rng(4)
        positions = rng.uniform(0.0, 2.0, size=(80, 2))
        pairs = pairSet(gridPairs(positions, 0.3))
        assert all((j, i) in pairs for (i, j) in pairs)

    def testNoDuplicatePairs(self):
        rng = np.random.default_rng(8)
        positions = rng.uniform(-1.0, 1.0, size=(16, 2))
        iIdx, jIdx = gridPairs(positions, 0.5)
        assert len(pairSet((iIdx, jIdx))) == len(iIdx)

    def testEmptyGrid(self):
        iIdx, jIdx = gridPairs(np.zeros((0, 2)), 1.0)
        assert len(iIdx) == 0 and len(jIdx) == 0

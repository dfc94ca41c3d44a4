'''
Tests for the two-phase key-bucketed sort.

The sorted index list must be a permutation grouped by key and the
offset table must bound every key's range exactly.
'''

import numpy as np
import pytest

from FluidSim2D.sph.errors import InvalidArgument
from FluidSim2D.sph.parallelSort import countingOffsets, scatterByKey, sortAndOffsets


def assertGroupedByKey(keys, sortedIndex, offsets, tableSize):
    '''Check the sort/offset contract for every key.'''
    nParticles = len(keys)
    assert offsets.shape == (tableSize + 1,)
    assert offsets[0] == 0
    assert offsets[-1] == nParticles
    assert np.all(np.diff(offsets) >= 0)
    assert np.array_equal(np.sort(sortedIndex), np.arange(nParticles))

    for k in range(tableSize):
        members = sortedIndex[offsets[k]:offsets[k + 1]]
        assert np.all(keys[members] == k)
        assert len(members) == np.count_nonzero(keys == k)


class TestSortAndOffsets:

    @pytest.mark.parametrize('seed', [0, 1, 2])
    def testRandomKeysAreGrouped(self, seed):
        rng = np.random.default_rng(seed)
        tableSize = 64
        keys = rng.integers(0, tableSize, size=500)
        sortedIndex, offsets = sortAndOffsets(keys, tableSize)
        assertGroupedByKey(keys, sortedIndex, offsets, tableSize)

    def testEmptyKeysHaveEmptyRanges(self):
        keys = np.array([3, 3, 0, 5])
        sortedIndex, offsets = sortAndOffsets(keys, 8)
        for k in (1, 2, 4, 6, 7):
            assert offsets[k] == offsets[k + 1]
        assertGroupedByKey(keys, sortedIndex, offsets, 8)

    def testSingleCrowdedBucket(self):
        keys = np.full(200, 6)
        sortedIndex, offsets = sortAndOffsets(keys, 8)
        assert offsets[6] == 0 and offsets[7] == 200
        assertGroupedByKey(keys, sortedIndex, offsets, 8)

    def testNoParticles(self):
        sortedIndex, offsets = sortAndOffsets(np.array([], dtype=np.int64), 1)
        assert len(sortedIndex) == 0
        assert np.array_equal(offsets, [0, 0])

    def testOutOfRangeKeyRaises(self):
        with pytest.raises(InvalidArgument):
            sortAndOffsets(np.array([0, 4]), 4)
        with pytest.raises(InvalidArgument):
            sortAndOffsets(np.array([-1, 0]), 4)

    def testZeroTableSizeRaises(self):
        with pytest.raises(InvalidArgument):
            sortAndOffsets(np.array([0]), 0)


class TestPhases:

    def testCountingOffsetsArePrefixSums(self):
        keys = np.array([2, 0, 2, 1, 2])
        offsets = countingOffsets(keys, 4)
        assert offsets.tolist() == [0, 1, 2, 5, 5]

    def testScatterFillsEverySlotOnce(self):
        keys = np.array([1, 1, 0, 3, 1, 0])
        offsets = countingOffsets(keys, 4)
        sortedIndex = scatterByKey(keys, offsets)
        assert sorted(sortedIndex.tolist()) == list(range(6))
        assert keys[sortedIndex].tolist() == [0, 0, 1, 1, 1, 3]

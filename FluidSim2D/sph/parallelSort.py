# -- Key-Bucketed Parallel Sort -- #

'''
Comparison-free counting sort that groups particle indices by cell key.

The sort runs in two phases, mirroring a GPU counting sort:

1. Counting phase: a histogram of the keys followed by an exclusive
   prefix sum gives cellOffsets, where cellOffsets[k] is the first
   slot of key k in the sorted index list and cellOffsets[k + 1] its
   end. The whole offset table is complete before phase 2 starts.
2. Scatter phase: every particle writes its index to
   cursor[key] and the cursor advances. Particles sharing a key
   collide on the same cursor; each round lets exactly one particle
   per key win (the role an atomic increment plays on a GPU) and the
   losers retry in the next round. The number of rounds equals the
   largest bucket occupancy.

Ordering within a key is unspecified.

References:
-----------
Green (2010) -- Particle Simulation using CUDA
Hoetzlein (2014) -- Fast fixed-radius nearest neighbors: interactive
    million-particle fluids

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSim2D.sph.errors import InvalidArgument


#--------------------------------------------------------------------#
# -- Counting Phase -- #
#--------------------------------------------------------------------#

def countingOffsets(cellKeys: np.ndarray, tableSize: int) -> np.ndarray:
    '''
    Histogram the keys and prefix-sum them into the offset table.

    Parameters:
    -----------
    cellKeys : np.ndarray
        Cell key per particle, shape (N,), values in [0, tableSize)
    tableSize : int
        Number of hash table slots

    Returns:
    --------
    np.ndarray : cellOffsets, shape (tableSize + 1,), dtype int64
    '''
    counts = np.bincount(cellKeys, minlength=tableSize)
    offsets = np.zeros(tableSize + 1, dtype=np.int64)
    np.cumsum(counts, out=offsets[1:])
    return offsets


#--------------------------------------------------------------------#
# -- Scatter Phase -- #
#--------------------------------------------------------------------#

def scatterByKey(
    cellKeys: np.ndarray,
    cellOffsets: np.ndarray,
) -> np.ndarray:
    '''
    Place every particle index in its key's range of the sorted list.

    Parameters:
    -----------
    cellKeys : np.ndarray
        Cell key per particle, shape (N,)
    cellOffsets : np.ndarray
        Completed offset table from countingOffsets

    Returns:
    --------
    np.ndarray : sortedIndex, a permutation of [0, N) grouped by key
    '''
    nParticles = len(cellKeys)
    sortedIndex = np.empty(nParticles, dtype=np.int64)
    cursor = cellOffsets[:-1].copy()
    winner = np.full(len(cursor), -1, dtype=np.int64)

    pending = np.arange(nParticles, dtype=np.int64)
    while len(pending) > 0:
        pendingKeys = cellKeys[pending]

        # One claim per key succeeds this round
        winner[pendingKeys] = pending
        won = winner[pendingKeys] == pending

        placed = pending[won]
        placedKeys = pendingKeys[won]
        sortedIndex[cursor[placedKeys]] = placed
        cursor[placedKeys] += 1

        winner[placedKeys] = -1
        pending = pending[~won]

    return sortedIndex


#--------------------------------------------------------------------#
# -- Combined Sort -- #
#--------------------------------------------------------------------#

def sortAndOffsets(
    cellKeys: np.ndarray,
    tableSize: int,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    Sort particle indices by cell key and build the per-key offsets.

    Parameters:
    -----------
    cellKeys : np.ndarray
        Cell key per particle, shape (N,)
    tableSize : int
        Number of hash table slots; every key must be < tableSize

    Returns:
    --------
    tuple[np.ndarray, np.ndarray] :
        (sortedIndex, cellOffsets). For every key k, the particles
        sortedIndex[cellOffsets[k]:cellOffsets[k + 1]] all have key k.

    Raises:
    -------
    InvalidArgument : If tableSize < 1 or a key is out of range
    '''
    if tableSize < 1:
        raise InvalidArgument(f'tableSize must be >= 1, got {tableSize}')

    keys = np.asarray(cellKeys, dtype=np.int64)
    if len(keys) > 0 and (keys.min() < 0 or keys.max() >= tableSize):
        raise InvalidArgument(
            f'cell keys must lie in [0, {tableSize}), '
            f'got range [{keys.min()}, {keys.max()}]'
        )

    cellOffsets = countingOffsets(keys, tableSize)
    sortedIndex = scatterByKey(keys, cellOffsets)
    return (sortedIndex, cellOffsets)

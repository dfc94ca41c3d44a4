# -- Spatial Hash Grid for Neighbor Search -- #

'''
Hashed uniform grid for O(N) fixed-radius neighbor search in SPH.

The plane is divided into square cells of size equal to the smoothing
radius h. A cell's integer coordinates are mixed with two odd primes
and reduced modulo the table size to give its key. Particles are then
sorted by key (see parallelSort), so every key owns one contiguous
range of the sorted index list and no per-cell lists are stored.

A neighbor query visits the 3x3 block of cells around a particle,
scans each block cell's key range and keeps candidates whose exact
distance is within h. Distinct cells may share a key, so the range of
a key can hold particles from far away cells: the distance check is
what makes the result exact.

References:
-----------
Teschner et al. (2003) -- Optimized spatial hashing for collision
    detection of deformable objects
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH
Green (2010) -- Particle Simulation using CUDA

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np

from FluidSim2D import constants as const
from FluidSim2D.sph.errors import InvalidArgument, requirePositive
from FluidSim2D.sph.parallelSort import sortAndOffsets


_uint32Mask = np.uint64(0xFFFFFFFF)


#--------------------------------------------------------------------#
# -- Neighbor Search Protocol -- #
#--------------------------------------------------------------------#

class NeighborSearch(Protocol):
    '''Protocol for neighbor search structures.'''

    def build(self, positions: np.ndarray, smoothingRadius: float) -> None:
        '''Build the search structure from particle positions.'''
        ...

    def queryPairs(self) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all directed particle pairs within the smoothing radius.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices) with |p_i - p_j| <= h, self pairs included
        '''
        ...


#--------------------------------------------------------------------#
# -- Cell Hashing -- #
#--------------------------------------------------------------------#

def tableSizeFor(nParticles: int) -> int:
    '''Smallest power of two >= nParticles (at least 1).'''
    size = 1
    while size < nParticles:
        size *= 2
    return size


def cellCoordinates(positions: np.ndarray, smoothingRadius: float) -> np.ndarray:
    '''
    Integer cell coordinates floor(position / h).

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    smoothingRadius : float
        Cell size h

    Returns:
    --------
    np.ndarray : Cell coordinates, shape (N, 2), dtype int64
    '''
    return np.floor(positions / smoothingRadius).astype(np.int64)


def hashCell(cells: np.ndarray) -> np.ndarray:
    '''
    Mix integer cell coordinates into a 32-bit hash.

    hash = (uint32(cx) * 15823 + uint32(cy) * 9737333) mod 2^32

    Negative coordinates wrap as two's complement, so neighboring
    cells across the origin still get distinct hashes.

    Parameters:
    -----------
    cells : np.ndarray
        Cell coordinates, shape (..., 2)

    Returns:
    --------
    np.ndarray : Hashes, shape (...), dtype uint64 with values < 2^32
    '''
    wrapped = cells.astype(np.int64).astype(np.uint64) & _uint32Mask
    a = (wrapped[..., 0] * np.uint64(const.hashPrimeX)) & _uint32Mask
    b = (wrapped[..., 1] * np.uint64(const.hashPrimeY)) & _uint32Mask
    return (a + b) & _uint32Mask


def keyFromHash(hashes: np.ndarray, tableSize: int) -> np.ndarray:
    '''Reduce hashes to table slots, hash % tableSize.'''
    return (hashes % np.uint64(tableSize)).astype(np.int64)


def cellKeysFor(
    positions: np.ndarray,
    smoothingRadius: float,
    tableSize: int,
) -> np.ndarray:
    '''Cell key of every particle, shape (N,).'''
    return keyFromHash(hashCell(cellCoordinates(positions, smoothingRadius)), tableSize)


#--------------------------------------------------------------------#
# -- Spatial Hash Grid -- #
#--------------------------------------------------------------------#

class SpatialHashGrid:
    '''
    Sorted spatial hash over particle positions.

    build() computes the cell key of every particle, sorts the
    particle indices by key and builds the per-key offset table.
    queryPairs() then returns every directed pair within h.

    All work is done as NumPy batch operations over the whole
    particle set; a query never mutates the grid.

    Parameters:
    -----------
    nParticles : int
        Number of particles the table is sized for
    '''

    def __init__(self, nParticles: int) -> None:
        if nParticles < 0:
            raise InvalidArgument(f'nParticles must be >= 0, got {nParticles}')
        self._nParticles = nParticles
        self._tableSize = tableSizeFor(nParticles)
        self._stencil = np.array(const.cellOffsets2D, dtype=np.int64)

        self._positions: np.ndarray | None = None
        self._smoothingRadius: float = 0.0
        self.cellKeys = np.zeros(nParticles, dtype=np.int64)
        self.sortedIndex = np.arange(nParticles, dtype=np.int64)
        self.cellOffsets = np.zeros(self._tableSize + 1, dtype=np.int64)

    @property
    def tableSize(self) -> int:
        '''Number of hash table slots.'''
        return self._tableSize

    def build(self, positions: np.ndarray, smoothingRadius: float) -> None:
        '''
        Rebuild keys, sorted indices and offsets from scratch.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        smoothingRadius : float
            Cell size and search radius h

        Raises:
        -------
        InvalidArgument : If h is not positive or N differs from the table
        '''
        requirePositive('smoothingRadius', smoothingRadius)
        if len(positions) != self._nParticles:
            raise InvalidArgument(
                f'expected {self._nParticles} positions, got {len(positions)}'
            )

        self._positions = positions
        self._smoothingRadius = smoothingRadius
        self.cellKeys = cellKeysFor(positions, smoothingRadius, self._tableSize)
        self.sortedIndex, self.cellOffsets = sortAndOffsets(self.cellKeys, self._tableSize)

    def queryPairs(self) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all directed pairs (i, j) with |p_i - p_j| <= h.

        Each particle appears paired with itself. Both (i, j) and
        (j, i) are returned for distinct neighbors.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices) arrays of neighbor pair indices
        '''
        empty = (np.array([], dtype=np.int64), np.array([], dtype=np.int64))
        if self._positions is None or self._nParticles == 0:
            return empty

        positions = self._positions
        h = self._smoothingRadius
        nParticles = self._nParticles

        # Keys of the 3x3 block around each particle, shape (N, 9)
        cells = cellCoordinates(positions, h)
        blockCells = cells[:, np.newaxis, :] + self._stencil[np.newaxis, :, :]
        blockKeys = keyFromHash(hashCell(blockCells), self._tableSize)

        # Two block cells may share a key; scan each key only once
        blockKeys.sort(axis=1)
        firstVisit = np.ones_like(blockKeys, dtype=bool)
        firstVisit[:, 1:] = blockKeys[:, 1:] != blockKeys[:, :-1]

        owner = np.repeat(np.arange(nParticles, dtype=np.int64), blockKeys.shape[1])
        owner = owner[firstVisit.ravel()]
        keys = blockKeys[firstVisit]

        # Expand every (particle, key) into its key's sorted range
        starts = self.cellOffsets[keys]
        counts = self.cellOffsets[keys + 1] - starts
        total = int(counts.sum())
        if total == 0:
            return empty

        rangeStarts = np.cumsum(counts) - counts
        within = np.arange(total, dtype=np.int64) - np.repeat(rangeStarts, counts)
        slots = np.repeat(starts, counts) + within

        iCandidates = np.repeat(owner, counts)
        jCandidates = self.sortedIndex[slots]

        # Exact distance post-filter
        keep = withinRadius(positions, iCandidates, jCandidates, h)
        return (iCandidates[keep], jCandidates[keep])


#--------------------------------------------------------------------#
# -- Reference Search -- #
#--------------------------------------------------------------------#

def withinRadius(
    positions: np.ndarray,
    iIdx: np.ndarray,
    jIdx: np.ndarray,
    radius: float,
) -> np.ndarray:
    '''Mask of pairs whose squared distance is <= radius^2.'''
    dr = positions[iIdx] - positions[jIdx]
    distSq = np.sum(dr * dr, axis=1)
    return distSq <= radius * radius


def bruteForceNeighbors(
    positions: np.ndarray,
    smoothingRadius: float,
) -> tuple[np.ndarray, np.ndarray]:
    '''
    O(N^2) neighbor search used as a reference for the hash grid.

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    smoothingRadius : float
        Search radius h

    Returns:
    --------
    tuple[np.ndarray, np.ndarray] :
        (iIndices, jIndices) of every directed pair within h
    '''
    nParticles = len(positions)
    iAll = np.repeat(np.arange(nParticles, dtype=np.int64), nParticles)
    jAll = np.tile(np.arange(nParticles, dtype=np.int64), nParticles)
    keep = withinRadius(positions, iAll, jAll, smoothingRadius)
    return (iAll[keep], jAll[keep])

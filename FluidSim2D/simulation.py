# -- Fluid Simulation Host API -- #

'''
Explicit lifecycle wrapper around the SPH stage pipeline.

The embedding application owns the frame loop and calls:

    sim = FluidSimulation.initSimulation(positions, velocities, params)
    sim.stepFrame(frameDuration, substepCount, params)   # once per frame
    positions = sim.positions                            # read-only view
    sim.teardown()

Pause, resume, single-step and reset are plain method calls; a
pause request only takes effect between substeps. Reset restores the
spawn snapshot taken at initialization.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Callable

import numpy as np

from FluidSim2D.sph.errors import InvalidArgument, requireFinite
from FluidSim2D.sph.particles import ParticleState
from FluidSim2D.sph.pipeline import SimulationPipeline
from FluidSim2D.sph.protocols import SimulationParams, SimulationState, SphSolver
from FluidSim2D.scenarios.spawner import ParticleSpawnData


SubstepListener = Callable[['FluidSimulation'], None]


class FluidSimulation:
    '''
    Handle to one running fluid simulation.

    Use initSimulation() to create one. The handle owns the particle
    state and the pipeline for its whole lifetime.

    Parameters:
    -----------
    spawnData : ParticleSpawnData
        Spawn snapshot, kept for reset()
    params : SimulationParams
        Validated parameters used until the first stepFrame()
    '''

    def __init__(self, spawnData: ParticleSpawnData, params: SimulationParams) -> None:
        self._spawnData = spawnData
        self._params = params
        self._particles = ParticleState()
        self._particles.initialize(spawnData.positions, spawnData.velocities)
        self._pipeline: SphSolver = SimulationPipeline(self._particles)

        self._paused = False
        self._pauseAfterNextSubstep = False
        self._tornDown = False
        self._listeners: list[SubstepListener] = []

        self._time: float = 0.0
        self._substep: int = 0
        self._dt: float = params.deltaTime

    ######################################################################
    # -- Initialization -- #
    ######################################################################

    @classmethod
    def initSimulation(
        cls,
        spawnPositions: np.ndarray,
        spawnVelocities: np.ndarray,
        params: SimulationParams,
    ) -> FluidSimulation:
        '''
        Create a simulation from spawn arrays.

        Parameters:
        -----------
        spawnPositions : np.ndarray
            Initial positions, shape (N, 2)
        spawnVelocities : np.ndarray
            Initial velocities, shape (N, 2)
        params : SimulationParams
            Simulation parameters

        Returns:
        --------
        FluidSimulation : Running (unpaused) simulation handle

        Raises:
        -------
        InvalidArgument : If the arrays differ in length, the count is
            zero, or the parameters are invalid
        '''
        positions = np.array(spawnPositions, dtype=np.float64)
        velocities = np.array(spawnVelocities, dtype=np.float64)
        if len(positions) != len(velocities):
            raise InvalidArgument(
                f'spawn arrays differ in length: {len(positions)} != {len(velocities)}'
            )
        if len(positions) <= 0:
            raise InvalidArgument('particle count must be > 0')

        params.validate()
        spawnData = ParticleSpawnData(positions=positions, velocities=velocities)
        return cls(spawnData, params)

    @classmethod
    def fromSpawnData(cls, spawnData: ParticleSpawnData, params: SimulationParams) -> FluidSimulation:
        '''initSimulation() taking a ParticleSpawnData.'''
        return cls.initSimulation(spawnData.positions, spawnData.velocities, params)

    ######################################################################
    # -- Frame Stepping -- #
    ######################################################################

    def stepFrame(
        self,
        frameDuration: float,
        substepCount: int,
        params: SimulationParams,
        speedMultiplier: float = 1.0,
    ) -> None:
        '''
        Advance one frame of substepCount pipeline substeps.

        dt = frameDuration / substepCount * speedMultiplier

        Does nothing while paused. After stepForward() only one
        substep runs before the simulation pauses again.

        Parameters:
        -----------
        frameDuration : float
            Frame duration to simulate
        substepCount : int
            Number of substeps in this frame (> 0)
        params : SimulationParams
            Parameters for every substep of this frame
        speedMultiplier : float
            Simulation speed multiplier

        Raises:
        -------
        InvalidArgument : For a non-positive substep count, a negative
            frame duration or invalid parameters
        RuntimeError : If the simulation was torn down
        '''
        self._requireAlive()
        if int(substepCount) != substepCount or substepCount <= 0:
            raise InvalidArgument(f'substepCount must be a positive integer, got {substepCount}')
        requireFinite('frameDuration', frameDuration)
        requireFinite('speedMultiplier', speedMultiplier)
        if frameDuration < 0.0 or speedMultiplier < 0.0:
            raise InvalidArgument(
                f'frameDuration and speedMultiplier must be >= 0, '
                f'got {frameDuration} and {speedMultiplier}'
            )

        dt = frameDuration / substepCount * speedMultiplier
        substepParams = params.withDeltaTime(dt).validate()
        self._params = substepParams

        if self._paused:
            return

        for _ in range(int(substepCount)):
            self._runSubstep(substepParams)

            if self._pauseAfterNextSubstep:
                self._pauseAfterNextSubstep = False
                self._paused = True
                break

    def _runSubstep(self, params: SimulationParams) -> None:
        self._pipeline.runSubstep(params)
        self._time += params.deltaTime
        self._substep += 1
        self._dt = params.deltaTime

        for listener in self._listeners:
            listener(self)

    ######################################################################
    # -- Commands -- #
    ######################################################################

    def pause(self) -> None:
        '''Stop advancing on stepFrame().'''
        self._requireAlive()
        self._paused = True
        self._pauseAfterNextSubstep = False

    def resume(self) -> None:
        '''Continue advancing on stepFrame().'''
        self._requireAlive()
        self._paused = False
        self._pauseAfterNextSubstep = False

    def togglePause(self) -> None:
        '''Flip between paused and running.'''
        if self._paused:
            self.resume()
        else:
            self.pause()

    def stepForward(self) -> None:
        '''Resume, then pause again after exactly one substep.'''
        self._requireAlive()
        self._paused = False
        self._pauseAfterNextSubstep = True

    def reset(self) -> None:
        '''
        Restore the spawn snapshot and pause.

        One substep is replayed on the pristine state with the most
        recent parameters, then the snapshot is restored again, so
        the observable state afterwards equals a fresh
        initSimulation() and the next stepFrame() (after resume())
        reproduces its trajectory.
        '''
        self._requireAlive()
        self._paused = True
        self._pauseAfterNextSubstep = False

        self._restoreSnapshot()
        self._pipeline.runSubstep(self._params)
        self._restoreSnapshot()

    def _restoreSnapshot(self) -> None:
        self._particles.initialize(self._spawnData.positions, self._spawnData.velocities)
        self._time = 0.0
        self._substep = 0
        self._dt = 0.0

    def teardown(self) -> None:
        '''Release the particle arrays; the handle is unusable afterwards.'''
        if self._tornDown:
            return
        self._listeners.clear()
        self._particles.initialize(np.zeros((0, 2)), np.zeros((0, 2)))
        self._tornDown = True

    def addSubstepListener(self, listener: SubstepListener) -> None:
        '''Register a callback invoked after every completed substep.'''
        self._requireAlive()
        self._listeners.append(listener)

    def removeSubstepListener(self, listener: SubstepListener) -> None:
        '''Unregister a substep callback.'''
        self._listeners.remove(listener)

    def _requireAlive(self) -> None:
        if self._tornDown:
            raise RuntimeError('Simulation has been torn down')

    ######################################################################
    # -- Readout -- #
    ######################################################################

    @property
    def positions(self) -> np.ndarray:
        '''Read-only view of the particle positions, shape (N, 2).'''
        self._requireAlive()
        return self._particles.readPositions()

    @property
    def velocities(self) -> np.ndarray:
        '''Read-only view of the particle velocities, shape (N, 2).'''
        self._requireAlive()
        return self._particles.readVelocities()

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self._particles.nParticles

    @property
    def isPaused(self) -> bool:
        '''True while stepFrame() is a no-op.'''
        return self._paused

    @property
    def isTornDown(self) -> bool:
        '''True after teardown().'''
        return self._tornDown

    @property
    def time(self) -> float:
        '''Simulated time since initialization or reset.'''
        return self._time

    @property
    def currentState(self) -> SimulationState:
        '''Diagnostics snapshot of the current state.'''
        self._requireAlive()
        p = self._particles
        return SimulationState(
            time=self._time,
            substep=self._substep,
            dt=self._dt,
            kineticEnergy=p.kineticEnergy(),
            maxVelocity=p.maxSpeed(),
            centroid=p.centroid(),
        )

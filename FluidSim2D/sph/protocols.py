# -- SPH Simulation Protocols -- #

'''
Parameter structs, diagnostics snapshot and solver protocol.

SimulationParams is the immutable per-substep parameter set the
stage pipeline consumes. SimulationConfig is the mutable host-side
configuration surface (presets, JSON loading) that produces those
parameters once per frame. SimulationState is a scalar diagnostics
snapshot derived from the readable particle arrays.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import dataclasses
import json
import math
from dataclasses import dataclass, field
from typing import Protocol, TYPE_CHECKING

import numpy as np

from FluidSim2D import constants as const
from FluidSim2D.sph.errors import InvalidArgument, requireFinite, requireInteger, requirePositive

if TYPE_CHECKING:
    from FluidSim2D.sph.particles import ParticleState


def _vector(value) -> np.ndarray:
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (2,):
        raise InvalidArgument(f'expected a 2-component vector, got {value!r}')
    return vec


######################################################################
# -- Per-Substep Parameters -- #
######################################################################

@dataclass(frozen=True)
class SimulationParams:
    '''
    Immutable physical parameters for one substep.

    Parameters:
    -----------
    gravity : float
        Vertical gravitational acceleration (negative is down)
    restitutionCoefficient : float
        Fraction of normal velocity kept after a collision, in [0, 1]
    smoothingRadius : float
        Neighbor cutoff distance h
    targetDensity : float
        Rest density rho_0
    pressureMultiplier : float
        Stiffness of the density pressure term
    nearPressureMultiplier : float
        Stiffness of the near-density pressure term
    viscosityStrength : float
        Neighbor velocity smoothing strength
    boundsSize : tuple[float, float]
        Full size of the bounds box centered on the origin
    obstacleSize : tuple[float, float]
        Full size of the static obstacle (zero disables it)
    obstacleCentre : tuple[float, float]
        Centre of the static obstacle
    interactionPoint : tuple[float, float]
        World position of the user interaction
    interactionStrength : float
        Interaction acceleration at the point; positive pulls particles
        in, negative pushes them out, zero disables the interaction
    interactionRadius : float
        Radius of influence of the interaction
    deltaTime : float
        Substep duration dt
    '''

    gravity: float = const.gravity
    restitutionCoefficient: float = const.restitutionCoefficient
    smoothingRadius: float = const.smoothingRadius
    targetDensity: float = const.targetDensity
    pressureMultiplier: float = const.pressureMultiplier
    nearPressureMultiplier: float = const.nearPressureMultiplier
    viscosityStrength: float = const.viscosityStrength
    boundsSize: tuple[float, float] = const.boundsSize
    obstacleSize: tuple[float, float] = const.obstacleSize
    obstacleCentre: tuple[float, float] = const.obstaclePosition
    interactionPoint: tuple[float, float] = (0.0, 0.0)
    interactionStrength: float = 0.0
    interactionRadius: float = const.userInteractionRadius
    deltaTime: float = 0.0

    def validate(self) -> SimulationParams:
        '''
        Check every field and return self.

        Raises:
        -------
        InvalidArgument : On the first invalid field
        '''
        requirePositive('smoothingRadius', self.smoothingRadius)
        for name in ('gravity', 'targetDensity', 'pressureMultiplier',
                     'nearPressureMultiplier', 'viscosityStrength',
                     'interactionStrength', 'deltaTime'):
            requireFinite(name, getattr(self, name))

        if not 0.0 <= self.restitutionCoefficient <= 1.0:
            raise InvalidArgument(
                f'restitutionCoefficient must lie in [0, 1], got {self.restitutionCoefficient}'
            )
        if self.deltaTime < 0.0:
            raise InvalidArgument(f'deltaTime must be >= 0, got {self.deltaTime}')

        bounds = _vector(self.boundsSize)
        requireFinite('boundsSize', bounds)
        if np.any(bounds <= 0.0):
            raise InvalidArgument(f'boundsSize must be positive, got {self.boundsSize}')

        obstacle = _vector(self.obstacleSize)
        requireFinite('obstacleSize', obstacle)
        if np.any(obstacle < 0.0):
            raise InvalidArgument(f'obstacleSize must be >= 0, got {self.obstacleSize}')

        requireFinite('obstacleCentre', _vector(self.obstacleCentre))
        requireFinite('interactionPoint', _vector(self.interactionPoint))
        if self.interactionStrength != 0.0:
            requirePositive('interactionRadius', self.interactionRadius)

        return self

    def withDeltaTime(self, deltaTime: float) -> SimulationParams:
        '''Copy of these parameters with a new substep duration.'''
        return dataclasses.replace(self, deltaTime=deltaTime)


######################################################################
# -- Host Configuration -- #
######################################################################

@dataclass
class SimulationConfig:
    '''
    Host-side configuration of the fluid simulation.

    This is the recognized option surface. It is converted into an
    immutable SimulationParams once per frame by toParams().

    Parameters:
    -----------
    simulationSpeed : float
        Multiplier on every substep duration
    useFixedTimeSteps : bool
        Step with a fixed frame duration instead of wall-clock deltas
    stepsPerFrame : int
        Pipeline substeps per frame
    gravity : float
        Vertical gravitational acceleration
    restitutionCoefficient : float
        Collision restitution, in [0, 1]
    interactionRadius : float
        Smoothing radius h of the SPH kernels
    targetDensity : float
        Rest density
    pressureMultiplier : float
        Density pressure stiffness
    nearPressureMultiplier : float
        Near-density pressure stiffness
    viscosityStrength : float
        Viscosity strength
    boundsSize : np.ndarray
        Full size of the bounds box
    obstacleSize : np.ndarray
        Full size of the obstacle
    obstaclePosition : np.ndarray
        Centre of the obstacle
    userInteractionRadius : float
        Radius of the user interaction force
    userForceMagnitude : float
        Magnitude of the user interaction force
    '''

    simulationSpeed: float = const.simulationSpeed
    useFixedTimeSteps: bool = True
    stepsPerFrame: int = const.stepsPerFrame
    gravity: float = const.gravity
    restitutionCoefficient: float = const.restitutionCoefficient
    interactionRadius: float = const.smoothingRadius
    targetDensity: float = const.targetDensity
    pressureMultiplier: float = const.pressureMultiplier
    nearPressureMultiplier: float = const.nearPressureMultiplier
    viscosityStrength: float = const.viscosityStrength
    boundsSize: np.ndarray = field(default_factory=lambda: np.array(const.boundsSize))
    obstacleSize: np.ndarray = field(default_factory=lambda: np.array(const.obstacleSize))
    obstaclePosition: np.ndarray = field(default_factory=lambda: np.array(const.obstaclePosition))
    userInteractionRadius: float = const.userInteractionRadius
    userForceMagnitude: float = const.userForceMagnitude

    @classmethod
    def default(cls) -> SimulationConfig:
        '''Open box, water-like settings.'''
        return cls()

    @classmethod
    def viscous(cls) -> SimulationConfig:
        '''Thick, slow fluid: strong viscosity, soft pressure.'''
        return cls(
            pressureMultiplier=250.0,
            nearPressureMultiplier=10.0,
            viscosityStrength=0.5,
            restitutionCoefficient=0.5,
        )

    @classmethod
    def obstacleCourse(cls) -> SimulationConfig:
        '''Water falling onto a block in the middle of the box.'''
        return cls(
            obstacleSize=np.array([4.0, 1.5]),
            obstaclePosition=np.array([0.0, -2.0]),
        )

    def validate(self) -> SimulationConfig:
        '''
        Check host-only options and the derived physics parameters.

        Raises:
        -------
        InvalidArgument : On the first invalid option
        '''
        self.stepsPerFrame = requireInteger('stepsPerFrame', self.stepsPerFrame)
        if self.stepsPerFrame <= 0:
            raise InvalidArgument(f'stepsPerFrame must be a positive integer, got {self.stepsPerFrame}')
        requirePositive('simulationSpeed', self.simulationSpeed)
        requireFinite('userForceMagnitude', self.userForceMagnitude)
        requirePositive('userInteractionRadius', self.userInteractionRadius)
        self.toParams()
        return self

    def toParams(
        self,
        interactionPoint: tuple[float, float] | np.ndarray = (0.0, 0.0),
        interactionActive: bool = False,
        deltaTime: float = 0.0,
    ) -> SimulationParams:
        '''
        Build validated per-substep parameters.

        An active interaction pushes particles away from the point
        with the configured force magnitude.

        Parameters:
        -----------
        interactionPoint : tuple[float, float] | np.ndarray
            World position of the interaction (e.g. the pointer)
        interactionActive : bool
            Whether the interaction is applied this frame
        deltaTime : float
            Substep duration to store in the parameters

        Returns:
        --------
        SimulationParams : Validated parameters
        '''
        strength = -self.userForceMagnitude if interactionActive else 0.0
        point = _vector(interactionPoint)

        return SimulationParams(
            gravity=float(self.gravity),
            restitutionCoefficient=float(self.restitutionCoefficient),
            smoothingRadius=float(self.interactionRadius),
            targetDensity=float(self.targetDensity),
            pressureMultiplier=float(self.pressureMultiplier),
            nearPressureMultiplier=float(self.nearPressureMultiplier),
            viscosityStrength=float(self.viscosityStrength),
            boundsSize=tuple(float(v) for v in _vector(self.boundsSize)),
            obstacleSize=tuple(float(v) for v in _vector(self.obstacleSize)),
            obstacleCentre=tuple(float(v) for v in _vector(self.obstaclePosition)),
            interactionPoint=(float(point[0]), float(point[1])),
            interactionStrength=float(strength),
            interactionRadius=float(self.userInteractionRadius),
            deltaTime=float(deltaTime),
        ).validate()

    @classmethod
    def fromDict(cls, section: dict) -> SimulationConfig:
        '''
        Build a configuration from a dict of recognized options.

        Missing options keep their defaults.

        Raises:
        -------
        InvalidArgument : If an option name is not recognized or a
            whole-number option has a fractional value
        '''
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise InvalidArgument(f'Unknown simulation options: {", ".join(unknown)}')

        values = dict(section)
        if 'stepsPerFrame' in values:
            values['stepsPerFrame'] = requireInteger('stepsPerFrame', values['stepsPerFrame'])
        for name in ('boundsSize', 'obstacleSize', 'obstaclePosition'):
            if name in values:
                values[name] = _vector(values[name])
        return cls(**values)

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Reads the 'simulation' section; other sections (such as
        'spawn') are left to their own loaders.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data.get('simulation', {}))


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Diagnostics snapshot after a substep.

    Everything here is derived from positions and velocities only.

    Parameters:
    -----------
    time : float
        Accumulated simulated time
    substep : int
        Number of substeps run since initialization or reset
    dt : float
        Duration of the last substep
    kineticEnergy : float
        Kinetic energy per unit particle mass
    maxVelocity : float
        Maximum particle speed
    centroid : np.ndarray
        Mean particle position
    '''

    time: float
    substep: int
    dt: float
    kineticEnergy: float
    maxVelocity: float
    centroid: np.ndarray

    @property
    def isFinite(self) -> bool:
        '''True when no diagnostic has blown up to NaN or inf.'''
        return (
            math.isfinite(self.kineticEnergy)
            and math.isfinite(self.maxVelocity)
            and bool(np.all(np.isfinite(self.centroid)))
        )


######################################################################
# -- Solver Protocol -- #
######################################################################

class SphSolver(Protocol):
    '''Protocol for substep-driven SPH solvers.'''

    def runSubstep(self, params: SimulationParams) -> None:
        '''Advance the particle state by one substep.'''
        ...

    @property
    def particles(self) -> ParticleState:
        '''Access the particle state.'''
        ...

# -- Default Parameters for the 2D SPH Fluid -- #

'''
Default simulation and spawn parameters for the double-density
relaxation fluid, plus the numerical constants used by the
spatial hash and the stage pipeline.

Values are in simulation units (the bounds box is centered on
the origin and measured in world units).

References:
-----------
Clavet et al. (2005) -- Particle-based viscoelastic fluid simulation
Teschner et al. (2003) -- Optimized spatial hashing for collision detection

Sean Bowman [10/19/2026]
'''

#--------------------------------------------------------------------#
# -- Host / Frame Timing -- #
#--------------------------------------------------------------------#

# Multiplier applied to every substep duration
simulationSpeed: float = 1.0

# Fixed frame duration used when stepping with fixed time steps [s]
fixedFrameDuration: float = 1.0 / 60.0

# Number of pipeline substeps per rendered frame
# (keeps the fastest particles moving less than one cell per substep)
stepsPerFrame: int = 10

# Frames skipped before variable time stepping starts
# (the first wall-clock deltas are dominated by start-up cost)
variableStepWarmupFrames: int = 10

#--------------------------------------------------------------------#
# -- Fluid Parameters -- #
#--------------------------------------------------------------------#

# Vertical gravitational acceleration (negative is down)
gravity: float = -12.0

# Fraction of the normal velocity kept after a wall or obstacle hit
restitutionCoefficient: float = 0.95

# Smoothing radius h: neighbor cutoff and hash cell size
smoothingRadius: float = 0.35

# Rest density the pressure term drives towards
targetDensity: float = 55.0

# Stiffness of the density pressure term
pressureMultiplier: float = 500.0

# Stiffness of the near-density (short range repulsion) term
nearPressureMultiplier: float = 18.0

# Strength of the neighbor velocity smoothing
viscosityStrength: float = 0.06

# Full size of the bounds box centered on the origin
boundsSize: tuple[float, float] = (17.1, 9.3)

# Full size and centre of the static obstacle (zero size disables it)
obstacleSize: tuple[float, float] = (0.0, 0.0)
obstaclePosition: tuple[float, float] = (0.0, 0.0)

#--------------------------------------------------------------------#
# -- User Interaction -- #
#--------------------------------------------------------------------#

# Radius of influence around the interaction point
userInteractionRadius: float = 2.0

# Force magnitude applied while the interaction is active
userForceMagnitude: float = 30.0

#--------------------------------------------------------------------#
# -- Spawn Parameters -- #
#--------------------------------------------------------------------#

spawnCount: int = 1000
spawnCenter: tuple[float, float] = (0.0, 0.0)
spawnSize: tuple[float, float] = (7.0, 7.0)
spawnInitialSpeed: tuple[float, float] = (0.0, 0.0)
spawnJitterIntensity: float = 0.0

# Seed of the spawn random stream
spawnSeed: int = 42

#--------------------------------------------------------------------#
# -- Spatial Hash -- #
#--------------------------------------------------------------------#

# Odd primes mixing the two integer cell coordinates
hashPrimeX: int = 15823
hashPrimeY: int = 9737333

# 3x3 neighborhood offsets (own cell included)
cellOffsets2D: tuple[tuple[int, int], ...] = (
    (-1, 1), (0, 1), (1, 1),
    (-1, 0), (0, 0), (1, 0),
    (-1, -1), (0, -1), (1, -1),
)

#--------------------------------------------------------------------#
# -- Numerical Floors -- #
#--------------------------------------------------------------------#

# Distances below this are treated as coincident particles
distanceEpsilon: float = 1e-9

# Densities below this are treated as empty neighborhoods
densityEpsilon: float = 1e-12

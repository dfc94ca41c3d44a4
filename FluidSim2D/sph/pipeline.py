# -- Double-Density Relaxation SPH Stage Pipeline -- #

'''
Six-stage substep pipeline for the 2D SPH fluid.

Every stage is one NumPy batch operation over all particles (or all
neighbor pairs). A stage computes complete new arrays before they
replace the old ones, so no stage ever observes a partially updated
array and no particle reads a value another particle is writing in
the same stage.

Algorithm per substep:
    1. External forces: gravity and user interaction kick the
       velocity, then predicted = position + velocity * dt
    2. Hash build: cell key per particle from the predicted position
    3. Sort & offsets: group particle indices by key
    4. Density: Poly6 density and spiky near density, self included
    5. Pressure + viscosity: symmetric shared pressure along the
       pair direction plus velocity smoothing, scaled by 1 / density
    6. Integrate & collide: drift positions, resolve obstacle and
       bounds collisions

Stages 4 and 5 both read the predicted position snapshot the hash
was built from; only stage 6 moves the authoritative positions.

References:
-----------
Clavet et al. (2005) -- Particle-based viscoelastic fluid simulation
Muller et al. (2003) -- Particle-based fluid simulation for interactive
    applications

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from FluidSim2D import constants as const
from FluidSim2D.sph.protocols import SimulationParams
from FluidSim2D.sph.kernels import KernelFactors
from FluidSim2D.sph.particles import ParticleState
from FluidSim2D.sph.spatialHash import NeighborSearch, SpatialHashGrid
from FluidSim2D.sph.boundaryHandling import BoundaryHandler
from FluidSim2D.sph.timeIntegration import SymplecticEuler, TimeIntegrator


class SimulationPipeline:
    '''
    Stage pipeline owning the particle state and the spatial hash.

    Parameters:
    -----------
    particles : ParticleState
        Initialized particle state; the pipeline is its only writer
    '''

    def __init__(self, particles: ParticleState) -> None:
        self._particles = particles
        self._integrator: TimeIntegrator = SymplecticEuler()
        self._grid: NeighborSearch = SpatialHashGrid(particles.nParticles)

        self._factors: KernelFactors | None = None
        self._neighborPairs: tuple[np.ndarray, np.ndarray] = (
            np.array([], dtype=np.int64),
            np.array([], dtype=np.int64),
        )

    ######################################################################
    # -- Main Substep -- #
    ######################################################################

    def runSubstep(self, params: SimulationParams) -> None:
        '''
        Run all six stages once, in order.

        Parameters:
        -----------
        params : SimulationParams
            Validated parameters, including the substep duration
        '''
        if self._particles.nParticles == 0:
            return

        # Scaling constants are re-derived from h every substep
        self._factors = KernelFactors.fromRadius(params.smoothingRadius)

        # 1. External forces and prediction
        self._applyExternalForces(params)

        # 2-3. Hash build, sort and offsets
        self._grid.build(self._particles.predictedPositions, params.smoothingRadius)
        self._neighborPairs = self._grid.queryPairs()

        # 4. Density
        self._computeDensities()

        # 5. Pressure + viscosity
        self._applyPressureAndViscosity(params)

        # 6. Integrate and collide
        self._integrateAndCollide(params)

    ######################################################################
    # -- Stage 1: External Forces -- #
    ######################################################################

    def _applyExternalForces(self, params: SimulationParams) -> None:
        '''
        Kick velocities with gravity and the interaction force.

        Within the interaction radius a particle receives an extra
        acceleration of magnitude |strength| * (1 - dist / radius)
        along the direction to the interaction point (away from it
        for negative strength). Then predict positions for the
        neighbor search.
        '''
        p = self._particles
        dt = params.deltaTime

        accelerations = np.zeros_like(p.velocities)
        accelerations[:, 1] = params.gravity

        if params.interactionStrength != 0.0:
            toPoint = np.asarray(params.interactionPoint) - p.positions
            dist = np.linalg.norm(toPoint, axis=1)
            radius = params.interactionRadius

            # Particles sitting on the point have no direction to it
            active = (dist < radius) & (dist > const.distanceEpsilon)
            if np.any(active):
                centreT = 1.0 - dist[active] / radius
                direction = toPoint[active] / dist[active][:, np.newaxis]
                accelerations[active] += (
                    direction * (params.interactionStrength * centreT)[:, np.newaxis]
                )

        p.velocities = self._integrator.kick(p.velocities, accelerations, dt)
        p.predictedPositions = self._integrator.predict(p.positions, p.velocities, dt)

    ######################################################################
    # -- Stage 4: Density -- #
    ######################################################################

    def _computeDensities(self) -> None:
        '''
        Sum density and near density over all neighbors within h.

        rho_i      = sum_j W(|x*_i - x*_j|)
        rhoNear_i  = sum_j S2(|x*_i - x*_j|)

        The self pair (r = 0) is part of the neighbor list, so every
        particle contributes W(0) and S2(0) to itself.
        '''
        p = self._particles
        factors = self._factors
        iIdx, jIdx = self._neighborPairs

        densities = np.zeros((p.nParticles, 2))
        if len(iIdx) > 0:
            dr = p.predictedPositions[iIdx] - p.predictedPositions[jIdx]
            dist = np.linalg.norm(dr, axis=1)
            np.add.at(densities[:, 0], iIdx, factors.densityBatch(dist))
            np.add.at(densities[:, 1], iIdx, factors.nearDensityBatch(dist))

        p.densities = densities

    ######################################################################
    # -- Stage 5: Pressure and Viscosity -- #
    ######################################################################

    def _applyPressureAndViscosity(self, params: SimulationParams) -> None:
        '''
        Accumulate pressure and viscosity forces and kick velocities.

        For each pair (i, j), i != j, within h:

            shared = k  * (rho_i + rho_j - 2 * rho_0) / 2
                   + kN * (near_i + near_j) / 2
            F_p   += (x*_i - x*_j) / r * shared * |dS3/dr(r)| / rho_j
            F_v   += mu * (v_j - v_i) * S2(r)

        then v_i += (F_p + F_v) * dt / rho_i.

        A positive shared pressure pushes the pair apart. Coincident
        particles (r ~ 0) get no pressure term because the direction
        is undefined. Empty or degenerate densities fall back to
        the target density; if that is not positive either, the
        affected pair or particle contributes nothing.
        '''
        p = self._particles
        factors = self._factors
        iIdx, jIdx = self._neighborPairs

        distinct = iIdx != jIdx
        iIdx = iIdx[distinct]
        jIdx = jIdx[distinct]
        if len(iIdx) == 0:
            return

        density, usable = self._safeDensities(params.targetDensity)
        nearDensity = p.densities[:, 1]

        dr = p.predictedPositions[iIdx] - p.predictedPositions[jIdx]
        dist = np.linalg.norm(dr, axis=1)

        # --- Pressure (skips coincident pairs and unusable j) --- #
        separated = (dist > const.distanceEpsilon) & usable[jIdx]
        safeDist = np.where(separated, dist, 1.0)
        safeDensityJ = np.where(usable[jIdx], density[jIdx], 1.0)

        sharedPressure = (
            params.pressureMultiplier
            * (density[iIdx] + density[jIdx] - 2.0 * params.targetDensity) * 0.5
            + params.nearPressureMultiplier
            * (nearDensity[iIdx] + nearDensity[jIdx]) * 0.5
        )
        pressureScale = np.where(
            separated,
            sharedPressure * factors.pressureSlopeBatch(dist) / (safeDist * safeDensityJ),
            0.0,
        )
        pairForces = dr * pressureScale[:, np.newaxis]

        # --- Viscosity --- #
        dv = p.velocities[jIdx] - p.velocities[iIdx]
        viscosityScale = params.viscosityStrength * factors.nearDensityBatch(dist)
        pairForces += dv * viscosityScale[:, np.newaxis]

        forces = np.zeros_like(p.velocities)
        np.add.at(forces, iIdx, pairForces)

        safeDensityI = np.where(usable, density, 1.0)
        accelerations = np.where(
            usable[:, np.newaxis], forces / safeDensityI[:, np.newaxis], 0.0
        )
        p.velocities = self._integrator.kick(p.velocities, accelerations, params.deltaTime)

    def _safeDensities(self, targetDensity: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Densities with empty neighborhoods floored to the target.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (density, usable) where usable marks particles whose
            density may be divided by
        '''
        density = self._particles.densities[:, 0].copy()
        degenerate = ~np.isfinite(density) | (density <= const.densityEpsilon)
        if np.any(degenerate):
            density[degenerate] = targetDensity
        usable = density > const.densityEpsilon
        return (density, usable)

    ######################################################################
    # -- Stage 6: Integrate and Collide -- #
    ######################################################################

    def _integrateAndCollide(self, params: SimulationParams) -> None:
        '''Drift positions with the final velocities and resolve collisions.'''
        p = self._particles
        boundary = BoundaryHandler(
            boundsSize=np.asarray(params.boundsSize),
            obstacleSize=np.asarray(params.obstacleSize),
            obstacleCentre=np.asarray(params.obstacleCentre),
            restitutionCoefficient=params.restitutionCoefficient,
        )

        positions = self._integrator.drift(p.positions, p.velocities, params.deltaTime)
        p.positions, p.velocities = boundary.enforceBoundary(positions, p.velocities)

    ######################################################################
    # -- Properties -- #
    ######################################################################

    @property
    def particles(self) -> ParticleState:
        '''Access the particle state.'''
        return self._particles

    @property
    def grid(self) -> NeighborSearch:
        '''Spatial hash built during the last substep.'''
        return self._grid

    @property
    def neighborPairs(self) -> tuple[np.ndarray, np.ndarray]:
        '''Directed neighbor pairs found during the last substep.'''
        return self._neighborPairs

    @property
    def kernelFactors(self) -> KernelFactors | None:
        '''Kernel scaling constants of the last substep.'''
        return self._factors

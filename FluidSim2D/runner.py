# -- Fluid Simulation Runner -- #

'''
Command-line entry point for running the 2D SPH fluid headless.

Builds the spawn data and configuration from a preset or a JSON file,
drives the simulation frame by frame, prints progress, and optionally
exports frame data as JSON.

Usage:
    python -m FluidSim2D                                  # Small block, 120 frames
    python -m FluidSim2D --preset obstacle --frames 300
    python -m FluidSim2D --config configs/fluid.json
    python -m FluidSim2D --variable-steps                 # Wall-clock frame deltas
    python -m FluidSim2D --no-export                      # Skip frame export

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import argparse
import time as timeModule

from FluidSim2D import constants as const
from FluidSim2D.sph.protocols import SimulationConfig, SimulationState
from FluidSim2D.scenarios.spawner import ParticleSpawner, SpawnConfig
from FluidSim2D.simulation import FluidSimulation
from FluidSim2D.export.frameExporter import FrameExporter


#--------------------------------------------------------------------#
# -- Presets -- #
#--------------------------------------------------------------------#

presets: dict[str, tuple] = {
    'small': (SimulationConfig.default, SpawnConfig.small),
    'standard': (SimulationConfig.default, SpawnConfig.standard),
    'viscous': (SimulationConfig.viscous, SpawnConfig.small),
    'obstacle': (SimulationConfig.obstacleCourse, SpawnConfig.obstacleCourse),
}


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='FluidSim2D -- double-density relaxation SPH fluid',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file (simulation and spawn sections)',
    )
    parser.add_argument(
        '--preset', type=str, default='small',
        choices=sorted(presets),
        help='Scenario preset (default: small)',
    )
    parser.add_argument(
        '--frames', type=int, default=120,
        help='Number of frames to simulate (default: 120)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Override the spawn seed',
    )
    parser.add_argument(
        '--variable-steps', action='store_true',
        help='Use wall-clock frame durations instead of fixed time steps',
    )
    parser.add_argument(
        '--interaction-point', type=float, nargs=2, default=None, metavar=('X', 'Y'),
        help='Keep the user interaction force active at this point',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--output-dir', type=str, default='FluidSim2D/output',
        help='Output directory for exported frames (default: FluidSim2D/output)',
    )

    return parser


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class FluidSimRunner:
    '''
    Runs the fluid simulation frame by frame and stores results.

    Handles scenario setup, the frame loop with progress reporting,
    and optional frame export.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()

    @property
    def exporter(self) -> FrameExporter:
        '''Frame exporter collecting this run.'''
        return self._exporter

    def runFromConfig(
        self,
        configPath: str,
        nFrames: int = 120,
        doExport: bool = True,
        exportDir: str = 'FluidSim2D/output',
    ) -> dict:
        '''
        Run a simulation from a JSON configuration file.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file
        nFrames : int
            Number of frames to simulate
        doExport : bool
            Whether to export frame data
        exportDir : str
            Output directory for frame export

        Returns:
        --------
        dict : Simulation results summary
        '''
        simConfig = SimulationConfig.fromJson(configPath)
        spawnConfig = SpawnConfig.fromJson(configPath)
        return self.run(simConfig, spawnConfig, nFrames=nFrames,
                        doExport=doExport, exportDir=exportDir, scenarioName='config')

    def run(
        self,
        simConfig: SimulationConfig,
        spawnConfig: SpawnConfig,
        nFrames: int = 120,
        doExport: bool = True,
        exportDir: str = 'FluidSim2D/output',
        scenarioName: str = 'default',
        interactionPoint: tuple[float, float] | None = None,
    ) -> dict:
        '''
        Run the fluid simulation for a number of frames.

        Parameters:
        -----------
        simConfig : SimulationConfig
            Simulation configuration
        spawnConfig : SpawnConfig
            Spawn region configuration
        nFrames : int
            Number of frames to simulate
        doExport : bool
            Whether to export frame data
        exportDir : str
            Output directory for frame export
        scenarioName : str
            Scenario name for the export filename
        interactionPoint : tuple[float, float] | None
            If given, the user interaction is active at this point

        Returns:
        --------
        dict : Simulation results summary
        '''
        simConfig.validate()

        print()
        print('=' * 62)
        print('  FLUIDSIM2D -- DOUBLE-DENSITY SPH SIMULATION')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SCENARIO SETUP')
        print('-' * 62)

        spawnData = ParticleSpawner(spawnConfig).getSpawnData()
        interactionActive = interactionPoint is not None
        params = simConfig.toParams(
            interactionPoint=interactionPoint if interactionActive else (0.0, 0.0),
            interactionActive=interactionActive,
        )
        sim = FluidSimulation.fromSpawnData(spawnData, params)

        print(f'  Particles:         {sim.nParticles:8d}')
        print(f'  Spawn Seed:        {spawnConfig.seed:8d}')
        print(f'  Smoothing Radius:  {simConfig.interactionRadius:8.3f}')
        print(f'  Target Density:    {simConfig.targetDensity:8.2f}')
        print(f'  Bounds Size:       {simConfig.boundsSize[0]:8.2f} x {simConfig.boundsSize[1]:.2f}')
        print(f'  Steps Per Frame:   {simConfig.stepsPerFrame:8d}')
        print(f'  Fixed Time Steps:  {str(simConfig.useFixedTimeSteps):>8}')
        print(f'  Frames:            {nFrames:8d}')
        print()

        # Record initial frame
        self._exporter.addFrame(sim.currentState, sim.positions, sim.velocities)

        #--------------------------------------------------------------------#
        # Frame Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Time":>8}  {"Frame":>8}  {"Substep":>8}  {"dt":>10}  {"MaxVel":>8}  {"KE":>10}')
        print('  ' + '-' * 58)

        wallClockStart = timeModule.time()
        lastFrameClock = timeModule.perf_counter()
        printInterval = max(1, nFrames // 20)
        state: SimulationState = sim.currentState

        for frame in range(1, nFrames + 1):
            now = timeModule.perf_counter()
            frameDuration = self._frameDuration(simConfig, frame, now - lastFrameClock)
            lastFrameClock = now

            if frameDuration > 0.0:
                sim.stepFrame(
                    frameDuration,
                    simConfig.stepsPerFrame,
                    params,
                    speedMultiplier=simConfig.simulationSpeed,
                )

            state = sim.currentState
            self._exporter.addFrame(state, sim.positions, sim.velocities)

            if frame % printInterval == 0 or frame == nFrames:
                printProgress(state, frame)

        wallClockSeconds = timeModule.time() - wallClockStart

        print()
        print(f'  Simulation complete.')
        print(f'  Total substeps:    {state.substep:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        print(f'  Frames recorded:   {self._exporter.nFrames:8d}')
        print()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            print('-' * 62)
            print('  EXPORTING FRAME DATA')
            print('-' * 62)

            exportPath = self._exporter.export(
                config=simConfig,
                outputDir=exportDir,
                scenarioName=scenarioName,
            )
            print(f'  Exported to: {exportPath}')
            print()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        print('=' * 62)
        print('  SIMULATION SUMMARY')
        print('=' * 62)
        print(f'  Final KE:          {state.kineticEnergy:10.4f}')
        print(f'  Max Velocity:      {state.maxVelocity:10.4f}')
        print(f'  Centroid:          ({state.centroid[0]:.3f}, {state.centroid[1]:.3f})')
        print('=' * 62)
        print()

        sim.teardown()

        return {
            'finalState': state,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
        }

    @staticmethod
    def _frameDuration(simConfig: SimulationConfig, frame: int, elapsed: float) -> float:
        '''
        Duration to simulate for this frame.

        Fixed stepping always advances 1/60 s. Variable stepping uses
        the wall-clock time since the previous frame and skips the
        first few frames, whose deltas are dominated by start-up.
        '''
        if simConfig.useFixedTimeSteps:
            return const.fixedFrameDuration
        if frame <= const.variableStepWarmupFrames:
            return 0.0
        return elapsed


def printProgress(state: SimulationState, frame: int) -> None:
    '''Print one row of the progress table.'''
    print(
        f'  {state.time:8.4f}  {frame:8d}  {state.substep:8d}  {state.dt:10.2e}  '
        f'{state.maxVelocity:8.4f}  {state.kineticEnergy:10.4f}'
    )


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    runner = FluidSimRunner()

    if args.config:
        simConfig = SimulationConfig.fromJson(args.config)
        spawnConfig = SpawnConfig.fromJson(args.config)
        scenarioName = 'config'
    else:
        simFactory, spawnFactory = presets[args.preset]
        simConfig = simFactory()
        spawnConfig = spawnFactory()
        scenarioName = args.preset

    if args.seed is not None:
        spawnConfig.seed = args.seed
    if args.variable_steps:
        simConfig.useFixedTimeSteps = False

    runner.run(
        simConfig,
        spawnConfig,
        nFrames=args.frames,
        doExport=not args.no_export,
        exportDir=args.output_dir,
        scenarioName=scenarioName,
        interactionPoint=tuple(args.interaction_point) if args.interaction_point else None,
    )


if __name__ == '__main__':
    main()

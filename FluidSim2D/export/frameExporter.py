# -- Simulation Frame Exporter -- #

'''
Exports fluid simulation frames as JSON for offline rendering.

Collects readout snapshots (positions and speeds) during a run and
writes them, together with the simulation configuration and the
energy history, to a single JSON file.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
import os
from datetime import datetime

import numpy as np

from FluidSim2D.sph.protocols import SimulationConfig, SimulationState


class FrameExporter:
    '''
    Collects and exports simulation frame data as JSON.

    Usage:
        exporter = FrameExporter()
        # During the frame loop:
        exporter.addFrame(sim.currentState, sim.positions, sim.velocities)
        # After the run:
        exporter.export(config, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "fluidSim2D", "nFrames": 120, "created": "...", ... },
        "config": { "boundsSize": [17.1, 9.3], ... },
        "frames": [
            {
                "time": 0.0,
                "positions": [[x0, y0], [x1, y1], ...],
                "speeds": [v0, v1, ...]
            },
            ...
        ],
        "energy": {
            "times": [...],
            "kinetic": [...]
        }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._energyHistory: dict[str, list[float]] = {
            'times': [],
            'kinetic': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    def addFrame(
        self,
        state: SimulationState,
        positions: np.ndarray,
        velocities: np.ndarray,
    ) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Diagnostics of the frame
        positions : np.ndarray
            Particle positions, shape (N, 2)
        velocities : np.ndarray
            Particle velocities, shape (N, 2)
        '''
        speeds = np.linalg.norm(velocities, axis=1)

        frame = {
            'time': round(state.time, 6),
            'positions': np.round(positions, 5).tolist(),
            'speeds': np.round(speeds, 5).tolist(),
        }
        self._frames.append(frame)

        self._energyHistory['times'].append(round(state.time, 6))
        self._energyHistory['kinetic'].append(round(state.kineticEnergy, 6))

    def toDict(self, config: SimulationConfig) -> dict:
        '''Assemble the export document without writing it.'''
        return {
            'meta': {
                'type': 'fluidSim2D',
                'nFrames': len(self._frames),
                'nParticles': len(self._frames[0]['positions']) if self._frames else 0,
                'created': datetime.now().isoformat(),
            },
            'config': {
                'boundsSize': np.asarray(config.boundsSize).tolist(),
                'obstacleSize': np.asarray(config.obstacleSize).tolist(),
                'obstaclePosition': np.asarray(config.obstaclePosition).tolist(),
                'smoothingRadius': config.interactionRadius,
                'targetDensity': config.targetDensity,
                'stepsPerFrame': config.stepsPerFrame,
            },
            'frames': self._frames,
            'energy': self._energyHistory,
        }

    def export(
        self,
        config: SimulationConfig,
        outputDir: str = 'FluidSim2D/output',
        scenarioName: str = 'default',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'fluidSim2D_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        with open(filepath, 'w') as f:
            json.dump(self.toDict(config), f, indent=None, separators=(',', ':'))

        return filepath

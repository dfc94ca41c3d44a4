# -- Export Package -- #

'''
Data export utilities for fluid simulation runs.

Exports frame data as JSON for offline rendering.

Sean Bowman [10/19/2026]
'''

from FluidSim2D.export.frameExporter import FrameExporter

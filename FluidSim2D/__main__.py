# -- FluidSim2D Module Entry Point -- #

'''
Allows running the headless simulation with python -m FluidSim2D.

Sean Bowman [10/19/2026]
'''

from FluidSim2D.runner import main


if __name__ == '__main__':
    main()

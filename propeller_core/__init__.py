"""
Propeller blade design core.

Airfoil section generation, BEMT performance analysis and 3D blade
surface construction shared by the design tools.
"""

__version__ = "0.1.0"

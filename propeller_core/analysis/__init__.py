"""Analysis module for propeller core."""

from .bemt import (
    BEMTSolver,
    BEMTResult,
    OperatingConditions,
    SolverSettings,
    PerformanceCurves,
    EfficiencyMap,
    NumericDegenerate,
    prandtl_loss,
)
from .polar_database import PolarDatabase, interpolate_polar

__all__ = [
    "BEMTSolver",
    "BEMTResult",
    "OperatingConditions",
    "SolverSettings",
    "PerformanceCurves",
    "EfficiencyMap",
    "NumericDegenerate",
    "prandtl_loss",
    "PolarDatabase",
    "interpolate_polar",
]

"""IO module for propeller core."""

from .schema import SCHEMA_VERSION, validate_schema
from .export import export_json, export_stl, export_obj, export_performance_csv
from .import_handler import import_json, import_airfoil, InvalidFormat

__all__ = [
    "SCHEMA_VERSION",
    "validate_schema",
    "export_json",
    "export_stl",
    "export_obj",
    "export_performance_csv",
    "import_json",
    "import_airfoil",
    "InvalidFormat",
]

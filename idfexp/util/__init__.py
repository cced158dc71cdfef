"""
Miscellaneous Utilities.

Spatial helpers for rasters, path helpers for scripts (environment variable
expansion, base path resolution, file counting) and context managers.
"""

from idfexp.util.context import ignore_warnings
from idfexp.util.path import (
    add_postfix,
    count_files,
    expand_environment_variables,
    resolve_path,
)
from idfexp.util.spatial import (
    _xycoords,
    coord_reference,
    empty_2d,
    is_divisor,
    spatial_reference,
)

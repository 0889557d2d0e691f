"""
Grid layout table for the 27-cubie assembly.

Each cubie index (1-27) owns one fixed slot of a 3x3x3 lattice with step 3
and values {-6, -3, 0} per axis. The enumeration walks the top layer (y=0)
first, then the middle and bottom layers, snaking along x row by row.
"""

from typing import Dict, List, Mapping, Tuple

GridCoord = Tuple[int, int, int]

GRID_STEP = 3
GRID_VALUES = (-6, -3, 0)

GRID_LAYOUT: Dict[int, GridCoord] = {
    # top layer, y = 0
    1: (-6, 0, 0),
    2: (-3, 0, 0),
    3: (0, 0, 0),
    4: (0, 0, -3),
    5: (-3, 0, -3),
    6: (-6, 0, -3),
    7: (-6, 0, -6),
    8: (-3, 0, -6),
    9: (0, 0, -6),
    # middle layer, y = -3
    10: (-6, -3, 0),
    11: (-3, -3, 0),
    12: (0, -3, 0),
    13: (0, -3, -3),
    14: (-3, -3, -3),
    15: (-6, -3, -3),
    16: (-6, -3, -6),
    17: (-3, -3, -6),
    18: (0, -3, -6),
    # bottom layer, y = -6
    19: (-6, -6, 0),
    20: (-3, -6, 0),
    21: (0, -6, 0),
    22: (0, -6, -3),
    23: (-3, -6, -3),
    24: (-6, -6, -3),
    25: (-6, -6, -6),
    26: (-3, -6, -6),
    27: (0, -6, -6),
}

DEFAULT_SHIFT: Tuple[float, float, float] = (3.0, 3.0, 3.0)


def grid_position(index: int, table: Mapping[int, GridCoord] = GRID_LAYOUT) -> GridCoord:
    """
    Look up the base grid coordinate of a cubie.

    Args:
        index: Cubie index, 1-based
        table: Layout table to read from

    Returns:
        (x, y, z) integer coordinate

    Raises:
        ValueError: If the index has no slot in the table
    """
    if index not in table:
        raise ValueError(f"Cubie index must be in 1-{len(table)}, got {index}")
    return table[index]


def shifted_position(index: int,
                     shift: Tuple[float, float, float] = DEFAULT_SHIFT,
                     table: Mapping[int, GridCoord] = GRID_LAYOUT) -> Tuple[float, float, float]:
    """Grid coordinate plus the uniform construction-time shift."""
    x, y, z = grid_position(index, table)
    sx, sy, sz = shift
    return (x + sx, y + sy, z + sz)


def validate_layout(table: Mapping[int, GridCoord] = GRID_LAYOUT) -> List[str]:
    """
    Check a layout table for shared or off-lattice slots.

    Returns:
        List of problems, empty when the table is valid
    """
    problems = []
    seen: Dict[GridCoord, int] = {}

    for index in sorted(table):
        coord = tuple(table[index])
        if len(coord) != 3:
            problems.append(f"Cubie {index}: coordinate {coord} is not 3D")
            continue
        off_lattice = [v for v in coord if v not in GRID_VALUES]
        if off_lattice:
            problems.append(f"Cubie {index}: {coord} is off the {GRID_VALUES} lattice")
        if coord in seen:
            problems.append(f"Cubie {index}: {coord} is already used by cubie {seen[coord]}")
        else:
            seen[coord] = index

    return problems


def layout_rows(table: Mapping[int, GridCoord] = GRID_LAYOUT) -> List[Tuple[int, int, int, int]]:
    """Rows of (index, x, y, z) for console listings."""
    return [(index, *table[index]) for index in sorted(table)]

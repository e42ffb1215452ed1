"""
cg2d — мінімальна бібліотека для 2D комп'ютерної геометрії.
Зараз: триангуляція Делоне «розділяй і володарюй» (Guibas–Stolfi) на quad-edge,
інкрементальна вставка, комірки Вороного / центроїдні / інцентрові.
"""

__version__ = "0.1.0"

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from cg2d.geom import Pt, EPS, centroid, unique_points
from cg2d.predicates import (
    orient2d, ccw, almost_equal, almost_collinear, in_circumcircle_2d,
    circumcenter_2d, circumcenter_3d, triangle_centroid, incenter,
)
from cg2d.mesh import QuadEdgeMesh, UNSET
from cg2d.cell import Cell
from cg2d.delaunay import Delaunay2D, CellMode
from cg2d.pipeline import triangulate

__all__ = [
    "Pt", "EPS", "centroid", "unique_points",
    "orient2d", "ccw", "almost_equal", "almost_collinear", "in_circumcircle_2d",
    "circumcenter_2d", "circumcenter_3d", "triangle_centroid", "incenter",
    "QuadEdgeMesh", "UNSET", "Cell", "Delaunay2D", "CellMode",
    "triangulate", "__version__",
]

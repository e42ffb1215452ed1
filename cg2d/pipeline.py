from __future__ import annotations
from typing import Dict, Iterable, List, Tuple

from .delaunay import Delaunay2D
from .geom import Pt, PointLike, unique_points
from .predicates import orient2d


def _ccw_triple(pts: List[Pt], i: int, j: int, k: int) -> Tuple[int, int, int]:
    if orient2d(pts[i], pts[j], pts[k]) < 0:
        return (i, k, j)
    return (i, j, k)


def triangulate(
    points: Iterable[PointLike],
    backend: str = "internal",
) -> Tuple[List[Pt], List[Tuple[int, int, int]]]:
    """
    Повний пайплайн:
      - прибирає дублікати точок (по x, y);
      - будує триангуляцію Делоне: нашим Delaunay2D (backend="internal")
        або SciPy Delaunay (backend="scipy", Qhull під капотом).

    Повертає:
      pts        — список Pt у фінальному порядку;
      triangles  — трикутники як індекси у pts, проти годинникової стрілки.
    """
    pts: List[Pt] = unique_points(points)
    if len(pts) < 3:
        raise ValueError(f"Need at least 3 distinct points, got {len(pts)}")

    name = backend.lower()
    if name == "internal":
        dt: Delaunay2D = Delaunay2D(pts)
        dt.build()
        index: Dict[Pt, int] = {p: i for i, p in enumerate(pts)}
        tris = [_ccw_triple(pts, index[a], index[b], index[c]) for a, b, c in dt.triangles()]
        return pts, tris

    if name == "scipy":
        try:
            import numpy as np
            from scipy.spatial import Delaunay
        except ImportError as e:
            raise RuntimeError(
                "backend='scipy', але SciPy не встановлено. "
                "Встанови scipy або використай backend='internal'."
            ) from e

        arr = np.array([(p.x, p.y) for p in pts], dtype=float)
        dela = Delaunay(arr)
        tris = [_ccw_triple(pts, *(int(i) for i in simplex)) for simplex in dela.simplices]
        return pts, tris

    raise ValueError(f"Невідомий backend: {backend}")

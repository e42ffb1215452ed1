# examples/main.py
from __future__ import annotations

import logging
import random

from cg2d.delaunay import Delaunay2D, CellMode
from cg2d.geom import Pt
from cg2d.logging_config import setup_logging
from cg2d.pipeline import triangulate


def random_points(n: int, seed: int = 7):
    """n випадкових точок в [0,1]^2 з «висотою» z."""
    rnd = random.Random(seed)
    return [Pt(rnd.random(), rnd.random(), rnd.random()) for _ in range(n)]


def main():
    setup_logging(level=logging.DEBUG)

    # --- 1) Вхідні дані ---
    points = random_points(200)

    # --- 2) Триангуляція ---
    dt = Delaunay2D(points)
    if not dt.build():
        print("Замало точок.")
        return
    tris = dt.triangles()
    print(f"Вершини:      {len(dt.sites)}")
    print(f"Трикутників:  {len(tris)}")

    # --- 3) Валідація ---
    report = dt.validate()
    print("VALIDATION:", {k: (v if not isinstance(v, list) else len(v)) for k, v in report.items()})

    # --- 4) Вставка кількох точок усередину ---
    inserted = sum(dt.insert_site(Pt(0.25 + 0.5*random.random(), 0.25 + 0.5*random.random()), safe=True)
                   for _ in range(20))
    print(f"Вставлено:    {inserted}")

    # --- 5) Комірки Вороного (центр кола в R^3 з урахуванням z) ---
    cells = dt.export_cells(CellMode.VORONOI, radius=10.0, use_3d=True)
    print(f"Комірок:      {len(cells)} (на межі: {sum(c.on_bounds for c in cells)})")

    # --- 6) Звірка зі SciPy ---
    pts, ours = triangulate([(p.x, p.y) for p in dt.sites], backend="internal")
    _, theirs = triangulate([(p.x, p.y) for p in pts], backend="scipy")
    same = {frozenset(t) for t in ours} == {frozenset(t) for t in theirs}
    print(f"Збіг зі SciPy: {same}")


if __name__ == "__main__":
    main()

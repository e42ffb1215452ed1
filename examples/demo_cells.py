# examples/demo_cells.py
from cg2d.geom import unique_points
from cg2d.delaunay import Delaunay2D, CellMode

if __name__ == "__main__":
    # квадрат + внутрішні точки
    raw = [
        (0,0), (4,0), (4,3), (0,3),
        (2,1.5), (1,1), (3,2.2), (1.2,2.4), (2.9,0.7)
    ]
    pts = unique_points(raw)

    dt = Delaunay2D(pts)
    dt.build()

    for mode in (CellMode.VORONOI, CellMode.CENTROID, CellMode.INCENTER):
        cells = dt.export_cells(mode, radius=20.0, use_3d=False)
        on_bounds = sum(1 for c in cells if c.on_bounds)
        print(f"{mode.value}: cells={len(cells)} on_bounds={on_bounds}")
        for c in cells:
            ring = ", ".join(f"({p.x:.2f}, {p.y:.2f})" for p in c.bounds)
            print(f"  site ({c.center.x}, {c.center.y}): {ring}")

from cg2d.geom import Pt, unique_points
from cg2d.delaunay import Delaunay2D

if __name__ == "__main__":
    raw = [
        (0,0), (4,0), (4,3), (0,3),
        (2,1.5), (1,1), (3,2.2)
    ]
    pts = unique_points(raw)
    dt = Delaunay2D(pts)
    dt.build()

    for p in (Pt(1.5, 2.0), Pt(2.0, 1.5), Pt(9.0, 9.0), Pt(3.5, 0.5)):
        ok = dt.insert_site(p, safe=True)
        print(f"insert {p}: {'ok' if ok else 'rejected'}")

    report = dt.validate()
    print("VALIDATION:", report)
    print("Triangles:", len(dt.triangles()))

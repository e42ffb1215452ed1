# examples/demo_pipeline.py
from cg2d.pipeline import triangulate

if __name__ == "__main__":
    square = [
        (0,0), (1,0), (1,1), (0,1),
        (0.5,0.5), (0.2,0.8), (0.8,0.2), (0.5,0.5)
    ]

    pts, tris = triangulate(square, backend="internal")  # або "scipy"
    print("Vertices:", len(pts))
    print("Triangles:", len(tris))

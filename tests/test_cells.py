"""
Tests for dual cell export (Voronoi / centroid / incenter)
==========================================================
"""

import random
from collections import Counter
from math import dist

import pytest

from cg2d.cell import Cell
from cg2d.delaunay import CellMode, Delaunay2D
from cg2d.geom import Pt
from cg2d.predicates import triangle_centroid

RADIUS = 10.0


def build(points):
    dt = Delaunay2D(points)
    assert dt.build()
    return dt


def key(p):
    return round(p.x, 9), round(p.y, 9)


def xy(p):
    return p.x, p.y


def hull_size(dt):
    return len(list(dt.mesh.right_edges(dt.rightmost_edge, ccw=False)))


def test_cell_container():
    c = Cell(0, Pt(1, 1))
    assert len(c) == 0 and c.points == [Pt(1, 1)]
    c.add(Pt(2, 2))
    assert len(c) == 1 and c.points == [Pt(1, 1), Pt(2, 2)]
    assert Cell(0, Pt(0, 0)).id != c.id


def test_one_cell_per_site(cloud):
    dt = build(cloud)
    cells = dt.export_cells(CellMode.VORONOI, RADIUS)
    assert len(cells) == len(cloud)
    assert {c.center for c in cells} == set(cloud)
    hull = [c for c in cells if c.on_bounds]
    assert len(hull) == hull_size(dt)
    for c in cells:
        assert c.reconstructed == c.on_bounds
        assert len(c) >= 3
        assert dt.mesh.org(c.primal) is c.center


@pytest.mark.parametrize("use_3d", [True, False])
def test_voronoi_vertices_are_empty_circle_centers(cloud, use_3d):
    dt = build(cloud)
    for c in dt.export_cells("voronoi", RADIUS, use_3d=use_3d):
        if c.on_bounds:
            continue
        for b in c.bounds:
            r = dist(xy(c.center), xy(b))
            nearest = min(dist(xy(s), xy(b)) for s in cloud)
            assert nearest == pytest.approx(r, rel=1e-7)


def test_voronoi_edges_are_shared(cloud):
    dt = build(cloud)
    cells = dt.export_cells(CellMode.VORONOI, RADIUS)
    segments = Counter()
    for c in cells:
        ring = [key(b) for b in c.bounds]
        for i, p in enumerate(ring):
            segments[(p, ring[(i + 1) % len(ring)])] += 1
    for c in cells:
        if c.on_bounds:
            continue
        ring = [key(b) for b in c.bounds]
        for i, p in enumerate(ring):
            q = ring[(i + 1) % len(ring)]
            assert segments[(p, q)] == 1
            assert segments[(q, p)] == 1


def test_far_vertices_of_hull_cells(cloud):
    dt = build(cloud)
    for c in dt.export_cells(CellMode.VORONOI, RADIUS):
        if not c.on_bounds:
            continue
        first, last = c.bounds[0], c.bounds[-1]
        assert not dt.inside_convex_hull(first)
        assert not dt.inside_convex_hull(last)
        assert dist(xy(first), xy(c.bounds[1])) == pytest.approx(RADIUS)
        assert dist(xy(last), xy(c.bounds[-2])) == pytest.approx(RADIUS)


def test_switching_mode_recomputes_duals(cloud):
    dt = build(cloud)
    dt.export_cells(CellMode.VORONOI, RADIUS)
    around = {}
    for t in dt.triangles():
        g = key(triangle_centroid(*t))
        for p in t:
            around.setdefault(p, set()).add(g)

    cells = dt.export_cells(CellMode.CENTROID, RADIUS)
    interior = [c for c in cells if not c.on_bounds]
    assert interior
    for c in interior:
        assert {key(b) for b in c.bounds} == around[c.center]


def test_incenter_cells_stay_inside(cloud):
    dt = build(cloud)
    for c in dt.export_cells("incenter", RADIUS):
        inner = c.bounds[1:-1] if c.on_bounds else c.bounds
        assert all(dt.inside_convex_hull(b) for b in inner)


def test_export_is_repeatable(cloud):
    dt = build(cloud)
    first = dt.export_cells(CellMode.VORONOI, RADIUS)
    second = dt.export_cells(CellMode.VORONOI, RADIUS)
    assert [c.bounds for c in first] == [c.bounds for c in second]
    assert {c.id for c in first}.isdisjoint(c.id for c in second)


def test_cells_follow_insertion(cloud):
    dt = build(cloud)
    dt.export_cells(CellMode.VORONOI, RADIUS)
    site = Pt(0.5, 0.5)
    assert dt.insert_site(site, safe=True)
    cells = dt.export_cells(CellMode.VORONOI, RADIUS)
    assert len(cells) == len(cloud) + 1
    mine = next(c for c in cells if c.center == site)
    for b in mine.bounds:
        r = dist(xy(site), xy(b))
        assert min(dist(xy(s), xy(b)) for s in dt.sites) == pytest.approx(r, rel=1e-7)


def test_height_only_matters_in_3d():
    rnd = random.Random(5)
    flat = [Pt(rnd.random(), rnd.random(), 5.0) for _ in range(30)]
    dt = build(flat)
    in_3d = dt.export_cells(CellMode.VORONOI, RADIUS, use_3d=True)
    in_2d = dt.export_cells(CellMode.VORONOI, RADIUS, use_3d=False)
    for a, b in zip(in_3d, in_2d):
        assert a.center is b.center
        for p, q in zip(a.bounds, b.bounds):
            assert (p.x, p.y, p.z) == pytest.approx((q.x, q.y, q.z))

    hilly = [Pt(p.x, p.y, rnd.uniform(0, 3)) for p in flat]
    dt = build(hilly)
    in_3d = dt.export_cells(CellMode.VORONOI, RADIUS, use_3d=True)
    in_2d = dt.export_cells(CellMode.VORONOI, RADIUS, use_3d=False)
    moved = [
        (p, q)
        for a, b in zip(in_3d, in_2d)
        for p, q in zip(a.bounds, b.bounds)
        if dist(xy(p), xy(q)) > 1e-6
    ]
    assert moved


def test_unknown_mode_is_rejected(cloud):
    dt = build(cloud)
    with pytest.raises(ValueError):
        dt.export_cells("delaunay", RADIUS)


def test_flat_triangulation_has_no_cells():
    dt = build([Pt(0, 0), Pt(1, 1), Pt(2, 2)])
    assert dt.export_cells(CellMode.VORONOI, RADIUS) == []

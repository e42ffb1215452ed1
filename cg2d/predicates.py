# cg2d/predicates.py
from __future__ import annotations
from math import fabs

from .geom import Pt, EPS, add, sub, scale, cross, dot, norm, centroid, planar_distance_squared

# ---------- орієнтація ----------
def orient2d(a: Pt, b: Pt, c: Pt) -> float:
    """Подвоєна орієнтована площа (a, b, c): >0 проти годинникової, <0 за годинниковою, 0 — колінеарні."""
    return (b.x - a.x)*(c.y - a.y) - (b.y - a.y)*(c.x - a.x)

def ccw(a: Pt, b: Pt, c: Pt) -> bool:
    return orient2d(a, b, c) > 0.0

def left_of(p: Pt, org: Pt, dest: Pt) -> bool:
    """p строго ліворуч від напрямленого відрізка org -> dest."""
    return ccw(p, org, dest)

def right_of(p: Pt, org: Pt, dest: Pt) -> bool:
    return ccw(p, dest, org)

# ---------- «майже» перевірки ----------
def almost_equal(p: Pt, q: Pt, eps: float = EPS) -> bool:
    return fabs(p.x - q.x) <= eps and fabs(p.y - q.y) <= eps

def almost_collinear(a: Pt, b: Pt, c: Pt, eps: float = EPS) -> bool:
    """
    Відносний тест: |orient2d| <= eps * (найдовша сторона)^2,
    тобто висота трикутника мала порівняно з його розміром.
    Збіжні точки вважаються колінеарними.
    """
    longest = max(planar_distance_squared(a, b),
                  planar_distance_squared(b, c),
                  planar_distance_squared(c, a))
    return fabs(orient2d(a, b, c)) <= eps * longest

# ---------- тест кола ----------
def incircle(a: Pt, b: Pt, c: Pt, d: Pt) -> float:
    """
    Знак тесту «чи лежить d усередині кола через a, b, c?»
    (a, b, c проти годинникової стрілки):
      >0  всередині,
      <0  зовні,
       0  на колі.
    """
    adx = a.x - d.x; ady = a.y - d.y
    bdx = b.x - d.x; bdy = b.y - d.y
    cdx = c.x - d.x; cdy = c.y - d.y
    alift = adx*adx + ady*ady
    blift = bdx*bdx + bdy*bdy
    clift = cdx*cdx + cdy*cdy
    return (alift*(bdx*cdy - cdx*bdy)
            + blift*(cdx*ady - adx*cdy)
            + clift*(adx*bdy - bdx*ady))

def in_circumcircle_2d(d: Pt, a: Pt, b: Pt, c: Pt) -> bool:
    """d строго всередині описаного кола (a, b, c)."""
    return incircle(a, b, c, d) > 0.0

# ---------- центри трикутника ----------
def circumcenter_2d(a: Pt, b: Pt, c: Pt) -> Pt:
    """Центр описаного кола в площині XY; z — середнє вершин."""
    d = 2.0 * (a.x*(b.y - c.y) + b.x*(c.y - a.y) + c.x*(a.y - b.y))
    if d == 0.0:
        raise ValueError("Вироджений трикутник: вершини колінеарні")
    a2 = a.x*a.x + a.y*a.y
    b2 = b.x*b.x + b.y*b.y
    c2 = c.x*c.x + c.y*c.y
    ux = (a2*(b.y - c.y) + b2*(c.y - a.y) + c2*(a.y - b.y)) / d
    uy = (a2*(c.x - b.x) + b2*(a.x - c.x) + c2*(b.x - a.x)) / d
    return Pt(ux, uy, (a.z + b.z + c.z) / 3.0)

def circumcenter_3d(a: Pt, b: Pt, c: Pt) -> Pt:
    """
    Центр кола через три точки в R^3:
      a + (|u|^2 (v x w) + |v|^2 (w x u)) / (2 |w|^2),  u = b - a, v = c - a, w = u x v.
    """
    u = sub(b, a)
    v = sub(c, a)
    w = cross(u, v)
    w2 = dot(w, w)
    if w2 == 0.0:
        raise ValueError("Вироджений трикутник: вершини колінеарні")
    num = add(scale(cross(v, w), dot(u, u)), scale(cross(w, u), dot(v, v)))
    return add(a, scale(num, 0.5 / w2))

def triangle_centroid(a: Pt, b: Pt, c: Pt) -> Pt:
    return centroid((a, b, c))

def incenter(a: Pt, b: Pt, c: Pt) -> Pt:
    """Центр вписаного кола: вершини зважені довжинами протилежних сторін."""
    la = norm(sub(b, c))
    lb = norm(sub(c, a))
    lc = norm(sub(a, b))
    perimeter = la + lb + lc
    if perimeter == 0.0:
        raise ValueError("Вироджений трикутник: усі вершини збігаються")
    inv = 1.0 / perimeter
    return Pt((la*a.x + lb*b.x + lc*c.x) * inv,
              (la*a.y + lb*b.y + lc*c.y) * inv,
              (la*a.z + lb*b.z + lc*c.z) * inv)

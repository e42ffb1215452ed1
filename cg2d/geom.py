from __future__ import annotations
from dataclasses import dataclass
from math import sqrt
from typing import Dict, Iterable, List, Sequence, Tuple, Union

EPS = 1e-10  # відносний епс для «майже» перевірок

@dataclass(frozen=True)
class Pt:
    """Точка площини з необов'язковою висотою z (у предикатах не бере участі)."""
    x: float
    y: float
    z: float = 0.0
    def __iter__(self):
        yield self.x; yield self.y; yield self.z

PointLike = Union[Pt, Sequence[float]]

def as_pt(p: PointLike) -> Pt:
    """Pt як є; (x, y) або (x, y, z) -> Pt."""
    if isinstance(p, Pt):
        return p
    if len(p) == 2:
        return Pt(float(p[0]), float(p[1]))
    if len(p) == 3:
        return Pt(float(p[0]), float(p[1]), float(p[2]))
    raise ValueError(f"Очікується 2 або 3 координати, отримано {len(p)}")

def add(a: Pt, b: Pt) -> Pt:
    return Pt(a.x + b.x, a.y + b.y, a.z + b.z)

def sub(a: Pt, b: Pt) -> Pt:
    return Pt(a.x - b.x, a.y - b.y, a.z - b.z)

def scale(a: Pt, k: float) -> Pt:
    return Pt(a.x*k, a.y*k, a.z*k)

def dot(a: Pt, b: Pt) -> float:
    return a.x*b.x + a.y*b.y + a.z*b.z

def cross(a: Pt, b: Pt) -> Pt:
    return Pt(a.y*b.z - a.z*b.y,
              a.z*b.x - a.x*b.z,
              a.x*b.y - a.y*b.x)

def norm(a: Pt) -> float:
    return sqrt(dot(a, a))

def same_xy(a: Pt, b: Pt) -> bool:
    """Точний збіг у площині (z ігноруємо)."""
    return a.x == b.x and a.y == b.y

def planar_distance_squared(a: Pt, b: Pt) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx*dx + dy*dy

def centroid(points: Iterable[Pt]) -> Pt:
    xs = ys = zs = 0.0
    n = 0
    for p in points:
        xs += p.x; ys += p.y; zs += p.z; n += 1
    if n == 0:
        raise ValueError("empty set")
    inv = 1.0 / n
    return Pt(xs*inv, ys*inv, zs*inv)

def unique_points(points: Iterable[PointLike], scale: float = 1e9) -> List[Pt]:
    """
    Груба дедуплікація з квантуванням по (x, y): перша точка виграє, її z зберігається.
    `scale=1e9` ≈ 1e-9 на координату.
    """
    seen: Dict[Tuple[int, int], Pt] = {}
    for raw in points:
        p = as_pt(raw)
        key = (int(round(p.x*scale)), int(round(p.y*scale)))
        if key not in seen:
            seen[key] = p
    return list(seen.values())

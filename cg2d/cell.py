# cg2d/cell.py
from __future__ import annotations
from dataclasses import dataclass, field
from itertools import count
from typing import List

from .geom import Pt

_ids = count()


@dataclass
class Cell:
    """
    Комірка двоїстого графа (Вороного / центроїдна / інцентрова).
    primal: первинне ребро, origin якого — центр комірки (site).
    bounds: двоїсті вершини по колу навколо site.
    on_bounds: site лежить на опуклій оболонці.
    reconstructed: хоча б одна вершина побудована «на нескінченності».
    """
    primal: int
    center: Pt
    bounds: List[Pt] = field(default_factory=list)
    on_bounds: bool = False
    reconstructed: bool = False
    id: int = field(default_factory=lambda: next(_ids))

    def add(self, p: Pt) -> None:
        self.bounds.append(p)

    @property
    def points(self) -> List[Pt]:
        """Центр, далі межа."""
        return [self.center] + self.bounds

    def __len__(self) -> int:
        return len(self.bounds)

# cg2d/mesh.py
from __future__ import annotations
from typing import Dict, Generic, Iterator, List, Optional, Set, Tuple, TypeVar, Union

from .geom import Pt

T = TypeVar("T")


class _Unset:
    """Маркер «двоїста вершина ще не обчислена» (окремий від None)."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

Vertex = Union[Pt, _Unset]


class QuadEdgeMesh(Generic[T]):
    """
    Арена quad-edge (Guibas & Stolfi, 1985).

    Ребро — ціле число (handle). Пучок займає 4 суміжні слоти, e & ~3 — його база,
    e & 3 — номер повороту r:
      r = 0  первинне ребро a -> b,
      r = 1  двоїсте: з правої грані в ліву,
      r = 2  первинне b -> a (sym),
      r = 3  двоїсте: з лівої грані в праву.
    rot(e) = r + 1, sym(e) = r + 2, rot_inv(e) = r + 3 (mod 4).

    На кожне ребро: next (наступне проти годинникової навколо origin), origin,
    мітка обходу. Payload — одне значення на неорієнтоване ребро (e та sym(e) спільні).
    Видалений пучок іде у free-list і перевикористовується.
    """

    def __init__(self) -> None:
        self._next: List[int] = []
        self._org: List[Vertex] = []
        self._mark: List[int] = []
        self._data: List[Optional[T]] = []   # 2 слоти на пучок: первинне / двоїсте
        self._alive: List[bool] = []         # по пучку
        self._free: List[int] = []           # номери вільних пучків
        self._generation = 0
        self.revision = 0                    # росте з кожною структурною зміною

    # ---------------- алгебра поворотів ----------------
    @staticmethod
    def rot(e: int) -> int:
        return (e & ~3) | ((e + 1) & 3)

    @staticmethod
    def sym(e: int) -> int:
        return e ^ 2

    @staticmethod
    def rot_inv(e: int) -> int:
        return (e & ~3) | ((e + 3) & 3)

    # ---------------- навігація ----------------
    def onext(self, e: int) -> int:
        return self._next[e]

    def oprev(self, e: int) -> int:
        return self.rot(self._next[self.rot(e)])

    def dnext(self, e: int) -> int:
        return self.sym(self._next[self.sym(e)])

    def dprev(self, e: int) -> int:
        return self.rot_inv(self._next[self.rot_inv(e)])

    def lnext(self, e: int) -> int:
        return self.rot(self._next[self.rot_inv(e)])

    def lprev(self, e: int) -> int:
        return self.sym(self._next[e])

    def rnext(self, e: int) -> int:
        return self.rot_inv(self._next[self.rot(e)])

    def rprev(self, e: int) -> int:
        return self._next[self.sym(e)]

    def org(self, e: int) -> Vertex:
        return self._org[e]

    def dest(self, e: int) -> Vertex:
        return self._org[e ^ 2]

    def set_org(self, e: int, v: Vertex) -> None:
        self._org[e] = v

    def is_set(self, e: int) -> bool:
        return self._org[e] is not UNSET

    # ---------------- payload ----------------
    def data(self, e: int) -> Optional[T]:
        return self._data[(e >> 2) * 2 + (e & 1)]

    def set_data(self, e: int, value: Optional[T]) -> None:
        self._data[(e >> 2) * 2 + (e & 1)] = value

    # ---------------- кільця (ліниві, одноразові) ----------------
    def _ring(self, e: int, step) -> Iterator[int]:
        cur = e
        while True:
            yield cur
            cur = step(cur)
            if cur == e:
                break

    def edges_from(self, e: int, ccw: bool = True) -> Iterator[int]:
        """Усі ребра зі спільним origin, починаючи з e."""
        return self._ring(e, self.onext if ccw else self.oprev)

    def left_edges(self, e: int, ccw: bool = True) -> Iterator[int]:
        """Усі ребра зі спільною лівою гранню, починаючи з e."""
        return self._ring(e, self.lnext if ccw else self.lprev)

    def right_edges(self, e: int, ccw: bool = True) -> Iterator[int]:
        """Усі ребра зі спільною правою гранню, починаючи з e."""
        return self._ring(e, self.rnext if ccw else self.rprev)

    # ---------------- топологічні операції ----------------
    def make_edge(self, a: Pt, b: Pt) -> int:
        """Новий ізольований пучок; повертає ребро a -> b."""
        if self._free:
            q = self._free.pop()
            self._alive[q] = True
        else:
            q = len(self._alive)
            self._alive.append(True)
            self._next.extend((0, 0, 0, 0))
            self._org.extend((UNSET, UNSET, UNSET, UNSET))
            self._mark.extend((0, 0, 0, 0))
            self._data.extend((None, None))
        e = q * 4
        self._next[e] = e
        self._next[e + 1] = e + 3
        self._next[e + 2] = e + 2
        self._next[e + 3] = e + 1
        self._org[e] = a
        self._org[e + 1] = UNSET
        self._org[e + 2] = b
        self._org[e + 3] = UNSET
        for i in range(4):
            self._mark[e + i] = 0
        self._data[q * 2] = None
        self._data[q * 2 + 1] = None
        self.revision += 1
        return e

    def splice(self, a: int, b: int) -> None:
        """
        Перемикає кільця origin для a і b: два різні кільця зливаються в одне,
        одне кільце розпадається на два. Двоїсті кільця (грані) змінюються узгоджено.
        """
        alpha = self.rot(self._next[a])
        beta = self.rot(self._next[b])
        self._next[a], self._next[b] = self._next[b], self._next[a]
        self._next[alpha], self._next[beta] = self._next[beta], self._next[alpha]
        self.revision += 1

    def connect(self, a: int, b: int) -> int:
        """Нове ребро dest(a) -> org(b) у спільній лівій грані a та b."""
        e = self.make_edge(self.dest(a), self.org(b))
        self.splice(e, self.lnext(a))
        self.splice(self.sym(e), b)
        return e

    def delete(self, e: int) -> None:
        """
        Вирізати пучок з обох кілець і звільнити слоти.
        Викликач гарантує, що ребро не є останнім зв'язком сітки.
        """
        s = self.sym(e)
        self.splice(e, self.oprev(e))
        self.splice(s, self.oprev(s))
        q = e >> 2
        self._alive[q] = False
        base = q * 4
        for i in range(4):
            self._org[base + i] = UNSET
        self._data[q * 2] = None
        self._data[q * 2 + 1] = None
        self._free.append(q)

    def swap(self, e: int) -> None:
        """
        Фліп діагоналі опуклого чотирикутника з двох трикутників біля e.
        Той самий handle e після виклику — друга діагональ.
        """
        s = self.sym(e)
        a = self.oprev(e)
        b = self.oprev(s)
        self.splice(e, a)
        self.splice(s, b)
        self.splice(e, self.lnext(a))
        self.splice(s, self.lnext(b))
        self._org[e] = self.dest(a)
        self._org[s] = self.dest(b)

    # ---------------- обхід ----------------
    def begin_traversal(self) -> int:
        """Нове покоління міток: нічого очищати не треба."""
        self._generation += 1
        return self._generation

    def visited(self, e: int, generation: int) -> bool:
        return self._mark[e] == generation

    def mark(self, e: int, generation: int) -> None:
        self._mark[e] = generation

    # ---------------- корисні операції ----------------
    def is_alive(self, e: int) -> bool:
        return self._alive[e >> 2]

    def primal_edges(self) -> Iterator[int]:
        """По одному первинному ребру (r = 0) на живий пучок."""
        for q, alive in enumerate(self._alive):
            if alive:
                yield q * 4

    @property
    def edge_count(self) -> int:
        return len(self._alive) - len(self._free)

    def clear_duals(self) -> None:
        """Скинути всі обчислені двоїсті вершини в UNSET."""
        for e in self.primal_edges():
            self._org[e + 1] = UNSET
            self._org[e + 3] = UNSET

    # ---------- валідація ----------
    def _orbits(self, step) -> int:
        seen: Set[int] = set()
        count = 0
        for e in self.primal_edges():
            for start in (e, e + 2):
                if start in seen:
                    continue
                count += 1
                for cur in self._ring(start, step):
                    seen.add(cur)
        return count

    def validate(self) -> dict:
        """
        Перевірка топології:
          - next кожного ребра веде в живий пучок того ж типу (первинне/двоїсте);
          - oprev(onext(e)) == e;
          - усі ребра кільця onext мають той самий origin;
          - Ейлер: V - E + F (зовнішня грань теж рахується).
        Повертає словник з діагностикою (порожні списки = все ок).
        """
        bad_rings: List[Tuple[int, str]] = []
        for base in self.primal_edges():
            for e in range(base, base + 4):
                n = self._next[e]
                if not self._alive[n >> 2]:
                    bad_rings.append((e, "next_to_dead_edge"))
                    continue
                if (n & 1) != (e & 1):
                    bad_rings.append((e, "next_changes_kind"))
                    continue
                if self.oprev(n) != e:
                    bad_rings.append((e, "oprev_onext_mismatch"))
                if (e & 1) == 0 and self._org[n] is not self._org[e]:
                    bad_rings.append((e, "origin_mismatch_in_ring"))

        vertices = edges = faces = 0
        if not bad_rings:
            vertices = self._orbits(self.onext)
            edges = self.edge_count
            faces = self._orbits(self.lnext)

        return {
            "vertices": vertices,
            "edges": edges,
            "faces": faces,
            "euler": vertices - edges + faces,
            "bad_rings": bad_rings,
        }

    def stats(self) -> Dict[str, int]:
        return {"edges": self.edge_count, "slots": len(self._next), "free": len(self._free)}

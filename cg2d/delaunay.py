# cg2d/delaunay.py
from __future__ import annotations
import logging
from collections import deque
from enum import Enum
from math import inf, sqrt
from typing import Callable, Deque, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from .cell import Cell
from .geom import Pt, EPS, same_xy, planar_distance_squared
from .mesh import QuadEdgeMesh
from .predicates import (
    ccw, orient2d, almost_equal, almost_collinear, in_circumcircle_2d, incircle,
    circumcenter_2d, circumcenter_3d, triangle_centroid, incenter,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
CenterFn = Callable[[Pt, Pt, Pt], Pt]
Triangle = Tuple[Pt, Pt, Pt]


class CellMode(Enum):
    """Яку точку трикутника брати за двоїсту вершину."""
    CENTROID = "centroid"
    VORONOI = "voronoi"
    INCENTER = "incenter"


class Delaunay2D(Generic[T]):
    """
    Триангуляція Делоне «розділяй і володарюй» (Guibas & Stolfi, 1985)
    на quad-edge сітці + локалізація, інкрементальна вставка, експорт
    трикутників і двоїстих комірок.

    Вхід: послідовність Pt (z — висота, у предикатах не бере участі).
    build() сортує точки за (x, y) і будує сітку; повертає False, якщо точок < 2.
    """

    def __init__(self, points: Sequence[Pt], already_sorted: bool = False, eps: float = EPS):
        self.P: List[Pt] = list(points)
        self.eps = eps
        self._sorted = already_sorted
        self.mesh: QuadEdgeMesh[T] = QuadEdgeMesh()
        self._bounds: Optional[Tuple[int, int]] = None   # (ldo, rdo) після build
        self._flat = True                                # усі точки на одній прямій
        self._dual_key: Optional[tuple] = None           # для чого обчислені двоїсті вершини

    # ---------------- Публічний API ----------------
    def build(self) -> bool:
        """Побудувати триангуляцію з нуля. False — замало точок."""
        if len(self.P) < 2:
            logger.warning("Cannot triangulate %d point(s): need at least 2", len(self.P))
            return False
        if not self._sorted:
            self.P.sort(key=lambda p: (p.x, p.y))
            self._sorted = True

        # точні дублікати (x, y) — сусіди після сортування; лишаємо перший
        unique = [p for i, p in enumerate(self.P) if i == 0 or not same_xy(p, self.P[i - 1])]
        if len(unique) != len(self.P):
            logger.debug("Dropped %d duplicate site(s)", len(self.P) - len(unique))
            self.P = unique
        if len(self.P) < 2:
            logger.warning("Cannot triangulate %d distinct point(s): need at least 2", len(self.P))
            return False

        self.mesh = QuadEdgeMesh()
        self._dual_key = None
        self._bounds = self._triangulate(0, len(self.P))

        first, last = self.P[0], self.P[-1]
        self._flat = all(orient2d(first, last, p) == 0.0 for p in self.P)
        logger.debug("Triangulated %d points: %s, flat=%s",
                     len(self.P), self.mesh.stats(), self._flat)
        return True

    @property
    def built(self) -> bool:
        return self._bounds is not None

    @property
    def sites(self) -> List[Pt]:
        return self.P

    @property
    def leftmost_edge(self) -> int:
        """Ребро оболонки з крайньої лівої вершини, ліворуч від якого немає вершин."""
        m = self.mesh
        e = self._require_built()[0]
        while self._left_of(m.dest(m.onext(e)), e):
            e = m.onext(e)
        return e

    @property
    def rightmost_edge(self) -> int:
        """Ребро оболонки з крайньої правої вершини, праворуч від якого немає вершин."""
        m = self.mesh
        e = self._require_built()[1]
        while self._right_of(m.dest(m.oprev(e)), e):
            e = m.oprev(e)
        return e

    def is_hull_edge(self, e: int) -> bool:
        """Хоча б одна грань біля e — зовнішня (немає трикутника з цього боку)."""
        m = self.mesh
        return (not self._left_of(m.dest(m.onext(e)), e)
                or not self._right_of(m.dest(m.oprev(e)), e))

    def inside_convex_hull(self, pos: Pt) -> bool:
        """pos всередині опуклої оболонки або на її межі."""
        m = self.mesh
        for hull_edge in m.right_edges(self.rightmost_edge, ccw=False):
            # права грань hull_edge — зовнішня
            if self._right_of(pos, hull_edge):
                return False
        return True

    def closest_bounding_edge(self, pos: Pt) -> Optional[int]:
        """
        pos поза оболонкою -> найближче ребро оболонки, у якого pos ліворуч.
        pos всередині -> None.
        Один прохід по оболонці: відстань до origin спадає, поки не дійдемо до мінімуму.
        """
        m = self.mesh
        last_dist = inf
        best: Optional[int] = None
        for hull_edge in m.right_edges(self.rightmost_edge, ccw=False):
            if self._right_of(pos, hull_edge):
                dist = planar_distance_squared(pos, m.org(hull_edge))
                if dist < last_dist:
                    last_dist = dist
                    best = hull_edge
                else:
                    return m.sym(best)
            elif best is not None:
                return m.sym(best)
        return m.sym(best) if best is not None else None

    def locate(self, pos: Pt, edge: Optional[int] = None, safe: bool = False) -> int:
        """
        Знайти ребро e таке, що pos лежить на e або всередині лівої грані e.

        Якщо pos поза оболонкою, цикл не завершиться — спершу перевір
        inside_convex_hull() або передай safe=True (тоді для зовнішньої точки
        повертається closest_bounding_edge()).
        """
        bounds = self._require_built()
        if safe:
            outside = self.closest_bounding_edge(pos)
            if outside is not None:
                return outside

        m = self.mesh
        e = bounds[1] if edge is None else edge
        while True:
            if same_xy(pos, m.org(e)) or same_xy(pos, m.dest(e)):
                return e
            elif self._right_of(pos, e):
                e = m.sym(e)
            elif self._left_of(pos, m.onext(e)):
                e = m.onext(e)
            elif self._left_of(pos, m.dprev(e)):
                e = m.dprev(e)
            else:
                # всередині трикутника; віддаємо перевагу ребру, на якому pos майже лежить
                other = m.lprev(e)
                if almost_collinear(pos, m.org(other), m.dest(other), self.eps):
                    return other
                other = m.lnext(e)
                if almost_collinear(pos, m.org(other), m.dest(other), self.eps):
                    return other
                return e

    def insert_site(self, pos: Pt, edge: Optional[int] = None, safe: bool = False) -> bool:
        """
        Вставити нову вершину в готову триангуляцію.
        pos має бути всередині оболонки (safe=True перевіряє це).
        False — вставку відхилено, сітка не змінена:
          - pos поза оболонкою (safe=True);
          - вершина вже є (з точністю eps).
        Точка на ребрі оболонки розбиває це ребро й стає новою вершиною оболонки.
        Для виродженої сітки (усі точки на прямій) приймаються лише точки на ланцюжку.
        """
        bounds = self._require_built()
        m = self.mesh
        if safe and not self.inside_convex_hull(pos):
            logger.debug("Insert %s rejected: outside convex hull", pos)
            return False
        if self._flat:
            return self._insert_on_chain(pos)

        e = self.locate(pos, bounds[1] if edge is None else edge)

        # 1) перевірки до будь-яких змін у сітці
        if (almost_equal(m.org(e), pos, self.eps) or almost_equal(m.dest(e), pos, self.eps)
                or almost_equal(m.dest(m.lnext(e)), pos, self.eps)):
            logger.debug("Insert %s rejected: duplicate site", pos)
            return False
        on_edge = almost_collinear(m.org(e), m.dest(e), pos, self.eps)
        if on_edge and self.is_hull_edge(e):
            self._split_hull_edge(e, pos)
            self.P.append(pos)
            self._sorted = False
            return True

        # 2) точка на ребрі: прибираємо ребро, зірка стає чотирикутником
        if on_edge:
            t = m.oprev(e)
            m.delete(e)
            e = t

        # 3) віяло з pos до всіх вершин зіркового многокутника
        base = m.make_edge(m.org(e), pos)
        first = m.org(base)
        m.splice(base, e)
        while True:
            base = m.connect(e, m.sym(base))
            e = m.oprev(base)
            if m.dest(e) is first:
                break

        # 4) підозрілі ребра: фліпаємо, поки не стане Делоне
        e = m.oprev(base)
        while True:
            t = m.oprev(e)
            if (self._right_of(m.dest(t), e)
                    and in_circumcircle_2d(pos, m.org(e), m.dest(t), m.dest(e))):
                m.swap(e)
                e = m.oprev(e)
            elif m.org(e) is first:
                break
            else:
                e = m.lprev(m.onext(e))

        self.P.append(pos)
        self._sorted = False
        return True

    def export_triangles(self) -> List[Pt]:
        """Вершини всіх трикутників підряд, по три (за годинниковою стрілкою)."""
        m = self.mesh
        triangles: List[Pt] = []
        generation = m.begin_traversal()
        queue: Deque[int] = deque()

        # зовнішня грань: позначаємо й кладемо в чергу протилежні ребра
        first = self.rightmost_edge
        for hull_edge in m.right_edges(first, ccw=False):
            queue.append(m.sym(hull_edge))
            m.mark(hull_edge, generation)

        while queue:
            e = queue.popleft()
            if m.visited(e, generation):
                continue
            for cur in m.right_edges(e, ccw=False):
                triangles.append(m.org(cur))
                if not m.visited(m.sym(cur), generation):
                    queue.append(m.sym(cur))
                m.mark(cur, generation)
        return triangles

    def triangles(self) -> List[Triangle]:
        flat = self.export_triangles()
        return [(flat[i], flat[i + 1], flat[i + 2]) for i in range(0, len(flat), 3)]

    def export_cells(self, mode: Union[CellMode, str], radius: float, use_3d: bool = True) -> List[Cell]:
        """
        Двоїсті комірки для всіх вершин. Вершини «на нескінченності» будуються
        на відстані radius від сусідньої скінченної двоїстої вершини; radius має
        перевищувати максимальну відстань між скінченними двоїстими вершинами.
        use_3d має значення лише для VORONOI (центр кола в R^3 замість XY).
        """
        self._require_built()
        mode = CellMode(mode)
        center = self._center_fn(mode, use_3d)
        if self._flat:
            logger.warning("No cells for a flat triangulation (%d collinear points)", len(self.P))
            return []

        m = self.mesh
        key = (m.revision, mode, use_3d, radius)
        if key != self._dual_key:
            logger.debug("Dual vertices reset for %s", key)
            m.clear_duals()
            self._dual_key = key

        cells: List[Cell] = []
        generation = m.begin_traversal()
        queue: Deque[int] = deque()

        # ребро з крайньої правої вершини, ліворуч від якого зовнішня грань
        first = self._bounds[1]
        while self._left_of(m.dest(m.onext(first)), first):
            first = m.onext(first)

        # 1) комірки вершин оболонки: обхід зовнішньої грані за годинниковою
        for hull_edge in m.left_edges(first, ccw=False):
            cell = Cell(hull_edge, m.org(hull_edge), on_bounds=True, reconstructed=True)
            far = m.rot_inv(hull_edge)   # ліва (зовнішня) грань hull_edge
            if not m.is_set(far):
                m.set_org(far, self._construct_at_infinity(m.sym(hull_edge), radius, center))
            cell.add(m.org(far))

            for cur in m.edges_from(hull_edge, ccw=False):
                dual = m.rot(cur)       # права грань cur
                if not m.is_set(dual):
                    if not self._right_of(m.dest(m.oprev(cur)), cur):
                        m.set_org(dual, self._construct_at_infinity(cur, radius, center))
                    else:
                        m.set_org(dual, center(m.org(cur), m.dest(cur), m.dest(m.oprev(cur))))
                if not m.visited(m.sym(cur), generation):
                    queue.append(m.sym(cur))
                m.mark(cur, generation)
                cell.add(m.org(dual))
            cells.append(cell)

        # 2) внутрішні вершини: усі грані навколо — трикутники
        while queue:
            e = queue.popleft()
            if m.visited(e, generation):
                continue
            cell = Cell(e, m.org(e))
            for cur in m.edges_from(e, ccw=False):
                dual = m.rot(cur)
                if not m.is_set(dual):
                    m.set_org(dual, center(m.org(cur), m.dest(cur), m.dest(m.oprev(cur))))
                if not m.visited(m.sym(cur), generation):
                    queue.append(m.sym(cur))
                m.mark(cur, generation)
                cell.add(m.org(dual))
            cells.append(cell)
        return cells

    # ---------------- Діагностика ----------------
    def validate(self) -> dict:
        """
        Топологія сітки (див. QuadEdgeMesh.validate) + локальна умова Делоне:
        для кожного внутрішнього ребра протилежна вершина не всередині кола
        трикутника з іншого боку. Локальна умова всюди = глобальна.
        """
        self._require_built()
        m = self.mesh
        report = m.validate()
        non_delaunay: List[int] = []
        if not report["bad_rings"]:
            for e in m.primal_edges():
                if self.is_hull_edge(e):
                    continue
                a, b = m.org(e), m.dest(e)
                left = m.dest(m.onext(e))
                right = m.dest(m.oprev(e))
                if incircle(a, b, left, right) > self.eps:
                    non_delaunay.append(e)
        report["non_delaunay"] = non_delaunay
        return report

    # ---------------- Внутрішні методи ----------------
    def _require_built(self) -> Tuple[int, int]:
        if self._bounds is None:
            raise RuntimeError("Triangulation is not built: call build() first")
        return self._bounds

    def _left_of(self, p: Pt, e: int) -> bool:
        return ccw(p, self.mesh.org(e), self.mesh.dest(e))

    def _right_of(self, p: Pt, e: int) -> bool:
        return ccw(p, self.mesh.dest(e), self.mesh.org(e))

    def _valid(self, e: int, base: int) -> bool:
        """dest(e) строго над базовим ребром (праворуч від base, що йде справа наліво)."""
        m = self.mesh
        return ccw(m.dest(e), m.dest(base), m.org(base))

    @staticmethod
    def _center_fn(mode: CellMode, use_3d: bool) -> CenterFn:
        if mode is CellMode.CENTROID:
            return triangle_centroid
        if mode is CellMode.VORONOI:
            return circumcenter_3d if use_3d else circumcenter_2d
        if mode is CellMode.INCENTER:
            return incenter
        raise ValueError(f"Невідомий режим комірок: {mode!r}")

    def _construct_at_infinity(self, primal: int, radius: float, center: CenterFn) -> Pt:
        """
        Двоїста вершина праворуч від primal (там немає трикутника).
        Від двоїстої вершини лівої грані (трикутник, обчислюється за потреби)
        відкладаємо radius уздовж правої нормалі до primal.
        """
        m = self.mesh
        left = m.rot_inv(primal)
        if not m.is_set(left):
            m.set_org(left, center(m.org(primal), m.dest(primal), m.dest(m.onext(primal))))
        c = m.org(left)

        a, b = m.org(primal), m.dest(primal)
        tx = b.x - a.x
        ty = b.y - a.y
        k = radius / sqrt(tx*tx + ty*ty)
        return Pt(c.x + ty*k, c.y - tx*k, c.z)

    def _split_hull_edge(self, e: int, pos: Pt) -> None:
        """
        pos лежить на ребрі оболонки e: ребро a -> b замінюється на a -> pos -> b,
        pos з'єднується з третьою вершиною c трикутника біля e.
        Далі фліпи лише по внутрішніх ребрах (b, c) і (c, a).
        """
        m = self.mesh
        if not self._left_of(m.dest(m.lnext(e)), e):
            e = m.sym(e)                 # трикутник ліворуч
        a, b = m.org(e), m.dest(e)
        n1, n2 = m.lnext(e), m.lprev(e)  # b -> c, c -> a
        outer = m.oprev(e)               # сусід e біля a з боку зовнішньої грані
        stale = [(i, m.org(h)) for i, h in enumerate(self._bounds) if h >> 2 == e >> 2]

        m.delete(e)
        first = m.make_edge(a, pos)
        m.splice(first, outer)
        second = m.make_edge(pos, b)
        m.splice(second, m.sym(first))
        m.splice(m.sym(second), n1)
        m.connect(first, n2)             # pos -> c

        if stale:
            bounds = list(self._bounds)
            for i, v in stale:
                bounds[i] = first if v is a else m.sym(second)
            self._bounds = (bounds[0], bounds[1])
        logger.debug("Split hull edge %s-%s at %s", a, b, pos)
        self._legalize(pos, [n1, n2])

    def _legalize(self, pos: Pt, stack: List[int]) -> None:
        """Фліпи Лоусона: у стеку ребра, ліворуч від яких трикутник з вершиною pos."""
        m = self.mesh
        while stack:
            e = stack.pop()
            t = m.oprev(e)
            if (self._right_of(m.dest(t), e)
                    and in_circumcircle_2d(pos, m.org(e), m.dest(t), m.dest(e))):
                after = m.lnext(t)
                m.swap(e)
                stack.append(t)
                stack.append(after)

    def _insert_on_chain(self, pos: Pt) -> bool:
        """Вироджена сітка: pos має лежати всередині одного з відрізків ланцюжка."""
        m = self.mesh
        for e in m.primal_edges():
            a, b = m.org(e), m.dest(e)
            if almost_equal(a, pos, self.eps) or almost_equal(b, pos, self.eps):
                logger.debug("Insert %s rejected: duplicate site", pos)
                return False
        for e in m.primal_edges():
            a, b = m.org(e), m.dest(e)
            if not almost_collinear(a, b, pos, self.eps):
                continue
            if ((pos.x - a.x)*(b.x - a.x) + (pos.y - a.y)*(b.y - a.y) <= 0.0
                    or (pos.x - b.x)*(a.x - b.x) + (pos.y - b.y)*(a.y - b.y) <= 0.0):
                continue
            # a -> b стає a -> pos, додаємо pos -> b
            s = m.sym(e)
            neighbour = m.oprev(s)
            if neighbour != s:
                m.splice(s, neighbour)
            m.set_org(s, pos)
            tail = m.make_edge(pos, b)
            m.splice(tail, s)
            if neighbour != s:
                m.splice(m.sym(tail), neighbour)
            self._bounds = tuple(m.sym(tail) if h == s else h for h in self._bounds)
            self.P.append(pos)
            self._sorted = False
            return True
        logger.debug("Insert %s rejected: not on the collinear chain", pos)
        return False

    def _triangulate(self, lo: int, hi: int) -> Tuple[int, int]:
        """
        Триангулювати P[lo:hi] (відсортовані). Повертає (ldo, rdo):
        ребра оболонки з крайньої лівої та крайньої правої вершини.
        """
        m = self.mesh
        P = self.P
        n = hi - lo

        # ---- базові випадки ----
        if n == 2:
            a = m.make_edge(P[lo], P[lo + 1])
            return a, m.sym(a)

        if n == 3:
            p0, p1, p2 = P[lo], P[lo + 1], P[lo + 2]
            a = m.make_edge(p0, p1)
            b = m.make_edge(p1, p2)
            m.splice(m.sym(a), b)
            if ccw(p0, p1, p2):
                m.connect(b, a)
                return a, m.sym(b)
            if ccw(p0, p2, p1):
                c = m.connect(b, a)
                return m.sym(c), c
            # колінеарні: лишаємо ланцюжок
            return a, m.sym(b)

        # ---- поділ ----
        half = (n + 1) // 2
        ldo, ldi = self._triangulate(lo, lo + half)
        rdi, rdo = self._triangulate(lo + half, hi)

        # ---- нижня спільна дотична ----
        while True:
            if self._left_of(m.org(rdi), ldi):
                ldi = m.lnext(ldi)
            elif self._right_of(m.org(ldi), rdi):
                rdi = m.rprev(rdi)
            else:
                break

        # базове ребро справа наліво
        base = m.connect(m.sym(rdi), ldi)
        if m.org(ldi) is m.org(ldo):
            ldo = m.sym(base)
        if m.org(rdi) is m.org(rdo):
            rdo = base

        # ---- «спливаюча бульбашка» до верхньої дотичної ----
        while True:
            lcand = m.onext(m.sym(base))
            if self._valid(lcand, base):
                while in_circumcircle_2d(m.dest(m.onext(lcand)),
                                         m.dest(base), m.org(base), m.dest(lcand)):
                    t = m.onext(lcand)
                    m.delete(lcand)
                    lcand = t

            rcand = m.oprev(base)
            if self._valid(rcand, base):
                while in_circumcircle_2d(m.dest(m.oprev(rcand)),
                                         m.dest(base), m.org(base), m.dest(rcand)):
                    t = m.oprev(rcand)
                    m.delete(rcand)
                    rcand = t

            l_valid = self._valid(lcand, base)
            r_valid = self._valid(rcand, base)
            if not l_valid and not r_valid:
                break   # base — верхня дотична
            if not l_valid or (r_valid and in_circumcircle_2d(m.dest(rcand), m.dest(lcand),
                                                              m.org(lcand), m.org(rcand))):
                base = m.connect(rcand, m.sym(base))
            else:
                base = m.connect(m.sym(base), m.sym(lcand))

        return ldo, rdo

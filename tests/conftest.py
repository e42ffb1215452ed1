"""
Pytest Configuration
====================

Adds the repository root to sys.path so `cg2d` imports without installation,
and provides shared point sets.
"""

import random
import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from cg2d.geom import Pt  # noqa: E402


def random_points(n, seed, lo=0.0, hi=1.0):
    rnd = random.Random(seed)
    return [Pt(rnd.uniform(lo, hi), rnd.uniform(lo, hi)) for _ in range(n)]


@pytest.fixture
def cloud():
    """60 random points in general position."""
    return random_points(60, seed=1234)

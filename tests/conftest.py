"""Pytest fixtures for skeleton cleaning tests."""

import math
import os
import tempfile

import pytest

from skelclean.models import create_graph


SQRT2 = math.sqrt(2.0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def sail_graph():
    """
    Triangle with a short pendant edge.

        2
        |\\
        | |
        | \\
        0--1
        |
        3
    """
    return create_graph(
        [[(0, 0, 0)], [(2, 0, 0)], [(0, 3, 0)], [(0, -1, 0)]],
        [(0, 1, 2.0), (0, 2, 3.0), (1, 2, math.sqrt(13.0)), (0, 3, 1.0)],
    )


@pytest.fixture
def loop_graph():
    """Triangle with a zero-length loop on vertex 0."""
    return create_graph(
        [[(0, 0, 0)], [(-1, -1, 0)], [(1, -1, 0)]],
        [(0, 0, 0.0), (0, 1, 1.0), (0, 2, 1.0), (1, 2, 2.0)],
    )


@pytest.fixture
def kite_graph():
    """
    Three close vertices with a tail.

          ______4
        _/     _/
       /      /
     _/     _/
    2     _3
    |   _/
    0--1
    """
    return create_graph(
        [[(0, 0, 0)], [(1, 0, 0)], [(0, 1, 0)], [(2, 2, 0)], [(5, 5, 0)]],
        [
            (0, 1, 1.0), (0, 2, 1.0), (1, 3, math.sqrt(3.0)),
            (2, 3, math.sqrt(3.0)), (3, 4, 3 * SQRT2),
        ],
    )


@pytest.fixture
def dumbbell_graph():
    """
    Two triangles joined by a long edge.

    2      5
     \\    /
      1--3
     /    \\
    0      4
    """
    return create_graph(
        [[(0, -1, 0)], [(1, 0, 0)], [(0, 1, 0)], [(4, 0, 0)], [(5, -1, 0)], [(5, 1, 0)]],
        [
            (0, 1, SQRT2), (0, 2, 2.0), (1, 2, SQRT2),
            (3, 4, SQRT2), (4, 5, 2.0), (5, 3, SQRT2),
            (1, 3, 3.0),
        ],
    )


@pytest.fixture
def doorknob_graph():
    """
    Two short junctions that only merge on a second pass.

      4
      |
    1 |
    |\\2--6
    |
    |/3--7
    0 |
      |
      5
    """
    return create_graph(
        [
            [(0, 0, 0)], [(0, 3, 0)], [(1, 2, 0)], [(1, 1, 0)],
            [(1, 6, 0)], [(1, -3, 0)], [(3, 2, 0)], [(3, 1, 0)],
        ],
        [
            (0, 1, 3.0), (0, 3, SQRT2), (1, 2, SQRT2), (2, 4, 2.0),
            (3, 5, 2.0), (2, 6, 2.0), (3, 7, 2.0),
        ],
    )


@pytest.fixture
def arch_graph():
    """Single edge bending over four slab points."""
    return create_graph(
        [[(0, 0, 0)], [(5, 0, 0)]],
        [(0, 1, 4 * SQRT2 + 1, [(1, 1, 0), (2, 2, 0), (3, 2, 0), (4, 1, 0)])],
    )


@pytest.fixture
def three_segments_graph():
    """Straight line 0---1-2---3 along y."""
    return create_graph(
        [[(0, -16, 0)], [(0, -4, 0)], [(0, 4, 0)], [(0, 16, 0)]],
        [(0, 1, 12.0), (1, 2, 8.0), (2, 3, 12.0)],
    )


@pytest.fixture
def four_segments_graph():
    """Straight line 0---1-2-3---4 along x."""
    return create_graph(
        [[(-16, 0, 0)], [(-4, 0, 0)], [(0, 0, 0)], [(4, 0, 0)], [(16, 0, 0)]],
        [(0, 1, 12.0), (1, 2, 4.0), (2, 3, 4.0), (3, 4, 12.0)],
    )


SQUARE_VERTICES = [
    [(-1, -1, 0)], [(-1, 1, 0)], [(1, 1, 0)], [(1, -1, 0)],
    [(5, 4, 0)], [(-4, -5, 0)], [(5, -5, 0)],
]

SQUARE_EDGES = [
    (0, 1, 2.0), (1, 2, 2.0), (2, 3, 2.0), (3, 0, 2.0), (1, 3, 2 * SQRT2),
    (2, 4, 5.0), (0, 5, 5.0), (4, 6, 9.0), (5, 6, 9.0),
]


@pytest.fixture
def square_cluster_graph():
    """
    Triangle whose top corner is a square of four close vertices.

                4
              _/|
        3--2_/  |
        |\\_|    |
       _0--1    |
     _/         |
    /           |
    5-----------6
    """
    return create_graph(SQUARE_VERTICES, SQUARE_EDGES)


@pytest.fixture
def square_cluster_artefacts_graph():
    """
    The square cluster triangle with three loops, two parallel edges and
    a dead end from 6 to an extra vertex 7. 15 edges in total.
    """
    return create_graph(
        SQUARE_VERTICES + [[(7, -5, 0)]],
        SQUARE_EDGES + [
            (6, 4, 9.0),  # opposite-way parallel edge
            (5, 6, 9.0),  # same-way parallel edge
            (6, 7, 2.0),  # dead end
            (5, 5, 9.0),
            (6, 6, 9.0),
            (4, 4, 9.0),
        ],
    )


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from skelclean.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def graph_file(temp_dir, square_cluster_artefacts_graph):
    """Write the artefact graph to a JSON file."""
    from skelclean.io.graph_io import save_graph
    path = os.path.join(temp_dir, "artefacts.json")
    save_graph(square_cluster_artefacts_graph, path)
    return path


@pytest.fixture
def twig_graph():
    """
    Junction with a twig of two short edges.

        4
        |
        3
        |
    2---0---1
    """
    return create_graph(
        [[(0, 0, 0)], [(10, 0, 0)], [(-10, 0, 0)], [(0, 1, 0)], [(0, 2, 0)]],
        [(0, 1, 10.0), (0, 2, 10.0), (0, 3, 1.0), (3, 4, 1.0)],
    )


@pytest.fixture
def collapse_twig_graph():
    """
    Short edge whose collapse pulls a pendant vertex within reach.

    The centre of 0-1 lands at (1, 0, 0), sqrt(2) from vertex 3.

          3
         /
        0-1---------2
    """
    return create_graph(
        [[(0, 0, 0)], [(1, 0, 0)], [(20, 0, 0)], [(2, 1, 0)]],
        [(0, 1, 1.0), (1, 2, 19.0), (0, 3, math.sqrt(5.0))],
    )

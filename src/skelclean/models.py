"""
Pydantic data models for skeleton graph cleaning.

The graph is an arena: vertices and edges live in ordered lists and edges
refer to their endpoints by vertex index. Transformations never mutate a
graph, they materialize a new one.
"""

import hashlib
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class Point(BaseModel):
    """An integer voxel coordinate."""
    x: int
    y: int
    z: int

    model_config = ConfigDict(frozen=True, extra="forbid")

    def as_tuple(self):
        return (self.x, self.y, self.z)


class Vertex(BaseModel):
    """A junction or end point cluster of voxels."""
    points: List[Point] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")

    def has_point(self, point):
        """Check if the point belongs to the vertex footprint."""
        return point in self.points


class Edge(BaseModel):
    """
    A centerline branch between two vertices.

    v1 and v2 index into the owning graph's vertex list. slabs are the
    interior points ordered from v1 to v2.
    """
    v1: int = Field(..., ge=0)
    v2: int = Field(..., ge=0)
    slabs: List[Point] = Field(default_factory=list)
    length: float = 0.0
    edge_type: int = 0
    color: float = 0.0
    color3rd: float = 0.0

    model_config = ConfigDict(extra="forbid")

    def other_end(self, vertex_index):
        """Get the opposite endpoint of the edge."""
        return self.v2 if vertex_index == self.v1 else self.v1


class SkeletonGraph(BaseModel):
    """Vertices and edges of a skeleton."""
    vertices: List[Vertex] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_endpoints(self):
        n = len(self.vertices)
        for i, edge in enumerate(self.edges):
            if edge.v1 >= n or edge.v2 >= n:
                raise ValueError(
                    f"Edge {i} references vertex outside graph: ({edge.v1}, {edge.v2}), {n} vertices"
                )
        return self

    def degrees(self):
        """
        Count incident edges for every vertex.

        A self-loop contributes two to its vertex.
        """
        counts = [0] * len(self.vertices)
        for edge in self.edges:
            counts[edge.v1] += 1
            counts[edge.v2] += 1
        return counts

    def branches(self, vertex_index):
        """Indices of the edges incident to a vertex, in edge order."""
        return [
            i for i, e in enumerate(self.edges)
            if e.v1 == vertex_index or e.v2 == vertex_index
        ]

    def vertex_points(self):
        """All vertex points, flattened in vertex order."""
        return [p for v in self.vertices for p in v.points]


class PercentagesOfCulledEdges(BaseModel):
    """
    Breakdown of the edges removed while cleaning a graph.

    Counts are stored; percentages are relative to the input edge count.
    """
    total_edges: int = 0
    dead_ends: int = 0
    parallel_edges: int = 0
    loop_edges: int = 0
    cluster_edges: int = 0

    model_config = ConfigDict(frozen=True, extra="forbid")

    def _percentage(self, count):
        if self.total_edges == 0:
            return 0.0
        return count / self.total_edges * 100

    @property
    def percentage_dead_ends(self):
        return self._percentage(self.dead_ends)

    @property
    def percentage_parallel_edges(self):
        return self._percentage(self.parallel_edges)

    @property
    def percentage_loop_edges(self):
        return self._percentage(self.loop_edges)

    @property
    def percentage_cluster_edges(self):
        return self._percentage(self.cluster_edges)

    @property
    def removed_edges(self):
        """Total of all categories."""
        return self.dead_ends + self.parallel_edges + self.loop_edges + self.cluster_edges

    def as_dict(self):
        """Counts and percentages as a flat dictionary."""
        return {
            "total_edges": self.total_edges,
            "dead_ends": self.dead_ends,
            "parallel_edges": self.parallel_edges,
            "loop_edges": self.loop_edges,
            "cluster_edges": self.cluster_edges,
            "percentage_dead_ends": self.percentage_dead_ends,
            "percentage_parallel_edges": self.percentage_parallel_edges,
            "percentage_loop_edges": self.percentage_loop_edges,
            "percentage_cluster_edges": self.percentage_cluster_edges,
        }


class PassRecord(BaseModel):
    """Removals and graph size after one clustering pass."""
    pass_index: int
    loop_edges: int = 0
    parallel_edges: int = 0
    dead_ends: int = 0
    clusters_found: int = 0
    cluster_edges: int = 0
    num_vertices: int = 0
    num_edges: int = 0

    model_config = ConfigDict(extra="forbid")


class CleaningResult(BaseModel):
    """Output of a cleaning run."""
    graph: SkeletonGraph
    percentages: PercentagesOfCulledEdges
    passes: List[PassRecord] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class GraphReport(BaseModel):
    """Cleaning outcome for one input graph."""
    graph_id: str
    source_path: str
    output_path: str = ""
    input_vertices: int = 0
    input_edges: int = 0
    output_vertices: int = 0
    output_edges: int = 0
    percentages: PercentagesOfCulledEdges = Field(default_factory=PercentagesOfCulledEdges)
    passes: List[PassRecord] = Field(default_factory=list)
    validation: ValidationReport = Field(default_factory=ValidationReport)

    model_config = ConfigDict(extra="forbid")


class CleaningReport(BaseModel):
    """Root report covering every graph cleaned in a run."""
    report_id: str
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    threshold: Optional[float] = None
    calibration: List[float] = Field(default_factory=lambda: [1.0, 1.0, 1.0])
    iterative_pruning: bool = False
    use_clusters: bool = True
    graphs: List[GraphReport] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        return any(g.validation.has_errors for g in self.graphs)


# Graph construction helpers

def create_graph(vertex_points, edge_rows):
    """
    Build a graph from plain coordinates.

    vertex_points: list of point lists, e.g. [[(0, 0, 0)], [(1, 0, 0), (1, 1, 0)]]
    edge_rows: list of (v1, v2, length) or (v1, v2, length, slabs) tuples
    """
    vertices = [
        Vertex(points=[Point(x=p[0], y=p[1], z=p[2]) for p in points])
        for points in vertex_points
    ]
    edges = []
    for row in edge_rows:
        slabs = row[3] if len(row) > 3 else []
        edges.append(Edge(
            v1=row[0],
            v2=row[1],
            length=row[2],
            slabs=[Point(x=p[0], y=p[1], z=p[2]) for p in slabs],
        ))
    return SkeletonGraph(vertices=vertices, edges=edges)


def compose_graph(vertices, edges):
    """
    Materialize a new graph owning copies of the given parts.

    vertices: Vertex objects in output order
    edges: (edge, v1, v2) tuples, v1 and v2 indexing into vertices
    """
    return SkeletonGraph(
        vertices=[v.model_copy(deep=True) for v in vertices],
        edges=[e.model_copy(update={"v1": i, "v2": j}, deep=True) for e, i, j in edges],
    )


def subgraph(graph, vertex_indices, edge_indices):
    """
    Keep only the given vertices and edges, preserving their order.

    Every kept edge must have both endpoints among the kept vertices.
    """
    keep = sorted(set(vertex_indices))
    remap = {old: new for new, old in enumerate(keep)}
    edges = []
    for i in sorted(set(edge_indices)):
        edge = graph.edges[i]
        if edge.v1 not in remap or edge.v2 not in remap:
            raise ValueError(f"Edge {i} has an endpoint outside the kept vertices")
        edges.append((edge, remap[edge.v1], remap[edge.v2]))
    return compose_graph([graph.vertices[i] for i in keep], edges)


def to_networkx(graph):
    """
    Convert to a networkx MultiGraph.

    Nodes are vertex indices with a "points" attribute; parallel edges and
    loops are kept, each edge carries its index and length.
    """
    g = nx.MultiGraph()
    for i, vertex in enumerate(graph.vertices):
        g.add_node(i, points=[p.as_tuple() for p in vertex.points])
    for i, edge in enumerate(graph.edges):
        g.add_edge(edge.v1, edge.v2, key=i, length=edge.length, edge_type=edge.edge_type)
    return g


# ID generation functions for deterministic outputs

def generate_graph_id(source_path, index):
    """
    Generate deterministic graph ID from source path and index.
    """
    data = f"{source_path}:{index}"
    h = hashlib.sha256(data.encode()).hexdigest()[:12]
    return f"graph_{h}"


def generate_report_id(input_paths):
    """
    Generate deterministic report ID from input file paths.
    """
    sorted_paths = sorted(input_paths)
    data = ":".join(sorted_paths)
    h = hashlib.sha256(data.encode()).hexdigest()[:16]
    return f"report_{h}"

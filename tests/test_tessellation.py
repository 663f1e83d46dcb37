"""Tests for bounded Voronoi tessellation."""

import pytest
import numpy as np
from scipy.spatial import QhullError
from py_cellmap.core.errors import DegenerateInput
from py_cellmap.core.geometry import Rect, polygon_area
from py_cellmap.core.sampling import sample_points
from py_cellmap.core.tessellation import (
    build_cells, mirror_points, snap_to_bounds, tessellate, triangulate_and_clip
)


def signed_area(polygon):
    total = 0.0
    n = len(polygon)
    for i in range(n):
        j = (i + 1) % n
        total += polygon[i][0] * polygon[j][1] - polygon[j][0] * polygon[i][1]
    return total / 2


@pytest.fixture
def domain():
    return Rect(0, 0, 100, 100)


@pytest.fixture
def random_points():
    return sample_points(0, 0, 100, 100, 30, seed="tessellation")


class TestMirrorPoints:
    """Test reflection of points across the domain edges."""

    def test_reflections(self):
        """Test each reflected copy sits opposite its edge."""
        bounds = Rect(0, 0, 10, 20)
        mirrored = mirror_points(np.array([[2.0, 3.0]]), bounds)

        np.testing.assert_array_equal(mirrored, [[-2, 3], [18, 3], [2, -3], [2, 37]])


class TestTriangulateAndClip:
    """Test clipped Voronoi polygons."""

    def test_one_polygon_per_point(self, random_points, domain):
        """Test polygons are returned in input order, one per point."""
        polygons = triangulate_and_clip(random_points, domain)
        assert len(polygons) == len(random_points)

    def test_single_point_fills_domain(self):
        """Test that a lone point owns the whole rectangle."""
        bounds = Rect(0, 0, 10, 10)
        polygons = triangulate_and_clip(np.array([[3.0, 4.0]]), bounds)

        assert len(polygons[0]) == 4
        assert polygon_area(polygons[0]) == pytest.approx(100.0)

    def test_two_points_split_domain(self):
        """Test the bisector between two points divides the rectangle."""
        bounds = Rect(0, 0, 10, 10)
        polygons = triangulate_and_clip(np.array([[2.5, 5.0], [7.5, 5.0]]), bounds)

        assert polygon_area(polygons[0]) == pytest.approx(50.0)
        assert polygon_area(polygons[1]) == pytest.approx(50.0)
        assert max(x for x, _ in polygons[0]) == pytest.approx(5.0)

    def test_polygons_tile_domain(self, random_points, domain):
        """Test that the cell areas add up to the domain area."""
        polygons = triangulate_and_clip(random_points, domain)
        total = sum(polygon_area(p) for p in polygons)

        assert total == pytest.approx(100 * 100)

    def test_vertices_inside_domain(self, random_points, domain):
        """Test that every vertex is clipped to the rectangle."""
        for polygon in triangulate_and_clip(random_points, domain):
            for vertex in polygon:
                assert domain.contains(vertex)

    def test_counter_clockwise(self, random_points, domain):
        """Test polygons wind counter-clockwise with at least 3 vertices."""
        for polygon in triangulate_and_clip(random_points, domain):
            assert len(polygon) >= 3
            assert signed_area(polygon) > 0

    def test_point_inside_own_polygon(self, random_points, domain):
        """Test that each generating point lies within its polygon's extent."""
        for point, polygon in zip(random_points, triangulate_and_clip(random_points, domain)):
            xs = [v[0] for v in polygon]
            ys = [v[1] for v in polygon]
            assert min(xs) <= point[0] <= max(xs)
            assert min(ys) <= point[1] <= max(ys)

    def test_shared_vertices_exact(self, random_points, domain):
        """Test that interior vertices appear bit-identical in several polygons."""
        counts = {}
        for polygon in triangulate_and_clip(random_points, domain):
            for vertex in polygon:
                counts[vertex] = counts.get(vertex, 0) + 1

        eps = 1e-6
        interior = [v for v in counts
                    if eps < v[0] < 100 - eps and eps < v[1] < 100 - eps]
        assert interior
        # Interior Voronoi vertices join three or more cells
        assert all(counts[v] >= 3 for v in interior)

    def test_outside_point_rejected(self, domain):
        """Test points outside the rectangle fail explicitly."""
        with pytest.raises(DegenerateInput):
            triangulate_and_clip(np.array([[10.0, 10.0], [150.0, 10.0]]), domain)

    def test_point_on_edge_rejected(self, domain):
        """Test points on the domain edge fail explicitly."""
        with pytest.raises(DegenerateInput):
            triangulate_and_clip(np.array([[0.0, 10.0], [50.0, 50.0]]), domain)

    def test_duplicate_points_rejected(self, domain):
        """Test duplicate positions fail explicitly."""
        points = np.array([[10.0, 10.0], [40.0, 60.0], [10.0, 10.0]])
        with pytest.raises(DegenerateInput):
            triangulate_and_clip(points, domain)

    def test_empty_input_rejected(self, domain):
        """Test an empty point set fails explicitly."""
        with pytest.raises(DegenerateInput):
            triangulate_and_clip(np.empty((0, 2)), domain)

    def test_edge_vertices_exact(self, random_points, domain):
        """Test vertices near an edge sit exactly on it."""
        for polygon in triangulate_and_clip(random_points, domain):
            for x, y in polygon:
                for value, edge in ((x, 0.0), (x, 100.0), (y, 0.0), (y, 100.0)):
                    if abs(value - edge) < 1e-6:
                        assert value == edge

    def test_qhull_failure_chained(self, domain, monkeypatch):
        """Test Qhull errors surface as DegenerateInput with the cause kept."""
        def failing_voronoi(points):
            raise QhullError("QH6154 initial simplex is flat")

        monkeypatch.setattr("py_cellmap.core.tessellation.Voronoi", failing_voronoi)

        with pytest.raises(DegenerateInput) as excinfo:
            triangulate_and_clip(np.array([[10.0, 10.0], [40.0, 60.0]]), domain)
        assert isinstance(excinfo.value.__cause__, QhullError)


class TestSnapToBounds:
    """Test vertex clamping and edge snapping."""

    def test_snaps_and_clamps(self):
        """Test near-edge vertices move onto the edge and outliers are clamped."""
        bounds = Rect(0, 0, 100, 50)
        vertices = np.array([
            [43.6, 7.105427357601002e-15],
            [3.55e-15, 20.0],
            [100.00000000001, 49.9999999999999],
            [-1e-12, 25.0],
            [50.0, 25.0],
        ])

        snapped = snap_to_bounds(vertices, bounds)

        np.testing.assert_array_equal(snapped, [
            [43.6, 0.0],
            [0.0, 20.0],
            [100.0, 50.0],
            [0.0, 25.0],
            [50.0, 25.0],
        ])

    def test_input_untouched(self):
        """Test the source vertex array is not modified."""
        vertices = np.array([[1e-15, 5.0]])
        snap_to_bounds(vertices, Rect(0, 0, 10, 10))
        assert vertices[0, 0] == 1e-15


class TestTessellate:
    """Test snapshot and cell construction."""

    def test_cells_match_points(self, random_points, domain):
        """Test that cell i is centred on point i with polygon i."""
        snapshot = tessellate(random_points, domain)

        assert len(snapshot.cells) == len(random_points)
        for i, cell in enumerate(snapshot.cells):
            assert cell.center == (random_points[i, 0], random_points[i, 1])
            assert cell.boundary == snapshot.polygons[i]
            assert cell.corners == []
            assert cell.neighbors == set()

    def test_snapshot_points_read_only(self, random_points, domain):
        """Test that snapshot points cannot be mutated in place."""
        snapshot = tessellate(random_points, domain)
        with pytest.raises(ValueError):
            snapshot.points[0, 0] = 1.0

    def test_custom_tessellator(self, domain):
        """Test that any callable honouring the contract can be plugged in."""
        calls = []

        def fake(points, bounds):
            calls.append((len(points), bounds))
            return [[(0, 0), (1, 0), (1, 1)] for _ in points]

        snapshot = tessellate(np.array([[0.5, 0.3], [0.7, 0.2]]), domain, fake)

        assert calls == [(2, domain)]
        assert snapshot.cells[1].boundary == ((0, 0), (1, 0), (1, 1))

    def test_polygon_count_mismatch(self):
        """Test a tessellator returning the wrong number of polygons is rejected."""
        with pytest.raises(DegenerateInput):
            build_cells(np.array([[1.0, 1.0], [2.0, 2.0]]), [((0, 0), (1, 0), (1, 1))])

    def test_short_polygon_rejected(self):
        """Test polygons with fewer than three vertices are rejected."""
        points = np.array([[1.0, 1.0], [2.0, 2.0]])
        triangle = ((0, 0), (1, 0), (1, 1))
        with pytest.raises(DegenerateInput):
            build_cells(points, [triangle, ()])
        with pytest.raises(DegenerateInput):
            build_cells(points, [triangle, ((0, 0), (1, 0))])

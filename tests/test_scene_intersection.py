"""Unit tests for scene-level intersection.

Tests cover:
- SceneHitRecord with material_id
- Surface list storage, clearing and counts
- Closest hit selection among several spheres
- Parameter window handling at the scene level
"""

import pytest
import taichi as ti


def _intersect(origin, direction, t_min=0.001, t_max=1e30):
    """Run intersect_scene once and return (hit, t, point, normal, material_id)."""
    from src.minitracer.scene.intersection import intersect_scene, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, lo: ti.f32, hi: ti.f32):
        rec = intersect_scene(o, d, lo, hi)
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        material_id[None] = rec.material_id

    test_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    return hit[None], t_val[None], point[None], normal[None], material_id[None]


class TestSceneHitRecordBasics:
    """Tests for SceneHitRecord dataclass."""

    def test_scene_hit_record_has_material_id(self):
        """Test that SceneHitRecord includes material_id field."""
        from src.minitracer.scene.intersection import SceneHitRecord, vec3

        result_material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = SceneHitRecord(
                hit=1,
                t=5.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 0.0, 1.0),
                material_id=42,
            )
            result_material_id[None] = rec.material_id

        test_kernel()
        assert result_material_id[None] == 42

    def test_scene_hit_record_miss_has_negative_material_id(self):
        """Test that miss records have material_id = -1."""
        from src.minitracer.scene.intersection import _make_miss_record

        result_hit = ti.field(dtype=ti.i32, shape=())
        result_material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = _make_miss_record()
            result_hit[None] = rec.hit
            result_material_id[None] = rec.material_id

        test_kernel()
        assert result_hit[None] == 0
        assert result_material_id[None] == -1


class TestSurfaceListStorage:
    """Tests for surface list storage and management."""

    def test_add_sphere(self):
        """Test adding a sphere to the scene."""
        from src.minitracer.scene.intersection import add_sphere, get_sphere_count, vec3

        assert get_sphere_count() == 0
        idx = add_sphere(vec3(1.0, 2.0, 3.0), 0.5, material_id=1)
        assert idx == 0
        assert get_sphere_count() == 1

    def test_multiple_spheres(self):
        """Test indices follow insertion order."""
        from src.minitracer.scene.intersection import add_sphere, get_sphere_count, vec3

        for i in range(5):
            idx = add_sphere(vec3(float(i), 0.0, 0.0), 0.5, material_id=i)
            assert idx == i

        assert get_sphere_count() == 5

    def test_clear_scene(self):
        """Test clearing all spheres from the scene."""
        from src.minitracer.scene.intersection import (
            add_sphere,
            clear_scene,
            get_sphere_count,
            vec3,
        )

        add_sphere(vec3(0.0, 0.0, 0.0), 1.0, material_id=0)
        add_sphere(vec3(1.0, 0.0, 0.0), 0.5, material_id=1)
        assert get_sphere_count() == 2

        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity_exceeded_raises(self):
        """Test RuntimeError once the surface list is full."""
        from src.minitracer.scene import intersection
        from src.minitracer.scene.intersection import MAX_SPHERES, add_sphere, vec3

        intersection.num_spheres[None] = MAX_SPHERES
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere(vec3(0.0, 0.0, 0.0), 1.0)


class TestSingleSphereIntersection:
    """Tests for scene intersection with a single sphere."""

    def test_hit_single_sphere(self):
        """Test ray hitting a single sphere in the scene."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=5)

        hit, t, point, normal, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert abs(point[2] - (-2.0)) < 1e-5
        assert abs(normal[2] - 1.0) < 1e-5
        assert material_id == 5

    def test_miss_single_sphere(self):
        """Test ray missing the only sphere."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=5)

        hit, _, _, _, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 0
        assert material_id == -1

    def test_intersect_empty_scene(self):
        """Test an empty surface list never reports a hit."""
        hit, _, _, _, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 0
        assert material_id == -1

    def test_hit_rejected_by_t_min(self):
        """Test hits at or before t_min are ignored."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=0)

        # Both roots (2 and 4) are below t_min
        hit, _, _, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_min=5.0)
        assert hit == 0

    def test_hit_rejected_by_t_max(self):
        """Test hits beyond t_max are ignored."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=0)

        hit, _, _, _, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=1.5)
        assert hit == 0


class TestClosestHit:
    """Tests for closest-hit selection across the surface list."""

    def test_closest_of_two_spheres(self):
        """Test the nearer sphere wins."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=1)
        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, material_id=2)

        hit, t, _, _, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert material_id == 1

    def test_closest_of_two_spheres_reversed_order(self):
        """Test insertion order does not change the closest hit."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, material_id=2)
        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=1)

        hit, t, _, _, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert material_id == 1

    def test_ground_and_small_sphere(self):
        """Test the two-sphere default layout from the camera origin."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -1.0), 0.5, material_id=0)
        add_sphere(vec3(0.0, -100.5, -1.0), 100.0, material_id=1)

        # Straight ahead hits the small sphere at t = 0.5
        hit, t, _, normal, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 0.5) < 1e-5
        assert abs(normal[2] - 1.0) < 1e-5
        assert material_id == 0

        # Steeply downward misses the small sphere and lands on the ground
        hit, _, point, normal, material_id = _intersect((0.0, 0.0, 0.0), (0.0, -1.0, -0.2))
        assert hit == 1
        assert material_id == 1
        assert abs(point[1] - (-0.5)) < 1e-2
        assert normal[1] > 0.99

    def test_overlapping_spheres(self):
        """Test the nearest entry point wins when spheres overlap."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 2.0, material_id=7)
        add_sphere(vec3(0.0, 0.0, -4.0), 2.0, material_id=8)

        hit, t, _, _, material_id = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert material_id == 8

    def test_sphere_normal_propagated(self):
        """Test the scene record carries the sphere's outward normal."""
        from src.minitracer.scene.intersection import add_sphere, vec3

        add_sphere(vec3(2.0, 0.0, 0.0), 1.0, material_id=0)

        hit, _, point, normal, _ = _intersect((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))

        assert hit == 1
        assert abs(point[0] - 1.0) < 1e-5
        assert abs(normal[0] - (-1.0)) < 1e-5
        assert abs(normal[1]) < 1e-5
        assert abs(normal[2]) < 1e-5

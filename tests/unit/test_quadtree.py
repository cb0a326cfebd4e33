"""
Tests for the Barnes-Hut quadtree.
"""

from agentgraph_core.services.quadtree import QuadTree


def leaves(tree):
    found = []

    def collect(quad):
        if quad.is_leaf and quad.points:
            found.append(quad)
        return False

    tree.visit(collect)
    return found


class TestQuadTree:
    """Point insertion and traversal."""

    def test_every_point_lands_in_a_leaf(self):
        points = [(float(i), float(i * 2 % 7), i) for i in range(20)]
        tree = QuadTree(points)
        items = sorted(p[2] for leaf in leaves(tree) for p in leaf.points)
        assert items == list(range(20))

    def test_leaf_contains_its_points(self):
        tree = QuadTree([(0.0, 0.0, "a"), (100.0, 50.0, "b"), (30.0, 80.0, "c")])
        for leaf in leaves(tree):
            for x, y, _ in leaf.points:
                assert leaf.x0 <= x < leaf.x1
                assert leaf.y0 <= y < leaf.y1

    def test_coincident_points_share_a_leaf(self):
        tree = QuadTree([(5.0, 5.0, "a"), (5.0, 5.0, "b"), (9.0, 1.0, "c")])
        shared = [leaf for leaf in leaves(tree) if len(leaf.points) == 2]
        assert len(shared) == 1
        assert {p[2] for p in shared[0].points} == {"a", "b"}

    def test_empty_tree(self):
        tree = QuadTree([])
        assert tree.size == 0
        assert leaves(tree) == []

    def test_visit_after_is_post_order(self):
        tree = QuadTree([(0.0, 0.0, "a"), (10.0, 10.0, "b")])
        order = []
        tree.visit_after(order.append)
        assert order[-1] is tree.root
        assert len(order) > 1

    def test_visit_can_skip_children(self):
        tree = QuadTree([(0.0, 0.0, "a"), (10.0, 10.0, "b")])
        visited = []

        def stop_at_root(quad):
            visited.append(quad)
            return True

        tree.visit(stop_at_root)
        assert visited == [tree.root]

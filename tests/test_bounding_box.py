import unittest

from clean_onnx.types import BoundingBox, area, canonicalize, intersection_area, iou, union_area


def _box(x1, y1, x2, y2, label="obj", confidence=0.9) -> BoundingBox:
    return BoundingBox(label=label, confidence=confidence, x1=x1, y1=y1, x2=x2, y2=y2)


class TestBoundingBoxGeometry(unittest.TestCase):
    def test_area(self) -> None:
        self.assertEqual(_box(0, 0, 10, 10).area(), 100.0)
        self.assertEqual(area(_box(1.5, 2.0, 4.5, 3.0)), 3.0)

    def test_canonical_swaps_inverted_corners(self) -> None:
        b = _box(10, 8, 2, 4).canonical()
        self.assertEqual(b.as_xyxy(), (2, 4, 10, 8))
        self.assertEqual(b.label, "obj")
        self.assertEqual(_box(10, 8, 2, 4).area(), 32.0)

    def test_canonical_is_idempotent(self) -> None:
        for b in (_box(0, 0, 5, 5), _box(5, 5, 0, 0), _box(3, -1, -2, 7)):
            once = canonicalize(b)
            self.assertEqual(canonicalize(once), once)

    def test_intersection_union_iou(self) -> None:
        b1 = _box(0, 0, 10, 10)
        b2 = _box(5, 5, 15, 15)
        self.assertEqual(intersection_area(b1, b2), 25.0)
        self.assertEqual(union_area(b1, b2), 175.0)
        self.assertAlmostEqual(iou(b1, b2), 25.0 / 175.0)

    def test_union_identity(self) -> None:
        pairs = [
            (_box(0, 0, 10, 10), _box(5, 5, 15, 15)),
            (_box(0, 0, 10, 10), _box(20, 20, 30, 30)),
            (_box(2.5, 1.0, 7.25, 9.5), _box(9.0, 3.0, 1.0, 4.0)),
        ]
        for a, b in pairs:
            self.assertEqual(a.union(b), a.area() + b.area() - a.intersection(b))

    def test_iou_with_itself_is_one(self) -> None:
        for b in (_box(0, 0, 10, 10), _box(3.3, 1.1, 7.7, 9.9), _box(10, 10, 0, 0)):
            self.assertAlmostEqual(b.iou(b), 1.0)

    def test_disjoint_boxes(self) -> None:
        a = _box(0, 0, 10, 10)
        for b in (_box(20, 0, 30, 10), _box(0, 20, 10, 30), _box(10, 0, 20, 10)):
            self.assertEqual(a.intersection(b), 0.0)
            self.assertEqual(a.iou(b), 0.0)

    def test_zero_area_boxes_do_not_divide_by_zero(self) -> None:
        a = _box(5, 5, 5, 5)
        b = _box(5, 5, 5, 5)
        self.assertEqual(a.union(b), 0.0)
        self.assertEqual(a.iou(b), 0.0)

    def test_intersection_of_inverted_boxes(self) -> None:
        a = _box(10, 10, 0, 0)
        b = _box(15, 15, 5, 5)
        self.assertEqual(a.intersection(b), 25.0)

    def test_to_rect_truncates_and_canonicalises(self) -> None:
        self.assertEqual(_box(1.9, 2.2, 5.7, 6.1).to_rect(), (1, 2, 5, 6))
        self.assertEqual(_box(5.7, 6.1, 1.9, 2.2).to_rect(), (1, 2, 5, 6))

    def test_str(self) -> None:
        s = str(BoundingBox(label="cat", confidence=0.9, x1=1, y1=2, x2=3, y2=4))
        self.assertTrue(s.startswith("Object cat (confidence 0.900000)"))
        self.assertIn("(1.000000, 2.000000), (3.000000, 4.000000)", s)

    def test_is_immutable(self) -> None:
        b = _box(0, 0, 1, 1)
        with self.assertRaises(AttributeError):
            b.x1 = 5  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()

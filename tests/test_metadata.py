import tempfile
import unittest
from pathlib import Path

from clean_onnx.metadata import load_class_names


class TestLoadClassNames(unittest.TestCase):
    def _write(self, text: str) -> Path:
        td = tempfile.TemporaryDirectory()
        self.addCleanup(td.cleanup)
        path = Path(td.name) / "metadata.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_ordered_names(self) -> None:
        path = self._write(
            "description: Ultralytics YOLO11s model\n"
            "stride: 32\n"
            "names:\n"
            "  1: 'bicycle'\n"
            "  0: person\n"
            "  2: \"traffic light\"\n"
            "imgsz:\n"
            "- 640\n"
            "- 640\n"
        )
        self.assertEqual(load_class_names(path), ["person", "bicycle", "traffic light"])

    def test_gap_in_ids(self) -> None:
        path = self._write("names:\n  0: a\n  2: c\n")
        with self.assertRaises(ValueError):
            load_class_names(path)

    def test_no_names(self) -> None:
        path = self._write("stride: 32\n")
        with self.assertRaises(ValueError):
            load_class_names(path)


if __name__ == "__main__":
    unittest.main()

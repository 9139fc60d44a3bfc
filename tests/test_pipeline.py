import unittest

import numpy as np

from clean_onnx.config import ModelConfig
from clean_onnx.errors import InsufficientBufferError
from clean_onnx.pipeline import DetectionPipeline


class TestDetectionPipeline(unittest.TestCase):
    def setUp(self) -> None:
        self.cfg = ModelConfig.build(
            input_height=32,
            input_width=32,
            detection_slots=2,
            class_names=["cat", "dog"],
            confidence_threshold=0.5,
        )

    def test_encode_infer_decode(self) -> None:
        seen = {}

        def infer(blob: np.ndarray) -> np.ndarray:
            seen["shape"] = blob.shape
            seen["red"] = float(blob[0, 0].mean())
            out = np.zeros((1, 6, 2), dtype=np.float32)
            out[0, :, 0] = [16, 16, 8, 8, 0.2, 0.8]
            out[0, :, 1] = [4, 4, 2, 2, 0.1, 0.1]
            return out

        image = np.zeros((64, 128, 3), dtype=np.uint8)
        image[:, :, 2] = 255
        boxes = DetectionPipeline(infer, self.cfg)(image)

        self.assertEqual(seen["shape"], (1, 3, 32, 32))
        self.assertAlmostEqual(seen["red"], 1.0, places=5)
        self.assertEqual(len(boxes), 1)
        self.assertEqual(boxes[0].label, "dog")
        # 32x32 model space stretched back onto a 128x64 image.
        self.assertTrue(np.allclose(boxes[0].as_xyxy(), (48, 24, 80, 40)))

    def test_short_output_raises(self) -> None:
        pipeline = DetectionPipeline(lambda blob: np.zeros(5, dtype=np.float32), self.cfg)
        with self.assertRaises(InsufficientBufferError):
            pipeline(np.zeros((32, 32, 3), dtype=np.uint8))

    def test_inference_errors_propagate(self) -> None:
        def infer(blob: np.ndarray) -> np.ndarray:
            raise RuntimeError("session failed")

        with self.assertRaises(RuntimeError):
            DetectionPipeline(infer, self.cfg)(np.zeros((32, 32, 3), dtype=np.uint8))


if __name__ == "__main__":
    unittest.main()

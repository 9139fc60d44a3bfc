from __future__ import annotations

from typing import Callable, List

import numpy as np

from .config import ModelConfig
from .decoder import DetectionDecoder
from .encoder import TensorEncoder
from .types import BoundingBox


InferFn = Callable[[np.ndarray], np.ndarray]


class DetectionPipeline:
    """
    Plug-and-play pipeline: encode -> inference -> decode.

    `infer_fn` is the inference engine call: it receives the float32
    (1, 3, H, W) tensor and returns the raw detection output. Any failure it
    raises propagates unchanged and nothing is decoded.
    """

    def __init__(self, infer_fn: InferFn, model_cfg: ModelConfig, *, channel_order: str = "BGR"):
        self._infer_fn = infer_fn
        self.model_cfg = model_cfg
        self.encoder = TensorEncoder(model_cfg.encoding, channel_order=channel_order)
        self.decoder = DetectionDecoder(model_cfg.decoding)

    def preprocess(self, image: np.ndarray) -> np.ndarray:
        return self.encoder.blob(image)

    def __call__(self, image: np.ndarray) -> List[BoundingBox]:
        blob = self.preprocess(image)
        orig_h, orig_w = image.shape[:2]
        preds = self._infer_fn(blob)
        return self.decoder.decode(preds, orig_w, orig_h)

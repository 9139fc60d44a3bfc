import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import cv2

from clean_onnx import (
    CleanOnnxError,
    DetectionPipeline,
    draw_detections,
    load_model_config,
    yolo11s_config,
)


def read_image(path: str):
    img = cv2.imread(path)
    if img is None:
        raise FileNotFoundError(f"Could not read image at path: {path}")
    return img


def make_onnx_infer(model_path: Path, providers=None):
    try:
        import onnxruntime as ort  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError(
            "onnxruntime is required to run the model. Install it with `pip install onnxruntime` "
            "(or `onnxruntime-gpu`)."
        ) from e

    if not model_path.exists():
        raise FileNotFoundError(str(model_path))

    session = ort.InferenceSession(str(model_path), providers=providers)
    input_name = session.get_inputs()[0].name
    output_name = session.get_outputs()[0].name

    def infer(blob):
        return session.run([output_name], {input_name: blob})[0]

    return infer


def main() -> int:
    parser = argparse.ArgumentParser(description="Detect objects in one image with a YOLO ONNX export.")
    parser.add_argument("--image", required=True, help="Path to an input image.")
    parser.add_argument("--model", default="Models/yolo11s.onnx", help="Path to the .onnx model.")
    parser.add_argument(
        "--config",
        default=None,
        help="JSON model description (input size, slots, classes). Defaults to stock YOLO11s geometry.",
    )
    parser.add_argument("--conf", type=float, default=None, help="Override the confidence threshold.")
    parser.add_argument(
        "--keep-highest",
        action="store_true",
        help="Keep the highest-confidence box of each overlapping group instead of the first accepted one.",
    )
    parser.add_argument(
        "--onnx-providers",
        default=None,
        help='Comma-separated ORT providers, e.g. "CUDAExecutionProvider,CPUExecutionProvider".',
    )
    parser.add_argument("--show", action="store_true", help="Show a window with visualized detections.")
    parser.add_argument("--out", default=None, help="Optional output path to save the visualization.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    model_cfg = load_model_config(args.config) if args.config else yolo11s_config()
    decoding = model_cfg.decoding
    if args.conf is not None:
        decoding = replace(decoding, confidence_threshold=args.conf)
    if args.keep_highest:
        decoding = replace(decoding, keep_highest_confidence=True)
    model_cfg = replace(model_cfg, decoding=decoding)

    providers = None
    if args.onnx_providers:
        providers = [p.strip() for p in str(args.onnx_providers).split(",") if p.strip()]

    img = read_image(args.image)
    pipeline = DetectionPipeline(make_onnx_infer(Path(args.model), providers), model_cfg)

    try:
        boxes = pipeline(img)
    except CleanOnnxError as exc:
        print(f"Error analyzing image: {exc}", file=sys.stderr)
        return 1

    print(f"Loaded image: {img.shape[1]}x{img.shape[0]}")
    for box in boxes:
        print(box)

    if args.out or args.show:
        vis = draw_detections(img, boxes, show_score=True)
        if args.out:
            ok = cv2.imwrite(args.out, vis)
            if not ok:
                raise RuntimeError(f"Failed to write output image: {args.out}")
        if args.show:
            cv2.imshow("detections", vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

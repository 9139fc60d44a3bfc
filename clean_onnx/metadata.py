from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Union


def load_class_names(metadata_path: Union[str, Path]) -> List[str]:
    """
    Load the ordered class-name table from an exporter `metadata.yaml`.

    Only the `names` mapping is read:

        names:
          0: person
          1: bicycle
          ...

    The ids must be contiguous from 0 because the table is indexed by the
    class row of the model output. Parsed by hand to avoid a PyYAML dependency.
    """

    names: Dict[int, str] = {}
    in_names = False

    with open(metadata_path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line == "names:":
                in_names = True
                continue
            if not in_names:
                continue
            # A new top-level key ends the names block.
            if not raw[:1].isspace():
                break

            if ":" not in line:
                continue
            left, right = line.split(":", 1)
            left = left.strip()
            right = right.strip().strip("'").strip('"')
            if not left.isdigit():
                continue
            names[int(left)] = right

    if not names:
        raise ValueError(f"No class names found in {metadata_path}")
    missing = sorted(set(range(len(names))) - set(names))
    if missing:
        raise ValueError(f"Class ids in {metadata_path} must be contiguous from 0; missing {missing}")

    return [names[i] for i in range(len(names))]

"""
I/O utilities for the metrics artifact.

Provides consistent handling of the input formats the upstream pipeline
produces: plain JSON, gzip-compressed JSON, and the dashboard's JavaScript
configuration wrapper (``ataqv.configure({...});``).
"""

from __future__ import annotations

import gzip
import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from atacdash.core.exceptions import EmptyMetricsFileError, MalformedMetricsFileError
from atacdash.models.metrics import MetricsDataset

logger = logging.getLogger(__name__)

_CONFIGURE_CALL = re.compile(r"^\s*[\w.]+\.configure\(\s*(?P<body>.*)\)\s*;?\s*$", re.DOTALL)


def read_text(path: Path) -> str:
    """
    Read a text file, transparently decompressing ``.gz`` files.

    Args:
        path: Input file path.

    Returns:
        Decoded file contents.
    """
    if path.suffix.lower() == ".gz":
        with gzip.open(path, "rt", encoding="utf-8") as handle:
            return handle.read()
    return path.read_text(encoding="utf-8")


def parse_metrics_document(text: str, source: str = "<string>") -> dict[str, Any]:
    """
    Parse the raw artifact text into a mapping.

    Accepts bare JSON or the JavaScript ``configure(...)`` wrapper used by
    the browser dashboard.

    Raises:
        EmptyMetricsFileError: If the text is blank.
        MalformedMetricsFileError: If the text is not a JSON object.
    """
    if not text.strip():
        raise EmptyMetricsFileError(source)

    match = _CONFIGURE_CALL.match(text)
    body = match.group("body") if match else text

    try:
        raw = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedMetricsFileError(source, f"invalid JSON ({e})") from e

    if not isinstance(raw, dict):
        raise MalformedMetricsFileError(
            source, f"expected a JSON object, got {type(raw).__name__}"
        )
    return raw


def load_metrics(path: Path | str) -> MetricsDataset:
    """
    Load and validate a metrics artifact from disk.

    Supports: .json, .json.gz, .js (configure wrapper)

    Args:
        path: Input file path.

    Returns:
        Validated MetricsDataset.

    Raises:
        EmptyMetricsFileError: If the file has no experiments.
        MalformedMetricsFileError: If the file cannot be parsed or validated.
    """
    path = Path(path)
    raw = parse_metrics_document(read_text(path), source=str(path))
    dataset = metrics_from_mapping(raw, source=str(path))
    logger.info("Loaded %d experiments from %s", len(dataset.metrics), path)
    return dataset


def metrics_from_mapping(raw: dict[str, Any], source: str = "<mapping>") -> MetricsDataset:
    """Validate an already-parsed artifact mapping."""
    if not raw.get("metrics"):
        raise EmptyMetricsFileError(source)
    try:
        return MetricsDataset.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise MalformedMetricsFileError(
            source, f"{location}: {first['msg']} ({e.error_count()} error(s))"
        ) from e

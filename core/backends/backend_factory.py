"""
Backend Factory Module

Factory function for creating the optional ONNX capability backends from
the `backends` configuration section.

Follows:
- OCP (Open/Closed Principle): Easy to extend with new backends
- Factory Pattern: Encapsulates object creation logic
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.backends.onnx_backends import (
    OnnxSessionCache,
    OnnxLayoutBackend,
    OnnxOrientationBackend,
    OnnxRectifyBackend,
    LAYOUT_INPUT_SIZE,
    ORIENTATION_INPUT_SIZE,
    RECTIFY_INPUT_SIZE,
)


logger = logging.getLogger(__name__)


@dataclass
class BackendSet:
    """Configured backends; a field is None when its model is not configured."""
    layout: Optional[OnnxLayoutBackend] = None
    orientation: Optional[OnnxOrientationBackend] = None
    textlineOrientation: Optional[OnnxOrientationBackend] = None
    rectify: Optional[OnnxRectifyBackend] = None


def createBackends(
    config: Optional[Dict[str, Any]],
    sessionCache: OnnxSessionCache
) -> BackendSet:
    """
    Create backends whose configured model file exists.

    Args:
        config: The `backends` section, keyed by layout, orientation,
                textlineOrientation and rectify.
        sessionCache: Session cache shared by all created backends.

    Returns:
        BackendSet with the available backends.
    """
    config = config or {}
    backends = BackendSet()

    layoutConfig = _usableSection(config, "layout")
    if layoutConfig is not None:
        backends.layout = OnnxLayoutBackend(
            modelPath=layoutConfig["modelPath"],
            sessionCache=sessionCache,
            inputSize=layoutConfig.get("inputSize", LAYOUT_INPUT_SIZE),
            tableClassIds=layoutConfig.get("tableClassIds", [3])
        )

    for name in ("orientation", "textlineOrientation"):
        section = _usableSection(config, name)
        if section is not None:
            setattr(backends, name, OnnxOrientationBackend(
                modelPath=section["modelPath"],
                sessionCache=sessionCache,
                inputSize=section.get("inputSize", ORIENTATION_INPUT_SIZE),
                angles=section.get("angles", [0, 90, 180, 270])
            ))

    rectifyConfig = _usableSection(config, "rectify")
    if rectifyConfig is not None:
        backends.rectify = OnnxRectifyBackend(
            modelPath=rectifyConfig["modelPath"],
            sessionCache=sessionCache,
            inputSize=rectifyConfig.get("inputSize", RECTIFY_INPUT_SIZE)
        )

    logger.info(
        f"Backends: layout={backends.layout is not None}, "
        f"orientation={backends.orientation is not None}, "
        f"textline={backends.textlineOrientation is not None}, "
        f"rectify={backends.rectify is not None}"
    )
    return backends


def _usableSection(config: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    section = config.get(name)
    if not section or not section.get("modelPath"):
        return None

    if not os.path.isfile(section["modelPath"]):
        logger.warning(f"{name} model not found: {section['modelPath']}, using heuristic")
        return None
    return section

"""Per-ecosystem project detectors.

The detector list is assembled explicitly by build_detectors(); order
matters only for detect_primary() and for the order checks are reported.
"""

from pathlib import Path

from devhelper.detectors.base import (
    CHECK_MANUAL,
    CHECK_SKIP,
    CheckDefinition,
    Detection,
    Detector,
)
from devhelper.detectors.cpp import CppDetector
from devhelper.detectors.docker import DockerDetector
from devhelper.detectors.dotnet import DotNetDetector
from devhelper.detectors.flutter import FlutterDetector
from devhelper.detectors.go import GoDetector
from devhelper.detectors.java import JavaDetector
from devhelper.detectors.nodejs import NodeJSDetector
from devhelper.detectors.php import PHPDetector
from devhelper.detectors.python import PythonDetector
from devhelper.detectors.rust import RustDetector
from devhelper.safety.executor import GuardedExecutor
from devhelper.utils.logging import logger


def build_detectors(executor: GuardedExecutor | None = None) -> list[Detector]:
    """Return the fixed, ordered list of detectors sharing one executor."""
    executor = executor or GuardedExecutor()
    return [
        NodeJSDetector(executor),
        PythonDetector(executor),
        JavaDetector(executor),
        GoDetector(executor),
        RustDetector(executor),
        DotNetDetector(executor),
        PHPDetector(executor),
        CppDetector(executor),
        FlutterDetector(executor),
        DockerDetector(executor),
    ]


def detect_all(directory: str | Path, detectors: list[Detector] | None = None) -> list[Detection]:
    """Run every detector against a directory.

    A detector that raises is logged and skipped; the rest still run.
    """
    directory = Path(directory)
    if detectors is None:
        detectors = build_detectors()

    results = []
    for detector in detectors:
        try:
            if not detector.detect(directory):
                continue
            analysis = detector.analyze(directory)
            if analysis.get("detected") is False:
                logger.debug("{} manifest present but unreadable in {}", detector.name, directory)
                continue
            results.append(Detection(detector=detector, analysis=analysis, checks=detector.checks()))
        except Exception as e:
            logger.warning("Detector {} failed: {}", detector.name, e)
    return results


def detect_primary(directory: str | Path, detectors: list[Detector] | None = None) -> Detection | None:
    """The main project type; Docker only when nothing else matched."""
    results = detect_all(directory, detectors)
    for detection in results:
        if detection.type != "docker":
            return detection
    return results[0] if results else None


def get_detector(detector_type: str, detectors: list[Detector] | None = None) -> Detector | None:
    if detectors is None:
        detectors = build_detectors()
    return next((d for d in detectors if d.type == detector_type), None)


__all__ = [
    "CHECK_MANUAL",
    "CHECK_SKIP",
    "CheckDefinition",
    "Detection",
    "Detector",
    "build_detectors",
    "detect_all",
    "detect_primary",
    "get_detector",
]

"""Repository module detection, dependency graph and health scoring."""

from .detector import ModuleDetector, detect_modules, write_result
from .models import DetectionResult, Edge, Module, Summary

__all__ = [
    "DetectionResult",
    "Edge",
    "Module",
    "ModuleDetector",
    "Summary",
    "detect_modules",
    "write_result",
]

"""Classification passes run over a repository file list."""

from __future__ import annotations

from .framework import detect_framework
from .interfaces import extract_key_interfaces
from .language import build_language_histogram
from .matching import matches_extension, matches_pattern
from .special_files import SpecialFiles, categorize_special_files
from .subsystems import OTHER_SUBSYSTEM, classify_subsystems

__all__ = [
    "OTHER_SUBSYSTEM",
    "SpecialFiles",
    "build_language_histogram",
    "categorize_special_files",
    "classify_subsystems",
    "detect_framework",
    "extract_key_interfaces",
    "matches_extension",
    "matches_pattern",
]

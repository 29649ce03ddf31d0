"""Relevance classification and digest rendering."""

from repotutor.classifier.digest import estimate_tokens, render_digest
from repotutor.classifier.models import CodebaseStats, FileInfo, FilteredCodebase
from repotutor.classifier.smartfilter import SmartFilter, detect_framework

__all__ = [
    "CodebaseStats",
    "FileInfo",
    "FilteredCodebase",
    "SmartFilter",
    "detect_framework",
    "estimate_tokens",
    "render_digest",
]

from .context import ranked_files, resolve_files
from .engine import TutorialEngine, chapter_filename
from .models import Abstraction, Chapter, Relationship, RelationshipAnalysis, TutorialResult
from .postprocess import clean_markdown

__all__ = [
    "Abstraction",
    "Chapter",
    "Relationship",
    "RelationshipAnalysis",
    "TutorialEngine",
    "TutorialResult",
    "chapter_filename",
    "clean_markdown",
    "ranked_files",
    "resolve_files",
]

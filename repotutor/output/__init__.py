from .writer import TutorialWriter, build_index

__all__ = ["TutorialWriter", "build_index"]

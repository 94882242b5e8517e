"""Model-backed analysis modules"""

from .base import BaseAnalyzer
from .structure_analyzer import DocumentStructureAnalyzer
from .content_generator import InteractiveContentGenerator
from .study_tools import StudyToolsAnalyzer

__all__ = [
    "BaseAnalyzer",
    "DocumentStructureAnalyzer",
    "InteractiveContentGenerator",
    "StudyToolsAnalyzer"
]

"""Core processor module"""

from .processor import StudyProcessor

__all__ = [
    "StudyProcessor"
]

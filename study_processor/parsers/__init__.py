"""Response parsing modules"""

from .response_parser import ResponseParser

__all__ = [
    "ResponseParser"
]

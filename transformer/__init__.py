"""Transformer module for converting meeting events to calendar formats."""

from .base import BaseTransformer
from .ical_transformer import ICalTransformer, find_first_occurrence

__all__ = ["BaseTransformer", "ICalTransformer", "find_first_occurrence"]

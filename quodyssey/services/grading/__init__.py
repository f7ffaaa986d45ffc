"""Grading services: fuzzy string matching and per-type answer grading.

Pure logic with no network access, imported by the question lifecycle and
usable on its own for offline grading.
"""

from .edit_distance import edit_distance, is_within_distance
from .grader import AnswerGrader

__all__ = ['AnswerGrader', 'edit_distance', 'is_within_distance']

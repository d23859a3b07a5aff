"""
Application layer - Use cases and orchestration.

This layer classifies annotations, maintains the bean index and resolves
injection points against it. It depends only on the Domain layer.
"""

from .bean_index import BeanIndex
from .classifier import AnnotationClassifier
from .extractor import DeclarationExtractor
from .indexer import BeanIndexer, ScanSession
from .resolver import MATCH_RULES, BeanResolver, MatchRule, is_type_compatible, is_type_match

__all__ = [
    "AnnotationClassifier",
    "BeanIndex",
    "BeanResolver",
    "MatchRule",
    "MATCH_RULES",
    "is_type_match",
    "is_type_compatible",
    "DeclarationExtractor",
    "BeanIndexer",
    "ScanSession",
]

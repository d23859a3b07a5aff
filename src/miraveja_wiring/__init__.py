"""
miraveja-wiring: Static dependency-injection wiring index for annotation-driven Java code.

Public API exports for the miraveja-wiring package.
"""

# Application exports
from miraveja_wiring.application.bean_index import BeanIndex
from miraveja_wiring.application.classifier import AnnotationClassifier
from miraveja_wiring.application.extractor import DeclarationExtractor
from miraveja_wiring.application.indexer import BeanIndexer, ScanSession
from miraveja_wiring.application.resolver import BeanResolver

# Domain exports
from miraveja_wiring.domain.enums import InjectionKind, MatchReason, ResolutionStatus
from miraveja_wiring.domain.exceptions import ConfigurationError, ScanSupersededError, WiringException
from miraveja_wiring.domain.models import (
    Annotation,
    AnnotationTable,
    BeanCandidate,
    BeanDefinition,
    BeanInjectionPoint,
    MatchResult,
    ResolutionResult,
    SourceLocation,
    TypeDeclaration,
)

__version__ = "0.1.0"

__all__ = [
    # Index and resolution
    "AnnotationClassifier",
    "BeanIndex",
    "BeanResolver",
    "DeclarationExtractor",
    "BeanIndexer",
    "ScanSession",
    # Enums
    "MatchReason",
    "InjectionKind",
    "ResolutionStatus",
    # Models
    "SourceLocation",
    "Annotation",
    "AnnotationTable",
    "BeanDefinition",
    "BeanInjectionPoint",
    "MatchResult",
    "BeanCandidate",
    "ResolutionResult",
    "TypeDeclaration",
    # Exceptions
    "WiringException",
    "ConfigurationError",
    "ScanSupersededError",
]

"""
Domain layer - Core wiring models and rules.

This layer contains the value objects describing bean definitions, injection
points and match results. It has no dependencies on other layers.
"""

from .enums import (
    DeclarationKind,
    DefinitionKind,
    InjectionKind,
    LombokConstructorType,
    MatchReason,
    MemberKind,
    ResolutionStatus,
)
from .exceptions import ConfigurationError, ScanSupersededError, WiringException
from .interfaces import IAnnotationClassifier, IBeanIndex, IBeanResolver
from .models import (
    Annotation,
    AnnotationTable,
    BeanCandidate,
    BeanDefinition,
    BeanInjectionPoint,
    ExtractionResult,
    IndexStats,
    MatchResult,
    MemberDeclaration,
    ParameterDeclaration,
    ResolutionResult,
    SourceLocation,
    TypeDeclaration,
    sort_by_location,
)
from .type_names import decapitalize, normalize_type_name, simple_type_name

__all__ = [
    # Enums
    "MatchReason",
    "DefinitionKind",
    "InjectionKind",
    "DeclarationKind",
    "MemberKind",
    "LombokConstructorType",
    "ResolutionStatus",
    # Exceptions
    "WiringException",
    "ConfigurationError",
    "ScanSupersededError",
    # Interfaces
    "IAnnotationClassifier",
    "IBeanIndex",
    "IBeanResolver",
    # Models
    "SourceLocation",
    "Annotation",
    "AnnotationTable",
    "BeanDefinition",
    "BeanInjectionPoint",
    "MatchResult",
    "BeanCandidate",
    "ResolutionResult",
    "IndexStats",
    "ParameterDeclaration",
    "MemberDeclaration",
    "TypeDeclaration",
    "ExtractionResult",
    "sort_by_location",
    # Type names
    "normalize_type_name",
    "simple_type_name",
    "decapitalize",
]

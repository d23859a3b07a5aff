from abc import ABC, abstractmethod
from typing import Any, List, Optional

from miraveja_wiring.domain.models import (
    Annotation,
    BeanCandidate,
    BeanDefinition,
    BeanInjectionPoint,
    IndexStats,
    MatchResult,
)


class IAnnotationClassifier(ABC):
    """Abstract interface for classifying scanned annotations."""

    @abstractmethod
    def is_bean_definition_annotation(self, annotation: Annotation) -> bool:
        """Check whether the annotation declares a bean.

        Args:
            annotation: The scanned annotation.
        """

    @abstractmethod
    def is_injection_annotation(self, annotation: Annotation) -> bool:
        """Check whether the annotation requests a bean.

        Args:
            annotation: The scanned annotation.
        """

    @abstractmethod
    def extract_annotation_parameter(self, annotation: Annotation, key: str = "value") -> Optional[Any]:
        """Look up an annotation parameter.

        Args:
            annotation: The scanned annotation.
            key: Parameter name.

        Returns:
            The stored value, or ``None`` when the parameter is absent.
        """


class IBeanIndex(ABC):
    """Abstract interface for the bean definition index."""

    @abstractmethod
    def add_definition(self, definition: BeanDefinition) -> None:
        """Insert a definition, replacing any definition at the same location.

        Args:
            definition: The definition to index.
        """

    @abstractmethod
    def remove_definition(self, location_key: str) -> Optional[BeanDefinition]:
        """Remove the definition anchored at a location.

        Args:
            location_key: Location key of the definition.

        Returns:
            The removed definition, or ``None`` if nothing was indexed there.
        """

    @abstractmethod
    def find_candidates(self, injection: BeanInjectionPoint) -> List[BeanDefinition]:
        """Return every definition whose type could satisfy the injection.

        Args:
            injection: The injection point being resolved.
        """

    @abstractmethod
    def find_injection_candidates(self, definition: BeanDefinition) -> List[BeanInjectionPoint]:
        """Return every injection point that could be satisfied by the definition.

        Args:
            definition: The definition being navigated from.
        """

    @abstractmethod
    def all_definitions(self) -> List[BeanDefinition]:
        """Return all indexed definitions ordered by location."""

    @abstractmethod
    def get_stats(self) -> IndexStats:
        """Return index statistics."""


class IBeanResolver(ABC):
    """Abstract interface for matching injection points against the index."""

    @abstractmethod
    def resolve(self, injection: BeanInjectionPoint, index: IBeanIndex) -> List[BeanCandidate]:
        """Resolve an injection point to its ranked candidates.

        Args:
            injection: The injection point.
            index: The index to read from.

        Returns:
            Matching candidates sorted by score, best first.
        """

    @abstractmethod
    def matches(self, definition: BeanDefinition, injection: BeanInjectionPoint) -> MatchResult:
        """Score one definition against one injection point.

        Args:
            definition: The candidate definition.
            injection: The injection point.
        """

    @abstractmethod
    def find_injection_points(self, definition: BeanDefinition, index: IBeanIndex) -> List[BeanInjectionPoint]:
        """Find the injection points a definition can satisfy.

        Args:
            definition: The definition.
            index: The index to read from.
        """


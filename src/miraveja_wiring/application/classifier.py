from typing import Any, FrozenSet, Optional

from miraveja_wiring.domain import Annotation, AnnotationTable, IAnnotationClassifier, LombokConstructorType


class AnnotationClassifier(IAnnotationClassifier):
    """Classifies scanned annotations by membership in an annotation table.

    Annotations are matched by fully-qualified name. When the scanner could
    not resolve an annotation's imports, its simple name is compared with the
    trailing component of every table entry instead.

    Attributes:
        _table: The recognized annotation names.
    """

    def __init__(self, table: Optional[AnnotationTable] = None) -> None:
        """Initialize the classifier.

        Args:
            table: Annotation table to classify against. Defaults to the Spring table.
        """
        self._table = table or AnnotationTable.spring()
        self._simple_names = {
            field_name: frozenset(name.rsplit(".", 1)[-1] for name in getattr(self._table, field_name))
            for field_name in type(self._table).model_fields
        }

    @property
    def table(self) -> AnnotationTable:
        return self._table

    def _is_member(self, annotation: Annotation, field_name: str) -> bool:
        markers: FrozenSet[str] = getattr(self._table, field_name)
        if annotation.is_resolved:
            return annotation.fully_qualified_name in markers
        return annotation.simple_name in self._simple_names[field_name]

    def is_bean_definition_annotation(self, annotation: Annotation) -> bool:
        """Check whether the annotation declares a bean (``@Service``, ``@Bean``, ...)."""
        return self._is_member(annotation, "bean_definition_markers")

    def is_injection_annotation(self, annotation: Annotation) -> bool:
        """Check whether the annotation requests a bean (``@Autowired``, ``@Inject``, ...)."""
        return self._is_member(annotation, "injection_markers")

    def is_by_name_injection_annotation(self, annotation: Annotation) -> bool:
        """Check whether the annotation injects by bean name first (``@Resource``)."""
        return self._is_member(annotation, "by_name_injection_markers")

    def is_qualifier_annotation(self, annotation: Annotation) -> bool:
        return self._is_member(annotation, "qualifier_markers")

    def is_primary_annotation(self, annotation: Annotation) -> bool:
        return self._is_member(annotation, "primary_markers")

    def is_configuration_annotation(self, annotation: Annotation) -> bool:
        return self._is_member(annotation, "configuration_markers")

    def is_bean_method_annotation(self, annotation: Annotation) -> bool:
        return self._is_member(annotation, "bean_method_markers")

    def lombok_constructor_type(self, annotation: Annotation) -> Optional[LombokConstructorType]:
        """Return the Lombok constructor generator the annotation stands for, if any."""
        if self._is_member(annotation, "required_args_constructor_markers"):
            return LombokConstructorType.REQUIRED_ARGS
        if self._is_member(annotation, "all_args_constructor_markers"):
            return LombokConstructorType.ALL_ARGS
        return None

    def extract_annotation_parameter(self, annotation: Annotation, key: str = "value") -> Optional[Any]:
        """Look up an annotation parameter.

        Args:
            annotation: The scanned annotation.
            key: Parameter name, ``value`` for the single-element form.

        Returns:
            The stored value (an empty string is returned as-is), or ``None``
            when the annotation has no such parameter. ``None`` is never a
            stored value: the annotation model drops null parameters.

        Example:
            >>> qualifier = Annotation(name="Qualifier", parameters={"value": "paypal"})
            >>> classifier.extract_annotation_parameter(qualifier)
            'paypal'
            >>> classifier.extract_annotation_parameter(qualifier, "name") is None
            True
        """
        return annotation.parameters.get(key)

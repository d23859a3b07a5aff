"""Application layer - Bean metadata extraction from scanned declarations."""

import re
from typing import Any, FrozenSet, Iterable, List, Optional

import structlog

from miraveja_wiring.application.classifier import AnnotationClassifier
from miraveja_wiring.domain import (
    Annotation,
    BeanDefinition,
    BeanInjectionPoint,
    DeclarationKind,
    DefinitionKind,
    ExtractionResult,
    InjectionKind,
    LombokConstructorType,
    MemberDeclaration,
    MemberKind,
    SourceLocation,
    TypeDeclaration,
    decapitalize,
)

log = structlog.get_logger(__name__)

_NAME_KEYS = ("value", "name")
_BEAN_METHOD_NAME_KEYS = ("name", "value")
_ON_CONSTRUCTOR_KEYS = ("onConstructor", "onConstructor_", "onConstructor__")
_VOID_TYPES = {"void", "java.lang.Void"}
_ANNOTATION_TOKEN = re.compile(r"@([\w.]+)")


def _first_text(value: Any) -> Optional[str]:
    """Return a non-empty string from a parameter value, taking the first element of arrays."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value)
    return text or None


def _is_false(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "false"
    return value is False


class DeclarationExtractor:
    """Turns scanned type declarations into bean definitions and injection points.

    Attributes:
        _classifier: Classifier deciding which annotations play which role.
    """

    def __init__(self, classifier: Optional[AnnotationClassifier] = None) -> None:
        """Initialize the extractor.

        Args:
            classifier: Annotation classifier. Defaults to one using the Spring table.
        """
        self._classifier = classifier or AnnotationClassifier()

    @property
    def classifier(self) -> AnnotationClassifier:
        return self._classifier

    def extract(self, declaration: TypeDeclaration) -> ExtractionResult:
        """Extract everything a type declaration contributes to the index.

        Interfaces contribute nothing. Abstract classes contribute injection
        points but never definitions. Concrete classes carrying a bean
        definition annotation contribute a definition, their bean factory
        methods and all of their injection points.

        Args:
            declaration: The scanned declaration.

        Returns:
            The definitions and injection points found.

        Example:
            >>> result = extractor.extract(stripe_payment_service_declaration)
            >>> [(d.name, d.is_primary) for d in result.definitions]
            [('stripePaymentService', True)]
        """
        if declaration.kind == DeclarationKind.INTERFACE:
            return ExtractionResult()

        definitions: List[BeanDefinition] = []
        injection_points: List[BeanInjectionPoint] = []

        bean_annotation = self._bean_annotation(declaration)
        is_bean = declaration.kind == DeclarationKind.CLASS and bean_annotation is not None
        if is_bean:
            definitions.append(self._class_definition(declaration, bean_annotation))
            for method in declaration.members_of_kind(MemberKind.METHOD):
                method_annotation = self._find(method.annotations, self._classifier.is_bean_method_annotation)
                if method_annotation is None:
                    continue
                definition = self._method_definition(method, method_annotation)
                if definition is not None:
                    definitions.append(definition)
                injection_points.extend(self._parameter_points(method, InjectionKind.BEAN_METHOD_PARAMETER))

        injection_points.extend(self._field_points(declaration))
        injection_points.extend(self._constructor_points(declaration, is_bean))
        injection_points.extend(self._setter_points(declaration))

        log.debug(
            "extractor.declaration_extracted",
            declaration=declaration.fully_qualified_name,
            definitions=len(definitions),
            injection_points=len(injection_points),
        )
        return ExtractionResult(definitions=definitions, injection_points=injection_points)

    @staticmethod
    def _find(annotations: Iterable[Annotation], predicate) -> Optional[Annotation]:
        return next((annotation for annotation in annotations if predicate(annotation)), None)

    def _bean_annotation(self, declaration: TypeDeclaration) -> Optional[Annotation]:
        return self._find(
            declaration.annotations,
            lambda annotation: self._classifier.is_bean_definition_annotation(annotation)
            and not self._classifier.is_bean_method_annotation(annotation),
        )

    def _text_parameter(self, annotation: Annotation, keys: Iterable[str]) -> Optional[str]:
        for key in keys:
            text = _first_text(self._classifier.extract_annotation_parameter(annotation, key))
            if text is not None:
                return text
        return None

    def _qualifiers(self, annotations: Iterable[Annotation]) -> List[str]:
        qualifiers = []
        for annotation in annotations:
            if not self._classifier.is_qualifier_annotation(annotation):
                continue
            value = self._classifier.extract_annotation_parameter(annotation)
            if value is not None:
                qualifiers.append(str(value))
        return qualifiers

    def _qualifier(self, annotations: Iterable[Annotation]) -> Optional[str]:
        qualifiers = self._qualifiers(annotations)
        return qualifiers[0] if qualifiers else None

    def _definition_qualifiers(self, annotations: Iterable[Annotation], bean_name: str) -> FrozenSet[str]:
        """Declared qualifiers plus the bean name, which every bean answers to as a qualifier."""
        return frozenset(self._qualifiers(annotations)) | {bean_name}

    def _is_primary(self, annotations: Iterable[Annotation]) -> bool:
        return any(self._classifier.is_primary_annotation(annotation) for annotation in annotations)

    @staticmethod
    def _annotation_type(annotation: Annotation) -> str:
        return annotation.fully_qualified_name or annotation.name

    def _class_definition(self, declaration: TypeDeclaration, annotation: Annotation) -> BeanDefinition:
        is_configuration = any(
            self._classifier.is_configuration_annotation(candidate) for candidate in declaration.annotations
        )
        name = self._text_parameter(annotation, _NAME_KEYS) or decapitalize(declaration.simple_name)
        return BeanDefinition(
            name=name,
            type=declaration.fully_qualified_name,
            qualifiers=self._definition_qualifiers(declaration.annotations, name),
            is_primary=self._is_primary(declaration.annotations),
            location=declaration.location,
            implemented_interfaces=tuple(declaration.supertypes),
            definition_kind=DefinitionKind.CONFIGURATION if is_configuration else DefinitionKind.COMPONENT,
            annotation_type=self._annotation_type(annotation),
        )

    def _method_definition(self, method: MemberDeclaration, annotation: Annotation) -> Optional[BeanDefinition]:
        if not method.declared_type or method.declared_type in _VOID_TYPES:
            log.warning("extractor.bean_method_without_type", method=method.name, location=method.location.key)
            return None
        name = self._text_parameter(annotation, _BEAN_METHOD_NAME_KEYS) or method.name
        return BeanDefinition(
            name=name,
            type=method.declared_type,
            qualifiers=self._definition_qualifiers(method.annotations, name),
            is_primary=self._is_primary(method.annotations),
            location=method.location,
            definition_kind=DefinitionKind.BEAN_METHOD,
            annotation_type=self._annotation_type(annotation),
        )

    def _injection_point(
        self,
        bean_type: str,
        annotations: List[Annotation],
        location: SourceLocation,
        kind: InjectionKind,
        member_name: str,
        injection_annotation: Optional[Annotation] = None,
    ) -> BeanInjectionPoint:
        bean_name = None
        is_required = True
        if injection_annotation is not None:
            if self._classifier.is_by_name_injection_annotation(injection_annotation):
                bean_name = self._text_parameter(injection_annotation, ("name",)) or member_name
            is_required = not _is_false(self._classifier.extract_annotation_parameter(injection_annotation, "required"))
        return BeanInjectionPoint(
            bean_type=bean_type,
            bean_name=bean_name,
            qualifier=self._qualifier(annotations),
            location=location,
            injection_kind=kind,
            member_name=member_name,
            is_required=is_required,
        )

    def _parameter_points(
        self,
        member: MemberDeclaration,
        kind: InjectionKind,
        injection_annotation: Optional[Annotation] = None,
    ) -> List[BeanInjectionPoint]:
        return [
            self._injection_point(
                parameter.declared_type,
                parameter.annotations,
                parameter.location,
                kind,
                parameter.name,
                injection_annotation,
            )
            for parameter in member.parameters
        ]

    def _field_points(self, declaration: TypeDeclaration) -> List[BeanInjectionPoint]:
        points = []
        for field in declaration.members_of_kind(MemberKind.FIELD):
            annotation = self._find(field.annotations, self._classifier.is_injection_annotation)
            if annotation is None or field.is_static or not field.declared_type:
                continue
            points.append(
                self._injection_point(
                    field.declared_type,
                    field.annotations,
                    field.location,
                    InjectionKind.FIELD,
                    field.name,
                    annotation,
                )
            )
        return points

    def _constructor_points(self, declaration: TypeDeclaration, is_bean: bool) -> List[BeanInjectionPoint]:
        constructors = declaration.members_of_kind(MemberKind.CONSTRUCTOR)
        points = []
        explicit = False
        for constructor in constructors:
            annotation = self._find(constructor.annotations, self._classifier.is_injection_annotation)
            if annotation is not None:
                explicit = True
                points.extend(self._parameter_points(constructor, InjectionKind.CONSTRUCTOR, annotation))
        if explicit:
            return points

        # A bean with a single constructor is autowired through it implicitly.
        if is_bean and len(constructors) == 1:
            return self._parameter_points(constructors[0], InjectionKind.CONSTRUCTOR)
        if not constructors:
            return self._lombok_points(declaration, is_bean)
        return []

    def _lombok_points(self, declaration: TypeDeclaration, is_bean: bool) -> List[BeanInjectionPoint]:
        generators = [
            (annotation, self._classifier.lombok_constructor_type(annotation))
            for annotation in declaration.annotations
        ]
        generators = [(annotation, kind) for annotation, kind in generators if kind is not None]
        if not generators:
            return []

        wired = [(annotation, kind) for annotation, kind in generators if self._autowires_constructor(annotation)]
        if not wired and is_bean and len(generators) == 1:
            wired = generators
        if not wired:
            return []

        lombok_type = wired[0][1]
        points = []
        for field in declaration.members_of_kind(MemberKind.FIELD):
            if field.is_static or not field.declared_type:
                continue
            if lombok_type == LombokConstructorType.REQUIRED_ARGS and not self._is_required_field(field):
                continue
            points.append(
                self._injection_point(
                    field.declared_type,
                    field.annotations,
                    field.location,
                    InjectionKind.LOMBOK_CONSTRUCTOR,
                    field.name,
                )
            )
        return points

    def _autowires_constructor(self, annotation: Annotation) -> bool:
        """Check for ``onConstructor = @__({@Autowired})`` and its Java 8 spellings."""
        marker_names = {name.rsplit(".", 1)[-1] for name in self._classifier.table.injection_markers}
        for key in _ON_CONSTRUCTOR_KEYS:
            value = self._classifier.extract_annotation_parameter(annotation, key)
            if value is None:
                continue
            tokens = {token.rsplit(".", 1)[-1] for token in _ANNOTATION_TOKEN.findall(str(value))}
            if tokens & marker_names:
                return True
        return False

    @staticmethod
    def _is_required_field(field: MemberDeclaration) -> bool:
        return field.is_final or any(annotation.simple_name == "NonNull" for annotation in field.annotations)

    def _setter_points(self, declaration: TypeDeclaration) -> List[BeanInjectionPoint]:
        points = []
        for method in declaration.members_of_kind(MemberKind.METHOD):
            if self._find(method.annotations, self._classifier.is_bean_method_annotation) is not None:
                continue
            annotation = self._find(method.annotations, self._classifier.is_injection_annotation)
            if annotation is not None:
                points.extend(self._parameter_points(method, InjectionKind.SETTER_METHOD, annotation))
        return points

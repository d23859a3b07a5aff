from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from miraveja_wiring.domain.enums import (
    DeclarationKind,
    DefinitionKind,
    InjectionKind,
    MatchReason,
    MemberKind,
    ResolutionStatus,
)
from miraveja_wiring.domain.type_names import simple_type_name

SPRING_BEAN_DEFINITION_ANNOTATIONS = frozenset(
    {
        "org.springframework.stereotype.Component",
        "org.springframework.stereotype.Service",
        "org.springframework.stereotype.Repository",
        "org.springframework.stereotype.Controller",
        "org.springframework.web.bind.annotation.RestController",
        "org.springframework.context.annotation.Configuration",
        "org.springframework.context.annotation.Bean",
    }
)

SPRING_INJECTION_ANNOTATIONS = frozenset(
    {
        "org.springframework.beans.factory.annotation.Autowired",
        "jakarta.annotation.Resource",
        "javax.annotation.Resource",
        "jakarta.inject.Inject",
        "javax.inject.Inject",
    }
)

JSR250_RESOURCE_ANNOTATIONS = frozenset({"jakarta.annotation.Resource", "javax.annotation.Resource"})

SPRING_QUALIFIER_ANNOTATIONS = frozenset(
    {
        "org.springframework.beans.factory.annotation.Qualifier",
        "jakarta.inject.Named",
        "javax.inject.Named",
    }
)

SPRING_PRIMARY_ANNOTATIONS = frozenset({"org.springframework.context.annotation.Primary"})

SPRING_CONFIGURATION_ANNOTATIONS = frozenset({"org.springframework.context.annotation.Configuration"})

SPRING_BEAN_METHOD_ANNOTATIONS = frozenset({"org.springframework.context.annotation.Bean"})

LOMBOK_REQUIRED_ARGS_ANNOTATIONS = frozenset({"lombok.RequiredArgsConstructor"})

LOMBOK_ALL_ARGS_ANNOTATIONS = frozenset({"lombok.AllArgsConstructor"})


class SourceLocation(BaseModel):
    """Position of a declaration in a source file.

    Attributes:
        uri: File path or URI of the source file.
        line: Zero-based line number.
        column: Zero-based column number.
    """

    model_config = ConfigDict(frozen=True)

    uri: str = Field(..., min_length=1, description="File path or URI of the source file.")
    line: int = Field(..., ge=0, description="Zero-based line number.")
    column: int = Field(default=0, ge=0, description="Zero-based column number.")

    @property
    def key(self) -> str:
        """Identity of whatever is anchored at this location."""
        return f"{self.uri}:{self.line}:{self.column}"

    @property
    def sort_key(self) -> Tuple[str, int, int]:
        return (self.uri, self.line, self.column)


class Annotation(BaseModel):
    """An annotation occurrence as reported by the source scanner.

    Attributes:
        name: Simple annotation name, with or without a leading ``@``.
        fully_qualified_name: Resolved annotation name; empty when imports could not be resolved.
        parameters: Annotation parameters by name (``value`` for the single-element form).
            Java annotation elements are never null, so ``None`` values are
            dropped and a missing key is the only absent signal.
        location: Where the annotation occurs.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Simple annotation name.")
    fully_qualified_name: str = Field(default="", description="Resolved annotation name.")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Annotation parameters by name.")
    location: Optional[SourceLocation] = Field(default=None, description="Where the annotation occurs.")

    @field_validator("name")
    @classmethod
    def strip_at_sign(cls, value: str) -> str:
        return value.lstrip("@")

    @field_validator("parameters")
    @classmethod
    def drop_null_parameters(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return {key: item for key, item in value.items() if item is not None}

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_resolved(self) -> bool:
        """Whether the scanner resolved the annotation to a qualified name."""
        return "." in self.fully_qualified_name


class AnnotationTable(BaseModel):
    """Recognized annotation names, by role.

    Defaults target Spring with JSR-330, JSR-250 and Lombok. Every set can be
    replaced to support other annotation-driven frameworks.
    """

    model_config = ConfigDict(frozen=True)

    bean_definition_markers: FrozenSet[str] = Field(default=SPRING_BEAN_DEFINITION_ANNOTATIONS)
    injection_markers: FrozenSet[str] = Field(default=SPRING_INJECTION_ANNOTATIONS)
    by_name_injection_markers: FrozenSet[str] = Field(default=JSR250_RESOURCE_ANNOTATIONS)
    qualifier_markers: FrozenSet[str] = Field(default=SPRING_QUALIFIER_ANNOTATIONS)
    primary_markers: FrozenSet[str] = Field(default=SPRING_PRIMARY_ANNOTATIONS)
    configuration_markers: FrozenSet[str] = Field(default=SPRING_CONFIGURATION_ANNOTATIONS)
    bean_method_markers: FrozenSet[str] = Field(default=SPRING_BEAN_METHOD_ANNOTATIONS)
    required_args_constructor_markers: FrozenSet[str] = Field(default=LOMBOK_REQUIRED_ARGS_ANNOTATIONS)
    all_args_constructor_markers: FrozenSet[str] = Field(default=LOMBOK_ALL_ARGS_ANNOTATIONS)

    @classmethod
    def spring(cls) -> "AnnotationTable":
        """Return the default Spring table."""
        return cls()


class BeanDefinition(BaseModel):
    """A declared component eligible for injection.

    Attributes:
        name: Declared or derived bean name.
        type: Fully-qualified type name of the bean.
        qualifiers: Qualifier values attached to the definition.
        is_primary: Whether the bean is the default among same-typed implementations.
        location: Source position; the definition's identity in the index.
        implemented_interfaces: Interfaces and abstract classes the bean implements or extends.
        definition_kind: How the bean was declared.
        annotation_type: Qualified name of the annotation that declared the bean.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Declared or derived bean name.")
    type: str = Field(..., min_length=1, description="Fully-qualified type name of the bean.")
    qualifiers: FrozenSet[str] = Field(default_factory=frozenset, description="Qualifier values.")
    is_primary: bool = Field(default=False, description="Marked as the primary implementation.")
    location: SourceLocation = Field(..., description="Source position of the definition.")
    implemented_interfaces: Tuple[str, ...] = Field(
        default=(),
        description="Interfaces and abstract classes implemented or extended by the bean.",
    )
    definition_kind: DefinitionKind = Field(default=DefinitionKind.COMPONENT)
    annotation_type: Optional[str] = Field(default=None)

    @property
    def location_key(self) -> str:
        return self.location.key

    @property
    def provided_types(self) -> Tuple[str, ...]:
        """Every type name this bean can be injected as."""
        return (self.type,) + self.implemented_interfaces

    @property
    def simple_names(self) -> FrozenSet[str]:
        return frozenset(simple_type_name(type_name) for type_name in self.provided_types)


class BeanInjectionPoint(BaseModel):
    """A site requesting a dependency.

    Attributes:
        bean_type: Fully-qualified or simple type name the site expects.
        bean_name: Explicitly requested bean name, if any.
        qualifier: Requested qualifier, if any. An empty string is a present qualifier.
        location: Source position of the site.
        injection_kind: Kind of site (field, constructor parameter, ...).
        member_name: Name of the field or parameter.
        is_required: False for optional injections such as ``@Autowired(required = false)``.
    """

    model_config = ConfigDict(frozen=True)

    bean_type: str = Field(..., min_length=1, description="Type name the site expects.")
    bean_name: Optional[str] = Field(default=None, description="Explicitly requested bean name.")
    qualifier: Optional[str] = Field(default=None, description="Requested qualifier.")
    location: SourceLocation = Field(..., description="Source position of the site.")
    injection_kind: InjectionKind = Field(default=InjectionKind.FIELD)
    member_name: Optional[str] = Field(default=None)
    is_required: bool = Field(default=True)

    @property
    def location_key(self) -> str:
        return self.location.key

    @property
    def simple_type_name(self) -> str:
        return simple_type_name(self.bean_type)


class MatchResult(BaseModel):
    """Outcome of matching one definition against one injection point.

    ``reason`` is only meaningful when ``is_match`` is true and is left unset
    otherwise.
    """

    model_config = ConfigDict(frozen=True)

    is_match: bool
    score: int = Field(..., ge=0)
    reason: Optional[MatchReason] = None

    @model_validator(mode="after")
    def check_consistency(self) -> "MatchResult":
        if self.is_match and (self.score <= 0 or self.reason is None):
            raise ValueError("A match requires a positive score and a reason.")
        if not self.is_match and (self.score != 0 or self.reason is not None):
            raise ValueError("A non-match must have score 0 and no reason.")
        return self

    @classmethod
    def matched(cls, score: int, reason: MatchReason) -> "MatchResult":
        return cls(is_match=True, score=score, reason=reason)

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(is_match=False, score=0)


class BeanCandidate(BaseModel):
    """A definition together with how well it satisfies an injection point."""

    model_config = ConfigDict(frozen=True)

    definition: BeanDefinition
    match: MatchResult

    @property
    def score(self) -> int:
        return self.match.score

    @property
    def reason(self) -> Optional[MatchReason]:
        return self.match.reason


class ResolutionResult(BaseModel):
    """Ordered candidates for one injection point, with their classification.

    Attributes:
        injection: The injection point that was resolved.
        candidates: Matching candidates, best first.
    """

    model_config = ConfigDict(frozen=True)

    injection: BeanInjectionPoint
    candidates: List[BeanCandidate] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def top_candidates(self) -> List[BeanCandidate]:
        """All candidates sharing the highest score."""
        if not self.candidates:
            return []
        best = self.candidates[0].score
        return [candidate for candidate in self.candidates if candidate.score == best]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> ResolutionStatus:
        top = self.top_candidates
        if not top:
            return ResolutionStatus.UNRESOLVED
        if len(top) == 1:
            return ResolutionStatus.UNAMBIGUOUS
        return ResolutionStatus.AMBIGUOUS


class IndexStats(BaseModel):
    """Snapshot of index size."""

    model_config = ConfigDict(frozen=True)

    total_definitions: int = 0
    total_injection_points: int = 0
    indexed_files: int = 0
    generation: int = 0


class ParameterDeclaration(BaseModel):
    """A constructor or method parameter reported by the scanner."""

    model_config = ConfigDict(frozen=True)

    name: str
    declared_type: str = Field(..., min_length=1)
    annotations: List[Annotation] = Field(default_factory=list)
    location: SourceLocation


class MemberDeclaration(BaseModel):
    """A field, method or constructor reported by the scanner.

    Attributes:
        kind: Field, method or constructor.
        name: Member name.
        declared_type: Field type or method return type; ``None`` for constructors.
        annotations: Annotations on the member.
        parameters: Method or constructor parameters.
        is_final: Whether a field is final.
        is_static: Whether the member is static.
        location: Where the member is declared.
    """

    model_config = ConfigDict(frozen=True)

    kind: MemberKind
    name: str
    declared_type: Optional[str] = None
    annotations: List[Annotation] = Field(default_factory=list)
    parameters: List[ParameterDeclaration] = Field(default_factory=list)
    is_final: bool = False
    is_static: bool = False
    location: SourceLocation


class TypeDeclaration(BaseModel):
    """A class, interface or abstract class reported by the scanner.

    Attributes:
        kind: Class, interface or abstract class.
        fully_qualified_name: Dotted name of the declared type.
        annotations: Annotations on the type.
        supertypes: Implemented interfaces and extended classes, fully qualified where known.
        members: Fields, methods and constructors.
        location: Where the type is declared; the declaration's identity.
    """

    model_config = ConfigDict(frozen=True)

    kind: DeclarationKind = DeclarationKind.CLASS
    fully_qualified_name: str = Field(..., min_length=1)
    annotations: List[Annotation] = Field(default_factory=list)
    supertypes: List[str] = Field(default_factory=list)
    members: List[MemberDeclaration] = Field(default_factory=list)
    location: SourceLocation

    @property
    def key(self) -> str:
        return self.location.key

    @property
    def simple_name(self) -> str:
        return simple_type_name(self.fully_qualified_name)

    def members_of_kind(self, kind: MemberKind) -> List[MemberDeclaration]:
        return [member for member in self.members if member.kind == kind]


def sort_by_location(items: Iterable[Any]) -> List[Any]:
    """Order definitions or injection points by source location."""
    return sorted(items, key=lambda item: item.location.sort_key)


class ExtractionResult(BaseModel):
    """Definitions and injection points produced by one type declaration."""

    model_config = ConfigDict(frozen=True)

    definitions: List[BeanDefinition] = Field(default_factory=list)
    injection_points: List[BeanInjectionPoint] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.definitions and not self.injection_points

from enum import Enum


class MatchReason(str, Enum):
    """Why a bean definition satisfies an injection point.

    Attributes:
        EXACT_QUALIFIER: The injection's qualifier is declared on the bean.
        EXACT_NAME: The injection requests the bean by its exact name.
        PRIMARY_BEAN: Type compatible and marked as the primary implementation.
        TYPE_MATCH: Type compatible only.
    """

    EXACT_QUALIFIER = "EXACT_QUALIFIER"
    EXACT_NAME = "EXACT_NAME"
    PRIMARY_BEAN = "PRIMARY_BEAN"
    TYPE_MATCH = "TYPE_MATCH"

    def __str__(self) -> str:
        return self.value


class DefinitionKind(str, Enum):
    """How a bean definition was declared."""

    COMPONENT = "COMPONENT"
    BEAN_METHOD = "BEAN_METHOD"
    CONFIGURATION = "CONFIGURATION"

    def __str__(self) -> str:
        return self.value


class InjectionKind(str, Enum):
    """Where a dependency is requested.

    Attributes:
        FIELD: Annotated field.
        CONSTRUCTOR: Constructor parameter (explicit or implicit autowiring).
        SETTER_METHOD: Parameter of an annotated method.
        BEAN_METHOD_PARAMETER: Parameter of a bean factory method.
        LOMBOK_CONSTRUCTOR: Field wired through a Lombok-generated constructor.
    """

    FIELD = "FIELD"
    CONSTRUCTOR = "CONSTRUCTOR"
    SETTER_METHOD = "SETTER_METHOD"
    BEAN_METHOD_PARAMETER = "BEAN_METHOD_PARAMETER"
    LOMBOK_CONSTRUCTOR = "LOMBOK_CONSTRUCTOR"

    def __str__(self) -> str:
        return self.value


class DeclarationKind(str, Enum):
    """Kind of a scanned type declaration."""

    CLASS = "CLASS"
    INTERFACE = "INTERFACE"
    ABSTRACT_CLASS = "ABSTRACT_CLASS"

    def __str__(self) -> str:
        return self.value


class MemberKind(str, Enum):
    """Kind of a scanned member declaration."""

    FIELD = "FIELD"
    METHOD = "METHOD"
    CONSTRUCTOR = "CONSTRUCTOR"

    def __str__(self) -> str:
        return self.value


class LombokConstructorType(str, Enum):
    """Lombok constructor generators that can carry injected dependencies.

    Attributes:
        REQUIRED_ARGS: ``@RequiredArgsConstructor``, wires final fields.
        ALL_ARGS: ``@AllArgsConstructor``, wires every field.
    """

    REQUIRED_ARGS = "required-args"
    ALL_ARGS = "all-args"

    def __str__(self) -> str:
        return self.value


class ResolutionStatus(str, Enum):
    """Classification of an ordered candidate list."""

    UNRESOLVED = "unresolved"
    UNAMBIGUOUS = "unambiguous"
    AMBIGUOUS = "ambiguous"

    def __str__(self) -> str:
        return self.value

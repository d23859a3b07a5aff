from typing import Any, Iterable, Optional

from miraveja_wiring.application import BeanIndex
from miraveja_wiring.domain import (
    Annotation,
    AnnotationTable,
    BeanDefinition,
    BeanInjectionPoint,
    DefinitionKind,
    InjectionKind,
    SourceLocation,
    decapitalize,
    simple_type_name,
)


def source_location(uri: str, line: int = 0, column: int = 0) -> SourceLocation:
    return SourceLocation(uri=uri, line=line, column=column)


def _default_uri(type_name: str) -> str:
    return simple_type_name(type_name) + ".java"


def bean_definition(
    type_name: str,
    name: Optional[str] = None,
    *,
    qualifiers: Iterable[str] = (),
    is_primary: bool = False,
    implemented_interfaces: Iterable[str] = (),
    uri: Optional[str] = None,
    line: int = 0,
    column: int = 0,
    definition_kind: DefinitionKind = DefinitionKind.COMPONENT,
) -> BeanDefinition:
    """Build a bean definition with test-friendly defaults.

    The bean name defaults to the decapitalized simple type name and the
    location to line 0 of ``<SimpleName>.java``.

    Example:
        >>> stripe = bean_definition(
        ...     "com.example.StripePaymentService",
        ...     is_primary=True,
        ...     implemented_interfaces=["com.example.PaymentService"],
        ... )
        >>> stripe.name, stripe.location_key
        ('stripePaymentService', 'StripePaymentService.java:0:0')
    """
    return BeanDefinition(
        name=name or decapitalize(simple_type_name(type_name)),
        type=type_name,
        qualifiers=frozenset(qualifiers),
        is_primary=is_primary,
        location=source_location(uri or _default_uri(type_name), line, column),
        implemented_interfaces=tuple(implemented_interfaces),
        definition_kind=definition_kind,
    )


def injection_point(
    bean_type: str,
    *,
    bean_name: Optional[str] = None,
    qualifier: Optional[str] = None,
    uri: str = "Client.java",
    line: int = 0,
    column: int = 0,
    member_name: Optional[str] = None,
    injection_kind: InjectionKind = InjectionKind.FIELD,
) -> BeanInjectionPoint:
    """Build an injection point; the location defaults to line 0 of ``Client.java``."""
    return BeanInjectionPoint(
        bean_type=bean_type,
        bean_name=bean_name,
        qualifier=qualifier,
        location=source_location(uri, line, column),
        injection_kind=injection_kind,
        member_name=member_name,
    )


def spring_annotation(simple_name: str, table: Optional[AnnotationTable] = None, **parameters: Any) -> Annotation:
    """Build a resolved annotation by simple name, looking up its qualified name in a table.

    Args:
        simple_name: Annotation name as written, e.g. ``Qualifier``.
        table: Table to look the name up in. Defaults to the Spring table.
        **parameters: Annotation parameters.

    Raises:
        ValueError: If no table entry has the given simple name.

    Example:
        >>> spring_annotation("Qualifier", value="paypal").fully_qualified_name
        'org.springframework.beans.factory.annotation.Qualifier'
    """
    table = table or AnnotationTable.spring()
    for field_name in type(table).model_fields:
        for qualified_name in sorted(getattr(table, field_name)):
            if qualified_name.rsplit(".", 1)[-1] == simple_name:
                return Annotation(name=simple_name, fully_qualified_name=qualified_name, parameters=parameters)
    raise ValueError(f"No annotation named {simple_name} in table")


class TestIndex(BeanIndex):
    """Bean index for testing, seeded from another index.

    Starts as a copy of a parent index so tests can add or remove entries
    without touching shared fixtures. Restores the parent's contents on
    reset and empties itself when used as a context manager.

    Attributes:
        _parent_index: Index the contents were copied from.

    Example:
        >>> shared = create_index(stripe, paypal)
        >>> with TestIndex(shared) as index:
        ...     index.remove_definition(stripe.location_key)
        ...     resolver.resolve(payment_injection, index)
        >>> len(shared)
        2
    """

    __test__ = False  # Tell pytest not to collect this class as a test

    def __init__(self, parent_index: Optional[BeanIndex] = None) -> None:
        """Initialize the test index.

        Args:
            parent_index: Index to copy. If None, the test index starts empty.
        """
        super().__init__()
        self._parent_index = parent_index
        self._copy_parent()

    def _copy_parent(self) -> None:
        if self._parent_index is None:
            return
        for definition in self._parent_index.all_definitions():
            self.add_definition(definition)
        for injection in self._parent_index.all_injection_points():
            self.add_injection_point(injection)

    def add_definitions(self, *definitions: BeanDefinition) -> None:
        for definition in definitions:
            self.add_definition(definition)

    def add_injection_points(self, *injection_points: BeanInjectionPoint) -> None:
        for injection in injection_points:
            self.add_injection_point(injection)

    def reset(self) -> None:
        """Drop local changes and restore the parent's contents."""
        self.clear()
        self._copy_parent()

    def __enter__(self) -> "TestIndex":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        """Context manager exit - empty the index."""
        self.clear()
        return False


def create_index(*definitions: BeanDefinition, injection_points: Iterable[BeanInjectionPoint] = ()) -> TestIndex:
    """Create a test index pre-populated with definitions and injection points.

    Example:
        >>> index = create_index(
        ...     bean_definition("com.example.UserRepositoryImpl", implemented_interfaces=["com.example.UserRepository"]),
        ...     injection_points=[injection_point("UserRepository")],
        ... )
    """
    index = TestIndex()
    index.add_definitions(*definitions)
    index.add_injection_points(*injection_points)
    return index

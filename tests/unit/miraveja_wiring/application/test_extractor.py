"""Unit tests for DeclarationExtractor."""

import pytest

from miraveja_wiring.application.extractor import DeclarationExtractor
from miraveja_wiring.domain import (
    Annotation,
    DeclarationKind,
    DefinitionKind,
    InjectionKind,
    MemberDeclaration,
    MemberKind,
    ParameterDeclaration,
    TypeDeclaration,
)
from miraveja_wiring.infrastructure.testing import source_location, spring_annotation

URI = "src/main/java/com/example/OrderService.java"


def _type(annotations=(), members=(), supertypes=(), kind=DeclarationKind.CLASS, name="com.example.OrderService"):
    return TypeDeclaration(
        kind=kind,
        fully_qualified_name=name,
        annotations=list(annotations),
        supertypes=list(supertypes),
        members=list(members),
        location=source_location(URI, 5),
    )


def _field(name, declared_type, line, annotations=(), is_final=False, is_static=False):
    return MemberDeclaration(
        kind=MemberKind.FIELD,
        name=name,
        declared_type=declared_type,
        annotations=list(annotations),
        is_final=is_final,
        is_static=is_static,
        location=source_location(URI, line),
    )


def _parameter(name, declared_type, line, annotations=()):
    return ParameterDeclaration(
        name=name,
        declared_type=declared_type,
        annotations=list(annotations),
        location=source_location(URI, line),
    )


def _constructor(parameters, line, annotations=()):
    return MemberDeclaration(
        kind=MemberKind.CONSTRUCTOR,
        name="OrderService",
        parameters=list(parameters),
        annotations=list(annotations),
        location=source_location(URI, line),
    )


def _method(name, line, return_type=None, parameters=(), annotations=()):
    return MemberDeclaration(
        kind=MemberKind.METHOD,
        name=name,
        declared_type=return_type,
        parameters=list(parameters),
        annotations=list(annotations),
        location=source_location(URI, line),
    )


@pytest.fixture
def extractor():
    return DeclarationExtractor()


class TestClassDefinitions:
    """Test cases for bean definitions declared on classes."""

    def test_service_with_derived_name(self, extractor):
        """Test the default bean name of a stereotype class."""
        result = extractor.extract(_type([spring_annotation("Service")], supertypes=["com.example.Orders"]))

        assert len(result.definitions) == 1
        definition = result.definitions[0]
        assert definition.name == "orderService"
        assert definition.type == "com.example.OrderService"
        assert definition.implemented_interfaces == ("com.example.Orders",)
        assert definition.definition_kind == DefinitionKind.COMPONENT
        assert definition.annotation_type == "org.springframework.stereotype.Service"
        assert definition.location_key == f"{URI}:5:0"

    def test_explicit_bean_name(self, extractor):
        """Test a name given in the stereotype annotation."""
        result = extractor.extract(_type([spring_annotation("Component", value="orders")]))
        assert result.definitions[0].name == "orders"

    def test_qualifier_and_primary(self, extractor):
        """Test qualifiers and primary status on the class."""
        result = extractor.extract(
            _type(
                [
                    spring_annotation("Service"),
                    spring_annotation("Primary"),
                    spring_annotation("Qualifier", value="fast"),
                ]
            )
        )
        definition = result.definitions[0]
        assert definition.is_primary
        assert definition.qualifiers == frozenset({"fast", "orderService"})

    def test_bean_name_is_a_qualifier(self, extractor):
        """Test that a bean answers to its own name as a qualifier."""
        result = extractor.extract(_type([spring_annotation("Service", value="orders")]))
        assert result.definitions[0].qualifiers == frozenset({"orders"})

    def test_configuration_kind(self, extractor):
        """Test that @Configuration classes are marked as such."""
        result = extractor.extract(_type([spring_annotation("Configuration")]))
        assert result.definitions[0].definition_kind == DefinitionKind.CONFIGURATION

    def test_unresolved_annotation(self, extractor):
        """Test a stereotype the scanner could not resolve."""
        result = extractor.extract(_type([Annotation(name="@Repository")]))
        assert result.definitions[0].annotation_type == "Repository"

    def test_plain_class_has_no_definition(self, extractor):
        """Test a class without bean annotations."""
        assert extractor.extract(_type()).definitions == []

    def test_interface_yields_nothing(self, extractor):
        """Test that interfaces contribute nothing."""
        field = _field("repository", "OrderRepository", 7, [spring_annotation("Autowired")])
        result = extractor.extract(_type([spring_annotation("Service")], [field], kind=DeclarationKind.INTERFACE))
        assert result.is_empty

    def test_abstract_class_yields_injection_points_only(self, extractor):
        """Test that abstract classes are never beans."""
        field = _field("repository", "OrderRepository", 7, [spring_annotation("Autowired")])
        result = extractor.extract(
            _type([spring_annotation("Service")], [field], kind=DeclarationKind.ABSTRACT_CLASS)
        )
        assert result.definitions == []
        assert len(result.injection_points) == 1


class TestBeanMethods:
    """Test cases for @Bean factory methods."""

    def test_bean_method_definition(self, extractor):
        """Test a factory method inside a configuration class."""
        method = _method(
            "paymentClient",
            10,
            return_type="com.example.PaymentClient",
            parameters=[_parameter("properties", "com.example.PaymentProperties", 10)],
            annotations=[spring_annotation("Bean"), spring_annotation("Primary")],
        )
        result = extractor.extract(_type([spring_annotation("Configuration")], [method]))

        bean = result.definitions[1]
        assert bean.name == "paymentClient"
        assert bean.type == "com.example.PaymentClient"
        assert bean.is_primary
        assert bean.definition_kind == DefinitionKind.BEAN_METHOD
        assert [point.injection_kind for point in result.injection_points] == [InjectionKind.BEAN_METHOD_PARAMETER]

    def test_bean_method_name_array(self, extractor):
        """Test that the first of several bean names is used."""
        method = _method(
            "client",
            10,
            return_type="PaymentClient",
            annotations=[spring_annotation("Bean", name=["primaryClient", "client"])],
        )
        result = extractor.extract(_type([spring_annotation("Configuration")], [method]))
        assert result.definitions[1].name == "primaryClient"

    def test_bean_method_name_is_a_qualifier(self, extractor):
        """Test that a factory method's bean name is one of its qualifiers."""
        method = _method(
            "paymentClient",
            10,
            return_type="PaymentClient",
            annotations=[spring_annotation("Bean"), spring_annotation("Qualifier", value="payments")],
        )
        result = extractor.extract(_type([spring_annotation("Configuration")], [method]))
        assert result.definitions[1].qualifiers == frozenset({"payments", "paymentClient"})

    def test_void_bean_method_is_skipped(self, extractor):
        """Test that a factory method without a return type defines nothing."""
        method = _method("init", 10, return_type="void", annotations=[spring_annotation("Bean")])
        result = extractor.extract(_type([spring_annotation("Configuration")], [method]))
        assert len(result.definitions) == 1

    def test_bean_method_outside_bean_class_ignored(self, extractor):
        """Test that factory methods on plain classes are ignored."""
        method = _method("client", 10, return_type="PaymentClient", annotations=[spring_annotation("Bean")])
        assert extractor.extract(_type(members=[method])).definitions == []


class TestFieldInjection:
    """Test cases for field injection points."""

    def test_autowired_field(self, extractor):
        """Test a plain @Autowired field."""
        field = _field("repository", "com.example.OrderRepository", 7, [spring_annotation("Autowired")])
        result = extractor.extract(_type([spring_annotation("Service")], [field]))

        injection = result.injection_points[0]
        assert injection.bean_type == "com.example.OrderRepository"
        assert injection.injection_kind == InjectionKind.FIELD
        assert injection.member_name == "repository"
        assert injection.bean_name is None
        assert injection.qualifier is None
        assert injection.is_required

    def test_qualified_field(self, extractor):
        """Test a field with a qualifier."""
        field = _field(
            "paymentService",
            "PaymentService",
            7,
            [spring_annotation("Autowired"), spring_annotation("Qualifier", value="paypal")],
        )
        result = extractor.extract(_type(members=[field]))
        assert result.injection_points[0].qualifier == "paypal"

    def test_optional_field(self, extractor):
        """Test @Autowired(required = false)."""
        field = _field("audit", "AuditLog", 7, [spring_annotation("Autowired", required=False)])
        result = extractor.extract(_type(members=[field]))
        assert not result.injection_points[0].is_required

    def test_resource_with_name(self, extractor):
        """Test @Resource(name = ...)."""
        field = _field("dataSource", "DataSource", 7, [spring_annotation("Resource", name="mainDataSource")])
        result = extractor.extract(_type(members=[field]))
        assert result.injection_points[0].bean_name == "mainDataSource"

    def test_resource_defaults_to_field_name(self, extractor):
        """Test a bare @Resource."""
        field = _field("dataSource", "DataSource", 7, [spring_annotation("Resource")])
        result = extractor.extract(_type(members=[field]))
        assert result.injection_points[0].bean_name == "dataSource"

    def test_static_and_unannotated_fields_skipped(self, extractor):
        """Test fields that are not injection points."""
        fields = [
            _field("LOG", "Logger", 6, [spring_annotation("Autowired")], is_static=True),
            _field("cache", "Cache", 7),
        ]
        assert extractor.extract(_type(members=fields)).injection_points == []


class TestConstructorInjection:
    """Test cases for constructor injection points."""

    def test_annotated_constructor(self, extractor):
        """Test an @Autowired constructor."""
        constructor = _constructor(
            [
                _parameter("repository", "OrderRepository", 9),
                _parameter("payments", "PaymentService", 9, [spring_annotation("Qualifier", value="paypal")]),
            ],
            9,
            [spring_annotation("Autowired")],
        )
        result = extractor.extract(_type(members=[constructor]))

        assert [point.member_name for point in result.injection_points] == ["repository", "payments"]
        assert {point.injection_kind for point in result.injection_points} == {InjectionKind.CONSTRUCTOR}
        assert result.injection_points[1].qualifier == "paypal"

    def test_implicit_single_constructor_of_bean(self, extractor):
        """Test that a bean's only constructor is autowired without annotation."""
        constructor = _constructor([_parameter("repository", "OrderRepository", 9)], 9)
        result = extractor.extract(_type([spring_annotation("Service")], [constructor]))
        assert [point.member_name for point in result.injection_points] == ["repository"]

    def test_no_implicit_injection_for_plain_class(self, extractor):
        """Test that plain classes have no implicit constructor injection."""
        constructor = _constructor([_parameter("repository", "OrderRepository", 9)], 9)
        assert extractor.extract(_type(members=[constructor])).injection_points == []

    def test_no_implicit_injection_with_several_constructors(self, extractor):
        """Test that the implicit rule needs a single constructor."""
        constructors = [
            _constructor([_parameter("repository", "OrderRepository", 9)], 9),
            _constructor([], 12),
        ]
        assert extractor.extract(_type([spring_annotation("Service")], constructors)).injection_points == []


class TestLombokInjection:
    """Test cases for Lombok-generated constructors."""

    def test_required_args_on_bean(self, extractor):
        """Test that @RequiredArgsConstructor wires final fields."""
        fields = [
            _field("repository", "OrderRepository", 7, is_final=True),
            _field("counter", "int", 8),
            _field("payments", "PaymentService", 9, [Annotation(name="NonNull")]),
        ]
        result = extractor.extract(
            _type([spring_annotation("Service"), spring_annotation("RequiredArgsConstructor")], fields)
        )
        assert [point.member_name for point in result.injection_points] == ["repository", "payments"]
        assert {point.injection_kind for point in result.injection_points} == {InjectionKind.LOMBOK_CONSTRUCTOR}

    def test_all_args_wires_every_field(self, extractor):
        """Test that @AllArgsConstructor wires every instance field."""
        fields = [
            _field("repository", "OrderRepository", 7),
            _field("INSTANCE", "OrderService", 8, is_static=True),
        ]
        result = extractor.extract(_type([spring_annotation("Component"), spring_annotation("AllArgsConstructor")], fields))
        assert [point.member_name for point in result.injection_points] == ["repository"]

    def test_on_constructor_autowired(self, extractor):
        """Test onConstructor = @__({@Autowired}) on a non-bean class."""
        fields = [_field("repository", "OrderRepository", 7, is_final=True)]
        lombok = spring_annotation("RequiredArgsConstructor", onConstructor_="@Autowired")
        result = extractor.extract(_type([lombok], fields))
        assert len(result.injection_points) == 1

    def test_on_constructor_requires_whole_annotation_name(self, extractor):
        """Test that an annotation merely starting with a marker name is not autowiring."""
        fields = [_field("repository", "OrderRepository", 7, is_final=True)]
        lombok = spring_annotation("RequiredArgsConstructor", onConstructor_="@__({@InjectMocks})")
        assert extractor.extract(_type([lombok], fields)).injection_points == []

    def test_on_constructor_qualified_marker(self, extractor):
        """Test a fully-qualified marker inside onConstructor."""
        fields = [_field("repository", "OrderRepository", 7, is_final=True)]
        lombok = spring_annotation("RequiredArgsConstructor", onConstructor="@__({@javax.inject.Inject})")
        assert len(extractor.extract(_type([lombok], fields)).injection_points) == 1

    def test_lombok_without_bean_or_autowiring(self, extractor):
        """Test that a plain Lombok class has no injection points."""
        fields = [_field("repository", "OrderRepository", 7, is_final=True)]
        assert extractor.extract(_type([spring_annotation("RequiredArgsConstructor")], fields)).injection_points == []

    def test_explicit_constructor_disables_lombok(self, extractor):
        """Test that Lombok is ignored when constructors are declared."""
        fields = [_field("repository", "OrderRepository", 7, is_final=True)]
        constructor = _constructor([_parameter("repository", "OrderRepository", 9)], 9, [spring_annotation("Autowired")])
        result = extractor.extract(
            _type([spring_annotation("Service"), spring_annotation("RequiredArgsConstructor")], fields + [constructor])
        )
        assert [point.injection_kind for point in result.injection_points] == [InjectionKind.CONSTRUCTOR]


class TestSetterInjection:
    """Test cases for annotated methods."""

    def test_autowired_setter(self, extractor):
        """Test an @Autowired setter."""
        setter = _method(
            "setRepository",
            11,
            return_type="void",
            parameters=[_parameter("repository", "OrderRepository", 11)],
            annotations=[spring_annotation("Autowired")],
        )
        result = extractor.extract(_type(members=[setter]))
        assert [point.injection_kind for point in result.injection_points] == [InjectionKind.SETTER_METHOD]

    def test_inject_setter(self, extractor):
        """Test a JSR-330 @Inject setter."""
        setter = _method(
            "setRepository",
            11,
            return_type="void",
            parameters=[_parameter("repository", "OrderRepository", 11)],
            annotations=[spring_annotation("Inject")],
        )
        assert len(extractor.extract(_type(members=[setter])).injection_points) == 1

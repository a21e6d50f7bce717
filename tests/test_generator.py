from abstract_extractor.generator import generate
from abstract_extractor.model import ClassHeader, FieldDescriptor, MethodDescriptor


def method(name, return_type="void", params="()", body="{}", **flags):
    return MethodDescriptor(name=name, return_type=return_type, params=params, body=body, **flags)


def test_user_repository_layout():
    result = generate(
        "UserRepository",
        "I",
        "Impl",
        [FieldDescriptor("String", "id"), FieldDescriptor("String", "name")],
        [method("fetchUser"), method("saveUser")],
    )

    assert result.interface_text == "\n".join([
        "abstract class IUserRepository {",
        "  String get id;",
        "  String get name;",
        "",
        "  void fetchUser();",
        "  void saveUser();",
        "}",
    ])
    assert result.concrete_text == "\n".join([
        "class UserRepositoryImpl implements IUserRepository {",
        "  @override",
        "  final String id;",
        "",
        "  @override",
        "  final String name;",
        "",
        "  @override",
        "  void fetchUser() {}",
        "",
        "  @override",
        "  void saveUser() {}",
        "",
        "  UserRepositoryImpl(this.id, this.name);",
        "}",
    ])
    assert result.full_output == result.interface_text + "\n\n" + result.concrete_text


def test_empty_class_has_no_constructor():
    result = generate("Empty", "I", "Impl", [], [])
    assert result.interface_text == "abstract class IEmpty {\n}"
    assert result.concrete_text == "class EmptyImpl implements IEmpty {\n}"
    assert "EmptyImpl(" not in result.concrete_text


def test_getter_signature_and_verbatim_body():
    result = generate(
        "Repo", "I", "Impl", [],
        [method("count", return_type="int", params="", body="=> _count;", is_getter=True)],
    )
    assert "  int get count;" in result.interface_text
    assert "  @override\n  int get count => _count;" in result.concrete_text


def test_setters_stay_out_of_the_interface():
    result = generate(
        "Repo", "I", "Impl", [],
        [method("value", params="(String v)", body="{}", is_setter=True)],
    )
    assert "set value" not in result.interface_text
    assert "  void set value(String v) {}" in result.concrete_text
    assert "@override\n  void set value" not in result.concrete_text


def test_multiline_bodies_are_copied_verbatim():
    body = "{\n    await api.load();\n    return 1;\n  }"
    result = generate(
        "Svc", "I", "Impl", [],
        [method("load", return_type="Future<int>", body=body, is_async=True, body_marker="async")],
    )
    assert "  Future<int> load();" in result.interface_text
    assert "  @override\n  Future<int> load() async " + body in result.concrete_text


def test_member_groups_order():
    result = generate(
        "Shop", "I", "Impl",
        [FieldDescriptor("String", "id")],
        [
            method("run"),
            method("total", return_type="int", params="", body="=> 1;", is_getter=True),
            method("label", return_type="", params="(String v)", is_setter=True),
        ],
    )
    iface = result.interface_text
    assert iface.index("String get id;") < iface.index("int get total;") < iface.index("void run();")

    impl = result.concrete_text
    positions = [
        impl.index("final String id;"),
        impl.index("int get total => 1;"),
        impl.index("set label(String v) {}"),
        impl.index("void run() {}"),
        impl.index("ShopImpl(this.id);"),
    ]
    assert positions == sorted(positions)


def test_type_parameters_and_interfaces_carry_over_without_superclass():
    header = ClassHeader(
        name="Box",
        extends="Base<T>",
        implements=("Comparable<Box<T>>",),
        mixins=("Logger",),
        type_parameters="<T extends num>",
    )
    result = generate("Box", "I", "Impl", [FieldDescriptor("T", "value")], [], header=header)
    assert result.interface_text.startswith("abstract class IBox<T extends num> {")
    assert result.concrete_text.startswith(
        "class BoxImpl<T extends num> implements IBox<T>, Comparable<Box<T>> {"
    )
    assert "Base<T>" not in result.concrete_text
    assert "Logger" not in result.concrete_text


def test_custom_prefix_and_suffix():
    result = generate("PaymentService", "Base", "Service", [], [])
    assert "abstract class BasePaymentService" in result.interface_text
    assert "class PaymentServiceService implements BasePaymentService" in result.concrete_text


def test_generation_is_deterministic():
    args = ("A", "I", "Impl", [FieldDescriptor("int", "x")], [method("go")])
    assert generate(*args) == generate(*args)

import pytest

from autopanel.contract import OperationDeclaration, ReturnKind, model
from autopanel.errors import (
    AmbiguousOperationError,
    LocatorArityError,
    UnsupportedOperationShapeError,
)
from autopanel.generators import (
    CLICK,
    GENERATOR_PRIORITY,
    READ_ATTRIBUTE,
    READ_TEXT,
    SET_TEXT,
    ClickGenerator,
    GeneratorRegistry,
    ReadGenerator,
    SetInputGenerator,
    SetModelGenerator,
    make_name_pattern,
)
from autopanel.locator import LocatorKind, make_descriptor


@model
class Credentials:
    username: str
    password: str


def operation(name, params=(), return_type=None, return_kind=ReturnKind.VOID, locator=None):
    return OperationDeclaration(
        owner="Form",
        name=name,
        parameter_types=tuple(params),
        return_type=return_type,
        return_kind=return_kind,
        locator=locator,
    )


@pytest.mark.parametrize(
    "name, matched",
    [
        ("clickSubmit", True),
        ("click_submit", True),
        ("click2", True),
        ("click$", True),
        ("clickable", False),
        ("click", False),
        ("doClick", False),
    ],
)
def test_name_pattern(name, matched):
    assert (make_name_pattern("click").search(name) is not None) is matched


def test_priority_is_explicit():
    assert GENERATOR_PRIORITY == (
        ClickGenerator,
        ReadGenerator,
        SetModelGenerator,
        SetInputGenerator,
    )


def test_click_plan():
    op = operation("click_submit", locator=make_descriptor("submit"))
    plan = GeneratorRegistry().compile(op)

    assert [c.action for c in plan.calls] == [CLICK]
    assert plan.epilogue is ReturnKind.VOID
    assert plan.slice_at == 0


def test_click_with_format_arguments():
    op = operation("click_submit", (str, int), locator=make_descriptor("submit-%s[%d]"))
    assert GeneratorRegistry().select(op).name == "ClickGenerator"


def test_clickable_is_not_a_click():
    op = operation("clickable", locator=make_descriptor("x"))
    assert not ClickGenerator().matches(op)
    with pytest.raises(UnsupportedOperationShapeError):
        GeneratorRegistry().select(op)


def test_click_needs_a_locator():
    with pytest.raises(UnsupportedOperationShapeError):
        GeneratorRegistry().select(operation("click_submit"))


def test_click_needs_a_standard_return():
    op = operation("click_submit", return_type=int, return_kind=None, locator=make_descriptor("x"))
    with pytest.raises(UnsupportedOperationShapeError):
        GeneratorRegistry().select(op)


def test_read_returns_result():
    op = operation("read_heading", return_type=str, return_kind=None, locator=make_descriptor(css="h1"))
    plan = GeneratorRegistry().compile(op)

    assert [c.action for c in plan.calls] == [READ_TEXT]
    assert plan.returns_result


def test_read_attribute():
    op = operation(
        "read_link",
        return_type=str,
        return_kind=None,
        locator=make_descriptor(css="a", attribute="href"),
    )
    (call,) = GeneratorRegistry().compile(op).calls
    assert call.action == READ_ATTRIBUTE
    assert call.attribute == "href"


def test_read_must_return_text():
    op = operation("read_heading", locator=make_descriptor(css="h1"))
    with pytest.raises(UnsupportedOperationShapeError):
        GeneratorRegistry().select(op)


def test_set_input_plan():
    op = operation("set_name", (str,), locator=make_descriptor("name"))
    plan = GeneratorRegistry().compile(op)

    assert plan.slice_at == 1
    (call,) = plan.calls
    assert call.action == SET_TEXT
    assert call.argument == 0
    assert call.field is None


def test_set_model_plan():
    op = operation("set_some_form", (Credentials,), locator=make_descriptor("panel-"))
    plan = GeneratorRegistry().compile(op)

    assert [(c.action, c.locator.template, c.field) for c in plan.calls] == [
        (SET_TEXT, "panel-username", "username"),
        (SET_TEXT, "panel-password", "password"),
    ]


def test_set_model_without_locator_uses_field_ids():
    op = operation("set_credentials", (Credentials,))
    plan = GeneratorRegistry().compile(op)

    assert [(c.locator.kind, c.locator.template) for c in plan.calls] == [
        (LocatorKind.ID, "username"),
        (LocatorKind.ID, "password"),
    ]


def test_set_model_with_extra_parameters_is_rejected():
    op = operation("set_credentials", (Credentials, int), locator=make_descriptor("row-%d-"))
    with pytest.raises(UnsupportedOperationShapeError):
        GeneratorRegistry().select(op)


def test_set_rules_are_mutually_exclusive():
    model_op = operation("set_credentials", (Credentials,), locator=make_descriptor("p-"))
    text_op = operation("set_name", (str,), locator=make_descriptor("name"))

    assert SetModelGenerator().matches(model_op)
    assert not SetInputGenerator().matches(model_op)
    assert SetInputGenerator().matches(text_op)
    assert not SetModelGenerator().matches(text_op)


@pytest.mark.parametrize("params", [(str,), (str, str, int)])
def test_wrong_arity_is_reported_as_arity_error(params):
    op = operation("click_row", params, locator=make_descriptor("row-%s-%d"))

    with pytest.raises(LocatorArityError) as info:
        GeneratorRegistry().select(op)

    assert isinstance(info.value, UnsupportedOperationShapeError)
    assert info.value.contract == "Form"


def test_set_input_arity_counts_trailing_parameters():
    ok = operation("set_cell", (str, int), locator=make_descriptor("cell-%d"))
    short = operation("set_cell", (str,), locator=make_descriptor("cell-%d"))

    assert SetInputGenerator().matches(ok)
    with pytest.raises(LocatorArityError):
        GeneratorRegistry().select(short)


def test_two_matching_rules_are_ambiguous():
    registry = GeneratorRegistry([ClickGenerator(), ClickGenerator()])
    op = operation("click_submit", locator=make_descriptor("submit"))

    with pytest.raises(AmbiguousOperationError):
        registry.select(op)

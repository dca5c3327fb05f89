from __future__ import annotations

import dataclasses

import pytest

import autopanel
from autopanel.contract import (
    Page,
    Panel,
    ReturnKind,
    by,
    capability_of,
    classify_return,
    declared_operations,
    is_contract,
    is_model,
    model,
    scope,
    scope_of,
    url,
    url_of,
)
from autopanel.errors import ContractShapeError, UnsupportedOperationShapeError
from autopanel.locator import LocatorKind


@model
class Address:
    street: str
    city: str = "Oslo"


@scope("panel-")
class AddressPanel(Panel):

    @by("street")
    def set_street(self, value: str) -> AddressPanel: ...

    @by(css=".city", attribute="title")
    def read_city(self) -> str: ...

    def _helper(self):
        return "not an operation"


@url("/profile/%d")
class ProfilePage(Page):

    @by("save")
    def click_save(self) -> ProfilePage: ...

    @by("address")
    def click_address(self) -> AddressPanel: ...

    @by("logout")
    def click_logout(self): ...


class ExtendedProfilePage(ProfilePage):

    @by("delete")
    def click_delete(self) -> None: ...


class BrokenAnnotation(Panel):

    @by("x")
    def click_x(self) -> MissingType: ...  # noqa: F821


class KeywordOnly(Panel):

    @by("x")
    def set_x(self, *, value: str) -> None: ...


def test_capabilities():
    assert capability_of(AddressPanel) == "panel"
    assert capability_of(ProfilePage) == "page"
    assert capability_of(Address) is None
    assert is_contract(ProfilePage)
    assert not is_contract(Page)
    assert not is_contract(Panel)
    assert not is_contract(Address)


def test_model_decorator_makes_a_dataclass():
    assert is_model(Address)
    assert dataclasses.is_dataclass(Address)
    assert Address("Main").city == "Oslo"
    assert not is_model(AddressPanel)


def test_scope_and_url_metadata():
    assert scope_of(AddressPanel).template == "panel-"
    assert scope_of(AddressPanel).kind is LocatorKind.ID
    assert scope_of(ProfilePage) is None
    assert url_of(ProfilePage) == "/profile/%d"
    assert url_of(AddressPanel) is None


def test_scope_only_applies_to_panels():
    with pytest.raises(TypeError):
        scope("x")(ProfilePage)


def test_url_only_applies_to_pages():
    with pytest.raises(TypeError):
        url("/x")(AddressPanel)


def test_declared_operations_skip_private_members():
    names = {op.name for op in declared_operations(AddressPanel)}
    assert names == {"set_street", "read_city"}


def test_declaration_details():
    ops = {op.name: op for op in declared_operations(AddressPanel)}

    street = ops["set_street"]
    assert street.parameter_types == (str,)
    assert street.return_kind is ReturnKind.SELF
    assert street.qualified_name == "AddressPanel.set_street"

    city = ops["read_city"]
    assert city.return_type is str
    assert city.return_kind is None
    assert city.locator.attribute == "title"


def test_return_kinds():
    ops = {op.name: op for op in declared_operations(ProfilePage)}
    assert ops["click_save"].return_kind is ReturnKind.SELF
    assert ops["click_address"].return_kind is ReturnKind.PANEL
    assert ops["click_logout"].return_kind is ReturnKind.VOID


def test_inherited_operations_are_collected():
    ops = {op.name: op for op in declared_operations(ExtendedProfilePage)}
    assert set(ops) == {"click_save", "click_address", "click_logout", "click_delete"}
    assert ops["click_delete"].return_kind is ReturnKind.VOID
    assert ops["click_save"].owner == "ExtendedProfilePage"


def test_classify_return():
    assert classify_return(AddressPanel, None) is ReturnKind.VOID
    assert classify_return(AddressPanel, type(None)) is ReturnKind.VOID
    assert classify_return(AddressPanel, ProfilePage) is ReturnKind.PAGE
    assert classify_return(ProfilePage, AddressPanel) is ReturnKind.PANEL
    assert classify_return(ProfilePage, str) is None
    assert classify_return(ProfilePage, Page) is None


def test_non_contract_is_rejected():
    with pytest.raises(ContractShapeError):
        declared_operations(Address)


def test_unresolvable_annotation():
    with pytest.raises(ContractShapeError):
        declared_operations(BrokenAnnotation)


def test_keyword_only_parameters_are_unsupported():
    with pytest.raises(UnsupportedOperationShapeError):
        declared_operations(KeywordOnly)


def test_package_exports_the_decorators():
    assert autopanel.scope is scope
    assert autopanel.by is by
    assert autopanel.url is url

    @autopanel.scope("panel-")
    class Scoped(Panel):
        pass

    assert scope_of(Scoped).template == "panel-"

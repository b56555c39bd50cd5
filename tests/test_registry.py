from __future__ import annotations

import dataclasses

import pytest

from brevo_platform.abilities import build_abilities, register_abilities
from brevo_platform.errors import RegistryError
from brevo_platform.policy import ADMIN_RULE, PermissionRule
from brevo_platform.registry import AbilityRegistry

EXPECTED = {
    "brevo/list-contacts",
    "brevo/get-contact",
    "brevo/create-contact",
    "brevo/update-contact",
    "brevo/delete-contact",
    "brevo/list-attributes",
    "brevo/list-lists",
    "brevo/get-list",
    "brevo/create-list",
    "brevo/delete-list",
    "brevo/add-to-list",
    "brevo/remove-from-list",
    "brevo/list-folders",
    "brevo/list-senders",
    "brevo/list-templates",
    "brevo/get-template",
    "brevo/send-email",
    "brevo/list-campaigns",
    "brevo/get-campaign",
    "brevo/send-campaign",
    "brevo/send-test-campaign",
    "brevo/get-account",
}


def test_catalog_has_all_abilities():
    names = [d.name for d in build_abilities()]
    assert len(names) == 22
    assert set(names) == EXPECTED


def test_every_descriptor_shares_the_injected_rule():
    rule = PermissionRule("edit_newsletters")
    descriptors = build_abilities(rule)
    assert all(d.permission is rule for d in descriptors)
    assert all(d.permission is ADMIN_RULE for d in build_abilities())


def test_register_loop(registry):
    assert len(registry) == 22
    assert "brevo/send-email" in registry
    assert registry.get("brevo/send-email").label == "Send Transactional Email"


def test_duplicate_name_rejected():
    reg = AbilityRegistry()
    descriptors = build_abilities()
    register_abilities(reg, descriptors)
    with pytest.raises(RegistryError, match="Duplicate"):
        reg.register(descriptors[0].name, descriptors[0])


def test_name_must_match_descriptor():
    reg = AbilityRegistry()
    d = build_abilities()[0]
    with pytest.raises(RegistryError):
        reg.register("brevo/other", d)


def test_unknown_lookup():
    with pytest.raises(RegistryError, match="Unknown ability"):
        AbilityRegistry().get("brevo/nope")


def test_bad_name_format():
    d = build_abilities()[0]
    with pytest.raises(ValueError):
        dataclasses.replace(d, name="list-contacts")


def test_annotations():
    by_name = {d.name: d for d in build_abilities()}
    assert by_name["brevo/list-contacts"].annotations.readonly
    assert by_name["brevo/delete-contact"].annotations.destructive
    assert by_name["brevo/delete-contact"].annotations.idempotent
    assert not by_name["brevo/send-email"].annotations.idempotent
    assert not by_name["brevo/send-campaign"].annotations.idempotent
    assert by_name["brevo/update-contact"].annotations.idempotent


def test_to_json_publishes_schemas():
    d = {d.name: d for d in build_abilities()}["brevo/list-contacts"]
    js = d.to_json()
    assert js["permission"] == "manage_options"
    assert js["input_schema"]["properties"]["limit"]["maximum"] == 1000
    assert js["output_schema"]["properties"]["contacts"] == {"type": "array"}
    assert js["meta"]["annotations"]["readonly"] is True


def test_iterates_in_registration_order():
    reg = register_abilities(AbilityRegistry())
    assert list(reg) == [d.name for d in build_abilities()]


def test_published_schemas_only_use_checked_keywords():
    checked = {"type", "enum", "items", "properties", "minimum", "maximum", "default", "description"}

    def walk(node):
        assert set(node) <= checked, node
        for child in node.get("properties", {}).values():
            walk(child)
        if "items" in node:
            walk(node["items"])

    for d in build_abilities():
        for prop in d.input_schema.to_json_schema()["properties"].values():
            walk(prop)

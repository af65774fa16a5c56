"""Shared fixtures: the declarations used across the generator tests."""

import pytest

from buildergen import emit_schema, load_generated, schema_from_dict

SCHEMA = {
    "declarations": [
        {
            "name": "Agent",
            "directives": ["generate-validator"],
            "fields": [
                {"name": "public_key", "type": "str", "directives": ["expose"]},
                {"name": "wears_crocks", "type": "bool", "directives": ["expose"]},
                {"name": "known_enemies", "type": "List[str]", "directives": ["expose"]},
                {"name": "role", "type": "str", "directives": ["expose", "defaultable"]},
            ],
        },
        {
            "name": "Organization",
            "directives": ["generate-validator", {"name": "custom-name", "value": "OrgBuilder"}],
            "fields": [{"name": "org_id", "type": "str", "directives": ["expose"]}],
        },
        {
            "name": "Payload",
            "fields": [
                {"name": "action", "type": "str", "directives": ["expose"]},
                {"name": "payload", "type": "bytes", "directives": ["expose"]},
            ],
        },
    ]
}


@pytest.fixture
def schema_data():
    """A fresh copy of the shared schema document."""
    import copy

    return copy.deepcopy(SCHEMA)


@pytest.fixture
def schema(schema_data):
    return schema_from_dict(schema_data, "agents.json")


@pytest.fixture
def generated(schema):
    """The shared schema compiled into a live module."""
    result = emit_schema(schema)
    assert result.ok, [str(d) for d in result.diagnostics]
    return load_generated(result.source, "agents_gen")

#!/usr/bin/env python3
"""
Walkthrough of buildergen - generate builders from a schema and use them
"""

from pathlib import Path
from typing import Annotated, List

from buildergen import (
    MissingField,
    custom_name,
    declaration,
    defaultable,
    emit_schema,
    expose,
    generate_validator,
    load_generated,
    load_schema,
    schema_from_classes,
)

HERE = Path(__file__).parent


def demo_json_schema():
    """Generate from a JSON schema document"""
    print("=== JSON Schema ===")

    result = emit_schema(load_schema(HERE / "agents.json"))
    print(f"Generated {len(result.units)} declarations, {len(result.diagnostics)} diagnostics")

    models = load_generated(result.source, "agents_gen")

    agent = (
        models.AgentBuilder()
        .with_public_key("ed25519:4f2a")
        .with_wears_crocks(False)
        .with_known_enemies(["Mallory"])
        .build()
    )
    print(f"Built agent: {agent}")
    print(f"Role defaulted to: {agent.role!r}")
    print(f"Enemies view: {agent.known_enemies}")

    try:
        models.AgentBuilder().with_wears_crocks(True).build()
    except MissingField as e:
        print(f"Caught expected error: {e}")

    org = models.OrgBuilder().with_org_id("acme").build()
    print(f"Built organization: {org}, budget {org.budget}")
    print()


def demo_class_stubs():
    """Generate from annotated class stubs"""
    print("=== Class Stubs ===")

    @declaration(generate_validator, custom_name("TicketDraft"))
    class Ticket:
        title: Annotated[str, expose]
        labels: Annotated[List[str], expose, defaultable]
        assignee: str

    result = emit_schema(schema_from_classes(Ticket))
    models = load_generated(result.source, "tickets_gen")

    draft = models.TicketDraft().with_title("Crash on start")
    print(f"Missing before build: {draft.missing_fields()}")

    ticket = draft.with_assignee("ops").build()
    print(f"Built ticket: {ticket}")
    print(f"Labels defaulted to: {list(ticket.labels)}")
    print()


def demo_generated_source():
    """Show the generated module"""
    print("=== Generated Source ===")
    print(emit_schema(load_schema(HERE / "agents.json")).source)


if __name__ == "__main__":
    demo_json_schema()
    demo_class_stubs()
    demo_generated_source()

"""Tests for directive parsing."""

import pytest

from buildergen import (
    Annotation,
    DeclarationKind,
    DuplicateField,
    Field,
    InvalidIdentifier,
    MalformedDirectiveArgument,
    SourceLocation,
    Text,
    TypeDeclaration,
    UnsupportedShape,
    custom_name,
    defaultable,
    expose,
    generate_validator,
    parse_directives,
)
from buildergen.directives import canonical_name, parse_field_directives


def make_declaration(*annotations, fields=None, kind=DeclarationKind.RECORD, name="Agent"):
    if fields is None:
        fields = (Field("public_key", Text(), (expose,)),)
    return TypeDeclaration(name, tuple(fields), tuple(annotations), kind, SourceLocation("agents.json", 3))


class TestDeclarationDirectives:
    """Declaration-level directives."""

    def test_defaults(self):
        """Test a declaration without directives."""
        parsed = parse_directives(make_declaration())

        assert parsed.directives.custom_name is None
        assert parsed.directives.generate_validator is False
        assert parsed.companion_name == "AgentBuilder"

    def test_custom_name_and_validator(self):
        """Test both declaration-level directives together."""
        parsed = parse_directives(make_declaration(custom_name("Factory"), generate_validator))

        assert parsed.directives.custom_name == "Factory"
        assert parsed.directives.generate_validator is True
        assert parsed.companion_name == "Factory"

    def test_custom_name_without_argument(self):
        """Test custom-name with no argument is malformed."""
        with pytest.raises(MalformedDirectiveArgument) as excinfo:
            parse_directives(make_declaration(Annotation("custom-name")))

        assert excinfo.value.directive == "custom-name"
        assert excinfo.value.location == SourceLocation("agents.json", 3)

    def test_custom_name_with_non_string(self):
        """Test custom-name with a non-string argument is malformed."""
        location = SourceLocation("agents.json", 4, 7)
        with pytest.raises(MalformedDirectiveArgument, match="expected a string, got int") as excinfo:
            parse_directives(make_declaration(Annotation("custom-name", (42,), location)))

        assert excinfo.value.location == location

    def test_custom_name_with_invalid_identifier(self):
        """Test custom-name must be usable as a class name."""
        with pytest.raises(MalformedDirectiveArgument, match="not a valid type name"):
            parse_directives(make_declaration(custom_name("Org Builder")))

    def test_custom_name_clashing_with_record(self):
        """Test the companion type cannot share the record's name."""
        with pytest.raises(MalformedDirectiveArgument, match="must differ"):
            parse_directives(make_declaration(custom_name("Agent")))

    def test_unrecognized_directives_ignored(self):
        """Test unknown directives are skipped, not rejected."""
        parsed = parse_directives(
            make_declaration(Annotation("serde", ("rename_all",)), Annotation("expose"))
        )
        assert parsed.directives.generate_validator is False
        assert parsed.directives.custom_name is None

    def test_ignored_directives_logged(self, caplog):
        """Test skipped directives are reported at debug level."""
        with caplog.at_level("DEBUG", logger="buildergen"):
            parse_directives(make_declaration(Annotation("serde"), Annotation("expose")))

        assert "Ignoring unrecognized directive 'serde' on declaration 'Agent'" in caplog.text
        assert "Ignoring field directive 'expose' on declaration 'Agent'" in caplog.text

    def test_variant_rejected(self):
        """Test variant-shaped declarations are unsupported."""
        with pytest.raises(UnsupportedShape) as excinfo:
            parse_directives(make_declaration(kind=DeclarationKind.VARIANT, fields=()))

        assert excinfo.value.kind == "variant"
        assert "only compatible with records" in str(excinfo.value)

    def test_legacy_spellings(self):
        """Test the older attribute names map onto the directives."""
        parsed = parse_directives(
            make_declaration(Annotation("builder_name", ("Bar",)), Annotation("gen_build_impl"))
        )
        assert parsed.companion_name == "Bar"
        assert parsed.directives.generate_validator is True

        assert canonical_name("getter") == "expose"
        assert canonical_name("optional") == "defaultable"
        assert canonical_name("Custom_Name") == "custom-name"


class TestFieldDirectives:
    """Field-level directives and field checks."""

    def test_expose_and_defaultable(self):
        """Test both field directives are picked up."""
        directives = parse_field_directives(Field("role", Text(), (expose, defaultable)))
        assert directives.expose is True
        assert directives.defaultable is True

    def test_no_directives(self):
        """Test a bare field."""
        directives = parse_field_directives(Field("role", Text()))
        assert directives.expose is False
        assert directives.defaultable is False

    def test_declaration_directive_on_field_ignored(self):
        """Test directives from the other level are ignored on fields."""
        directives = parse_field_directives(Field("role", Text(), (generate_validator,)))
        assert directives.expose is False

    def test_field_directives_follow_field_order(self):
        """Test parsed directives line up with the declared fields."""
        parsed = parse_directives(
            make_declaration(
                fields=(
                    Field("a", Text(), (expose,)),
                    Field("b", Text()),
                    Field("c", Text(), (defaultable,)),
                )
            )
        )
        assert [f.name for f, _ in parsed.field_items()] == ["a", "b", "c"]
        assert [d.expose for d in parsed.field_directives] == [True, False, False]
        assert [d.defaultable for d in parsed.field_directives] == [False, False, True]

    def test_duplicate_field(self):
        """Test field names must be unique."""
        location = SourceLocation("agents.json", pointer="fields[1]")
        with pytest.raises(DuplicateField) as excinfo:
            parse_directives(
                make_declaration(fields=(Field("a", Text()), Field("a", Text(), (), location)))
            )
        assert excinfo.value.field_name == "a"
        assert excinfo.value.location == location

    @pytest.mark.parametrize("name", ["class", "2fast", "has space", "_private", "self", "fields", "replace"])
    def test_invalid_field_names(self, name):
        """Test field names must be plain identifiers."""
        with pytest.raises(InvalidIdentifier):
            parse_directives(make_declaration(fields=(Field(name, Text()),)))

    def test_invalid_declaration_name(self):
        """Test the declaration name must be an identifier."""
        with pytest.raises(InvalidIdentifier):
            parse_directives(make_declaration(name="not-a-name"))

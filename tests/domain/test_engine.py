"""Tests for the rule engine: field pass, combinations, struct-wide pass."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from gormlint.domain.models import Diagnostic
from gormlint.domain.rules import (
    Finding,
    register_value_rule,
    unregister_value_rule,
    validate_text,
)
from gormlint.domain.tags import TagEntry
from gormlint.domain.types import Severity
from gormlint.domain.vocabulary import register_tag_key, unregister_tag_key


def _model(*field_lines: str, name: str = "User") -> str:
    body = "\n".join(f"\t{line}" for line in field_lines)
    return f"package models\n\ntype {name} struct {{\n{body}\n}}\n"


def _messages(diagnostics: list[Diagnostic]) -> list[str]:
    return [d.message for d in diagnostics]


class TestScenarios:
    def test_primary_key_with_unique(self) -> None:
        diags = validate_text('type User struct { ID uint `gorm:"primaryKey;unique"` }')
        assert len(diags) == 2
        assert all(d.severity is Severity.ERROR for d in diags)
        assert all(d.field_name == "ID" and d.struct_name == "User" for d in diags)
        assert _messages(diags) == [
            "'primaryKey' and 'unique' cannot be used together",
            "'unique' and 'primaryKey' cannot be used together",
        ]
        assert [d.key for d in diags] == ["primaryKey", "unique"]

    def test_unique_before_primary_key(self) -> None:
        diags = validate_text(_model('ID uint `gorm:"unique;primaryKey"`'))
        assert _messages(diags) == [
            "'unique' and 'primaryKey' cannot be used together",
            "'primaryKey' and 'unique' cannot be used together",
        ]

    def test_invalid_size(self) -> None:
        (diag,) = validate_text('type User struct { A string `gorm:"size:abc"` }')
        assert diag.message == "Invalid size value 'abc'. Size must be a positive integer."
        assert diag.key == "size"
        assert diag.tag == "size:abc"

    def test_untagged_struct(self) -> None:
        assert validate_text(_model("ID uint", 'Name string `json:"name"`')) == []

    def test_blank_text(self) -> None:
        assert validate_text("") == []
        assert validate_text("   \n\n") == []

    def test_nested_struct_tags_checked(self) -> None:
        text = _model(
            'ID uint `gorm:"primaryKey"`',
            "Address struct {",
            '\tStreet string `gorm:"size:abc;colum:street"`',
            '} `gorm:"embedded"`',
        )
        diags = validate_text(text)
        assert [(d.struct_name, d.field_name, d.key) for d in diags] == [
            ("User", "Street", "size"),
            ("User", "Street", "colum"),
        ]
        assert diags[0].message == "Invalid size value 'abc'. Size must be a positive integer."
        assert diags[1].message.startswith("Unknown GORM tag 'colum'")


class TestFieldPass:
    def test_duplicate_key_case_insensitive(self) -> None:
        diags = validate_text(_model('Name string `gorm:"size:10;SIZE:20"`'))
        assert "Duplicate GORM tag key 'SIZE' in field" in _messages(diags)

    def test_unknown_key(self) -> None:
        (diag,) = validate_text(_model('Name string `gorm:"colum:name"`'))
        assert diag.severity is Severity.ERROR
        assert diag.message == (
            "Unknown GORM tag 'colum'. Check GORM documentation for valid tags."
        )
        assert diag.key == "colum"

    def test_removed_association_key_is_unknown(self) -> None:
        (diag,) = validate_text(_model('Orgs []Org `gorm:"associationForeignKey:ID"`'))
        assert diag.message.startswith("Unknown GORM tag 'associationForeignKey'")

    def test_deprecated_key_warns(self) -> None:
        (diag,) = validate_text(_model('ID uint `gorm:"primary_key"`'))
        assert diag.severity is Severity.WARNING
        assert diag.message == (
            "GORM tag 'primary_key' is deprecated or not recommended. "
            "Consider using alternative approaches."
        )

    def test_relationship_key_warns(self) -> None:
        diags = validate_text(_model('Company Company `gorm:"foreignKey:CompanyID;references:ID"`'))
        assert [d.severity for d in diags] == [Severity.WARNING, Severity.WARNING]
        assert all("deprecated or not recommended" in m for m in _messages(diags))

    def test_key_casing_kept_in_messages(self) -> None:
        (diag,) = validate_text(_model('Name string `gorm:"SIZE:x"`'))
        assert diag.key == "SIZE"


class TestCombinationRules:
    def test_primary_key_not_null(self) -> None:
        (diag,) = validate_text(_model('ID uint `gorm:"primaryKey;not null"`'))
        assert diag.severity is Severity.WARNING
        assert diag.message == "'primaryKey' automatically implies 'not null'. Remove 'not null' tag."
        assert diag.key == "not null"

    def test_ignored_with_other_keys(self) -> None:
        (diag,) = validate_text(_model('Tmp string `gorm:"-;column:tmp;size:5"`'))
        assert diag.severity is Severity.ERROR
        assert diag.message == (
            "Field marked as ignored ('-') cannot have other tags: column, size. "
            "Remove conflicting tags."
        )
        assert diag.key == "-"

    def test_conflicting_permissions(self) -> None:
        diags = validate_text(_model('Name string `gorm:"<-:create;->:false"`'))
        assert _messages(diags) == [
            "Conflicting permission tags: <-, ->. Use only one permission control tag."
        ]

    def test_index_with_unique_index(self) -> None:
        (diag,) = validate_text(_model('Code string `gorm:"index;uniqueIndex"`'))
        assert diag.severity is Severity.WARNING
        assert diag.key == "index"

    def test_foreign_key_without_references(self) -> None:
        diags = validate_text(_model('Company Company `gorm:"foreignKey:CompanyID"`'))
        assert "'foreignKey' should be used together with 'references' " in diags[-1].message

    def test_foreign_key_with_references_later(self) -> None:
        diags = validate_text(_model('Company Company `gorm:"foreignKey:CompanyID;references:ID"`'))
        assert not any("should be used together" in m for m in _messages(diags))

    def test_many2many_with_foreign_key(self) -> None:
        diags = validate_text(_model('Langs []Language `gorm:"many2many:user_languages;foreignKey:ID"`'))
        errors = [d for d in diags if d.severity is Severity.ERROR]
        assert [d.message for d in errors] == [
            "'many2many' cannot be used with 'foreignKey' or 'references'. "
            "Use association struct instead."
        ]

    def test_embedded_with_column(self) -> None:
        (diag,) = validate_text(_model('Addr Address `gorm:"embedded;column:addr"`'))
        assert diag.severity is Severity.ERROR
        assert diag.key == "column"

    def test_dual_time_tracking_is_warning(self) -> None:
        (diag,) = validate_text(_model('Stamp int64 `gorm:"autoCreateTime;autoUpdateTime"`'))
        assert diag.severity is Severity.WARNING
        assert "Ensure this is intentional" in diag.message

    def test_each_field_rule_fires_once(self) -> None:
        diags = validate_text(_model('ID uint `gorm:"primaryKey;not null;size:10;column:id"`'))
        assert len(diags) == 1


class TestStructPass:
    def test_duplicate_column_reported_once_on_later_field(self) -> None:
        diags = validate_text(
            _model(
                'First string `gorm:"column:name"`',
                'Second string `gorm:"column:name"`',
            )
        )
        assert len(diags) == 1
        assert diags[0].field_name == "Second"
        assert diags[0].message == (
            "Duplicate column name 'name' already used by field 'First'. "
            "Each column name must be unique within the struct."
        )

    def test_multiple_primary_keys(self) -> None:
        diags = validate_text(
            _model(
                'A uint `gorm:"primaryKey"`',
                'B uint `gorm:"primaryKey"`',
                'C uint `gorm:"PRIMARYKEY"`',
            )
        )
        assert [d.field_name for d in diags] == ["A", "B", "C"]
        assert {d.message for d in diags} == {
            "Multiple primary keys found in struct. Only one primary key is allowed."
        }
        assert diags[2].key == "PRIMARYKEY"

    def test_shared_index_name(self) -> None:
        diags = validate_text(
            _model(
                'First string `gorm:"index:idx_name"`',
                'Last string `gorm:"index:idx_name,sort:desc"`',
                'Email string `gorm:"uniqueIndex:idx_email"`',
            )
        )
        assert [d.field_name for d in diags] == ["First", "Last"]
        assert all(d.severity is Severity.WARNING for d in diags)
        assert diags[0].message == (
            "Index 'idx_name' is used by multiple fields: First, Last. "
            "Ensure this is intended for composite index."
        )

    def test_struct_rules_after_field_rules(self) -> None:
        diags = validate_text(
            _model('A uint `gorm:"primaryKey;size:x"`', 'B uint `gorm:"primaryKey"`')
        )
        assert _messages(diags)[0].startswith("Invalid size value")
        assert _messages(diags)[1:] == [
            "Multiple primary keys found in struct. Only one primary key is allowed."
        ] * 2

    def test_structs_isolated(self) -> None:
        text = _model('ID uint `gorm:"primaryKey"`', name="A") + _model(
            'ID uint `gorm:"primaryKey"`', name="B"
        )
        assert validate_text(text) == []


class TestEngineProperties:
    TEXT = _model(
        'ID uint `gorm:"primaryKey;unique"`',
        'Name string `gorm:"size:abc;comment:it\'s"`',
        'Alias string `gorm:"column:name"`',
        'Other string `gorm:"column:name"`',
    )

    def test_idempotent(self) -> None:
        first = validate_text(self.TEXT)
        second = validate_text(self.TEXT)
        assert first == second
        assert [d.model_dump_json() for d in first] == [d.model_dump_json() for d in second]

    def test_max_problems(self) -> None:
        assert validate_text(self.TEXT, max_problems=2) == validate_text(self.TEXT)[:2]
        assert validate_text(self.TEXT, max_problems=0) == []


@pytest.fixture
def exploding_rule() -> Generator[None]:
    def rule(entry: TagEntry) -> list[Finding]:
        raise RuntimeError("boom")

    register_tag_key("explode", "recommended")
    register_value_rule("explode", rule)
    try:
        yield
    finally:
        unregister_value_rule("explode")
        unregister_tag_key("explode")


class TestFailureIsolation:
    @pytest.mark.usefixtures("exploding_rule")
    def test_field_failure_becomes_single_diagnostic(self) -> None:
        diags = validate_text(
            _model(
                'Bad string `gorm:"explode;size:x"`',
                'Good string `gorm:"size:y"`',
            )
        )
        assert [(d.field_name, d.message) for d in diags] == [
            ("Bad", "Error parsing GORM tags: boom"),
            ("Good", "Invalid size value 'y'. Size must be a positive integer."),
        ]

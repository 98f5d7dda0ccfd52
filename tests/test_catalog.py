"""Tests for the field catalogs."""

from __future__ import annotations

import pytest

from core.catalog import EPIC_CATALOG, STORY_CATALOG, FieldCatalog
from core.errors import UnknownFieldError
from core.models import BooleanHas, BooleanIs, DateKind, EnumKind, FilterField, NumberKind, StringKind, UserRefKind


class TestLookup:
    def test_returns_registered_field(self):
        entry = STORY_CATALOG.lookup("created")

        assert entry == FilterField(key="created", token="created", kind=DateKind())

    def test_unknown_key_raises(self):
        with pytest.raises(UnknownFieldError) as exc_info:
            STORY_CATALOG.lookup("colour")

        assert exc_info.value.field_key == "colour"

    def test_epic_catalog_has_no_story_only_fields(self):
        with pytest.raises(UnknownFieldError):
            EPIC_CATALOG.lookup("estimate")


class TestTokens:
    @pytest.mark.parametrize(
        "key,token",
        [
            ("skill_set", "skill-set"),
            ("product_area", "product-area"),
            ("technical_area", "technical-area"),
            ("pr", "pr"),
        ],
    )
    def test_multi_word_keys_are_hyphenated(self, key, token):
        assert STORY_CATALOG.lookup(key).token == token

    def test_is_flags_drop_prefix(self):
        entry = STORY_CATALOG.lookup("is_done")

        assert entry.kind == BooleanIs("done")
        assert entry.token == "is:done"

    def test_has_flags_drop_prefix(self):
        entry = STORY_CATALOG.lookup("has_attachment")

        assert entry.kind == BooleanHas("attachment")
        assert entry.token == "has:attachment"

    def test_value_kinds(self):
        assert isinstance(STORY_CATALOG.lookup("name").kind, StringKind)
        assert isinstance(STORY_CATALOG.lookup("estimate").kind, NumberKind)
        assert isinstance(STORY_CATALOG.lookup("owner").kind, UserRefKind)
        assert STORY_CATALOG.lookup("type").kind == EnumKind(frozenset({"feature", "bug", "chore"}))
        assert EPIC_CATALOG.lookup("state").kind == EnumKind(frozenset({"unstarted", "started", "done"}))


class TestFieldCatalog:
    def test_preserves_declaration_order(self):
        catalog = FieldCatalog([
            FilterField("b", "b", StringKind()),
            FilterField("a", "a", StringKind()),
        ])

        assert catalog.keys() == ("b", "a")
        assert [entry.key for entry in catalog] == ["b", "a"]

    def test_rejects_duplicate_keys(self):
        with pytest.raises(ValueError):
            FieldCatalog([
                FilterField("a", "a", StringKind()),
                FilterField("a", "other", NumberKind()),
            ])

    def test_contains_and_len(self):
        assert "owner" in EPIC_CATALOG
        assert "skill_set" not in EPIC_CATALOG
        assert len(EPIC_CATALOG) == 22
        assert len(STORY_CATALOG) == 44

    def test_story_catalog_starts_with_identity_fields(self):
        assert STORY_CATALOG.keys()[:4] == ("id", "name", "description", "comment")

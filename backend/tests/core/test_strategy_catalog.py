"""Strategy Catalog: profiles and the comparison table."""

from app.core.domain_types import EnforcementLayer, EnumStrategy, SqlDialect
from app.core.strategy_catalog import (
    compare_strategies, get_profile, list_profiles, supports_dialect,
)


def test_list_profiles_fixed_order():
    assert [p.strategy for p in list_profiles()] == [
        EnumStrategy.FREE_TEXT,
        EnumStrategy.CHECK_CONSTRAINT,
        EnumStrategy.NATIVE_ENUM,
    ]


def test_only_free_text_lets_external_writes_through():
    assert not get_profile(EnumStrategy.FREE_TEXT).rejects_external_writes
    assert get_profile(EnumStrategy.CHECK_CONSTRAINT).rejects_external_writes
    assert get_profile(EnumStrategy.NATIVE_ENUM).rejects_external_writes


def test_enforcement_layers():
    assert get_profile("free_text").enforced_by is EnforcementLayer.APPLICATION
    assert get_profile("check_constraint").enforced_by is EnforcementLayer.DATABASE_CONSTRAINT
    assert get_profile("native_enum").enforced_by is EnforcementLayer.DATABASE_TYPE


def test_native_enum_not_supported_on_sqlite():
    assert not supports_dialect(EnumStrategy.NATIVE_ENUM, SqlDialect.SQLITE)
    assert supports_dialect(EnumStrategy.CHECK_CONSTRAINT, SqlDialect.SQLITE)


def test_native_enum_sorts_by_declaration():
    assert get_profile(EnumStrategy.NATIVE_ENUM).sort_semantics == "declaration"
    assert get_profile(EnumStrategy.CHECK_CONSTRAINT).sort_semantics == "lexical"


def test_compare_strategies_first_row():
    rows = compare_strategies()
    assert rows[0] == {
        "property": "Enforced by",
        "free_text": "application",
        "check_constraint": "database_constraint",
        "native_enum": "database_type",
    }


def test_compare_strategies_renders_dialects_and_booleans():
    rows = {row["property"]: row for row in compare_strategies()}
    assert rows["Supported databases"]["native_enum"] == "postgresql, mysql"
    assert rows["Rejects writes that bypass the app"]["free_text"] is False
    assert rows["Database error on violation"]["free_text"] is None


def test_profile_to_dict_is_json_ready():
    data = get_profile(EnumStrategy.CHECK_CONSTRAINT).to_dict()
    assert data["strategy"] == "check_constraint"
    assert data["supported_dialects"] == ["postgresql", "mysql", "sqlite"]
    assert isinstance(data["pros"], list)

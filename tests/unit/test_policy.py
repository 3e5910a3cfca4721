import pytest

from applyassist.services.field_resolver import FIELD_ALIASES
from applyassist.services.policy import Policy, load_policy


def test_defaults_describe_india_internship_search():
    policy = Policy()

    assert policy.suitability.home_region == "India"
    assert "pune" in policy.suitability.home_locations
    assert policy.suitability.position_type == "internship"
    names = [question.name for question in policy.fill.survey_questions]
    assert names.index("transgender") < names.index("gender_identity") < names.index("gender")


def test_alias_table_mirrors_resolver_defaults():
    table = Policy().alias_table()
    assert [key for key, _ in table] == [key for key, _ in FIELD_ALIASES]


def test_missing_file_yields_defaults(tmp_path):
    assert load_policy(tmp_path / "absent.yaml") == Policy()
    assert load_policy(None) == Policy()


def test_yaml_overrides_only_named_sections(tmp_path):
    path = tmp_path / "policy.yaml"
    path.write_text(
        "suitability:\n"
        "  home_region: Germany\n"
        "  home_locations: [germany, berlin]\n"
        "narrative:\n"
        "  role_title: Working Student\n",
        encoding="utf-8",
    )

    policy = load_policy(path)

    assert policy.suitability.home_region == "Germany"
    assert policy.suitability.home_locations == ["germany", "berlin"]
    assert policy.suitability.position_type == "internship"
    assert policy.narrative.role_title == "Working Student"
    assert policy.fill == Policy().fill


def test_empty_yaml_yields_defaults(tmp_path):
    path = tmp_path / "policy.yaml"
    path.write_text("", encoding="utf-8")
    assert load_policy(path) == Policy()


def test_invalid_yaml_is_reported(tmp_path):
    path = tmp_path / "policy.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_policy(path)

    path.write_text("suitability:\n  home_locations: 42\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_policy(path)

import json
from types import SimpleNamespace

import pytest

from applyassist.services.field_resolver import vocabulary
from applyassist.services.profile import (
    SYNTHETIC_AVAILABLE_FULL_TIME,
    flatten_profile,
    load_profile,
    resolve_resume_path,
)


def test_flatten_profile_maps_nested_sections(flat_profile):
    assert flat_profile["firstName"] == "Aarav"
    assert flat_profile["fullName"] == "Aarav Sharma"
    assert flat_profile["city"] == "Pune"
    assert flat_profile["location"] == "Pune, Maharashtra, India"
    assert flat_profile["authorized"] is True
    assert flat_profile["requiresSponsorship"] is False
    assert flat_profile["graduationYear"] == 2026
    assert flat_profile["skills"] == ["Python", "React", "PostgreSQL"]
    assert flat_profile["availableFullTime"] == SYNTHETIC_AVAILABLE_FULL_TIME


def test_flatten_profile_missing_education_yields_empty_slots(profile):
    profile.pop("education")
    flat = flatten_profile(profile)

    for key in ["degree", "field", "university", "graduationYear"]:
        assert key in flat
        assert flat[key] is None
    assert flat["email"] == "aarav.sharma@example.com"


def test_flatten_profile_is_total_for_empty_and_malformed_documents():
    for document in [None, {}, {"personalInfo": "not a section", "education": ["x"]}]:
        flat = flatten_profile(document)
        assert set(vocabulary()) <= set(flat)
        assert flat["firstName"] is None
        assert flat["fullName"] is None


def test_flatten_profile_keeps_explicit_full_name_and_address():
    flat = flatten_profile(
        {
            "personalInfo": {
                "firstName": "Jane",
                "lastName": "Doe",
                "fullName": "Jane Q. Doe",
                "location": {"address": "12 MG Road, Pune"},
            }
        }
    )
    assert flat["fullName"] == "Jane Q. Doe"
    assert flat["location"] == "12 MG Road, Pune"


def test_flatten_profile_does_not_mutate_input(profile):
    before = json.dumps(profile, sort_keys=True)
    flatten_profile(profile)
    assert json.dumps(profile, sort_keys=True) == before


def test_load_profile_reads_json_and_yaml(tmp_path, profile):
    json_path = tmp_path / "personal-details.json"
    json_path.write_text(json.dumps(profile), encoding="utf-8")
    assert load_profile(json_path)["personalInfo"]["firstName"] == "Aarav"

    yaml_path = tmp_path / "personal-details.yaml"
    yaml_path.write_text("personalInfo:\n  firstName: Jane\n", encoding="utf-8")
    assert load_profile(yaml_path) == {"personalInfo": {"firstName": "Jane"}}


def test_load_profile_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_profile(tmp_path / "missing.json")

    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_profile(path)


def test_resolve_resume_path_prefers_configured_file_then_best_pdf(tmp_path):
    configured = tmp_path / "resume.pdf"
    settings = SimpleNamespace(resume_path=configured, data_dir=tmp_path)
    assert resolve_resume_path(settings) is None

    (tmp_path / "notes.pdf").write_bytes(b"%PDF-" + b"x" * 500)
    (tmp_path / "Aarav_CV.pdf").write_bytes(b"%PDF-" + b"x" * 10)
    assert resolve_resume_path(settings).name == "Aarav_CV.pdf"

    configured.write_bytes(b"%PDF-")
    assert resolve_resume_path(settings) == configured

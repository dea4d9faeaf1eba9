import pytest

from conftest import VALID_CONTENT
from resumegen.errors import MissingField
from resumegen.services.content_validator import validate


def test_valid_content_passes():
    content = validate(dict(VALID_CONTENT))

    assert content.title == "Senior Backend Engineer"
    assert content.skills == VALID_CONTENT["skills"]
    assert len(content.experience) == 3


def test_empty_collections_are_present():
    content = validate({"title": "t", "summary": "s", "skills": {}, "experience": []})
    assert content.skills == {} and content.experience == []


@pytest.mark.parametrize("obj, field", [
    ({}, "title"),
    ({"summary": "s", "skills": {}, "experience": []}, "title"),
    ({"title": "t", "summary": "", "skills": {}, "experience": []}, "summary"),
    ({"title": "t", "summary": "s", "skills": None, "experience": []}, "skills"),
    ({"title": "t", "summary": "s", "skills": 0, "experience": []}, "skills"),
    ({"title": "t", "summary": "s", "skills": {}, "experience": False}, "experience"),
])
def test_first_missing_field_is_reported(obj, field):
    with pytest.raises(MissingField) as exc_info:
        validate(obj)

    assert exc_info.value.field == field
    assert f"'{field}'" in exc_info.value.message
    assert exc_info.value.kind == "schema_invalid"

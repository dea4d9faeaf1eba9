import json

import pytest

from conftest import VALID_CONTENT
from resumegen.errors import MalformedOutput, NoJSONFound, UnrecoverableJSON
from resumegen.services.json_recovery import (
    escape_string_contents,
    extract_object,
    recover,
    strip_comments,
    strip_wrappers,
)


def test_plain_json_is_returned_unchanged():
    assert recover(json.dumps(VALID_CONTENT)) == VALID_CONTENT
    assert recover(json.dumps(VALID_CONTENT, indent=2)) == VALID_CONTENT


def test_fenced_json_with_trailing_comma():
    raw = '```json\n{"title": "Engineer", "skills": ["Go", "Rust",],}\n```'
    assert recover(raw) == {"title": "Engineer", "skills": ["Go", "Rust"]}


def test_chatty_prefix_and_suffix():
    raw = 'Here is the JSON: {"title": "Engineer"}\nLet me know if you need changes!'
    assert recover(raw) == {"title": "Engineer"}


def test_comments_are_removed():
    raw = '{\n  // headline\n  "title": "Engineer", /* tagline */ "summary": "http://example.com"\n}'
    assert recover(raw) == {"title": "Engineer", "summary": "http://example.com"}


def test_double_commas():
    assert recover('{"a": 1,, "b": 2}') == {"a": 1, "b": 2}


def test_raw_newline_inside_string():
    raw = '{"summary": "line one\nline two"}'
    assert recover(raw) == {"summary": "line one\nline two"}


def test_unescaped_quote_inside_string():
    raw = '{"summary": "Led the "Apollo" migration", "title": "Engineer"}'
    assert recover(raw) == {"summary": 'Led the "Apollo" migration', "title": "Engineer"}


def test_smart_quotes_and_single_quoted_keys():
    raw = "{“title”: “Engineer”, 'summary': \"Builder\"}"
    assert recover(raw) == {"title": "Engineer", "summary": "Builder"}


def test_control_characters_are_dropped():
    raw = '{"title": "Eng\x07ineer"}'
    assert recover(raw) == {"title": "Engineer"}


def test_braces_inside_strings_do_not_end_object():
    raw = '{"summary": "uses {templates} and }", "title": "x"} trailing {junk}'
    assert recover(raw) == {"summary": "uses {templates} and }", "title": "x"}


def test_prose_without_json():
    with pytest.raises(NoJSONFound) as exc_info:
        recover("Sorry, nothing to see here.")
    assert exc_info.value.message == "AI did not return valid JSON format. Please try again."


def test_unrecoverable_json():
    with pytest.raises(UnrecoverableJSON) as exc_info:
        recover('{"title": [[[ nope }')
    assert exc_info.value.message.startswith("AI returned invalid JSON: ")
    assert isinstance(exc_info.value, MalformedOutput)


# ── Building blocks ──────────────────────────────────────────────────────────


def test_strip_wrappers():
    assert strip_wrappers("```javascript\n{}\n```") == "{}"
    assert strip_wrappers("Here's: {}") == "{}"
    assert strip_wrappers(None) == ""


def test_extract_object_spans():
    assert extract_object('x {"a": {"b": 1} y } z') == '{"a": {"b": 1} y }'
    assert extract_object('{"a": {"b": 1}') == '{"a": {"b": 1}'


def test_strip_comments_keeps_urls_in_strings():
    assert strip_comments('{"u": "https://x.io"} // done') == '{"u": "https://x.io"} '


def test_escape_string_contents_leaves_valid_json_alone():
    text = json.dumps({"a": 'say "hi"\n', "b": ["x", "y"]})
    assert escape_string_contents(text) == text

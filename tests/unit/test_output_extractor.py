import pytest

from forklift.errors import OutputParseFailure
from forklift.output import extract_payload, find_payload_start, unwrap_result


def test_extract_payload_skips_leading_prose():
    stdout = "\n".join([
        "Compiling, may take a little while to download git dependencies...",
        "INCLUDING DEPENDENCY AptosFramework",
        "{",
        '  "Result": "Success"',
        "}",
        "",
    ])
    assert extract_payload(stdout) == {"Result": "Success"}


def test_extract_payload_uses_last_opening_brace_line():
    stdout = "{\n  \"Result\": 1\n}\nnoise\n{\n  \"Result\": 2\n}"
    assert extract_payload(stdout) == {"Result": 2}


def test_find_payload_start_ignores_trailing_whitespace():
    assert find_payload_start(["text", "{   ", "}"]) == 1
    assert find_payload_start(["  {", "}"]) == -1


def test_extract_payload_without_object_raises_with_raw_output():
    with pytest.raises(OutputParseFailure) as exc_info:
        extract_payload("aptos 7.0.0\n", "warning")
    assert str(exc_info.value).startswith("Failed to parse process output as JSON")
    assert exc_info.value.stdout == "aptos 7.0.0\n"
    assert exc_info.value.stderr == "warning"
    assert exc_info.value.code == "OUTPUT_PARSE_FAILED"


def test_extract_payload_rejects_malformed_json():
    with pytest.raises(OutputParseFailure):
        extract_payload("{\n  \"Result\": \n")


def test_unwrap_result_requires_result_member():
    assert unwrap_result({"Result": None}) is None
    with pytest.raises(OutputParseFailure):
        unwrap_result({"Error": "boom"})

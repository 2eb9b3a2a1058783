from __future__ import annotations

import json
from typing import Any

from .errors import OutputParseFailure


def find_payload_start(lines: list[str]) -> int:
    """Index of the last line that is exactly an opening brace, or -1."""
    for index in range(len(lines) - 1, -1, -1):
        if lines[index].rstrip() == "{":
            return index
    return -1


def extract_payload(stdout: str, stderr: str = "") -> dict[str, Any]:
    """Parse the trailing JSON object of engine output.

    The CLI may print build or progress messages before its answer, so the
    object is taken to start at the last line consisting of a lone `{`.
    """
    lines = stdout.split("\n")
    start = find_payload_start(lines)
    if start == -1:
        raise OutputParseFailure("no JSON object found in output", stdout, stderr)
    candidate = "\n".join(lines[start:])
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise OutputParseFailure(f"malformed JSON: {exc.msg}", stdout, stderr) from exc
    if not isinstance(payload, dict):
        raise OutputParseFailure("top-level JSON value is not an object", stdout, stderr)
    return payload


def unwrap_result(payload: dict[str, Any]) -> Any:
    if "Result" not in payload:
        raise OutputParseFailure(
            "payload has no Result member",
            json.dumps(payload, ensure_ascii=False, indent=2),
        )
    return payload["Result"]

"""SSE (Server-Sent Events) framing utilities."""

import json
from typing import Any

SSE_DONE = b"data: [DONE]\n\n"


def encode_sse_event(payload: Any) -> bytes:
    """Frame ``payload`` as a single ``data: <json>`` event."""
    data = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return f"data: {data}\n\n".encode("utf-8")


def decode_sse_payloads(data: bytes) -> list[Any]:
    """
    Decode every JSON ``data:`` payload in a buffered SSE stream.

    The ``[DONE]`` sentinel, comments and lines that are not JSON are skipped.
    """
    text = data.decode("utf-8", errors="replace")
    payloads: list[Any] = []
    for line in text.split("\n"):
        line = line.strip()
        if not line.startswith("data:"):
            continue

        json_part = line[5:].strip()
        if not json_part or json_part == "[DONE]":
            continue

        try:
            payloads.append(json.loads(json_part))
        except json.JSONDecodeError:
            continue
    return payloads

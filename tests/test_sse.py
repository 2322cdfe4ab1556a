"""Tests for the SSE module."""

from ozwell_proxy.core.sse import SSE_DONE, decode_sse_payloads, encode_sse_event


class TestEncodeSseEvent:
    def test_frames_json_payload(self):
        assert encode_sse_event({"a": 1}) == b'data: {"a":1}\n\n'

    def test_keeps_unicode(self):
        frame = encode_sse_event({"content": "Grüße"})
        assert "Grüße".encode("utf-8") in frame


class TestDecodeSsePayloads:
    def test_returns_empty_for_empty_data(self):
        assert decode_sse_payloads(b"") == []

    def test_skips_done_signal(self):
        assert decode_sse_payloads(SSE_DONE) == []

    def test_skips_non_json_lines(self):
        data = b'data: not json\n\n: comment\n\ndata: {"id": "x"}\n\n'
        assert decode_sse_payloads(data) == [{"id": "x"}]

    def test_decodes_encoded_events_in_order(self):
        data = encode_sse_event({"n": 1}) + encode_sse_event({"n": 2}) + SSE_DONE
        assert decode_sse_payloads(data) == [{"n": 1}, {"n": 2}]

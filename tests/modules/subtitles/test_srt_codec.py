from __future__ import annotations

import pytest

from subtrans.subtitles import (
    SubtitleCue,
    SubtitleProcessingError,
    decode_subtitle_bytes,
    parse_srt,
    read_subtitle_file,
    serialize_srt,
)
from subtrans.subtitles.models import coerce_cue_index


SAMPLE = "1\n00:00:01,000 --> 00:00:02,000\nHello\n\n2\n00:00:03,000 --> 00:00:04,000\nWorld"


def test_parse_srt_extracts_index_timing_and_text() -> None:
    cues = parse_srt(SAMPLE)

    assert [cue.index for cue in cues] == [1, 2]
    assert cues[0].start == "00:00:01,000"
    assert cues[0].end == "00:00:02,000"
    assert [cue.source_text for cue in cues] == ["Hello", "World"]
    assert all(cue.translated_text is None for cue in cues)


def test_parse_srt_keeps_multi_line_text() -> None:
    cues = parse_srt("7\n00:01:00,000 --> 00:01:02,500\nfirst line\nsecond line\n")

    assert len(cues) == 1
    assert cues[0].index == 7
    assert cues[0].source_text == "first line\nsecond line"


def test_parse_srt_drops_malformed_blocks() -> None:
    payload = (
        "abc\n00:00:01,000 --> 00:00:02,000\nbad index\n\n"
        "2\nnot a timing line\nbad timing\n\n"
        "lonely line\n\n"
        "3\n00:00:05,000 --> 00:00:06,000\nkept"
    )

    cues = parse_srt(payload)

    assert [(cue.index, cue.source_text) for cue in cues] == [(3, "kept")]


def test_parse_srt_normalizes_crlf_and_bom() -> None:
    payload = "\ufeff1\r\n00:00:01,000 --> 00:00:02,000\r\nHi\r\n\r\n2\r\n00:00:02,000 --> 00:00:03,000\r\nThere\r\n"

    cues = parse_srt(payload)

    assert [cue.source_text for cue in cues] == ["Hi", "There"]


def test_parse_srt_tolerates_whitespace_only_separators_and_extra_timing_text() -> None:
    payload = "1\n00:00:01,000-->00:00:02,000 X1:40\nA\n \t\n2\n00:00:02,000 --> 00:00:03,000\nB"

    cues = parse_srt(payload)

    assert [cue.source_text for cue in cues] == ["A", "B"]
    assert cues[0].end == "00:00:02,000"


@pytest.mark.parametrize("payload", ["", "   \n\n  ", "garbage without structure"])
def test_parse_srt_returns_empty_list_for_unusable_input(payload: str) -> None:
    assert parse_srt(payload) == []


def test_serialize_srt_uses_translation_and_falls_back_to_source() -> None:
    cues = parse_srt(SAMPLE)
    cues[0].translated_text = "Bonjour"

    rendered = serialize_srt(cues)

    assert rendered == (
        "1\n00:00:01,000 --> 00:00:02,000\nBonjour\n\n"
        "2\n00:00:03,000 --> 00:00:04,000\nWorld"
    )
    assert not rendered.endswith("\n")


def test_serialize_then_parse_preserves_order_and_timings() -> None:
    cues = parse_srt(SAMPLE)

    reparsed = parse_srt(serialize_srt(cues))

    assert [(c.index, c.start, c.end, c.source_text) for c in reparsed] == [
        (c.index, c.start, c.end, c.source_text) for c in cues
    ]


@pytest.mark.parametrize("index_line", ["1_000", "\u0661", "\uff11", "1 2", "NaN"])
def test_parse_srt_drops_blocks_with_unrecognised_index(index_line: str) -> None:
    payload = f"{index_line}\n00:00:01,000 --> 00:00:02,000\nDropped\n\n2\n00:00:02,000 --> 00:00:03,000\nKept"

    assert [cue.source_text for cue in parse_srt(payload)] == ["Kept"]


def test_parse_srt_accepts_signed_and_exponent_indices() -> None:
    payload = "+3\n00:00:01,000 --> 00:00:02,000\nA\n\n1e1\n00:00:02,000 --> 00:00:03,000\nB"

    assert [cue.index for cue in parse_srt(payload)] == [3, 10]


def test_coerce_cue_index_accepts_integral_and_fractional_values() -> None:
    assert coerce_cue_index("12") == 12
    assert isinstance(coerce_cue_index("12.0"), int)
    assert coerce_cue_index("1.5") == 1.5


@pytest.mark.parametrize("value", ["nan", "inf", "x", True])
def test_coerce_cue_index_rejects_non_finite_values(value) -> None:
    with pytest.raises(ValueError):
        coerce_cue_index(value)


def test_cue_dict_round_trip_keeps_failure_flag() -> None:
    cue = SubtitleCue(index=4, start="00:00:01,000", end="00:00:02,000", source_text="x", failed=True)

    restored = SubtitleCue.from_dict(cue.to_dict())

    assert restored == cue
    assert "translated_text" not in cue.to_dict()


def test_decode_subtitle_bytes_falls_back_to_latin1() -> None:
    assert decode_subtitle_bytes("1\nCafé".encode("latin-1")) == "1\nCafé"
    assert decode_subtitle_bytes("1\n字幕".encode("utf-8")) == "1\n字幕"


def test_read_subtitle_file_reads_from_disk(tmp_path) -> None:
    path = tmp_path / "movie.srt"
    path.write_bytes(SAMPLE.encode("utf-8"))

    assert parse_srt(read_subtitle_file(path))[1].source_text == "World"


def test_subtitle_processing_error_is_runtime_error() -> None:
    assert issubclass(SubtitleProcessingError, RuntimeError)

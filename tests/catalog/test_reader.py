from __future__ import annotations

import logging
from pathlib import Path

import pytest

from opac.catalog.errors import MalformedLineError
from opac.catalog.reader import iter_raw_records, read_source_lines, split_line


def test_split_line_lowercases_key_and_keeps_value() -> None:
    assert split_line("TR: 吾輩は猫である / 夏目漱石著") == ("tr", "吾輩は猫である / 夏目漱石著")


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("ISBN", "4-00-310101-4"),
        ("Note", "初版: 1905"),
        ("pub", ""),
    ],
)
def test_split_line_round_trips_on_first_separator(key: str, value: str) -> None:
    parsed_key, parsed_value = split_line(f"{key}: {value}")

    assert parsed_key == key.lower()
    assert parsed_value == value
    assert f"{parsed_key}: {parsed_value}" == f"{key.lower()}: {value}"


def test_split_line_accepts_bare_sentinel() -> None:
    assert split_line("*") == ("*", None)


def test_split_line_rejects_line_without_separator() -> None:
    with pytest.raises(MalformedLineError) as exc_info:
        split_line("TR 吾輩は猫である", line_no=7)

    assert exc_info.value.step == "read"
    assert "line 7" in exc_info.value.detail


def test_records_split_on_sentinel_and_accumulate_repeated_keys() -> None:
    lines = [
        "TR: 本A / 著者A",
        "AUTHORHEADING: ヤマダ, タロウ (山田, 太郎)",
        "AUTHORHEADING: Yamada, Taro",
        "NOTE: first",
        "NOTE: second",
        "*",
        "TR: 本B",
        "*",
    ]

    records = list(iter_raw_records(lines))

    assert len(records) == 2
    first, second = records
    assert first.get("tr") == "本A / 著者A"
    assert first.values("authorheading") == ("ヤマダ, タロウ (山田, 太郎)", "Yamada, Taro")
    assert first.values("note") == ("first", "second")
    assert first.start_line == 1
    assert first.lines[-1] == "*"
    assert second.values("authorheading") == ()
    assert second.values("note") == ()
    assert second.start_line == 7


def test_scalar_keys_are_last_write_wins() -> None:
    records = list(iter_raw_records(["ISBN: 111", "ISBN: 222", "*"]))

    assert records[0].get("isbn") == "222"


def test_unknown_keys_are_kept_verbatim() -> None:
    records = list(iter_raw_records(["XYZ: Some Value", "*"]))

    assert records[0].get("xyz") == "Some Value"


def test_trailing_unterminated_record_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    lines = ["TR: 本A", "*", "TR: 本B"]

    with caplog.at_level(logging.WARNING):
        records = list(iter_raw_records(lines))

    assert [record.get("tr") for record in records] == ["本A"]
    assert "unterminated" in caplog.text


def test_records_are_immutable() -> None:
    record = next(iter_raw_records(["TR: 本A", "*"]))

    with pytest.raises(TypeError):
        record.fields["tr"] = "changed"  # type: ignore[index]


def test_carriage_returns_and_blank_lines_are_ignored() -> None:
    records = list(iter_raw_records(["TR: 本A\r\n", "\n", "ISBN: 1\r", "*\r\n"]))

    assert records[0].get("tr") == "本A"
    assert records[0].get("isbn") == "1"


def test_reader_is_lazy_and_fails_at_malformed_line() -> None:
    records = iter_raw_records(["TR: 本A", "*", "broken line", "*"])

    assert next(records).get("tr") == "本A"
    with pytest.raises(MalformedLineError):
        next(records)


def test_read_source_lines_decodes_utf8(tmp_path: Path) -> None:
    source = tmp_path / "jbisc.txt"
    source.write_text("TR: 雪国 / 川端康成著\n*\n", encoding="utf-8")

    lines = read_source_lines(source)

    assert lines[0] == "TR: 雪国 / 川端康成著"
    assert lines[1] == "*"


def test_read_source_lines_honours_explicit_encoding(tmp_path: Path) -> None:
    source = tmp_path / "jbisc_sjis.txt"
    source.write_bytes("TR: 雪国 / 川端康成著\n*\n".encode("cp932"))

    lines = read_source_lines(source, encoding="cp932")

    assert lines[0] == "TR: 雪国 / 川端康成著"

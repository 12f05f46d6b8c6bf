import pytest

from playback import MalformedRecordError, TraceRecord, parse_line


def test_parse_openxc_line():
    rec = parse_line('1332794184.319404: {"name":"fuel_consumed_since_restart","value":0.090000}\n')
    assert rec == TraceRecord(
        timestamp=1332794184.319404,
        payload='{"name":"fuel_consumed_since_restart","value":0.090000}',
    )


def test_only_first_colon_splits():
    rec = parse_line("12.5: {\"time\":\"10:42:07\"}")
    assert rec.timestamp == 12.5
    assert rec.payload == '{"time":"10:42:07"}'


def test_empty_payload_is_allowed():
    assert parse_line("3:").payload == ""


@pytest.mark.parametrize("line", ["bad line", "", "1332794184.3 no delimiter"])
def test_missing_delimiter(line):
    with pytest.raises(MalformedRecordError):
        parse_line(line)


@pytest.mark.parametrize("line", ["abc: {}", ": {}", "nan: {}", "inf: {}"])
def test_bad_timestamp(line):
    with pytest.raises(MalformedRecordError) as ei:
        parse_line(line)
    assert ei.value.line == line


def test_parse_raw_bytes_line():
    rec = parse_line(b'7.5: {"name":"odometer","value":2.4}\n')
    assert rec == TraceRecord(timestamp=7.5, payload='{"name":"odometer","value":2.4}')


def test_invalid_utf8_is_malformed():
    with pytest.raises(MalformedRecordError) as ei:
        parse_line(b"4.0: bad \xff byte\n")
    assert "UTF-8" in str(ei.value)

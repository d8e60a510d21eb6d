from csvjson.convert import RecordReader, assemble_record, convert_bytes, convert_text
from csvjson.models import ConversionOptions, Encoding, RawDocument


def test_quoted_comma_is_one_field():
    result = convert_text('Name,Age\n"Smith, John",42\n')
    assert result.headers == ["Name", "Age"]
    assert result.records == [{"Name": "Smith, John", "Age": "42"}]
    assert result.delimiter == ","


def test_utf8_bom_header_is_clean():
    result = convert_bytes(b"\xef\xbb\xbfA,B\n1,2\n")
    assert result.headers == ["A", "B"]
    assert result.records == [{"A": "1", "B": "2"}]
    assert result.encoding is Encoding.UTF8_BOM


def test_every_record_has_every_header():
    text = "a,b,c\n1\n1,2,3,4,5\n\n,,\n x ,y\n"
    result = convert_text(text)
    assert result.records == [
        {"a": "1", "b": "", "c": ""},
        {"a": "1", "b": "2", "c": "3"},
        {"a": "x", "b": "y", "c": ""},
    ]
    for record in result.records:
        assert list(record) == result.headers
    assert result.skipped == 1


def test_leading_blank_lines_and_crlf():
    result = convert_text("\r\n  \r\nid;name\r\n1;Ann\r\n")
    assert result.headers == ["id", "name"]
    assert result.delimiter == ";"
    assert result.records == [{"id": "1", "name": "Ann"}]


def test_explicit_delimiter_is_used_verbatim():
    options = ConversionOptions(delimiter="|")
    result = convert_text("a,b|c\n1,2|3\n", options)
    assert result.headers == ["a,b", "c"]
    assert result.records == [{"a,b": "1,2", "c": "3"}]


def test_empty_document():
    result = convert_text("\n\n")
    assert result.headers == []
    assert result.records == []
    assert result.delimiter == ","


def test_limit_truncates_rows():
    options = ConversionOptions(limit=2)
    result = convert_text("n\n1\n2\n3\n", options)
    assert [r["n"] for r in result.records] == ["1", "2"]


def test_duplicate_headers_in_records():
    result = convert_text("Name,Name,Name\na,b,c\n")
    assert result.records == [{"Name": "a", "Name (2)": "b", "Name (3)": "c"}]


def test_array_field_and_inference_together():
    options = ConversionOptions(infer_types=True, array_fields="Locations")
    text = 'Id,Locations,Active\n1,"Store A - Springfield, OH, Store B - Reno, NV",false\n'
    result = convert_text(text, options)
    assert result.records == [
        {
            "Id": 1,
            "Locations": ["Store A - Springfield, OH", "Store B - Reno, NV"],
            "Active": False,
        }
    ]


def test_conversion_is_deterministic():
    raw = b"a,b\n1,\"x, y\"\n"
    assert convert_bytes(raw) == convert_bytes(raw)


def test_reader_is_lazy_and_counts():
    reader = RecordReader(RawDocument(text="a\n1\n,\n2\n"), ConversionOptions())
    assert reader.headers == ["a"]
    assert reader.produced == 0
    assert list(reader) == [{"a": "1"}, {"a": "2"}]
    assert reader.produced == 2


def test_assemble_record_pads_and_drops():
    options = ConversionOptions()
    assert assemble_record(["x", "y"], ["1"], options) == {"x": "1", "y": ""}
    assert assemble_record(["x"], ["1", "2"], options) == {"x": "1"}


def test_inference_never_raises_on_long_numbers():
    options = ConversionOptions(infer_types=True)
    long_int = "9" * 5000
    long_dec = "1" * 400 + ".5"
    result = convert_text(f"a,b\n{long_int},{long_dec}\n", options)
    assert result.records == [{"a": long_int, "b": long_dec}]


def test_zero_limit_means_no_limit():
    options = ConversionOptions(limit=0)
    assert options.limit is None
    assert len(convert_text("n\n1\n2\n3\n", options).records) == 3

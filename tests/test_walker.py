import json

from csvjson.models import ConversionOptions
from csvjson.walker import convert_directory, default_output_root, iter_csv_files, output_path_for


def _tree(tmp_path):
    src = tmp_path / "exports"
    (src / "sub").mkdir(parents=True)
    (src / "a.csv").write_bytes(b"Name,Age\nAnn,30\n")
    (src / "sub" / "b.CSV").write_bytes(b"\xef\xbb\xbfx;y\n1;2\n")
    (src / "notes.txt").write_text("ignored")
    return src


def test_iter_csv_files_is_case_insensitive(tmp_path):
    src = _tree(tmp_path)
    found = sorted(p.relative_to(src).as_posix() for p in iter_csv_files(src))
    assert found == ["a.csv", "sub/b.CSV"]


def test_default_output_root_is_sibling(tmp_path):
    src = tmp_path / "exports"
    assert default_output_root(src) == (tmp_path / "exports-json").resolve()


def test_output_path_extension_follows_mode(tmp_path):
    from pathlib import Path

    assert output_path_for(Path("sub/b.csv"), tmp_path, ndjson=False) == tmp_path / "sub" / "b.json"
    assert output_path_for(Path("sub/b.csv"), tmp_path, ndjson=True) == tmp_path / "sub" / "b.ndjson"


def test_directory_mirrors_structure(tmp_path):
    src = _tree(tmp_path)
    out = tmp_path / "out"

    summary = convert_directory(src, out, ConversionOptions())

    assert summary.failed == []
    assert json.loads((out / "a.json").read_text(encoding="utf-8")) == [{"Name": "Ann", "Age": "30"}]
    assert json.loads((out / "sub" / "b.json").read_text(encoding="utf-8")) == [{"x": "1", "y": "2"}]
    assert not (out / "notes.json").exists()


def test_default_output_root_used_when_missing(tmp_path):
    src = _tree(tmp_path)
    summary = convert_directory(src, None, ConversionOptions(ndjson=True))
    root = (tmp_path / "exports-json").resolve()
    assert summary.output_root == root
    assert (root / "a.ndjson").read_text(encoding="utf-8") == '{"Name":"Ann","Age":"30"}\n'


def test_one_bad_file_does_not_stop_the_walk(tmp_path):
    src = _tree(tmp_path)
    out = tmp_path / "out"
    # A directory where the output file should go makes that write fail
    (out / "sub" / "b.json").mkdir(parents=True)

    summary = convert_directory(src, out, ConversionOptions())

    assert [p.as_posix() for p in summary.failed] == ["sub/b.CSV"]
    assert [p.as_posix() for p in summary.converted] == ["a.csv"]
    assert (out / "a.json").exists()

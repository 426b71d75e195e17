"""
Tests for file reads and writes.
"""

import pytest

from codesurgeon.sources import (
    read_source,
    read_sources,
    write_output,
    write_output_async,
)


class TestRead:
    def test_read_source(self, write_js):
        path = write_js("a.js", "var a = 1;")
        result = read_source(path)
        assert result.ok
        assert result.text == "var a = 1;"

    def test_missing_file_is_reported_not_raised(self, tmp_path):
        result = read_source(str(tmp_path / "missing.js"))
        assert not result.ok
        assert result.text is None
        assert isinstance(result.error, FileNotFoundError)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "latin.js"
        path.write_bytes(b"var a = '\xff';")
        result = read_source(str(path))
        assert isinstance(result.error, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_read_sources_keeps_argument_order(self, write_js, tmp_path):
        paths = [write_js(f"{n}.js", f"var {n};") for n in "cab"]
        paths.insert(1, str(tmp_path / "missing.js"))

        results = await read_sources(paths)

        assert [r.path for r in results] == paths
        assert [r.ok for r in results] == [True, False, True, True]
        assert results[0].text == "var c;"


class TestWrite:
    def test_write_truncates(self, tmp_path):
        path = str(tmp_path / "out.js")
        write_output(path, "first")
        result = write_output(path, "second")
        assert result.ok
        assert result.bytes_written == len("second")
        assert (tmp_path / "out.js").read_text() == "second"

    def test_append(self, tmp_path):
        path = str(tmp_path / "out.js")
        write_output(path, "first")
        write_output(path, "second", append=True)
        assert (tmp_path / "out.js").read_text() == "firstsecond"

    def test_unwritable_path_is_reported(self, tmp_path):
        result = write_output(str(tmp_path / "no" / "such" / "dir" / "out.js"), "x")
        assert not result.ok
        assert isinstance(result.error, OSError)

    @pytest.mark.asyncio
    async def test_write_output_async(self, tmp_path):
        path = str(tmp_path / "out.js")
        result = await write_output_async(path, "async text")
        assert result.ok
        assert (tmp_path / "out.js").read_text() == "async text"

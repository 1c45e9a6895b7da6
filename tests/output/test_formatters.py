"""Tests for output formatting of ServiceResult."""

from __future__ import annotations

import json

from weir.output.console import create_console, get_output
from weir.output.formatters import OutputSettings, format_result
from weir.services.result import ServiceResult


def _stats() -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="stats",
        data={
            "dim": 2,
            "vertices": 3,
            "edges": 3,
            "components": 1,
            "total_length": 3.414214,
            "mean_degree": 2.0,
            "bbox": [[0.0, 0.0], [1.0, 1.0]],
        },
    )


class TestJson:
    def test_json_output(self) -> None:
        out = format_result(_stats(), json_output=True)
        parsed = json.loads(out)
        assert parsed["ok"] is True
        assert parsed["data"]["vertices"] == 3

    def test_settings_json(self) -> None:
        out = format_result(_stats(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["op"] == "stats"


class TestHuman:
    def test_stats_table(self) -> None:
        out = format_result(_stats())
        assert "OK" in out
        assert "vertices" in out
        assert "total length" in out
        assert "(0.000, 0.000) .. (1.000, 1.000)" in out

    def test_path_chain(self) -> None:
        result = ServiceResult(
            ok=True,
            op="path",
            data={"vertices": [0, 2, 4], "hops": 2, "length": 2.414214},
        )
        out = format_result(result)
        assert "0 → 2 → 4" in out
        assert "Hops: 2" in out

    def test_components(self) -> None:
        result = ServiceResult(
            ok=True, op="components", data={"count": 2, "items": [[0, 1, 2], [5]]}
        )
        out = format_result(result)
        assert "2 components" in out

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="seed_polygon", data={"sides": 4, "vertices": [0, 1]})
        out = format_result(result)
        assert "seed_polygon" in out
        assert "sides: 4" in out
        assert "[0,1]" in out

    def test_error(self) -> None:
        result = ServiceResult.fail("path", "NO_PATH", "No path between 0 and 5")
        out = format_result(result)
        assert "ERROR" in out
        assert "NO_PATH" in out
        assert "No path between 0 and 5" in out

    def test_verbose_renders_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="grow",
            data={"steps": 1},
            meta={
                "telemetry": {
                    "name": "GrowService.grow",
                    "duration_ms": 1.5,
                    "commits": 2,
                    "alterations": 9,
                    "children": [{"name": "commit", "duration_ms": 0.4}],
                }
            },
        )
        out = format_result(result, settings=OutputSettings(verbose=True))
        assert "GrowService.grow" in out
        assert "commits=2" in out
        assert "commit" in out


class TestQuiet:
    def test_ok(self) -> None:
        assert format_result(_stats(), settings=OutputSettings(quiet=True)) == "OK: stats"

    def test_path_ids_only(self) -> None:
        result = ServiceResult(ok=True, op="path", data={"vertices": [3, 1, 4]})
        assert format_result(result, settings=OutputSettings(quiet=True)) == "3 1 4"

    def test_error(self) -> None:
        result = ServiceResult.fail("load_json", "IO_ERROR", "Cannot read x")
        assert format_result(result, settings=OutputSettings(quiet=True)) == (
            "ERROR: load_json: Cannot read x"
        )


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("[weir.ok]hello[/weir.ok]")
        assert get_output(console) == "hello\n"

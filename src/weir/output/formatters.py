"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables and styled fields)
or machines (--json).  This layer picks the mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from weir.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from weir.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode flags; *json_output* is used when omitted.
        json_output: Shorthand for ``OutputSettings(json_output=True)``.
    """
    settings = settings or OutputSettings(json_output=json_output)
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)

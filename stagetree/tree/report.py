#!/usr/bin/env python3
"""Expected-versus-actual report rendering using Jinja2.

When a structural comparison fails, a human wants to see both trees next to
each other. render_comparison() lays the two print_folder() renderings out
in two columns and lists the differences underneath.

Example:
    >>> print(render_comparison(expected, actual))
    Expected                         | Actual
    -------------------------------- | --------------------------------
    root/                            | root/
        a.txt                        |     a.txt
        b.ps1                        |     b.txt
"""

from itertools import zip_longest
from typing import List, Optional, Tuple

import jinja2

from stagetree.core.constants import Limits
from stagetree.tree.compare import ComparisonResult, compare_folders
from stagetree.tree.folder import VirtualFolder

REPORT_TEMPLATE = """\
{{ "%-*s"|format(width, left_title) }} | {{ right_title }}
{{ "-" * width }} | {{ "-" * width }}
{% for left, right in rows -%}
{{ ("%-*s"|format(width, left|truncate_to(width))) ~ " | " ~ right|truncate_to(width) }}
{% endfor -%}
{% if result.match -%}
Trees match
{%- else -%}
{{ result.differences|length }} difference(s):
{%- for difference in result.differences %}
{{ "  - " ~ difference }}
{%- endfor %}
{%- endif %}"""


def _truncate_to(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(width - 3, 0)] + "..."


def _build_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=False,
        autoescape=False,
    )
    env.filters["truncate_to"] = _truncate_to
    return env


_environment: Optional[jinja2.Environment] = None


def _get_template() -> jinja2.Template:
    global _environment
    if _environment is None:
        _environment = _build_environment()
    return _environment.from_string(REPORT_TEMPLATE)


def side_by_side_rows(left: str, right: str) -> List[Tuple[str, str]]:
    """Pair up the lines of two renderings, padding the shorter one."""
    return list(zip_longest(left.splitlines(), right.splitlines(), fillvalue=""))


def render_comparison(
    expected: VirtualFolder,
    actual: VirtualFolder,
    result: Optional[ComparisonResult] = None,
    show_contents: bool = False,
    width: Optional[int] = None,
    left_title: str = "Expected",
    right_title: str = "Actual",
) -> str:
    """Render two trees side by side followed by their differences.

    Args:
        expected: Expected tree (left column)
        actual: Actual tree (right column)
        result: Precomputed comparison; computed here when omitted
        show_contents: Include item contents in both renderings
        width: Column width (defaults to Limits.REPORT_COLUMN_WIDTH)
        left_title: Heading of the left column
        right_title: Heading of the right column

    Returns:
        Report text
    """
    if result is None:
        result = compare_folders(expected, actual)
    width = width or Limits.REPORT_COLUMN_WIDTH

    rows = side_by_side_rows(
        expected.print_folder(show_contents=show_contents),
        actual.print_folder(show_contents=show_contents),
    )
    text = _get_template().render(
        rows=rows,
        result=result,
        width=width,
        left_title=left_title,
        right_title=right_title,
    )
    return text.rstrip("\n")

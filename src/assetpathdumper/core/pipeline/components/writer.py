from __future__ import annotations

"""
HTML Report Writer.

Renders each processed file as a heading followed by a two-column table
(path, available types). Rows follow the insertion order of the index.
"""

import html
from typing import Dict, TextIO

from assetpathdumper.domain.models import FileReport, PathTypeIndex

# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

def write_file_table(out: TextIO, name: str, index: PathTypeIndex) -> None:
    """
    Append one report section to an open report stream.

    Output Format:
    <h1>name</h1>
    <table>
        <tr><th>Path</th><th>Available types</th></tr>
        <tr><td>path</td><td>Label<br/>Other (multiple (n))</td></tr>
    </table>

    Args:
        out: Text stream opened by the pipeline.
        name: Base name of the input file.
        index: Finalized path/type index of that file.
    """
    out.write(f"<h1>{html.escape(name)}</h1>\n")
    out.write("<table>\n")
    out.write("\t<tr><th>Path</th><th>Available types</th></tr>\n")
    for path, types in index.items():
        out.write(f"\t<tr><td>{html.escape(path)}</td><td>{format_types(types)}</td></tr>\n")
    out.write("</table>\n")


def write_report(out: TextIO, report: FileReport) -> None:
    write_file_table(out, report.name, report.index)


def format_types(types: Dict[str, int]) -> str:
    """Join the labels of one path, marking labels seen more than once."""
    cells = []
    for label, count in types.items():
        text = html.escape(label)
        if count > 1:
            text = f"{text} (multiple ({count}))"
        cells.append(text)
    return "<br/>".join(cells)

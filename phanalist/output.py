# phanalist/output.py
"""Render :class:`~phanalist.results.Results` as coloured text or JSON."""

from __future__ import annotations

import json
import sys
from typing import List, Optional, TextIO

from termcolor import colored

from .results import Results, Violation
from .rules import RuleRegistry, all_rules


class TextRenderer:
    """
    Human-readable report.

    One section per file with violations, then a per-rule summary sorted
    by count, then the file count and duration.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        summary_only: bool = False,
        registry: Optional[RuleRegistry] = None,
    ) -> None:
        self._stream = stream or sys.stdout
        self.summary_only = summary_only
        self.registry = registry or RuleRegistry(all_rules())

    def render(self, results: Results) -> None:
        lines: List[str] = []
        if not self.summary_only:
            for path, violations in results.files.items():
                if violations:
                    lines.extend(self._render_file(path, violations))
        lines.extend(self._render_summary(results))
        self._stream.write("\n".join(lines) + "\n")
        self._stream.flush()

    def _render_file(self, path: str, violations: List[Violation]) -> List[str]:
        count = colored(f"{len(violations)} violation(s)", "red")
        lines = [f"{colored(path, 'white', attrs=['bold'])}, detected {count}:"]
        for violation in violations:
            code = colored(violation.rule, "yellow", attrs=["bold"])
            lines.append(f"  {code}: {violation.suggestion}")
            location = colored(f"{violation.span.line}:{violation.span.column}", "blue")
            lines.append(f"    {location} | {violation.line.strip()}")
        lines.append("")
        return lines

    def _render_summary(self, results: Results) -> List[str]:
        lines: List[str] = []
        if results.codes_count:
            lines.append(colored("Summary:", attrs=["bold"]))
            for code, count in results.codes_count.most_common():
                description = self.registry.get(code).description if code in self.registry else ""
                lines.append(f"  {colored(code, 'yellow')} {description}: {count}")
            lines.append("")
        duration = results.duration or 0.0
        lines.append(
            colored(
                f"Analysed {results.total_files_count} files in {duration:.2f}s",
                "green" if not results.has_any_violations() else "red",
            )
        )
        return lines


class JsonRenderer:
    """The results as one JSON document."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stdout

    def render(self, results: Results) -> None:
        json.dump(results.to_dict(), self._stream, indent=2)
        self._stream.write("\n")
        self._stream.flush()


def make_renderer(output: str, stream: Optional[TextIO] = None, summary_only: bool = False):
    if output == "json":
        return JsonRenderer(stream)
    return TextRenderer(stream, summary_only=summary_only)


__all__ = ["JsonRenderer", "TextRenderer", "make_renderer"]

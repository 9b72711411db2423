# phanalist/analyse.py
"""
Rule orchestration and source discovery.

Usage
-----
>>> analyse = Analyse(config)
>>> violations = analyse.analyse_source("Foo.php", "<?php\\nclass foo {}\\n")

>>> results = scan(config)
>>> results.total_files_count, results.total_violations

Discovery runs on a daemon producer thread that walks ``config.src`` and
pushes ``(content, path)`` pairs onto an unbounded queue; the calling
thread parses and analyses each file as it arrives.  A sentinel marks the
end of the walk.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from .config import Config
from .results import Results, Violation
from .rules import Rule, RuleRegistry, all_rules
from .source import SourceFile

_log = logging.getLogger(__name__)

PHP_SUFFIX = ".php"

_SENTINEL = None


class Analyse:
    """
    Runs the enabled rules over parsed files.

    Parameters
    ----------
    config : Run configuration; its ``rules`` section configures the rules
    rules  : Rule instances to register instead of :func:`all_rules`
    """

    def __init__(self, config: Optional[Config] = None, rules: Optional[List[Rule]] = None) -> None:
        self.config = config or Config()
        self.registry = RuleRegistry(all_rules() if rules is None else rules)
        self.registry.configure(self.config.rules)
        self.rules = self.registry.enabled(
            self.config.enabled_rules, self.config.disable_rules
        )
        _log.debug("Enabled rules: %s", ", ".join(rule.code for rule in self.rules))

    def analyse_file(self, file: SourceFile) -> List[Violation]:
        violations: List[Violation] = []
        for rule in self.rules:
            if not rule.is_applicable(file):
                continue
            for statement in file.statements:
                for nested in rule.flatten(statement):
                    violations.extend(rule.validate(file, nested))
        return violations

    def analyse_source(self, path: str, content: str) -> List[Violation]:
        return self.analyse_file(SourceFile.parse(path, content))


# ── Discovery ────────────────────────────────────────────────────

def iter_php_files(src: Union[str, Path]) -> Iterator[Path]:
    """PHP files under *src* in a stable order; *src* may be a single file."""
    root = Path(src)
    if root.is_file():
        yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(PHP_SUFFIX):
                yield Path(dirpath) / filename


def _produce(src: Union[str, Path], sink: "queue.Queue[Optional[Tuple[str, str]]]") -> None:
    try:
        for path in iter_php_files(src):
            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                _log.warning("Unable to read %s: %s", path, exc)
                continue
            sink.put((content, str(path)))
    finally:
        sink.put(_SENTINEL)


def scan(config: Config, analyse: Optional[Analyse] = None) -> Results:
    """
    Analyse every PHP file under ``config.src``.

    Every file read is recorded in the results, clean or not.
    """
    analyse = analyse or Analyse(config)
    results = Results()
    started = time.monotonic()

    files: "queue.Queue[Optional[Tuple[str, str]]]" = queue.Queue()
    producer = threading.Thread(
        target=_produce, args=(config.src, files), name="phanalist-discovery", daemon=True
    )
    producer.start()

    while True:
        item = files.get()
        if item is _SENTINEL:
            break
        content, path = item
        _log.debug("Analysing %s", path)
        results.add_file_violations(path, analyse.analyse_source(path, content))
        results.total_files_count += 1

    producer.join()
    results.duration = time.monotonic() - started
    _log.info(
        "Analysed %d files, %d violations in %.2fs",
        results.total_files_count,
        results.total_violations,
        results.duration,
    )
    return results


__all__ = ["Analyse", "PHP_SUFFIX", "iter_php_files", "scan"]

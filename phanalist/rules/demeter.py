# phanalist/rules/demeter.py
"""E0014: Law of Demeter, checked on method chains."""

from __future__ import annotations

from typing import List

from ..results import Violation
from ..source import SourceFile
from ..syntax import Statement
from ..type_flow import ForeignCall, foreign_calls
from .base import Rule


class LawOfDemeterRule(Rule):
    code = "E0014"
    description = (
        "Law of Demeter violation. Method chaining should be avoided unless "
        "returning the same object type."
    )

    def is_applicable(self, file: SourceFile) -> bool:
        return True

    def flatten(self, statement: Statement) -> List[Statement]:
        # declarations are walked method by method in foreign_calls()
        return [statement]

    def validate(self, file: SourceFile, statement: Statement) -> List[Violation]:
        return [
            self.new_violation(file, self.suggestion(call), call.span)
            for call in foreign_calls(statement, file.type_registry)
        ]

    @staticmethod
    def suggestion(call: ForeignCall) -> str:
        if call.receiver_type is None:
            return (
                f"Law of Demeter violation. Method '{call.method}' is called on an "
                f"object of unknown type (possible foreign object)."
            )
        return (
            f"Law of Demeter violation. Method '{call.method}' is called on "
            f"'{call.receiver_type}', which is a foreign object."
        )


__all__ = ["LawOfDemeterRule"]

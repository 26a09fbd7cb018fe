from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Tuple

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, UnexpectedInput, VisitError

from ..core.exceptions import QueryError, QueryParseError
from ..core.query import Query

GRAMMAR_PATH = Path(__file__).with_name("query_grammar.lark")


@lru_cache(maxsize=1)
def _build_lark() -> Lark:
    grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
    return Lark(
        grammar,
        parser="earley",
        start="start",
        propagate_positions=True,
        maybe_placeholders=False,
    )


class QueryTransformer(Transformer):
    def __init__(self, text: str):
        super().__init__()
        self.text = text

    def _error_token(self, token: Token, message: str) -> None:
        raise QueryParseError(
            message,
            line=token.line,
            column=token.column,
            line_text=self.text.splitlines()[token.line - 1] if self.text else "",
        )

    def variables(self, names: List[Token]) -> List[Token]:
        seen = set()
        for name in names:
            if name in seen:
                self._error_token(name, f"Variable '{name}' is queried twice")
            seen.add(str(name))
        return names

    def observed_true(self, items) -> Tuple[Token, bool]:
        (name,) = items
        return name, True

    def observed_false(self, items) -> Tuple[Token, bool]:
        (name,) = items
        return name, False

    def observed_value(self, items) -> Tuple[Token, bool]:
        name, value = items
        return name, value.lower() == "true"

    def evidence(self, literals) -> Dict[str, bool]:
        observed: Dict[str, bool] = {}
        for name, value in literals:
            previous = observed.get(str(name))
            if previous is not None and previous != value:
                self._error_token(name, f"Conflicting evidence for '{name}'")
            observed[str(name)] = value
        return observed

    def start(self, items) -> Query:
        names = items[0]
        evidence = items[1] if len(items) > 1 else {}
        for name in names:
            if str(name) in evidence:
                self._error_token(name, f"Variable '{name}' cannot be both queried and observed")
        return Query(tuple(str(name) for name in names), evidence)


def parse_query(text: str) -> Query:
    """
    Parse ``p(Query, ... | Evidence, ...)`` into a :class:`Query`.

    Evidence literals are ``Name`` (observed true), ``!Name`` or ``~Name``
    (observed false), or ``Name=true`` / ``Name=false``.
    """

    parser = _build_lark()
    lines = text.splitlines()
    try:
        tree = parser.parse(text)
    except UnexpectedInput as exc:
        line = exc.line if exc.line and exc.line > 0 else max(len(lines), 1)
        column = exc.column if exc.column and exc.column > 0 else None
        if column is None:
            column = len(lines[line - 1]) + 1 if 1 <= line <= len(lines) else 1
        line_text = lines[line - 1] if 1 <= line <= len(lines) else ""
        raise QueryParseError(
            "Syntax error while parsing query",
            line=line,
            column=column,
            line_text=line_text,
        ) from exc
    except LarkError as exc:  # pragma: no cover - defensive
        raise QueryParseError(str(exc)) from exc

    try:
        return QueryTransformer(text).transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, QueryError):
            raise exc.orig_exc from None
        raise

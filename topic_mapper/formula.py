"""
Formula Evaluation Layer.

A formula is an arithmetic expression template whose ``{placeholders}`` are
filled from a JSON message before evaluation::

    "{$.grid.import} - {$.grid.export}"
    "{power} / 1000"

Each placeholder is either a JSONPath query (leading ``$.``) or a plain
top-level key.  Placeholders are rewritten to identifiers the expression
grammar accepts: braces are stripped and every character outside
``[0-9a-zA-Z]`` becomes ``_``.  The rewritten expression is evaluated by
``simpleeval`` with the resolved values bound to those identifiers.

Templates are compiled once when the mapping is loaded.  Two distinct
placeholders that normalise to the same identifier (``{a.b}`` and
``{a-b}``) are rejected at that point rather than silently merged.
"""

from __future__ import annotations

import keyword
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from jsonpath_ng.jsonpath import JSONPath
from simpleeval import InvalidExpression, SimpleEval

from topic_mapper.json_extractor import (
    compile_path,
    first_match,
    parse_document,
    path_problem,
)
from topic_mapper.logging_setup import get_logger
from topic_mapper.schema import MappingDefinition

logger = get_logger("formula")


PLACEHOLDER_RE = re.compile(r"\{(.*?)\}")

_NON_ALNUM_RE = re.compile(r"[^0-9a-zA-Z]")

PATH_PREFIX = "$."

# Failures raised by simpleeval itself or by the operators it applies
_EVALUATION_ERRORS = (
    InvalidExpression,
    ArithmeticError,
    LookupError,
    SyntaxError,
    TypeError,
    ValueError,
)


def normalize_variable(token: str) -> str:
    """Turn a placeholder token into an expression identifier.

    >>> normalize_variable("$.meter.power")
    '__meter_power'
    """
    stripped = token.replace("{", "").replace("}", "")
    return _NON_ALNUM_RE.sub("_", stripped)


def placeholders_in(template: str) -> List[str]:
    """Distinct placeholder tokens of *template* in order of first appearance."""
    return list(dict.fromkeys(PLACEHOLDER_RE.findall(template)))


def template_problems(template: str) -> List[str]:
    """Describe everything that prevents *template* from compiling."""
    problems: list[str] = []
    seen: dict[str, str] = {}  # identifier → first token

    for token in placeholders_in(template):
        identifier = normalize_variable(token)

        if not identifier.isidentifier() or keyword.iskeyword(identifier):
            problems.append(
                f"placeholder {{{token}}} does not form a valid variable "
                f"name ({identifier!r})"
            )
        elif identifier in seen:
            problems.append(
                f"placeholders {{{seen[identifier]}}} and {{{token}}} both "
                f"normalise to {identifier!r}"
            )
        else:
            seen[identifier] = token

        if token.startswith(PATH_PREFIX):
            problem = path_problem(token)
            if problem:
                problems.append(problem)

    return problems


@dataclass(frozen=True)
class Placeholder:
    """A single ``{token}`` of a formula template."""

    token: str
    identifier: str
    query: Optional[JSONPath] = None

    def resolve(self, document: Any) -> Any:
        if self.query is not None:
            return first_match(self.query, document)
        if isinstance(document, dict):
            return document.get(self.token)
        return None


@dataclass(frozen=True)
class Formula:
    """A compiled formula template."""

    template: str
    expression: str
    placeholders: Tuple[Placeholder, ...]

    def bind(self, document: Any) -> Dict[str, Any]:
        """Map every identifier to its value in *document* (``None`` if absent)."""
        return {p.identifier: p.resolve(document) for p in self.placeholders}


def compile_formula(template: str) -> Formula:
    """Compile *template*.

    Raises
    ------
    ValueError
        If any placeholder is invalid (see ``template_problems``).
    """
    problems = template_problems(template)
    if problems:
        raise ValueError(f"Invalid formula {template!r}: " + "; ".join(problems))

    placeholders = []
    expression = template
    for token in placeholders_in(template):
        identifier = normalize_variable(token)
        query = compile_path(token) if token.startswith(PATH_PREFIX) else None
        placeholders.append(Placeholder(token, identifier, query))
        expression = expression.replace(f"{{{token}}}", identifier)

    return Formula(
        template=template,
        expression=expression,
        placeholders=tuple(placeholders),
    )


class FormulaEvaluator:
    """Resolves ``json_formula`` mappings against a message."""

    def evaluate(self, message: Any, definition: MappingDefinition) -> Any:
        """Return the formula result for *message*, or ``None``."""
        document = parse_document(message)
        if document is None:
            return None

        formula = definition.formula or compile_formula(definition.json_formula)
        names = formula.bind(document)
        return self.evaluate_expression(formula.expression, names)

    @staticmethod
    def evaluate_expression(expression: str, names: Dict[str, Any]) -> Any:
        """Evaluate an already rewritten *expression* with *names* bound."""
        try:
            result = SimpleEval(names=names).eval(expression)
        except _EVALUATION_ERRORS as exc:
            logger.warning(
                "Failed to evaluate formula %r with %r: %s",
                expression,
                names,
                exc,
            )
            return None

        logger.debug("formula %r with %r → %r", expression, names, result)
        return result

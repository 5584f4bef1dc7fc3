"""
Substitution data models

A substitution reference is written `{{name}}` or `{{name | op | op}}`. The
operators after the variable name form a mutation chain applied to the
variable's value, left to right.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class MutationOperator:
    """A mutation operator with its documentation"""
    operator: str
    description: str
    example: str = ""


@dataclass(frozen=True)
class SubstitutionExpression:
    """
    Parsed content of a `{{ ... }}` reference

    Attributes:
        variable_name: Name before the first `|`, may be empty
        mutations: Non-empty operator names, in order

    Example:
        "version | M.M | trim" -> SubstitutionExpression("version", ["M.M", "trim"])
    """
    variable_name: str
    mutations: List[str] = field(default_factory=list)


def _operator(operator: str, description: str, example: str) -> MutationOperator:
    return MutationOperator(operator=operator, description=description, example=example)


MUTATION_OPERATORS: Dict[str, MutationOperator] = {
    op.operator: op for op in (
        # Text case
        _operator('lc', 'LowerCase - converts all characters to lowercase',
                  'Hello World → hello world'),
        _operator('uc', 'UpperCase - converts all characters to uppercase',
                  'Hello World → HELLO WORLD'),
        _operator('tc', 'TitleCase - capitalizes all words',
                  'hello world → Hello World'),
        _operator('c', 'Capitalize - capitalizes the first letter',
                  'hello world → Hello world'),
        _operator('kc', 'KebabCase - converts to kebab-case',
                  'Hello World → hello-world'),
        _operator('sc', 'SnakeCase - converts to snake_case',
                  'Hello World → hello_world'),
        _operator('cc', 'CamelCase - converts to camelCase',
                  'Hello World → helloWorld'),
        _operator('pc', 'PascalCase - converts to PascalCase',
                  'Hello World → HelloWorld'),
        _operator('trim', 'Trim - removes common non-word characters from start and end',
                  '  Hello World!  → Hello World'),
        # Versions
        _operator('M', 'Major - displays only the major version component',
                  '9.1.5 → 9'),
        _operator('M.x', "Major.x - displays major component followed by '.x'",
                  '9.1.5 → 9.x'),
        _operator('M.M', 'Major.Minor - displays only the major and minor components',
                  '9.1.5 → 9.1'),
        _operator('M+1', 'Next Major - increments to the next major version',
                  '9.1.5 → 10'),
        _operator('M.M+1', 'Next Minor - increments to the next minor version',
                  '9.1.5 → 9.2'),
    )
}

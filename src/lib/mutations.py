"""
Mutation operators for substitution values

Each operator is a plain `str -> str` function looked up by name. Operators
never raise: an unknown name, or a version operator given text that does not
start with a number, leaves the value unchanged.

Example:
    >>> mutationChain_apply("Hello World", ["kc", "uc"])
    ['Hello World', 'hello-world', 'HELLO-WORLD']
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from ..models.substitutions import MUTATION_OPERATORS
from .log import LOG

SEMVER_PATTERN = re.compile(r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?')


def case_title(value: str) -> str:
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), value)


def case_capitalize(value: str) -> str:
    if not value:
        return value
    return value[0].upper() + value[1:]


def case_kebab(value: str) -> str:
    value = re.sub(r'([a-z])([A-Z])', r'\1-\2', value)
    return re.sub(r'[\s_]+', '-', value).lower()


def case_snake(value: str) -> str:
    value = re.sub(r'([a-z])([A-Z])', r'\1_\2', value)
    return re.sub(r'[\s-]+', '_', value).lower()


def separators_join(value: str) -> str:
    """Drop separators, uppercasing the character after each run"""
    return re.sub(r'[-_\s]+(.)?', lambda m: m.group(1).upper() if m.group(1) else '', value)


def case_camel(value: str) -> str:
    return re.sub(r'^[A-Z]', lambda m: m.group(0).lower(), separators_join(value))


def case_pascal(value: str) -> str:
    return re.sub(r'^[a-z]', lambda m: m.group(0).upper(), separators_join(value))


def value_trim(value: str) -> str:
    """Strip non-word characters from both ends"""
    return re.sub(r'^\W+|\W+$', '', value)


def semver_parse(value: str) -> Optional[Tuple[int, int, int]]:
    """
    Read major, minor and patch from the start of a value

    Missing components are 0. Trailing text after the numbers is ignored.

    Example:
        >>> semver_parse("9.1-SNAPSHOT")
        (9, 1, 0)
    """
    match = SEMVER_PATTERN.match(value)
    if not match:
        return None
    return (
        int(match.group(1)),
        int(match.group(2) or 0),
        int(match.group(3) or 0),
    )


def version_mutator(render: Callable[[Tuple[int, int, int]], str]) -> Callable[[str], str]:
    """Wrap a renderer so non-version values pass through"""
    def mutate(value: str) -> str:
        parsed = semver_parse(value)
        if parsed is None:
            return value
        return render(parsed)
    return mutate


MUTATORS: Dict[str, Callable[[str], str]] = {
    'lc': str.lower,
    'uc': str.upper,
    'tc': case_title,
    'c': case_capitalize,
    'kc': case_kebab,
    'sc': case_snake,
    'cc': case_camel,
    'pc': case_pascal,
    'trim': value_trim,
    'M': version_mutator(lambda v: f"{v[0]}"),
    'M.x': version_mutator(lambda v: f"{v[0]}.x"),
    'M.M': version_mutator(lambda v: f"{v[0]}.{v[1]}"),
    'M+1': version_mutator(lambda v: f"{v[0] + 1}"),
    'M.M+1': version_mutator(lambda v: f"{v[0]}.{v[1] + 1}"),
}


def mutation_apply(value: str, operator: str) -> str:
    """
    Apply one mutation operator

    Args:
        value: Input value
        operator: Operator name such as "lc" or "M.M"

    Returns:
        The transformed value, or value unchanged for unknown operators
    """
    mutator = MUTATORS.get(operator)
    if mutator is None:
        LOG(f"Unknown mutation operator '{operator}'", level=3)
        return value
    return mutator(value)


def mutationChain_apply(value: str, operators: List[str]) -> List[str]:
    """
    Apply operators in sequence, keeping every intermediate value

    Returns:
        [value, after first operator, after second operator, ...]
    """
    results = [value]
    current = value
    for operator in operators:
        current = mutation_apply(current, operator)
        results.append(current)
    return results


def mutationChain_describe(operators: List[str]) -> str:
    """Markdown description of a mutation chain, one paragraph per operator"""
    descriptions = []
    for operator in operators:
        known = MUTATION_OPERATORS.get(operator)
        description = known.description if known else 'Unknown operator'
        descriptions.append(f"**{operator}**: {description}")
    return '\n\n'.join(descriptions)

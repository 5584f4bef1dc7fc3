"""
Directive definitions

Static registry data for the directive blocks the documentation dialect
understands. Directive kinds differ only in data (argument requirement,
allowed parameters, optional content shape), so the registry is a tuple of
frozen records built once at import time.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class DirectiveDefinition:
    """
    Definition of one directive

    Attributes:
        name: Directive name as written between the braces
        has_argument: Whether text after the closing brace is required
        parameters: Allowed `:name:` parameter names
        template: Snippet showing typical usage
        description: Human-readable description
        content_pattern: When set, the block's non-blank content (stripped and
                         newline-joined) must match this pattern in full
        content_hint: Expected content shape, used in diagnostics
    """
    name: str
    has_argument: bool
    parameters: FrozenSet[str]
    template: str
    description: str
    content_pattern: Optional[re.Pattern] = None
    content_hint: str = ""


def _definition(
    name: str,
    has_argument: bool,
    parameters: List[str],
    template: str,
    description: str,
    content_pattern: Optional[str] = None,
    content_hint: str = "",
) -> DirectiveDefinition:
    return DirectiveDefinition(
        name=name,
        has_argument=has_argument,
        parameters=frozenset(parameters),
        template=template,
        description=description,
        content_pattern=re.compile(content_pattern) if content_pattern else None,
        content_hint=content_hint,
    )


ADMONITION_PARAMETERS = ['open', 'applies_to']

DIRECTIVES = (
    _definition(
        'note', False, ADMONITION_PARAMETERS,
        ':::{note}\nThis is a note.\n:::',
        'A relevant piece of information with no serious repercussions if ignored.',
    ),
    _definition(
        'warning', False, ADMONITION_PARAMETERS,
        ':::{warning}\nThis is a warning.\n:::',
        'You could permanently lose data or leak sensitive information.',
    ),
    _definition(
        'tip', False, ADMONITION_PARAMETERS,
        ':::{tip}\nThis is a tip.\n:::',
        'Advice to help users make better choices when using a feature.',
    ),
    _definition(
        'important', False, ADMONITION_PARAMETERS,
        ':::{important}\nThis is an important notice.\n:::',
        'Ignoring this information could impact performance or the stability of your system.',
    ),
    _definition(
        'admonition', False, ADMONITION_PARAMETERS,
        ':::{admonition} Custom Title\nContent here...\n:::',
        'A plain admonition with custom title and no further styling.',
    ),
    _definition(
        'dropdown', True, ADMONITION_PARAMETERS,
        ':::{dropdown} Dropdown Title\nDropdown content\n:::',
        'Dropdowns allow you to hide and reveal content on user interaction.',
    ),
    _definition(
        'include', True, [],
        ':::{include} _snippets/reusable-snippet.md\n:::',
        'Include content from another file into any given MD file.',
    ),
    _definition(
        'image', True, ['alt', 'width', 'height', 'screenshot', 'title'],
        ':::{image} /path/to/image.png\n:alt: Image description\n:width: 250px\n:::',
        'Include screenshots, inline images, icons, and more.',
    ),
    _definition(
        'diagram', True, [],
        ':::{diagram} mermaid\nflowchart LR\n    A[Start] --> B[End]\n:::',
        'Render various types of diagrams using the Kroki service.',
    ),
    _definition(
        'carousel', False, ['id', 'max-height'],
        '::::{carousel}\n:id: carousel-example\n:max-height: small\n\n'
        ':::{image} images/example1.png\n:alt: First image\n:::\n\n::::',
        'Create an image carousel with multiple images.',
    ),
    _definition(
        'stepper', False, [],
        ':::::{stepper}\n\n::::{step} Install\nFirst install the dependencies.\n::::\n\n:::::',
        'Provide a visual representation of sequential steps.',
    ),
    _definition(
        'step', True, [],
        '::::{step} Step Title\nStep content goes here.\n::::',
        'A single step within a stepper directive.',
    ),
    _definition(
        'tab-set', False, ['group', 'sync'],
        '::::{tab-set}\n:group: example-group\n\n:::{tab-item} Tab #1 title\n:sync: tab1\n'
        'This is where the content for tab #1 goes.\n:::\n\n::::',
        'Create tabbed content with multiple tab items.',
    ),
    _definition(
        'tab-item', True, ['sync'],
        ':::{tab-item} Tab Title\n:sync: tab-id\nTab content goes here.\n:::',
        'A single tab within a tab-set directive.',
    ),
    _definition(
        'applies-switch', False, [],
        '::::{applies-switch}\n\n:::{applies-item} stack:\nContent for Stack\n:::\n\n::::',
        'Create tabbed content where each tab displays an applies_to badge instead of text titles.',
    ),
    _definition(
        'applies-item', True, [],
        ':::{applies-item} stack:\nContent for this applicability\n:::',
        'A single item within an applies-switch directive.',
    ),
    _definition(
        'csv-include', True, ['caption', 'separator'],
        ':::{csv-include} _snippets/sample-data.csv\n:caption: Sample user data from the database\n:::',
        'Include and render CSV files as formatted tables.',
    ),
    _definition(
        'button', False, ['type', 'align', 'external'],
        ':::{button}\n[Get started](/get-started)\n:::',
        'A call-to-action button wrapping a single Markdown link.',
        content_pattern=r'\[[^\]\n]+\]\([^)\s]+\)',
        content_hint='[text](url)',
    ),
)


"""Extract scenario structure and dependencies from test-file text.

Extraction is lexical: it recognises ``describe``/``it``/``test`` call shapes
followed by a quoted label and uses the block scanner to find the body of
each section. Commented-out code is ignored. Nothing here evaluates or
type-checks the source.
"""

import re

from scenario_miner.mining.scanner import find_matching_close, mask_comments
from scenario_miner.models.scenario import ScenarioSection

# Quoted label with its quote character in group "quote" and the verbatim
# (not escape-decoded) contents in group "label".
_LABEL = r"(?P<quote>['\"`])(?P<label>(?:\\.|(?!(?P=quote))[^\\])*)(?P=quote)"

SECTION_PATTERN = re.compile(
    r"(?<![\w.$])describe(?:\.\w+)*\s*(?P<paren>\()\s*" + _LABEL, re.DOTALL
)
LEAF_PATTERN = re.compile(
    r"(?<![\w.$])(?:it|test)(?:\.\w+)*\s*\(\s*" + _LABEL, re.DOTALL
)

DEPENDENCY_PATTERN = re.compile(
    r"^[ \t]*(?:import|export)\s+(?:[^'\";]*?\bfrom\s*)?(['\"])([^'\"\n]+)\1",
    re.MULTILINE,
)


def extract_sections(source_text: str) -> tuple[ScenarioSection, ...]:
    """Extract every section and its case labels, in source order.

    Nested sections are reported on their own as well, and their cases are
    also counted toward every enclosing section. A section whose body
    cannot be delimited is returned with no scenarios.
    """
    code = mask_comments(source_text)
    sections: list[ScenarioSection] = []

    for match in SECTION_PATTERN.finditer(code):
        body = _section_body(code, match)
        scenarios = extract_case_labels(body) if body is not None else ()
        sections.append(ScenarioSection(name=match["label"], scenarios=scenarios))

    return tuple(sections)


def extract_case_labels(body: str) -> tuple[str, ...]:
    """Collect leaf case labels from a section body in order of appearance."""
    return tuple(
        match["label"] for match in LEAF_PATTERN.finditer(mask_comments(body))
    )


def extract_dependencies(source_text: str) -> tuple[str, ...]:
    """Return module specifiers of import/export-from statements, deduplicated."""
    code = mask_comments(source_text)
    specifiers = (match[2] for match in DEPENDENCY_PATTERN.finditer(code))
    return tuple(dict.fromkeys(specifiers))


def _section_body(source_text: str, match: re.Match[str]) -> str | None:
    """Return the text between the braces of a section's callback."""
    call_close = find_matching_close(source_text, match.start("paren"))
    search_end = call_close if call_close is not None else len(source_text)

    brace = source_text.find("{", match.end(), search_end)
    if brace == -1:
        return None

    close = find_matching_close(source_text, brace)
    if close is None:
        return None

    return source_text[brace + 1 : close]

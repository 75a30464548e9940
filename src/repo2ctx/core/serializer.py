"""
Rendering of selected files into a context document.

Two formats carry the same information: markdown (headings and fenced
blocks) and XML (tagged elements). File content is emitted in full and
escaped only as the format requires, so it can be recovered byte-for-byte.
Output depends only on its inputs; nothing time- or host-dependent is
written.
"""

import re
from enum import Enum
from typing import List, Sequence

from .models import GroupResult, ScoredFile


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    XML = "xml"

    @property
    def extension(self) -> str:
        return "md" if self is OutputFormat.MARKDOWN else "xml"


DOCUMENT_TITLE = "Codebase Context"

FENCE_LANGUAGES = {
    '.ts': 'typescript',
    '.tsx': 'tsx',
    '.js': 'javascript',
    '.jsx': 'jsx',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.json': 'json',
    '.md': 'markdown',
    '.html': 'html',
    '.vue': 'vue',
    '.svelte': 'svelte',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.toml': 'toml',
    '.py': 'python',
}

_BACKTICK_RUN = re.compile(r'`+')


def _fence_for(content: str) -> str:
    """A backtick fence longer than any backtick run inside ``content``."""
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(content)), default=0)
    return '`' * max(3, longest + 1)


def _fence_language(f: ScoredFile) -> str:
    ext = f.extension
    return FENCE_LANGUAGES.get(ext, ext.lstrip('.'))


def _escape_xml_text(text: str) -> str:
    """Escape element content so a parser returns ``text`` unchanged."""
    return (text
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace("\r", "&#13;"))


def _escape_xml_attr(text: str) -> str:
    """Escape an attribute value, including whitespace that parsers normalize."""
    return (_escape_xml_text(text)
            .replace('"', "&quot;")
            .replace("\n", "&#10;")
            .replace("\t", "&#9;"))


def _escape_heading(text: str) -> str:
    """Keep a heading on one line: backslash, LF and CR become ``\\\\ \\n \\r``."""
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def _group_title(section: GroupResult) -> str:
    title = section.group.full_name
    if section.group.ref:
        title += f" (ref: {section.group.ref})"
    return title


def format_markdown(sections: Sequence[GroupResult], budget: int) -> str:
    """
    Render sections as markdown.

    Each file is a ``###`` heading with its relative path followed by a
    fenced block. Exactly one newline separates the content from the closing
    fence.
    """
    out: List[str] = [f"# {DOCUMENT_TITLE}\n", f"Token budget: {budget:,}\n"]

    for section in sections:
        out.append(f"## {_group_title(section)}\n")
        for f in section.files:
            fence = _fence_for(f.content)
            out.append(f"### {_escape_heading(f.relative_path)}\n")
            out.append(f"{fence}{_fence_language(f)}\n{f.content}\n{fence}\n")
        selected, discovered, tokens = section.stats()
        out.append(f"_{selected} of {discovered} files, ~{tokens:,} tokens_\n")

    total_files = sum(len(s.files) for s in sections)
    total_tokens = sum(s.total_tokens for s in sections)
    out.append("---\n")
    out.append(f"**Total: {total_files} files, ~{total_tokens:,} of {budget:,} tokens**\n")
    return "\n".join(out)


def format_xml(sections: Sequence[GroupResult], budget: int) -> str:
    """
    Render sections as XML.

    File content sits between a newline after the opening ``<file>`` tag and
    a newline before the closing tag.
    """
    out: List[str] = [f'<context budget="{budget}">']

    for section in sections:
        group = section.group
        selected, discovered, tokens = section.stats()
        attrs = f'owner="{_escape_xml_attr(group.owner)}" name="{_escape_xml_attr(group.name)}"'
        if group.ref:
            attrs += f' ref="{_escape_xml_attr(group.ref)}"'
        attrs += f' files="{selected}" discovered="{discovered}" tokens="{tokens}"'
        out.append(f"<repository {attrs}>")
        for f in section.files:
            out.append(
                f'<file path="{_escape_xml_attr(f.relative_path)}" category="{f.category.value}" '
                f'score="{f.score}" tokens="{f.tokens}">\n'
                f'{_escape_xml_text(f.content)}\n'
                f'</file>'
            )
        out.append("</repository>")

    total_files = sum(len(s.files) for s in sections)
    total_tokens = sum(s.total_tokens for s in sections)
    out.append(f'<summary files="{total_files}" tokens="{total_tokens}" budget="{budget}"/>')
    out.append("</context>")
    return "\n".join(out) + "\n"


def render(sections: Sequence[GroupResult], budget: int, fmt=OutputFormat.MARKDOWN) -> str:
    """
    Render a document in the requested format.

    Args:
        sections: Groups with their selections, in output order.
        budget: The requested global budget, echoed in the summary.
        fmt: ``OutputFormat`` or its string value.

    Returns:
        The complete document text.
    """
    fmt = OutputFormat(fmt)
    if fmt is OutputFormat.XML:
        return format_xml(sections, budget)
    return format_markdown(sections, budget)

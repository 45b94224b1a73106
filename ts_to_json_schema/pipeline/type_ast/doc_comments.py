"""
Doc-comment tag extraction.

Only `/** ... */` comments carry tags. A tag's text runs until the next
tag; a tag without text maps to None, which removes the key from the
rendered schema.
"""

from __future__ import annotations

import re

_TAG_LINE = re.compile(r"^\s*\*?\s?(.*)$")
_TAG = re.compile(r"(?:^|(?<=\s))@([A-Za-z_][\w-]*)", re.MULTILINE)


def is_doc_comment(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/**/") and text.endswith("*/")


def parse_doc_tags(comment: str) -> dict[str, str | None]:
    """
    Extract block tags from the body of a doc comment.

    "@minimum 0" becomes {"minimum": "0"}. A tag starts at an "@" that
    begins a line or follows whitespace; text lines are joined with a
    newline.

    Args:
        comment: Doc comment text without the surrounding /** and */

    Returns:
        Mapping from tag name to tag text, None for a tag without text
        (last occurrence wins)
    """
    body = "\n".join(_TAG_LINE.match(line).group(1).rstrip() for line in comment.splitlines())
    matches = list(_TAG.finditer(body))

    tags: dict[str, str | None] = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(body)
        text = body[match.end() : end].strip()
        tags[match.group(1)] = "\n".join(line.strip() for line in text.splitlines()) or None
    return tags

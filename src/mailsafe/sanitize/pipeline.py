"""The email HTML sanitizer: an ordered pipeline of pure string stages.

Tag stripping runs first, so the attribute stage never sees script-bearing
elements. It leaves none of the stripped names behind, even where a removal
joins the text around it into a new tag. The attribute stage only removes
attributes, adds the link safety attributes and escapes ``<``, so it cannot
create a stripped tag. One pass of each stage is therefore enough:
``sanitize_html`` is idempotent without looping.
"""

from __future__ import annotations

from typing import Callable, Union

from mailsafe.sanitize.attributes import rewrite_attributes
from mailsafe.sanitize.strippers import strip_tags

Stage = Callable[[str], str]

STAGES: tuple[tuple[str, Stage], ...] = (
    # content and shell stripping share one scan
    ("tags", strip_tags),
    # event handlers, URI guard and link hardening share one scan
    ("attributes", rewrite_attributes),
)


def run_stages(html: str) -> str:
    """One pass of every stage, in order."""
    for _name, stage in STAGES:
        html = stage(html)
    return html


def sanitize_html(raw_html: Union[str, bytes, None]) -> str:
    """Return *raw_html* with executable content, handlers and dangerous URIs removed.

    Never raises: ``None`` and empty input give ``""`` and bytes are decoded
    as UTF-8 with replacement characters.
    """
    if not raw_html:
        return ""
    if isinstance(raw_html, bytes):
        html = raw_html.decode("utf-8", errors="replace")
    else:
        html = str(raw_html)
    return run_stages(html)

"""Tests for the BeautifulSoup-based audit."""

import pytest

from mailsafe.sanitize.audit import Violation, find_violations
from mailsafe.sanitize.pipeline import sanitize_html


class TestFindViolations:
    def test_clean_document(self):
        assert find_violations("<p>ok</p>") == []
        assert find_violations("") == []

    def test_script_and_bad_link(self):
        violations = find_violations('<script>x</script><a href="javascript:y">z</a>')
        assert [v.kind for v in violations] == ["content_tag", "dangerous_uri", "unsafe_link"]
        assert violations[0].tag == "script"

    def test_event_handler(self):
        assert find_violations('<img onerror="x" src="y">') == [Violation("event_handler", "img", "onerror")]

    def test_shell_tags(self):
        assert [v.kind for v in find_violations("<form><input></form>")] == ["shell_tag", "shell_tag"]

    def test_foreign_object(self):
        violations = find_violations("<svg><foreignObject></foreignObject></svg>")
        assert violations == [Violation("content_tag", "foreignobject")]

    def test_hardened_link_passes(self):
        assert find_violations('<a href="/x" target="_blank" rel="noopener noreferrer">x</a>') == []

    def test_data_image_src_passes(self):
        assert find_violations('<img src="data:image/png;base64,x">') == []


@pytest.mark.parametrize(
    "html",
    [
        '<style>.x{color:red}</style><p onclick="bad()">Safe</p><script>evil()</script><img src="photo.jpg">',
        '<a href="https://example.com" target="_self">Link</a>',
        '<svg><foreignObject><div>x</div></foreignObject><use xlink:href="javascript:alert(1)"/></svg>',
        '<a href="&#106;avascript:alert(1)">click</a>',
        '<form action="/steal"><input name="q"><button onclick="go()">Go</button></form>',
        '<img src="data:text/html,x" srcset="javascript:alert(1) 1x">',
    ],
)
def test_sanitized_output_has_no_violations(html):
    assert find_violations(sanitize_html(html)) == []

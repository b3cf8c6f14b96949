# tests/test_rewriter.py
import logging

import pytest

from outlinks.config.models import RewriteConfig, UrlPolicy
from outlinks.links import LinkRewriter, rewrite_external_links

HOST = "example.com"

MIXED_DOCUMENT = """<article>
  <h1 class="title">Links</h1>
  <p>Read <a href="https://other.com/page" class=ext>this</a>,
     <a href='https://example.com/about'>our page</a>,
     <a href="/contact" target="_self">contact</a> and
     <a name="top">an anchor</a>.</p>
  <script>document.write('<a href="https://ads.com">ad</a>');</script>
  <a HREF="http://news.org/?q=1&amp;r=2" REL="nofollow" TARGET=_top>news</a>
</article>
"""


@pytest.fixture
def rewrite():
    """Rewrite with the site host used throughout these tests."""
    return lambda html: rewrite_external_links(html, HOST)


# --- Rewriting external links ---

def test_external_link_gets_target_and_rel(rewrite):
    result = rewrite('<a href="https://other.com/page">text</a>')

    assert result == (
        '<a href="https://other.com/page" target="_blank" rel="noopener noreferrer">text</a>'
    )


def test_existing_target_and_rel_are_overwritten(rewrite):
    result = rewrite('<a href="https://other.com" target="_self" rel="nofollow">x</a>')

    assert result == '<a href="https://other.com" target="_blank" rel="noopener noreferrer">x</a>'


def test_mixed_document(rewrite):
    result = rewrite(MIXED_DOCUMENT)

    assert result == MIXED_DOCUMENT.replace(
        '<a href="https://other.com/page" class=ext>',
        '<a href="https://other.com/page" class=ext target="_blank" rel="noopener noreferrer">',
    ).replace(
        '<a HREF="http://news.org/?q=1&amp;r=2" REL="nofollow" TARGET=_top>',
        '<a HREF="http://news.org/?q=1&amp;r=2" rel="noopener noreferrer" target="_blank">',
    )


def test_only_anchors_are_touched(rewrite):
    html = (
        '<link rel="stylesheet" href="https://cdn.other.com/site.css">'
        '<area href="https://other.com/map"><img src="https://other.com/a.png">'
    )

    assert rewrite(html) == html


# --- Links that are left alone ---

@pytest.mark.parametrize(
    "html",
    [
        '<a href="https://example.com/about" target="_self" rel="nofollow">x</a>',
        '<a href="https://blog.example.com/post">x</a>',
        '<a href="https://other.com/?ref=example.com">x</a>',
        # Substring matching also treats look-alike hosts as internal
        '<a href="https://evilexample.com/">x</a>',
    ],
)
def test_links_containing_the_site_host_are_preserved(rewrite, html):
    assert rewrite(html) == html


def test_host_check_sees_the_href_as_the_browser_does():
    # "&notes" stays literal in an attribute, so the host is present
    html = '<a href="https://other.com/?q&notes.example">x</a>'

    assert rewrite_external_links(html, "notes.example") == html


@pytest.mark.parametrize(
    "html",
    [
        '<a href="/about">x</a>',
        '<a href="about.html">x</a>',
        '<a href="#top">x</a>',
        '<a href="mailto:someone@other.com">x</a>',
        '<a href="not a url">x</a>',
        '<a href="//other.com/path">x</a>',
    ],
)
def test_relative_and_invalid_links_are_preserved(rewrite, html):
    assert rewrite(html) == html


@pytest.mark.parametrize("html", ['<a name="anchor">x</a>', '<a href="">x</a>', "<a href>x</a>"])
def test_anchors_without_href_are_preserved(rewrite, html):
    assert rewrite(html) == html


# --- Short circuits ---

def test_empty_document_is_returned_unchanged():
    assert rewrite_external_links("", HOST) == ""


@pytest.mark.parametrize("site_host", ["", None])
def test_missing_site_host_disables_rewriting(site_host):
    html = '<a href="https://other.com/page">text</a>'

    assert rewrite_external_links(html, site_host) == html


def test_document_without_anchors_is_byte_identical(rewrite):
    html = (
        "<!DOCTYPE html>\r\n<html><head><title>T &amp; <a></title></head>"
        "<body data-x='1'  >\n\t<p>https://other.com</p><!-- <a href=\"https://x.com\"> --></body></html>"
    )

    assert rewrite(html) == html


# --- Properties ---

def test_rewrite_is_idempotent(rewrite):
    once = rewrite(MIXED_DOCUMENT)

    assert rewrite(once) == once


def test_malformed_markup_never_raises(rewrite):
    html = '<a href="https://other.com">ok</a><p <a href="https://x.com'

    assert rewrite(html) == (
        '<a href="https://other.com" target="_blank" rel="noopener noreferrer">ok</a>'
        '<p <a href="https://x.com'
    )


@pytest.mark.parametrize(
    "html",
    ["<", "<a", "</", "<!--", "<a href='x", '<a href="https://other.com"', "<<<>>>", "<a =x>"],
)
def test_fragments_of_markup_pass_through(rewrite, html):
    assert rewrite(html) == html


def test_url_validator_is_injectable():
    html = '<a href="/about">x</a>'

    result = rewrite_external_links(html, HOST, is_valid_url=lambda href: True)

    assert result == '<a href="/about" target="_blank" rel="noopener noreferrer">x</a>'


def test_custom_target_and_rel():
    result = rewrite_external_links(
        '<a href="https://other.com">x</a>', HOST, target="external", rel="noopener"
    )

    assert result == '<a href="https://other.com" target="external" rel="noopener">x</a>'


def test_rewrite_count_is_logged_at_debug(rewrite, caplog):
    with caplog.at_level(logging.DEBUG, logger="outlinks.links.rewriter"):
        rewrite(MIXED_DOCUMENT)

    assert "Rewrote 2 external link(s) for host example.com" in caplog.text


# --- LinkRewriter ---

def test_link_rewriter_uses_configured_host():
    rewriter = LinkRewriter(RewriteConfig(site_host=HOST))

    assert rewriter('<a href="https://example.com/x">x</a>') == '<a href="https://example.com/x">x</a>'
    assert 'target="_blank"' in rewriter.rewrite('<a href="https://other.com/x">x</a>')


def test_link_rewriter_host_can_be_overridden_per_call():
    rewriter = LinkRewriter(RewriteConfig(site_host=HOST))
    html = '<a href="https://other.com/x">x</a>'

    assert rewriter.rewrite(html, "other.com") == html
    assert rewriter.rewrite(html, "") == html


def test_link_rewriter_without_host_is_a_no_op():
    html = '<a href="https://other.com/x">x</a>'

    assert LinkRewriter().rewrite(html) == html


def test_link_rewriter_applies_url_policy():
    html = '<a href="https://other.com:3000/">x</a>'
    strict = LinkRewriter(RewriteConfig(site_host=HOST))
    relaxed = LinkRewriter(
        RewriteConfig(site_host=HOST, url_policy=UrlPolicy(allowed_ports=frozenset({3000})))
    )

    assert strict.rewrite(html) == html
    assert 'rel="noopener noreferrer"' in relaxed.rewrite(html)


def test_link_rewriter_rejects_invalid_config():
    with pytest.raises(ValueError):
        LinkRewriter(RewriteConfig(site_host="https://example.com"))
    with pytest.raises(ValueError):
        LinkRewriter(RewriteConfig(site_host=HOST, rel=" "))

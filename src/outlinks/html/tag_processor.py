"""Forward-only HTML tag scanner with in-place attribute patching.

The processor walks raw markup one tag at a time and records attribute
edits as text replacements against the original string. Nothing outside
the edited attribute tokens is reparsed or reserialized, so whitespace,
quoting and casing of untouched markup survive byte for byte.
"""

import html
import re
from dataclasses import dataclass, field
from html.entities import html5
from typing import NamedTuple

_WHITESPACE = "\t\n\f\r "

_TAG_NAME_RE = re.compile(r"[^\t\n\f\r />]+")
_ATTR_NAME_RE = re.compile(r"[^\t\n\f\r />][^\t\n\f\r />=]*")
_UNQUOTED_VALUE_RE = re.compile(r"[^\t\n\f\r >]*")
_COMMENT_END_RE = re.compile(r"--!?>")
_VALID_ATTR_NAME_RE = re.compile(r"[^\t\n\f\r \"'<>/=\x00-\x1f\x7f]+")
_CHAR_REF_RE = re.compile(r"&(#[xX][0-9a-fA-F]+;?|#[0-9]+;?|[A-Za-z][A-Za-z0-9]*;?)")

# Elements whose contents are text up to the matching end tag.
RAWTEXT_ELEMENTS = frozenset(
    {"IFRAME", "NOEMBED", "NOFRAMES", "SCRIPT", "STYLE", "TEXTAREA", "TITLE", "XMP"}
)


class _Patch(NamedTuple):
    start: int
    end: int
    text: str


class _AttributeToken(NamedTuple):
    name: str  # Lower-cased attribute name
    lead: int  # Offset where the whitespace before the name begins
    start: int  # Offset of the name
    end: int  # Offset just past the value (or the name, for boolean attributes)
    value_start: int | None
    value_end: int | None


@dataclass
class _Tag:
    name: str
    is_closer: bool
    start: int
    end: int
    attributes: list[_AttributeToken] = field(default_factory=list)
    attributes_end: int = 0  # Insertion point for new attributes

    def find(self, name: str) -> list[_AttributeToken]:
        return [attr for attr in self.attributes if attr.name == name]


class TagProcessor:
    """Scan an HTML string tag by tag and patch attributes on the way.

    Usage::

        tags = TagProcessor(markup)
        while tags.next_tag("a"):
            if tags.get_attribute("href"):
                tags.set_attribute("target", "_blank")
        markup = tags.get_updated_html()

    The cursor only moves forward. Once it leaves a tag, that tag can no
    longer be read or changed. Malformed markup never raises: an incomplete
    tag, comment or declaration at the end of the input ends the scan and is
    left exactly as it was.
    """

    def __init__(self, html_text: str) -> None:
        self._html = html_text
        self._pos = 0
        self._tag: _Tag | None = None
        self._patches: list[_Patch] = []
        self._updates: dict[str, str | None] = {}
        self._done = False
        self._incomplete = False

    # -- navigation -------------------------------------------------------

    def next_tag(self, tag_name: str | None = None, *, tag_closers: bool = False) -> bool:
        """Advance to the next matching tag.

        Args:
            tag_name: Only stop on tags with this name (case-insensitive).
            tag_closers: Also stop on end tags such as ``</a>``.

        Returns:
            True when positioned on a matching tag, False once the document
            is exhausted.
        """
        wanted = tag_name.upper() if tag_name else None

        while True:
            self._leave_tag()
            tag = self._scan_next_tag()
            if tag is None:
                return False
            self._tag = tag
            if tag.is_closer and not tag_closers:
                continue
            if wanted is None or tag.name == wanted:
                return True

    def get_tag(self) -> str | None:
        """Upper-case name of the current tag, or None."""
        return self._tag.name if self._tag else None

    def is_tag_closer(self) -> bool:
        return self._tag is not None and self._tag.is_closer

    @property
    def paused_at_incomplete_token(self) -> bool:
        """True when the scan stopped at a tag or comment cut off by end of input."""
        return self._incomplete

    # -- attributes -------------------------------------------------------

    def get_attribute(self, name: str) -> str | None:
        """Return the decoded value of an attribute on the current start tag.

        Boolean attributes read as an empty string. Duplicate attributes
        resolve to the first occurrence, the way browsers do.
        """
        tag = self._tag
        if tag is None or tag.is_closer:
            return None

        name = name.lower()
        if name in self._updates:
            return self._updates[name]

        matches = tag.find(name)
        if not matches:
            return None
        attr = matches[0]
        if attr.value_start is None:
            return ""
        return _decode_attribute_value(self._html[attr.value_start:attr.value_end])

    def get_attribute_names(self) -> list[str]:
        tag = self._tag
        if tag is None or tag.is_closer:
            return []

        names: list[str] = []
        for attr in tag.attributes:
            if attr.name not in names and self._updates.get(attr.name, "") is not None:
                names.append(attr.name)
        for name, value in self._updates.items():
            if value is not None and name not in names:
                names.append(name)
        return names

    def set_attribute(self, name: str, value: str) -> bool:
        """Set an attribute on the current start tag, replacing any existing value.

        Returns:
            False if the cursor is not on a start tag.

        Raises:
            ValueError: If ``name`` is not a valid attribute name.
        """
        _check_attribute_name(name)
        if self._tag is None or self._tag.is_closer:
            return False
        self._updates[name.lower()] = value
        return True

    def remove_attribute(self, name: str) -> bool:
        """Remove every occurrence of an attribute from the current start tag."""
        _check_attribute_name(name)
        if self._tag is None or self._tag.is_closer:
            return False
        self._updates[name.lower()] = None
        return True

    # -- output -----------------------------------------------------------

    def get_updated_html(self) -> str:
        """Return the document with every queued attribute change applied."""
        patches = self._patches + self._pending_patches()
        if not patches:
            return self._html

        parts: list[str] = []
        offset = 0
        for patch in patches:
            parts.append(self._html[offset:patch.start])
            parts.append(patch.text)
            offset = patch.end
        parts.append(self._html[offset:])
        return "".join(parts)

    def __str__(self) -> str:
        return self.get_updated_html()

    # -- internals --------------------------------------------------------

    def _leave_tag(self) -> None:
        self._patches.extend(self._pending_patches())
        self._updates = {}
        self._tag = None

    def _pending_patches(self) -> list[_Patch]:
        tag = self._tag
        if tag is None or not self._updates:
            return []

        patches: list[_Patch] = []
        for name, value in self._updates.items():
            matches = tag.find(name)
            if value is None:
                patches.extend(_Patch(attr.lead, attr.end, "") for attr in matches)
                continue

            text = f'{name}="{html.escape(value, quote=True)}"'
            if matches:
                first, duplicates = matches[0], matches[1:]
                patches.append(_Patch(first.start, first.end, text))
                patches.extend(_Patch(attr.lead, attr.end, "") for attr in duplicates)
            else:
                patches.append(_Patch(tag.attributes_end, tag.attributes_end, f" {text}"))

        # sorted() is stable, so insertions at the same offset keep their order
        return sorted(patches, key=lambda patch: patch.start)

    def _scan_next_tag(self) -> _Tag | None:
        doc = self._html
        length = len(doc)

        while not self._done:
            lt = doc.find("<", self._pos)
            if lt == -1 or lt + 1 >= length:
                self._done = True
                return None

            nxt = doc[lt + 1]
            if nxt.isascii() and nxt.isalpha():
                return self._parse_tag(lt, lt + 1, is_closer=False)

            if nxt == "/":
                if lt + 2 < length and doc[lt + 2].isascii() and doc[lt + 2].isalpha():
                    return self._parse_tag(lt, lt + 2, is_closer=True)
                if doc.startswith(">", lt + 2):
                    self._pos = lt + 3
                    continue
                self._skip_until(">", lt + 2)
            elif nxt == "!":
                if doc.startswith("--", lt + 2):
                    self._skip_comment(lt + 4)
                else:
                    self._skip_until(">", lt + 2)
            elif nxt == "?":
                self._skip_until(">", lt + 2)
            else:
                # A stray "<" is text
                self._pos = lt + 1

        return None

    def _skip_until(self, marker: str, start: int) -> None:
        end = self._html.find(marker, start)
        if end == -1:
            self._stop_incomplete()
        else:
            self._pos = end + len(marker)

    def _skip_comment(self, start: int) -> None:
        doc = self._html
        # "<!-->" and "<!--->" close immediately
        if doc.startswith(">", start):
            self._pos = start + 1
            return
        if doc.startswith("->", start):
            self._pos = start + 2
            return
        match = _COMMENT_END_RE.search(doc, start)
        if match is None:
            self._stop_incomplete()
        else:
            self._pos = match.end()

    def _stop_incomplete(self) -> None:
        self._done = True
        self._incomplete = True

    def _parse_tag(self, start: int, name_start: int, *, is_closer: bool) -> _Tag | None:
        doc = self._html
        length = len(doc)

        name_match = _TAG_NAME_RE.match(doc, name_start)
        tag = _Tag(
            name=name_match.group().upper(),
            is_closer=is_closer,
            start=start,
            end=-1,
            attributes_end=name_match.end(),
        )
        pos = name_match.end()

        while True:
            lead = pos
            while pos < length and (doc[pos] in _WHITESPACE or doc[pos] == "/"):
                pos += 1
            if pos >= length:
                self._stop_incomplete()
                return None
            if doc[pos] == ">":
                tag.end = pos + 1
                break

            attr_match = _ATTR_NAME_RE.match(doc, pos)
            attr_start = pos
            pos = attr_match.end()

            after_name = pos
            while after_name < length and doc[after_name] in _WHITESPACE:
                after_name += 1

            value_start = value_end = None
            if after_name < length and doc[after_name] == "=":
                pos = after_name + 1
                while pos < length and doc[pos] in _WHITESPACE:
                    pos += 1
                if pos >= length:
                    self._stop_incomplete()
                    return None

                quote = doc[pos]
                if quote in "\"'":
                    close = doc.find(quote, pos + 1)
                    if close == -1:
                        self._stop_incomplete()
                        return None
                    value_start, value_end = pos + 1, close
                    pos = close + 1
                else:
                    value_match = _UNQUOTED_VALUE_RE.match(doc, pos)
                    value_start, value_end = value_match.start(), value_match.end()
                    pos = value_match.end()

            tag.attributes.append(
                _AttributeToken(
                    name=attr_match.group().lower(),
                    lead=lead,
                    start=attr_start,
                    end=pos,
                    value_start=value_start,
                    value_end=value_end,
                )
            )
            tag.attributes_end = pos

        self._pos = tag.end
        if not is_closer:
            self._skip_raw_text(tag.name)
        return tag

    def _skip_raw_text(self, tag_name: str) -> None:
        if tag_name == "PLAINTEXT":
            self._done = True
            return
        if tag_name not in RAWTEXT_ELEMENTS:
            return

        closer = re.compile(rf"</{tag_name}[\t\n\f\r />]", re.IGNORECASE)
        match = closer.search(self._html, self._pos)
        if match is None:
            # Unclosed raw text runs to the end of the document
            self._done = True
        else:
            self._pos = match.start()


def _check_attribute_name(name: str) -> None:
    if not isinstance(name, str) or not _VALID_ATTR_NAME_RE.fullmatch(name):
        raise ValueError(f"Invalid attribute name: {name!r}")


def _decode_attribute_value(raw: str) -> str:
    """Decode character references the way a browser does inside an attribute.

    A named reference without its ``;`` stays literal when the next character
    is alphanumeric or ``=``, so query strings like ``?a=1&copy=2`` survive.
    """
    if "&" not in raw:
        return raw

    def replace(match: re.Match) -> str:
        ref = match.group(1)
        if ref.startswith("#") or (ref.endswith(";") and ref in html5):
            return html.unescape(match.group())

        # Longest legacy name (no trailing ";") that prefixes the reference
        for size in range(len(ref.rstrip(";")), 1, -1):
            name = ref[:size]
            if name not in html5:
                continue
            following = ref[size:size + 1] or raw[match.end():match.end() + 1]
            if following == "=" or (following.isascii() and following.isalnum()):
                return match.group()
            return html5[name] + ref[size:]
        return match.group()

    return _CHAR_REF_RE.sub(replace, raw)

from __future__ import annotations

import re
from typing import Iterable, List, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString


_CAPTION_RE = re.compile(r"\[/?caption[^\]]*\]", re.IGNORECASE)
_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
_WS_RE = re.compile(r"\s+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

# Elements nested deeper than this are flattened to their text.
MAX_NESTING = 100

_INLINE_TAGS = {
    "span", "a", "strong", "b", "em", "i", "u", "s", "strike", "del", "code",
    "img", "br", "sup", "sub", "small", "mark", "abbr", "cite", "q", "time",
}

Inline = Union[str, Tag]


def is_wordpress_image(img: Tag) -> bool:
    """Images inserted through the WordPress media library."""
    classes = img.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    src = img.get("src") or ""
    return any("wp-image" in c for c in classes) or "wp-content" in src


def convert_html_to_markdown(
    html: str,
    *,
    preserve_images: bool = True,
    process_shortcodes: bool = True,
) -> str:
    """
    Convert a WordPress post body to Markdown.

    Covered:
    - ATX headings, paragraphs, emphasis, links, inline code, line breaks.
    - Nested bulleted/numbered lists, blockquotes, fenced code blocks,
      horizontal rules, simple tables and iframe embeds as links.
    - Images as ``![alt](src)``; images from the WordPress media library drop
      their ``title`` attribute, other images keep it.

    With ``process_shortcodes`` the ``[caption]`` wrappers WordPress puts
    around images are removed; every other shortcode is kept verbatim.
    """
    source = html or ""
    if process_shortcodes:
        source = _CAPTION_RE.sub("", source)

    soup = BeautifulSoup(source, "html.parser")

    # Remove scripts/styles
    for bad in soup.find_all(["script", "style"]):
        bad.decompose()

    def render_image(img: Tag) -> str:
        if not preserve_images:
            return ""
        src = img.get("src") or ""
        if not src:
            return ""
        alt = img.get("alt") or ""
        title = img.get("title") or ""
        if title and not is_wordpress_image(img):
            return f'![{alt}]({src} "{title}")'
        return f"![{alt}]({src})"

    def wrap(inner: str, marker: str) -> str:
        core = inner.strip()
        if not core:
            return inner
        lead = " " if inner[:1].isspace() else ""
        trail = " " if inner[-1:].isspace() else ""
        return f"{lead}{marker}{core}{marker}{trail}"

    def flatten(el: Tag) -> str:
        return _WS_RE.sub(" ", el.get_text(" ")).strip()

    def render_inline(children: Iterable[Inline], level: int = 0) -> str:
        parts: List[str] = []
        for child in children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, str):
                parts.append(_WS_RE.sub(" ", str(child)))
                continue
            if not isinstance(child, Tag):
                continue
            name = (child.name or "").lower()
            if name == "br":
                parts.append("  \n")
                continue
            if name == "img":
                parts.append(render_image(child))
                continue
            if name == "iframe":
                parts.append(render_embed(child))
                continue
            if name == "code":
                code = child.get_text()
                parts.append(f"`{code}`" if code else "")
                continue
            if level >= MAX_NESTING:
                parts.append(flatten(child))
                continue
            inner = render_inline(child.children, level + 1)
            if name in ("strong", "b"):
                parts.append(wrap(inner, "**"))
            elif name in ("em", "i"):
                parts.append(wrap(inner, "*"))
            elif name in ("s", "strike", "del"):
                parts.append(wrap(inner, "~~"))
            elif name == "a" and child.get("href"):
                parts.append(f"[{inner.strip()}]({child['href']})")
            else:
                parts.append(inner)
        return "".join(parts)

    def render_embed(el: Tag) -> str:
        src = el.get("src") or ""
        return f"[Embed]({src})" if src else ""

    def render_list(el: Tag, depth: int = 0, level: int = 0) -> str:
        if level >= MAX_NESTING:
            return flatten(el)
        ordered = el.name == "ol"
        lines: List[str] = []
        for index, li in enumerate(el.find_all("li", recursive=False), start=1):
            marker = f"{index}." if ordered else "-"
            nested = [c for c in li.children if isinstance(c, Tag) and c.name in ("ul", "ol")]
            inline = [c for c in li.children if not (isinstance(c, Tag) and c.name in ("ul", "ol"))]
            text = render_inline(inline, level).strip()
            lines.append(f"{'    ' * depth}{marker} {text}")
            for sub in nested:
                lines.append(render_list(sub, depth + 1, level + 1))
        return "\n".join(lines)

    def render_table(el: Tag, level: int) -> List[str]:
        rows: List[List[str]] = []
        for tr in el.find_all("tr"):
            cells = [render_inline(c.children, level).strip() for c in tr.find_all(["td", "th"], recursive=False)]
            if cells:
                rows.append(cells)
        if not rows:
            return []
        width = max(len(r) for r in rows)
        rows = [r + [""] * (width - len(r)) for r in rows]
        lines = ["| " + " | ".join(rows[0]) + " |", "|" + " --- |" * width]
        lines.extend("| " + " | ".join(r) + " |" for r in rows[1:])
        return ["\n".join(lines)]

    def render_block(el: Tag, level: int) -> List[str]:
        name = (el.name or "").lower()
        if name in {"h1", "h2", "h3", "h4", "h5", "h6"}:
            text = render_inline(el.children, level).strip()
            return [f"{'#' * int(name[1])} {text}"] if text else []
        if name == "p":
            text = render_inline(el.children, level).strip()
            return [text] if text else []
        if name in {"ul", "ol"}:
            rendered = render_list(el, level=level)
            return [rendered] if rendered else []
        if name == "blockquote":
            inner = "\n\n".join(render_blocks(el, level + 1))
            if not inner:
                return []
            return ["\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))]
        if name == "pre":
            code_child = el.find("code")
            text = (code_child or el).get_text()
            return [f"```\n{text.strip(chr(10))}\n```"]
        if name == "hr":
            return ["---"]
        if name == "table":
            return render_table(el, level)
        if name in {"iframe", "embed", "object"}:
            embed = render_embed(el)
            return [embed] if embed else []
        # div, section, figure, figcaption and unknown containers
        return render_blocks(el, level + 1)

    def render_blocks(container: Tag, level: int = 0) -> List[str]:
        if level >= MAX_NESTING:
            text = flatten(container)
            return [text] if text else []
        blocks: List[str] = []
        run: List[Inline] = []

        def flush_run() -> None:
            text = render_inline(run, level).strip()
            if text:
                blocks.append(text)
            run.clear()

        for child in container.children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, NavigableString):
                # Bodies without <p> tags separate paragraphs with blank lines
                for i, piece in enumerate(_PARAGRAPH_BREAK_RE.split(str(child))):
                    if i:
                        flush_run()
                    if piece.strip() or run:
                        run.append(piece)
                continue
            if isinstance(child, Tag) and (child.name or "").lower() in _INLINE_TAGS:
                run.append(child)
                continue
            flush_run()
            if isinstance(child, Tag):
                blocks.extend(render_block(child, level))
        flush_run()
        return blocks

    markdown = "\n\n".join(render_blocks(soup))
    return _EXCESS_NEWLINES_RE.sub("\n\n", markdown).strip()

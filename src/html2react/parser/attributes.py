"""Attribute normalization for parsed elements.

Splits raw element attributes into plain (React-named) attributes, event
handlers, a camelCased style map, the class string, and data-/aria-
passthrough maps.
"""

from __future__ import annotations

import logging
import re

from html2react.model.document import EventHandler, NodeAttributes

logger = logging.getLogger(__name__)

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

BOOLEAN_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "download",
        "formnovalidate",
        "hidden",
        "inert",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
    }
)

# HTML attribute name -> React prop name. Every entry maps to exactly one name.
REACT_ATTRIBUTE_ALIASES: dict[str, str] = {
    "class": "className",
    "for": "htmlFor",
    "accept-charset": "acceptCharset",
    "accesskey": "accessKey",
    "allowfullscreen": "allowFullScreen",
    "autocapitalize": "autoCapitalize",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "autoplay": "autoPlay",
    "cellpadding": "cellPadding",
    "cellspacing": "cellSpacing",
    "charset": "charSet",
    "classid": "classID",
    "colspan": "colSpan",
    "contenteditable": "contentEditable",
    "contextmenu": "contextMenu",
    "crossorigin": "crossOrigin",
    "datetime": "dateTime",
    "enctype": "encType",
    "enterkeyhint": "enterKeyHint",
    "fetchpriority": "fetchPriority",
    "formaction": "formAction",
    "formenctype": "formEncType",
    "formmethod": "formMethod",
    "formnovalidate": "formNoValidate",
    "formtarget": "formTarget",
    "frameborder": "frameBorder",
    "hreflang": "hrefLang",
    "http-equiv": "httpEquiv",
    "inputmode": "inputMode",
    "ismap": "isMap",
    "itemprop": "itemProp",
    "itemscope": "itemScope",
    "itemtype": "itemType",
    "marginheight": "marginHeight",
    "marginwidth": "marginWidth",
    "maxlength": "maxLength",
    "mediagroup": "mediaGroup",
    "minlength": "minLength",
    "nomodule": "noModule",
    "novalidate": "noValidate",
    "playsinline": "playsInline",
    "radiogroup": "radioGroup",
    "readonly": "readOnly",
    "referrerpolicy": "referrerPolicy",
    "rowspan": "rowSpan",
    "spellcheck": "spellCheck",
    "srcdoc": "srcDoc",
    "srclang": "srcLang",
    "srcset": "srcSet",
    "tabindex": "tabIndex",
    "usemap": "useMap",
    "xlink:href": "xlinkHref",
    "xml:lang": "xmlLang",
    "xml:space": "xmlSpace",
    # SVG presentation attributes
    "clip-path": "clipPath",
    "clip-rule": "clipRule",
    "fill-opacity": "fillOpacity",
    "fill-rule": "fillRule",
    "font-family": "fontFamily",
    "font-size": "fontSize",
    "font-weight": "fontWeight",
    "stop-color": "stopColor",
    "stop-opacity": "stopOpacity",
    "stroke-dasharray": "strokeDasharray",
    "stroke-dashoffset": "strokeDashoffset",
    "stroke-linecap": "strokeLinecap",
    "stroke-linejoin": "strokeLinejoin",
    "stroke-miterlimit": "strokeMiterlimit",
    "stroke-opacity": "strokeOpacity",
    "stroke-width": "strokeWidth",
    "text-anchor": "textAnchor",
    "viewbox": "viewBox",
}

_EVENT_NAMES = (
    "Abort AnimationEnd AnimationIteration AnimationStart BeforeInput Blur CanPlay "
    "CanPlayThrough Change Click Close CompositionEnd CompositionStart CompositionUpdate "
    "ContextMenu Copy Cut DoubleClick Drag DragEnd DragEnter DragExit DragLeave DragOver "
    "DragStart Drop DurationChange Emptied Encrypted Ended Error Focus GotPointerCapture "
    "Input Invalid KeyDown KeyPress KeyUp Load LoadedData LoadedMetadata LoadStart "
    "LostPointerCapture Message MouseDown MouseEnter MouseLeave MouseMove MouseOut "
    "MouseOver MouseUp Open Paste Pause Play Playing PointerCancel PointerDown "
    "PointerEnter PointerLeave PointerMove PointerOut PointerOver PointerUp Progress "
    "RateChange Reset Scroll Seeked Seeking Select Stalled Submit Suspend TimeUpdate "
    "Toggle TouchCancel TouchEnd TouchMove TouchStart TransitionEnd VolumeChange "
    "Waiting Wheel"
).split()

# Lowercase HTML handler name -> React event prop
EVENT_ALIASES: dict[str, str] = {f"on{name.lower()}": f"on{name}" for name in _EVENT_NAMES}
EVENT_ALIASES["ondblclick"] = "onDoubleClick"

_EVENT_RE = re.compile(r"^on[A-Za-z][A-Za-z]*$")
_DASH_RE = re.compile(r"-([a-z])")


def is_event_attribute(name: str) -> bool:
    """Match ``onClick``-style and lowercase ``onclick``-style handler names."""
    return bool(_EVENT_RE.match(name))


def css_to_camel_case(prop: str) -> str:
    """``background-color`` -> ``backgroundColor``; vendor prefixes keep their capital."""
    prop = prop.strip()
    if prop.startswith("--"):
        return prop
    if prop.startswith("-ms-"):
        prop = prop[1:]
    return _DASH_RE.sub(lambda m: m.group(1).upper(), prop.lower())


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline style string into an ordered camelCase map.

    Declarations without a ``:`` or with an empty property/value are skipped.
    """
    styles: dict[str, str] = {}
    if not style or not style.strip():
        return styles
    for declaration in split_declarations(style):
        prop, sep, value = declaration.partition(":")
        prop = prop.strip()
        value = value.strip()
        if not sep or not prop or not value:
            logger.debug("Skipping malformed style declaration: %r", declaration)
            continue
        styles[css_to_camel_case(prop)] = value
    return styles


def split_declarations(style: str) -> list[str]:
    # Split on ';' outside parentheses and quotes, e.g. url(data:image/png;base64,...)
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    buf: list[str] = []
    for ch in style:
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == ";" and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    if buf:
        parts.append("".join(buf))
    return [p for p in parts if p.strip()]


def event_react_name(name: str) -> str:
    """``onclick`` -> ``onClick``; names that are already camelCased pass through."""
    if len(name) > 2 and name[2].isupper():
        return name
    mapped = EVENT_ALIASES.get(name.lower())
    if mapped:
        return mapped
    rest = name[2:]
    return "on" + rest[:1].upper() + rest[1:]


def normalize_attributes(attrs: dict[str, str]) -> NodeAttributes:
    """Normalize raw element attributes (already lower-cased by the HTML parser)."""
    result = NodeAttributes(raw=dict(attrs))
    for name, value in attrs.items():
        value = "" if value is None else str(value)
        lname = name.lower()
        if lname == "class":
            classes = value.split()
            result.class_name = " ".join(classes) if classes else None
        elif lname == "style":
            result.style_text = value
            result.style = parse_style(value)
        elif is_event_attribute(name):
            result.events.append(
                EventHandler(name=name, react_name=event_react_name(name), handler=value)
            )
        elif lname.startswith("data-"):
            result.data[lname] = value
        elif lname.startswith("aria-"):
            result.aria[lname] = value
        elif lname in BOOLEAN_ATTRIBUTES and value.strip().lower() in ("", lname):
            result.html[REACT_ATTRIBUTE_ALIASES.get(lname, lname)] = True
        else:
            result.html[REACT_ATTRIBUTE_ALIASES.get(lname, name)] = value
    return result


__all__ = [
    "BOOLEAN_ATTRIBUTES",
    "EVENT_ALIASES",
    "REACT_ATTRIBUTE_ALIASES",
    "VOID_ELEMENTS",
    "css_to_camel_case",
    "event_react_name",
    "is_event_attribute",
    "normalize_attributes",
    "parse_style",
    "split_declarations",
]

"""Runtime contract: built-in element names, attribute aliases, call targets."""

from __future__ import annotations

from dataclasses import dataclass

# Alias map: convenience attribute name -> canonical prop name
ATTRIBUTE_ALIASES: dict[str, str] = {
    "className": "class",
    "htmlFor": "for",
    "onChange": "oninput",
    "onDoubleClick": "ondblclick",
    "dangerouslySetInnerHTML": "innerHTML",
}


def normalize_attribute_name(name: str) -> str:
    """Resolve an attribute alias to its canonical prop name."""
    return ATTRIBUTE_ALIASES.get(name, name)


# Tags the runtime provides a component constructor for.
ELEMENT_NAMES: frozenset[str] = frozenset(
    """
    a abbr acronym address applet area article aside audio b base basefont bdi
    bdo bgsound big blink blockquote body br button canvas caption center cite
    code col colgroup command content data datalist dd del details dfn dialog
    dir div dl dt element em embed fieldset figcaption figure font footer form
    frame frameset h1 h2 h3 h4 h5 h6 head header hgroup hr html i iframe image
    img input ins isindex kbd keygen label legend li link listing main map mark
    marquee math menu menuitem meta meter multicol nav nextid nobr noembed
    noframes noscript object ol optgroup option output p param picture
    plaintext pre progress q rb rbc rp rt rtc ruby s samp script section select
    shadow slot small source spacer span strike strong style sub summary sup
    svg table tbody td template text textarea tfoot th thead time title tr
    track tt u ul var video wbr xmp
    """.split()
)


@dataclass(frozen=True, slots=True)
class RuntimeNames:
    """Expressions the generated code calls into.

    ``components`` is the namespace holding one constructor per element name
    (including ``text``); ``normalize_children`` turns an interpolated value
    into a list of view nodes; ``merge`` combines props objects left to right.
    """

    components: str = "Moon.view.components"
    normalize_children: str = "Moon.view.normalizeChildren"
    merge: str = "Object.assign"

    @property
    def text(self) -> str:
        return f"{self.components}.text"


DEFAULT_RUNTIME = RuntimeNames()


def resolve_name(name: str, runtime: RuntimeNames = DEFAULT_RUNTIME) -> str:
    """Qualify a built-in element name; other names are used as written."""
    if name in ELEMENT_NAMES:
        return f"{runtime.components}.{name}"
    return name

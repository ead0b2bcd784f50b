"""
DOM support for domScript exercises.

- HostDocument: the page shell preview containers are mounted into
- build_container: isolated container seeded with fixture markup and styles
- confined_lookup: rebinds the host's lookup primitives to a container
- DomBridge: element handles and operations called from the JS prelude
"""

import json
import logging
import re
from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Iterator, Optional

from bs4 import BeautifulSoup, Tag


logger = logging.getLogger(__name__)

MOUNT_ID = "pagelab-mount"
CONTAINER_ID = "pagelab-preview"

PAGE_SHELL = f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style id="pagelab-base">
body {{ font-family: -apple-system, "Segoe UI", Roboto, sans-serif; margin: 0.75em; color: #222; }}
.pagelab-console {{ background: #263238; color: #eceff1; padding: 0.8em 1em; border-radius: 6px;
                    white-space: pre-wrap; font-family: Menlo, Consolas, monospace; font-size: 0.9em; }}
.pagelab-console-empty {{ color: #90a4ae; font-style: italic; }}
.pagelab-error {{ background: #ffebee; color: #b71c1c; border-left: 4px solid #c62828;
                  padding: 0.8em 1em; border-radius: 6px; white-space: pre-wrap;
                  font-family: Menlo, Consolas, monospace; font-size: 0.9em; }}
</style>
</head>
<body>
<main id="{MOUNT_ID}"></main>
</body>
</html>
"""

LOOKUP_PRIMITIVES = (
    "query_selector",
    "query_selector_all",
    "get_element_by_id",
    "get_elements_by_class_name",
    "get_elements_by_tag_name",
)


# -----------------------------------------------------------------------------
# Scoped lookups
# -----------------------------------------------------------------------------

def _query_selector(root: Tag, selector: str) -> Optional[Tag]:
    return root.select_one(selector)


def _query_selector_all(root: Tag, selector: str) -> list[Tag]:
    return root.select(selector)


def _get_element_by_id(root: Tag, element_id: str) -> Optional[Tag]:
    return root.find(id=element_id)


def _get_elements_by_class_name(root: Tag, names: str) -> list[Tag]:
    classes = names.split()
    if not classes:
        return []
    return root.find_all(lambda tag: all(name in (tag.get("class") or []) for name in classes))


def _get_elements_by_tag_name(root: Tag, name: str) -> list[Tag]:
    if name == "*":
        return root.find_all(True)
    return root.find_all(name.lower())


SCOPED_LOOKUPS: dict[str, Callable[..., Any]] = {
    "query_selector": _query_selector,
    "query_selector_all": _query_selector_all,
    "get_element_by_id": _get_element_by_id,
    "get_elements_by_class_name": _get_elements_by_class_name,
    "get_elements_by_tag_name": _get_elements_by_tag_name,
}


class HostDocument:
    """
    Page shell that hosts the preview.

    The lookup primitives search the whole page unless rebound by
    ``confined_lookup``.
    """

    def __init__(self, markup: str = PAGE_SHELL):
        self.soup = BeautifulSoup(markup, "html.parser")
        self.mount = self.soup.find(id=MOUNT_ID) or self.soup.body or self.soup

    def query_selector(self, selector: str) -> Optional[Tag]:
        return _query_selector(self.soup, selector)

    def query_selector_all(self, selector: str) -> list[Tag]:
        return _query_selector_all(self.soup, selector)

    def get_element_by_id(self, element_id: str) -> Optional[Tag]:
        return _get_element_by_id(self.soup, element_id)

    def get_elements_by_class_name(self, names: str) -> list[Tag]:
        return _get_elements_by_class_name(self.soup, names)

    def get_elements_by_tag_name(self, name: str) -> list[Tag]:
        return _get_elements_by_tag_name(self.soup, name)

    def mount_container(self, container: Tag) -> None:
        self.mount.clear()
        self.mount.append(container)

    def render(self) -> str:
        return str(self.soup)


def build_container(
    host: HostDocument,
    preview_markup: Optional[str] = None,
    preview_stylesheet: Optional[str] = None,
) -> Tag:
    """Create an isolated container holding the fixture styles and markup."""
    container = host.soup.new_tag("div", id=CONTAINER_ID)
    if preview_stylesheet:
        style = host.soup.new_tag("style")
        style.string = preview_stylesheet
        container.append(style)
    if preview_markup:
        fragment = BeautifulSoup(preview_markup, "html.parser")
        for child in list(fragment.contents):
            container.append(child.extract())
    return container


@contextmanager
def confined_lookup(host: HostDocument, container: Tag) -> Iterator[HostDocument]:
    """
    Rebind the host's lookup primitives to search only ``container``.

    The original primitives are restored when the block exits, whether it
    finished normally or raised.
    """
    originals = {name: getattr(host, name) for name in LOOKUP_PRIMITIVES}
    for name in LOOKUP_PRIMITIVES:
        setattr(host, name, partial(SCOPED_LOOKUPS[name], container))
    try:
        yield host
    finally:
        for name, original in originals.items():
            setattr(host, name, original)


# -----------------------------------------------------------------------------
# Style helpers
# -----------------------------------------------------------------------------

def css_property_name(name: str) -> str:
    """Convert a CSSOM property (backgroundColor) to CSS syntax (background-color)."""
    if name == "cssFloat":
        return "float"
    if "-" in name:
        return name.lower()
    return re.sub(r"([A-Z])", r"-\1", name).lower()


def parse_style(text: str) -> dict[str, str]:
    declarations: dict[str, str] = {}
    for part in text.split(";"):
        if ":" not in part:
            continue
        prop, value = part.split(":", 1)
        prop = prop.strip().lower()
        if prop:
            declarations[prop] = value.strip()
    return declarations


def format_style(declarations: dict[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in declarations.items())


# -----------------------------------------------------------------------------
# Bridge
# -----------------------------------------------------------------------------

BOOLEAN_ATTRIBUTES = {"hidden", "disabled", "checked"}
ATTRIBUTE_PROPERTIES = {"value", "src", "href", "title", "placeholder", "type", "name", "alt"}
QUERY_PRIMITIVES = {
    "selector": "query_selector",
    "selectorAll": "query_selector_all",
    "id": "get_element_by_id",
    "class": "get_elements_by_class_name",
    "tag": "get_elements_by_tag_name",
}
DOCUMENT = -1


class DomBridge:
    """
    Python side of the JS ``document`` shim.

    Elements cross the boundary as integer handles. ``dispatch`` is the single
    entry point called from the sandbox; it always answers with JSON so that
    errors can be rethrown inside the sandbox as JS exceptions.
    """

    def __init__(self, host: HostDocument, container: Tag):
        self.host = host
        self.container = container
        self._nodes: list[Tag] = []
        self._handles: dict[int, int] = {}
        self._ops: dict[str, Callable[[int, Any, Any], Any]] = {
            "query": self._query,
            "root": lambda handle, first, second: self.handle(self.container),
            "create": self._create,
            "get": self._get,
            "set": self._set,
            "attr_get": self._attr_get,
            "attr_set": self._attr_set,
            "attr_remove": self._attr_remove,
            "attr_has": lambda handle, first, second: self.node(handle).has_attr(str(first)),
            "class_add": self._class_add,
            "class_remove": self._class_remove,
            "class_toggle": self._class_toggle,
            "class_contains": lambda handle, first, second: str(first) in self._classes(self.node(handle)),
            "style_get": self._style_get,
            "style_set": self._style_set,
            "append": self._append,
            "remove": self._remove,
            "insert_html": self._insert_html,
            "children": lambda handle, first, second: [
                self.handle(child) for child in self.node(handle).children if isinstance(child, Tag)
            ],
            "parent": self._parent,
        }

    # Handles ------------------------------------------------------------------

    def handle(self, tag: Optional[Tag]) -> Optional[int]:
        if tag is None:
            return None
        key = id(tag)
        if key not in self._handles:
            self._handles[key] = len(self._nodes)
            self._nodes.append(tag)
        return self._handles[key]

    def node(self, handle: Any) -> Tag:
        if not isinstance(handle, int) or not 0 <= handle < len(self._nodes):
            raise LookupError(f"Unknown element handle: {handle!r}")
        return self._nodes[handle]

    def dispatch(self, op: str, handle: Any, first: Any = None, second: Any = None) -> str:
        """Run one DOM operation and return a JSON reply."""
        operation = self._ops.get(op)
        if operation is None:
            return json.dumps({"error": f"Unsupported DOM operation: {op}"})
        try:
            result = operation(handle, first, second)
        except Exception as e:  # rethrown in the sandbox as a JS Error
            logger.debug(f"DOM operation '{op}' failed: {e}")
            return json.dumps({"error": str(e) or type(e).__name__})
        return json.dumps({"ok": result})

    # Queries ------------------------------------------------------------------

    def _query(self, handle: Any, method: Any, arg: Any) -> Any:
        primitive = QUERY_PRIMITIVES.get(str(method))
        if primitive is None:
            raise ValueError(f"Unsupported lookup: {method}")
        if handle == DOCUMENT:
            found = getattr(self.host, primitive)(str(arg))
        else:
            found = SCOPED_LOOKUPS[primitive](self.node(handle), str(arg))
        if isinstance(found, list):
            return [self.handle(tag) for tag in found]
        return self.handle(found)

    def _create(self, handle: Any, name: Any, second: Any) -> int:
        tag_name = str(name).strip().lower()
        if not re.fullmatch(r"[a-z][a-z0-9-]*", tag_name):
            raise ValueError(f"Invalid tag name: {name}")
        return self.handle(self.host.soup.new_tag(tag_name))

    def _parent(self, handle: Any, first: Any, second: Any) -> Optional[int]:
        tag = self.node(handle)
        if tag is self.container or not isinstance(tag.parent, Tag):
            return None
        return self.handle(tag.parent)

    # Properties ---------------------------------------------------------------

    @staticmethod
    def _classes(tag: Tag) -> list[str]:
        classes = tag.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        return list(classes)

    def _get(self, handle: Any, prop: Any, second: Any) -> Any:
        tag = self.node(handle)
        prop = str(prop)
        if prop in ("textContent", "innerText"):
            return tag.get_text()
        if prop == "innerHTML":
            return tag.decode_contents()
        if prop == "outerHTML":
            return str(tag)
        if prop in ("tagName", "nodeName"):
            return tag.name.upper()
        if prop == "id":
            return tag.get("id", "")
        if prop == "className":
            return " ".join(self._classes(tag))
        if prop == "style":
            return tag.get("style", "")
        if prop in BOOLEAN_ATTRIBUTES:
            return tag.has_attr(prop)
        if prop in ATTRIBUTE_PROPERTIES:
            if prop == "value" and tag.name == "textarea":
                return tag.get_text()
            return tag.get(prop, "")
        raise ValueError(f"Unsupported property: {prop}")

    def _set(self, handle: Any, prop: Any, value: Any) -> None:
        tag = self.node(handle)
        prop = str(prop)
        if prop in ("textContent", "innerText"):
            tag.string = "" if value is None else str(value)
        elif prop == "innerHTML":
            tag.clear()
            fragment = BeautifulSoup("" if value is None else str(value), "html.parser")
            for child in list(fragment.contents):
                tag.append(child.extract())
        elif prop == "id":
            tag["id"] = str(value)
        elif prop == "className":
            tag["class"] = str(value).split()
        elif prop == "style":
            tag["style"] = str(value)
        elif prop in BOOLEAN_ATTRIBUTES:
            if value:
                tag[prop] = ""
            elif tag.has_attr(prop):
                del tag[prop]
        elif prop in ATTRIBUTE_PROPERTIES:
            if prop == "value" and tag.name == "textarea":
                tag.string = str(value)
            else:
                tag[prop] = str(value)
        else:
            raise ValueError(f"Unsupported property: {prop}")

    # Attributes ---------------------------------------------------------------

    def _attr_get(self, handle: Any, name: Any, second: Any) -> Optional[str]:
        tag = self.node(handle)
        name = str(name).lower()
        if not tag.has_attr(name):
            return None
        value = tag[name]
        if isinstance(value, list):
            return " ".join(value)
        return value

    def _attr_set(self, handle: Any, name: Any, value: Any) -> None:
        tag = self.node(handle)
        name = str(name).lower()
        if name == "class":
            tag["class"] = str(value).split()
        else:
            tag[name] = "" if value is None else str(value)

    def _attr_remove(self, handle: Any, name: Any, second: Any) -> None:
        tag = self.node(handle)
        name = str(name).lower()
        if tag.has_attr(name):
            del tag[name]

    # Class list ---------------------------------------------------------------

    def _class_add(self, handle: Any, name: Any, second: Any) -> None:
        tag = self.node(handle)
        classes = self._classes(tag)
        if str(name) not in classes:
            classes.append(str(name))
        tag["class"] = classes

    def _class_remove(self, handle: Any, name: Any, second: Any) -> None:
        tag = self.node(handle)
        classes = [item for item in self._classes(tag) if item != str(name)]
        if classes:
            tag["class"] = classes
        elif tag.has_attr("class"):
            del tag["class"]

    def _class_toggle(self, handle: Any, name: Any, force: Any) -> bool:
        present = str(name) in self._classes(self.node(handle))
        wanted = (not present) if force is None else bool(force)
        if wanted:
            self._class_add(handle, name, None)
        else:
            self._class_remove(handle, name, None)
        return wanted

    # Inline style -------------------------------------------------------------

    def _style_get(self, handle: Any, prop: Any, second: Any) -> str:
        declarations = parse_style(self.node(handle).get("style", ""))
        return declarations.get(css_property_name(str(prop)), "")

    def _style_set(self, handle: Any, prop: Any, value: Any) -> None:
        tag = self.node(handle)
        declarations = parse_style(tag.get("style", ""))
        name = css_property_name(str(prop))
        if value is None or str(value) == "":
            declarations.pop(name, None)
        else:
            declarations[name] = str(value)
        if declarations:
            tag["style"] = format_style(declarations)
        elif tag.has_attr("style"):
            del tag["style"]

    # Tree mutation ------------------------------------------------------------

    def _append(self, handle: Any, child: Any, text: Any) -> None:
        parent = self.node(handle)
        if child is None:
            parent.append(str(text))
            return
        node = self.node(child)
        if node is parent or any(ancestor is node for ancestor in parent.parents):
            raise ValueError("Cannot append an element to itself or its descendant")
        parent.append(node.extract())

    def _remove(self, handle: Any, first: Any, second: Any) -> None:
        tag = self.node(handle)
        if tag is self.container:
            raise ValueError("The preview container cannot be removed")
        tag.extract()

    def _insert_html(self, handle: Any, position: Any, markup: Any) -> None:
        tag = self.node(handle)
        where = str(position).lower()
        nodes = list(BeautifulSoup(str(markup), "html.parser").contents)
        if where == "beforeend":
            for node in nodes:
                tag.append(node.extract())
        elif where == "afterbegin":
            for offset, node in enumerate(nodes):
                tag.insert(offset, node.extract())
        elif where == "beforebegin":
            for node in nodes:
                tag.insert_before(node.extract())
        elif where == "afterend":
            for node in reversed(nodes):
                tag.insert_after(node.extract())
        else:
            raise ValueError(f"Invalid insertAdjacentHTML position: {position}")

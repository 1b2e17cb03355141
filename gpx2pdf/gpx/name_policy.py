"""Waypoint name selection for GPX files.

A waypoint can carry several names: the plain GPX ``<name>`` (often a code
such as ``GC1A2B3``), the Groundspeak cache name and the GSAK "smart name".
Providers are applied in priority order and each one that finds a name
replaces the previous choice.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, Optional

NameProvider = Callable[[ET.Element], Optional[str]]


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def find_child(element: ET.Element, name: str) -> Optional[ET.Element]:
    """First direct child whose local tag name is ``name``."""
    for child in element:
        if local_name(child.tag) == name:
            return child
    return None


def find_descendant(element: ET.Element, name: str) -> Optional[ET.Element]:
    """First descendant (excluding ``element``) whose local tag name is ``name``."""
    for child in element.iter():
        if child is not element and local_name(child.tag) == name:
            return child
    return None


def _nested_text(element: ET.Element, container: str, name: str) -> Optional[str]:
    parent = find_descendant(element, container)
    if parent is None:
        return None
    node = find_child(parent, name)
    if node is None:
        return None
    return node.text or ""


def default_name(wpt: ET.Element) -> Optional[str]:
    """Plain GPX ``<name>``."""
    node = find_child(wpt, "name")
    if node is None:
        return None
    return node.text or ""


def geocache_name(wpt: ET.Element) -> Optional[str]:
    """``<groundspeak:cache><groundspeak:name>``."""
    return _nested_text(wpt, "cache", "name")


def gsak_smart_name(wpt: ET.Element) -> Optional[str]:
    """``<gsak:wptExtension><gsak:SmartName>``."""
    return _nested_text(wpt, "wptExtension", "SmartName")


@dataclass(frozen=True)
class NamePolicy:
    """Which names to prefer and how long a printed name may be.

    Attributes:
        use_geocache_name: Prefer the Groundspeak cache name.
        use_gsak_smart_name: Prefer the GSAK smart name (wins over the cache name).
        max_length: Maximum number of characters, None for no limit.
    """

    use_geocache_name: bool = True
    use_gsak_smart_name: bool = True
    max_length: Optional[int] = 10

    @property
    def providers(self) -> list[NameProvider]:
        """Name providers from lowest to highest priority."""
        providers: list[NameProvider] = [default_name]
        if self.use_geocache_name:
            providers.append(geocache_name)
        if self.use_gsak_smart_name:
            providers.append(gsak_smart_name)
        return providers

    def resolve(self, wpt: ET.Element) -> Optional[str]:
        """Pick the display name for a ``<wpt>`` element.

        Returns:
            The (possibly truncated) name, or None if the waypoint has no
            ``<name>`` element at all.
        """
        if default_name(wpt) is None:
            return None

        name = ""
        for provider in self.providers:
            candidate = provider(wpt)
            if candidate is not None:
                name = candidate

        return self.truncate(name)

    def truncate(self, name: str) -> str:
        if self.max_length is None:
            return name
        return name[: self.max_length]

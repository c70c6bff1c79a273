# =============================================================================
# Web Menu Data
# =============================================================================
# The server can send a tree of links ("web menu") with the login reply when
# the GET_MENU login flag is set. The reply encodes it as numbered menus:
#
#     menu_0_count   = 2
#     menu_0_1_text  = Update Journal
#     menu_0_1_url   = https://www.livejournal.com/update.bml
#     menu_0_2_text  = Your Journal
#     menu_0_2_sub   = 1          <- items for this entry live in menu 1
#     menu_1_count   = ...
#
# Menu 0 is the top level. A text of "-" is a separator. Building an actual
# menu widget out of this is left to the UI layer.
# =============================================================================

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ljkit.errors import ProtocolParseError

SEPARATOR_TEXT = "-"


@dataclass
class MenuItem:
    """
    One entry in the web menu.

    Attributes:
        text: Label to display.
        url: Link target, empty for separators and submenu headers.
        children: Submenu items, empty for plain links.
    """
    text: str
    url: str = ""
    children: list["MenuItem"] = field(default_factory=list)

    @property
    def is_separator(self) -> bool:
        return self.text == SEPARATOR_TEXT

    @property
    def has_submenu(self) -> bool:
        return bool(self.children)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"text": self.text}
        if self.url:
            data["url"] = self.url
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MenuItem":
        return cls(
            text=data.get("text", ""),
            url=data.get("url", ""),
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )


def parse_menu(reply: Mapping[str, Any]) -> list[MenuItem]:
    """
    Parse the web menu out of a login reply.

    Args:
        reply: Flat login reply map.

    Returns:
        Top-level menu items, or an empty list if the reply has no menu.

    Raises:
        ProtocolParseError: If a count or submenu number isn't an integer,
                            or a submenu refers back to one of its parents.
    """
    if "menu_0_count" not in reply:
        return []
    return _parse_submenu(reply, 0, set())


def _parse_submenu(reply: Mapping[str, Any], menu_id: int, parents: set[int]) -> list[MenuItem]:
    if menu_id in parents:
        raise ProtocolParseError(f"Menu {menu_id} contains itself", dict(reply))
    parents = parents | {menu_id}

    raw_count = reply.get(f"menu_{menu_id}_count", 0)
    try:
        count = int(raw_count or 0)
    except (TypeError, ValueError) as e:
        raise ProtocolParseError(f"Invalid menu_{menu_id}_count {raw_count!r}", dict(reply)) from e

    items = []
    for i in range(1, count + 1):
        prefix = f"menu_{menu_id}_{i}"
        item = MenuItem(
            text=str(reply.get(f"{prefix}_text") or ""),
            url=str(reply.get(f"{prefix}_url") or ""),
        )
        sub = reply.get(f"{prefix}_sub")
        if sub not in (None, ""):
            try:
                sub_id = int(sub)
            except (TypeError, ValueError) as e:
                raise ProtocolParseError(f"Invalid {prefix}_sub {sub!r}", dict(reply)) from e
            item.children = _parse_submenu(reply, sub_id, parents)
        items.append(item)
    return items

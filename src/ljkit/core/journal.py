# =============================================================================
# Journal List
# =============================================================================
# The journals an account can post into: its own journal plus any shared
# journals (communities) it has posting access to.
#
# The login reply lists shared journals as numbered fields:
#
#     access_count = 2
#     access_1     = some_community
#     access_2     = another_community
#
# Some servers spell these journal_count / journal_N; both are accepted.
# The account's own journal is always at index 0, whatever order the server
# uses and whether or not it lists the account's own name at all.
# =============================================================================

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ljkit.errors import ProtocolParseError


class JournalType(Enum):
    """Kind of journal."""
    PERSONAL = "personal"       # The account's own journal
    COMMUNITY = "community"     # Shared journal the account may post to


@dataclass(frozen=True)
class Journal:
    """
    A journal the account can post into.

    Attributes:
        name: Journal (user or community) name.
        journal_type: PERSONAL for the account's own journal, COMMUNITY
                      for shared journals.
        is_default: True only for the account's own journal.
    """
    name: str
    journal_type: JournalType = JournalType.COMMUNITY
    is_default: bool = False

    def __str__(self) -> str:
        return self.name


def _count_field(reply: Mapping[str, Any], key: str) -> int:
    raw = reply.get(key, 0)
    try:
        return int(raw or 0)
    except (TypeError, ValueError) as e:
        raise ProtocolParseError(f"Invalid {key} {raw!r}", dict(reply)) from e


class JournalList(Sequence[Journal]):
    """
    Ordered, read-only list of journals. Element 0 is the default journal.

    Usage:
        >>> journals = JournalList.from_login_reply("alice", reply)
        >>> journals.default.name
        'alice'
        >>> journals.named("some_community")
        Journal(name='some_community', ...)
    """

    def __init__(self, username: str, shared: Sequence[str] = ()) -> None:
        """
        Build the list.

        Args:
            username: The account's own journal name (always index 0).
            shared: Names of other journals, in server order. Blanks,
                    duplicates and the account's own name are dropped.
        """
        journals = [Journal(username, JournalType.PERSONAL, is_default=True)]
        seen = {username}
        for name in shared:
            if not name or name in seen:
                continue
            seen.add(name)
            journals.append(Journal(name, JournalType.COMMUNITY))
        self._journals: tuple[Journal, ...] = tuple(journals)

    @classmethod
    def from_login_reply(cls, username: str, reply: Mapping[str, Any]) -> "JournalList":
        """
        Build the list from a login reply.

        Raises:
            ProtocolParseError: If the count field isn't an integer.
        """
        if "access_count" in reply:
            prefix = "access"
        else:
            prefix = "journal"
        count = _count_field(reply, f"{prefix}_count")
        shared = [str(reply.get(f"{prefix}_{i}") or "") for i in range(1, count + 1)]
        return cls(username, shared)

    @property
    def default(self) -> Journal:
        """The account's own journal."""
        return self._journals[0]

    def named(self, name: str) -> Journal | None:
        """Return the journal with the given name, or None."""
        for journal in self._journals:
            if journal.name == name:
                return journal
        return None

    def names(self) -> list[str]:
        return [journal.name for journal in self._journals]

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_list(self) -> list[str]:
        """Serialize as a list of names, own journal first."""
        return self.names()

    @classmethod
    def from_list(cls, names: Sequence[str]) -> "JournalList":
        """Restore a list saved with to_list()."""
        if not names:
            raise ProtocolParseError("A journal list needs at least the default journal")
        return cls(names[0], names[1:])

    # -------------------------------------------------------------------------
    # Sequence protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, index):
        return self._journals[index]

    def __len__(self) -> int:
        return len(self._journals)

    def __iter__(self) -> Iterator[Journal]:
        return iter(self._journals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JournalList):
            return NotImplemented
        return self._journals == other._journals

    def __repr__(self) -> str:
        return f"JournalList({self.names()!r})"

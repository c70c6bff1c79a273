# =============================================================================
# Mood Directory
# =============================================================================
# The set of moods known to the server, mapped to their numeric IDs.
#
# Moods arrive in the login reply as numbered fields:
#
#     mood_count   = 2
#     mood_1_name  = happy
#     mood_1_id    = 1
#     mood_2_name  = sad
#     mood_2_id    = 2
#
# The directory keeps names in ascending ordinal (code point) order so both
# lookup and autocompletion are a binary search. Merging is additive only:
# a name that's already known is never overwritten and an ID that's already
# known never gets a second name. That makes repeated logins cheap, and lets
# a client save the directory between sessions and only download new moods
# (the login request asks for moods above highest_mood_id).
#
# Locale-aware ordering is available for display through
# sorted_for_display(), but is never used for the search invariant.
# =============================================================================

import bisect
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from ljkit.errors import ProtocolParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mood:
    """
    A single mood.

    Attributes:
        name: Mood name as sent by the server (e.g., "happy").
        id: Numeric mood ID used when posting.
    """
    name: str
    id: int


class MoodDirectory:
    """
    Sorted, bidirectional registry of mood names and IDs.

    Usage:
        >>> moods = MoodDirectory()
        >>> moods.merge_from_reply(login_reply)
        2
        >>> moods.id_for_name("happy")
        1
        >>> moods.completion("ha")
        'happy'

    Attributes:
        highest_mood_id: The largest mood ID merged so far (0 when empty).
                         Never decreases.
    """

    def __init__(self, moods: Mapping[int, str] | None = None) -> None:
        """
        Initialize the directory.

        Args:
            moods: Optional initial id -> name mapping.
        """
        # Parallel lists, both ordered by name
        self._names: list[str] = []
        self._ids: list[int] = []
        self.highest_mood_id = 0

        if moods:
            for mood_id, name in moods.items():
                self.add(name, mood_id)

    # -------------------------------------------------------------------------
    # Searching
    # -------------------------------------------------------------------------

    def _index_for_name(self, name: str, hypothetical: bool = False) -> int | None:
        """
        Binary search for a mood name.

        Args:
            name: The name to look for (exact, case-sensitive).
            hypothetical: If True and the name isn't present, return the
                          index the name would have if it were inserted.

        Returns:
            The index, or None if not found and hypothetical is False.
        """
        index = bisect.bisect_left(self._names, name)
        if index < len(self._names) and self._names[index] == name:
            return index
        return index if hypothetical else None

    def id_for_name(self, name: str) -> int | None:
        """Return the ID for a mood name, or None if the name is unknown."""
        index = self._index_for_name(name)
        if index is None:
            return None
        return self._ids[index]

    def name_for_id(self, mood_id: int) -> str | None:
        """Return the name for a mood ID, or None if the ID is unknown."""
        for index, known_id in enumerate(self._ids):
            if known_id == mood_id:
                return self._names[index]
        return None

    def completion(self, prefix: str) -> str | None:
        """
        Autocomplete a partially typed mood name.

        Finds where the prefix would sort and returns the name at that
        position if it starts with the prefix.

        Args:
            prefix: What the user has typed so far.

        Returns:
            The first mood name (in ordinal order) beginning with prefix,
            or None if there isn't one.
        """
        index = self._index_for_name(prefix, hypothetical=True)
        if index is not None and index < len(self._names):
            candidate = self._names[index]
            if candidate.startswith(prefix):
                return candidate
        return None

    @property
    def names(self) -> tuple[str, ...]:
        """All mood names in ascending ordinal order."""
        return tuple(self._names)

    def all_names(self) -> list[str]:
        """All mood names in ascending ordinal order, as a new list."""
        return list(self._names)

    def sorted_for_display(self, key: Callable[[str], Any] | None = None) -> list[str]:
        """
        Mood names ordered for presentation.

        Args:
            key: Sort key, e.g. locale.strxfrm or str.casefold.
                 Defaults to str.casefold.

        Returns:
            A new list of names. The directory itself is unaffected.
        """
        return sorted(self._names, key=key or str.casefold)

    # -------------------------------------------------------------------------
    # Merging
    # -------------------------------------------------------------------------

    def add(self, name: str, mood_id: int | str) -> bool:
        """
        Insert a single mood, keeping the name order intact.

        Empty names or IDs are ignored. A name or ID that's already in the
        directory is left alone.

        Args:
            name: The mood name.
            mood_id: The mood ID, as an int or a decimal string.

        Returns:
            True if the mood was added, False if it was skipped.

        Raises:
            ProtocolParseError: If mood_id is not an integer.
        """
        name = "" if name is None else str(name)
        raw_id = "" if mood_id is None else str(mood_id).strip()
        if not name or not raw_id:
            return False

        try:
            parsed_id = int(raw_id)
        except ValueError as e:
            raise ProtocolParseError(f"Mood {name!r} has a non-numeric ID {raw_id!r}") from e

        index = self._index_for_name(name, hypothetical=True)
        if index < len(self._names) and self._names[index] == name:
            return False
        if parsed_id in self._ids:
            logger.debug(f"Mood ID {parsed_id} already named {self.name_for_id(parsed_id)!r}, skipping {name!r}")
            return False

        self._names.insert(index, name)
        self._ids.insert(index, parsed_id)
        if parsed_id > self.highest_mood_id:
            self.highest_mood_id = parsed_id
        return True

    def merge_from_reply(self, reply: Mapping[str, Any]) -> int:
        """
        Merge the moods listed in a login reply.

        Args:
            reply: Flat reply map with mood_count and mood_N_name/mood_N_id.

        Returns:
            Number of moods that were new.

        Raises:
            ProtocolParseError: If mood_count or an ID isn't an integer.
        """
        raw_count = reply.get("mood_count", 0)
        try:
            count = int(raw_count or 0)
        except (TypeError, ValueError) as e:
            raise ProtocolParseError(f"Invalid mood_count {raw_count!r}", dict(reply)) from e

        added = 0
        for i in range(1, count + 1):
            try:
                if self.add(reply.get(f"mood_{i}_name"), reply.get(f"mood_{i}_id")):
                    added += 1
            except ProtocolParseError as e:
                raise ProtocolParseError(str(e), dict(reply)) from e

        if added:
            logger.info(f"Merged {added} new moods (highest ID now {self.highest_mood_id})")
        return added

    def copy(self) -> "MoodDirectory":
        """Return an independent copy of this directory."""
        clone = MoodDirectory()
        clone._names = list(self._names)
        clone._ids = list(self._ids)
        clone.highest_mood_id = self.highest_mood_id
        return clone

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, str]:
        """Serialize as an id -> name map (string keys, for JSON)."""
        return {str(mood_id): name for name, mood_id in zip(self._names, self._ids)}

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> "MoodDirectory":
        """
        Restore a directory saved with to_dict().

        The sort order is rebuilt from the names; it's never read from disk.
        """
        directory = cls()
        for mood_id, name in data.items():
            directory.add(name, mood_id)
        return directory

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._index_for_name(name) is not None

    def __iter__(self) -> Iterator[Mood]:
        for name, mood_id in zip(self._names, self._ids):
            yield Mood(name=name, id=mood_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoodDirectory):
            return NotImplemented
        return self._names == other._names and self._ids == other._ids

    def __repr__(self) -> str:
        return f"MoodDirectory({len(self)} moods, highest_mood_id={self.highest_mood_id})"

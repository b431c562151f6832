"""Lazily created playback widgets, one per voice or reply."""

from collections.abc import Callable, Iterable
from typing import Protocol


class Player(Protocol):
    def play_pause(self) -> None: ...

    def destroy(self) -> None: ...


PlayerFactory = Callable[[str, str], Player]


class WaveformRegistry:
    """Players keyed by container id.

    A player is created the first time its key is seen. Initializing a key
    again destroys the previous player first.
    """

    def __init__(self, factory: PlayerFactory) -> None:
        self.factory = factory
        self._players: dict[str, Player] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._players

    def __len__(self) -> int:
        return len(self._players)

    def get(self, key: str) -> Player | None:
        return self._players.get(key)

    def ensure(self, key: str, url: str) -> Player:
        """Return the player for ``key``, creating it on first use."""
        player = self._players.get(key)
        if player is None:
            player = self.init(key, url)
        return player

    def init(self, key: str, url: str) -> Player:
        """(Re)create the player for ``key``."""
        previous = self._players.pop(key, None)
        if previous is not None:
            previous.destroy()
        player = self.factory(key, url)
        self._players[key] = player
        return player

    def toggle(self, key: str) -> bool:
        player = self._players.get(key)
        if player is None:
            return False
        player.play_pause()
        return True

    def retain(self, keys: Iterable[str]) -> None:
        """Destroy every player whose key is not in ``keys``."""
        keep = set(keys)
        for key in [k for k in self._players if k not in keep]:
            self._players.pop(key).destroy()

    def clear(self) -> None:
        self.retain(())


class AudioClip:
    """Player that downloads its audio on first play."""

    def __init__(self, fetch: Callable[[str], bytes], url: str) -> None:
        self._fetch = fetch
        self.url = url
        self.data: bytes | None = None
        self.playing = False
        self.destroyed = False

    def play_pause(self) -> None:
        if self.data is None:
            self.data = self._fetch(self.url)
        self.playing = not self.playing

    def destroy(self) -> None:
        self.data = None
        self.playing = False
        self.destroyed = True

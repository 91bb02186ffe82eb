"""Shared playground state: the code/language pair every view can push into."""

from __future__ import annotations

from collections.abc import Callable
from typing import get_args

from .schemas import DEFAULT_CODE, DEFAULT_LANGUAGE, Language, PlaygroundState


Subscriber = Callable[[PlaygroundState], None]


def _check_language(language: str) -> Language:
    if language not in get_args(Language):
        raise ValueError(f"Unsupported language: {language}")
    return language  # type: ignore[return-value]


class PlaygroundStore:
    """Injectable holder of the current ``PlaygroundState``.

    The state object is immutable and replaced whole on every mutation, so a
    reader always sees a consistent code/language pair.
    """

    def __init__(self, default_code: str = DEFAULT_CODE) -> None:
        self.default_code: str = default_code
        self._state: PlaygroundState = PlaygroundState(code=default_code, language=DEFAULT_LANGUAGE)
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> PlaygroundState:
        return self._state

    @property
    def code(self) -> str:
        return self._state.code

    @property
    def language(self) -> Language:
        return self._state.language

    def set_code(self, code: str) -> None:
        self._replace(self._state.model_copy(update={"code": code}))

    def set_language(self, language: str) -> None:
        checked = _check_language(language)
        self._replace(self._state.model_copy(update={"language": checked}))

    def load(self, code: str, language: str) -> None:
        self._replace(PlaygroundState(code=code, language=_check_language(language)))

    def load_starter_code(self, code: str) -> None:
        self.load(code, "javascript")

    def reset(self) -> None:
        self.load(self.default_code, DEFAULT_LANGUAGE)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _replace(self, state: PlaygroundState) -> None:
        self._state = state
        for callback in list(self._subscribers):
            callback(state)

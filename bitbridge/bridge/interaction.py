"""Blocking menu loop, parked between actions until all replies are in."""

from __future__ import annotations

import threading
from typing import Callable, Sequence

from loguru import logger

from bitbridge.bridge.actions import Action
from bitbridge.bridge.resume import ResumeSignal

PromptSelect = Callable[[Sequence[str]], str]


class InteractionDriver:
    """Runs the prompt loop on its own daemon thread.

    After each action it waits on the resume signal; Quit ends the loop at once
    without waiting for outstanding replies. Prompts are serialized across
    drivers so a driver left over from a closed connection and the driver of
    the next one never read the terminal at the same time. An answer typed into
    a prompt whose connection has since closed is handed to the driver of the
    live connection, which uses it instead of prompting again.
    """

    _prompt_lock = threading.Lock()
    _handoff_lock = threading.Lock()
    _current: InteractionDriver | None = None

    def __init__(
        self,
        *,
        prompt_select: PromptSelect,
        submit: Callable[[Action], bool],
        resume: ResumeSignal,
        options: Sequence[str] | None = None,
    ):
        self.prompt_select = prompt_select
        self.submit = submit
        self.resume = resume
        self.options = list(options or Action.labels())
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None
        self._adopted: str | None = None

    @classmethod
    def current(cls) -> InteractionDriver | None:
        """The driver of the most recently started prompt loop, while it runs."""
        with cls._handoff_lock:
            return cls._current

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self.run, name="bitbridge-interaction", daemon=True)
        self._thread.start()
        logger.debug("Interaction driver started")

    def stop(self) -> None:
        self._stopped.set()
        self.resume.close()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _finished(self) -> bool:
        return self._stopped.is_set() or self.resume.closed

    def _hand_over(self, label: str) -> bool:
        """Give an answer to the live driver; False when there is none."""
        with self._handoff_lock:
            target = InteractionDriver._current
            if target is None or target is self or target._finished():
                return False
            target._adopted = label
            return True

    def _take_adopted(self) -> str | None:
        with self._handoff_lock:
            label, self._adopted = self._adopted, None
            return label

    def _prompt(self) -> str:
        try:
            return self.prompt_select(self.options)
        except (KeyboardInterrupt, EOFError):
            return Action.QUIT.value

    def run(self) -> None:
        with self._handoff_lock:
            InteractionDriver._current = self
        try:
            self._loop()
        finally:
            with self._handoff_lock:
                if InteractionDriver._current is self:
                    InteractionDriver._current = None
            logger.debug("Interaction driver stopped")

    def _loop(self) -> None:
        while not self._finished():
            with self._prompt_lock:
                if self._finished():
                    break
                label = self._take_adopted()
                if label is None:
                    label = self._prompt()
                    # Hand over while still holding the prompt lock so the
                    # next driver sees the answer before it prompts.
                    if self._finished():
                        if self._hand_over(label):
                            logger.info(f"Passing '{label}' on to the new connection")
                        else:
                            logger.info(f"Ignoring '{label}': the remote host disconnected")
                        break

            try:
                action = Action.from_label(label)
            except ValueError as e:
                logger.warning(str(e))
                continue

            self.resume.arm()
            if not self.submit(action):
                break
            if action is Action.QUIT:
                break
            self.resume.wait()

# tts.py
# Single-slot speech output on the asyncio loop.
# pyttsx3 runs in a child interpreter so the loop never blocks and an
# utterance can be cut off by terminating the child.

import asyncio
import logging
import sys
from collections import deque
from typing import Awaitable, Callable, Deque, Optional

logger = logging.getLogger(__name__)


async def pyttsx3_utter(text: str, rate: int = 150, volume: float = 1.0) -> None:
    """Speak text with pyttsx3 in a subprocess; cancelling terminates it."""
    script = (
        "import pyttsx3\n"
        "engine = pyttsx3.init()\n"
        f"engine.setProperty('rate', {int(rate)})\n"
        f"engine.setProperty('volume', {float(volume)})\n"
        f"engine.say({text!r})\n"
        "engine.runAndWait()"
    )
    process = await asyncio.create_subprocess_exec(sys.executable, "-c", script)
    try:
        returncode = await process.wait()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.terminate()
            await process.wait()
        raise
    if returncode != 0:
        logger.error(f"TTS process exited with code {returncode} for {text!r}")


class VoiceAnnouncer:
    """
    speak(text, priority) sink with one active utterance at a time.

    A priority utterance interrupts whatever is playing and drops anything
    queued; a normal utterance waits for the slot to become free.

    Args:
        utter:  Coroutine function speaking one text; defaults to pyttsx3.
        rate:   Words per minute for the default backend.
        volume: 0.0 - 1.0 for the default backend.
    """

    def __init__(
        self,
        utter: Optional[Callable[[str], Awaitable[None]]] = None,
        rate: int = 150,
        volume: float = 1.0,
    ) -> None:
        self._utter = utter or (lambda text: pyttsx3_utter(text, rate, volume))
        self._pending: Deque[str] = deque()
        self._current: Optional[asyncio.Task] = None

    @property
    def is_speaking(self) -> bool:
        return self._current is not None and not self._current.done()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def speak(self, text: str, priority: bool = False) -> None:
        """Queue or interrupt; must be called from within the running loop."""
        text = (text or "").strip()
        if not text:
            return

        if priority:
            self._pending.clear()
            self._cancel_current()
            self._start(text)
        elif self.is_speaking:
            self._pending.append(text)
        else:
            self._start(text)

    def stop(self) -> None:
        """Silence immediately and forget queued utterances."""
        self._pending.clear()
        self._cancel_current()

    async def wait_idle(self) -> None:
        """Wait until nothing is playing or queued."""
        while self.is_speaking:
            await asyncio.wait({self._current})

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cancel_current(self) -> None:
        if self.is_speaking:
            self._current.cancel()
        self._current = None

    def _start(self, text: str) -> None:
        self._current = asyncio.get_running_loop().create_task(self._run(text))

    async def _run(self, text: str) -> None:
        logger.debug(f"Speaking: {text}")
        try:
            await self._utter(text)
        except asyncio.CancelledError:
            logger.debug(f"Interrupted: {text}")
            raise
        except OSError as e:
            logger.error(f"TTS error: {e}")
        finally:
            if self._current is asyncio.current_task():
                self._current = None
                if self._pending:
                    self._start(self._pending.popleft())

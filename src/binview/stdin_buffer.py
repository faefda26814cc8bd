"""StdinBuffer reassembles key sequences from raw terminal reads.

A single ``read`` on the tty can return half an escape sequence (``ESC [``
now, ``A`` a moment later) or several keys at once. Without buffering, a
partial arrow key would be taken for an ESC keypress followed by ordinary
characters.

The buffer is synchronous: the owner feeds it chunks with :meth:`process`,
takes keys with :meth:`pop`, and calls :meth:`flush` once no more data
arrived within its key timeout.
"""

from __future__ import annotations

from collections import deque

ESC = "\x1b"

# CSI final bytes: "@" through "~"
_CSI_FINAL = range(0x40, 0x7F)


def _sequence_length(data: str) -> int | None:
    """Return the length of the key sequence at the start of *data*.

    ``None`` means *data* holds only the beginning of an escape sequence.
    """
    if not data.startswith(ESC):
        return 1
    if len(data) == 1:
        return None

    introducer = data[1]
    if introducer == "[":
        for end in range(2, len(data)):
            if ord(data[end]) in _CSI_FINAL:
                return end + 1
        return None
    if introducer == "O":
        # SS3 carries exactly one more character
        return 3 if len(data) >= 3 else None
    # meta: ESC plus one character
    return 2


def split_sequences(data: str) -> tuple[list[str], str]:
    """Split *data* into complete key sequences and an unfinished tail."""
    sequences: list[str] = []
    while data:
        length = _sequence_length(data)
        if length is None:
            break
        sequences.append(data[:length])
        data = data[length:]
    return sequences, data


class StdinBuffer:
    """Queue of complete key sequences plus the partial one being assembled."""

    def __init__(self) -> None:
        self._partial = ""
        self._ready: deque[str] = deque()

    def process(self, data: str) -> None:
        """Append decoded input and queue every sequence it completes."""
        sequences, self._partial = split_sequences(self._partial + data)
        self._ready.extend(sequences)

    def pop(self) -> str | None:
        """Return the oldest complete sequence, or ``None`` if there is none."""
        return self._ready.popleft() if self._ready else None

    def flush(self) -> None:
        """Give up waiting and queue the partial sequence as-is."""
        if self._partial:
            self._ready.append(self._partial)
            self._partial = ""

    @property
    def pending(self) -> bool:
        """``True`` while an incomplete sequence is waiting for more data."""
        return bool(self._partial)

    @property
    def partial(self) -> str:
        return self._partial

    def clear(self) -> None:
        self._partial = ""
        self._ready.clear()

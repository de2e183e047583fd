"""
Application number allocator

Format: <prefix><letter><counter>
Example: UNILAG-CL-K000001

The counter is a 6 digit zero-padded decimal. The letter depends on the
scheme:

- ``mode_letter``: K for kg/m3 submissions, R for ratio submissions
- ``rolling_letter``: A-Z, advanced every time the counter rolls over
- ``none``: no letter, e.g. UNILAG-CL-000001

This module only computes identifiers. Reading the last stored value and
persisting the new one is done by the caller (see record_counter).
"""

import re
import string
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from mixintake.config.constants import DEFAULT_INPUT_MODE, MODE_LETTERS, InputMode, resolve_input_mode

DEFAULT_PREFIX = "UNILAG-CL-"
SCHEMES = ("mode_letter", "rolling_letter", "none")

ModeTag = Union[InputMode, str]


@dataclass(frozen=True)
class ParsedRecordId:
    prefix: str
    letter: Optional[str]
    counter: int


class RecordIdAllocator:
    """
    Computes the successor of the last application number.

    >>> allocator = RecordIdAllocator()
    >>> allocator.next(None, InputMode.KGM3)
    'UNILAG-CL-K000001'
    >>> allocator.next("UNILAG-CL-K000041", InputMode.KGM3)
    'UNILAG-CL-K000042'
    >>> allocator.next("UNILAG-CL-K999999", InputMode.KGM3)
    'UNILAG-CL-K000001'

    A last value that does not match the active grammar is treated as
    absent, so the sequence restarts at 000001 instead of failing:

    >>> allocator.next("OTHER-LAB-K000007", InputMode.KGM3)
    'UNILAG-CL-K000001'
    """

    COUNTER_WIDTH = 6
    MAX_COUNTER = 10 ** COUNTER_WIDTH - 1
    ALPHABET = string.ascii_uppercase

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        scheme: str = "mode_letter",
        mode_letters: Optional[Dict[InputMode, str]] = None,
    ):
        if not prefix:
            raise ValueError("prefix must be a non-empty string")
        if scheme not in SCHEMES:
            raise ValueError(f"Unknown record id scheme: {scheme!r}, expected one of {SCHEMES}")

        self.prefix = prefix
        self.scheme = scheme
        self.mode_letters = dict(mode_letters or MODE_LETTERS)

        letter_group = "" if scheme == "none" else f"([{self.ALPHABET}])"
        self._pattern = re.compile(
            rf"{re.escape(prefix)}{letter_group}([0-9]{{{self.COUNTER_WIDTH}}})"
        )

    @property
    def shares_sequence(self) -> bool:
        """
        True when kg/m3 and ratio numbers are drawn from one sequence.

        Only ``mode_letter`` tells the modes apart inside the identifier;
        the other schemes continue from the latest number of either
        main table.
        """
        return self.scheme != "mode_letter"

    def _mode(self, mode: Optional[ModeTag]) -> InputMode:
        resolved = resolve_input_mode(mode)
        if resolved is None:
            raise ValueError(f"Unknown input mode: {mode!r}")
        return resolved

    def _first_letter(self, mode: InputMode) -> Optional[str]:
        if self.scheme == "mode_letter":
            return self.mode_letters[mode]
        if self.scheme == "rolling_letter":
            return self.ALPHABET[0]
        return None

    def format(self, counter: int, letter: Optional[str] = None) -> str:
        """Render an identifier from its parts."""
        if not 0 <= counter <= self.MAX_COUNTER:
            raise ValueError(f"counter out of range: {counter}")
        return f"{self.prefix}{letter or ''}{counter:0{self.COUNTER_WIDTH}d}"

    def first(self, mode: Optional[ModeTag] = DEFAULT_INPUT_MODE) -> str:
        """First identifier of the sequence, e.g. ``UNILAG-CL-R000001``."""
        return self.format(1, self._first_letter(self._mode(mode)))

    def parse(self, record_id: Optional[str], mode: Optional[ModeTag] = DEFAULT_INPUT_MODE) -> Optional[ParsedRecordId]:
        """
        Split an identifier into prefix, letter and counter.

        Returns None when ``record_id`` is not a string of the active
        grammar. Under ``mode_letter`` the letter must be the one of
        ``mode``.
        """
        if not isinstance(record_id, str):
            return None

        match = self._pattern.fullmatch(record_id.strip())
        if not match:
            return None

        if self.scheme == "none":
            return ParsedRecordId(self.prefix, None, int(match.group(1)))

        letter, digits = match.group(1), match.group(2)
        if self.scheme == "mode_letter" and letter != self.mode_letters[self._mode(mode)]:
            return None
        return ParsedRecordId(self.prefix, letter, int(digits))

    def next(self, last_id: Optional[str], mode: Optional[ModeTag] = DEFAULT_INPUT_MODE) -> str:
        """
        Successor of ``last_id``.

        Counter 999999 rolls back to 000001. Under ``rolling_letter`` the
        letter advances at the same time, Z wrapping to A.
        """
        parsed = self.parse(last_id, mode)
        if parsed is None:
            return self.first(mode)

        counter = parsed.counter + 1
        letter = parsed.letter
        if counter > self.MAX_COUNTER:
            counter = 1
            if self.scheme == "rolling_letter":
                position = self.ALPHABET.index(letter)
                letter = self.ALPHABET[(position + 1) % len(self.ALPHABET)]

        return self.format(counter, letter)

    def position(self, record_id: Optional[str], mode: Optional[ModeTag] = DEFAULT_INPUT_MODE) -> Optional[int]:
        """
        Ordinal of ``record_id`` in the sequence, None when malformed.

        >>> RecordIdAllocator(scheme="rolling_letter").position("UNILAG-CL-B000002")
        1000000
        """
        parsed = self.parse(record_id, mode)
        if parsed is None:
            return None
        if self.scheme == "rolling_letter":
            return self.ALPHABET.index(parsed.letter) * self.MAX_COUNTER + parsed.counter - 1
        return parsed.counter - 1

    def wraps(self, last_id: Optional[str], mode: Optional[ModeTag] = DEFAULT_INPUT_MODE) -> bool:
        """True when the successor of ``last_id`` is the first number of the sequence again."""
        parsed = self.parse(last_id, mode)
        if parsed is None or parsed.counter != self.MAX_COUNTER:
            return False
        return self.scheme != "rolling_letter" or parsed.letter == self.ALPHABET[-1]

    def validate(self, record_id: str, mode: Optional[ModeTag] = DEFAULT_INPUT_MODE) -> Tuple[bool, Optional[str]]:
        """
        Check ``record_id`` against the active grammar.

        Returns (is_valid, error_message).
        """
        if self.parse(record_id, mode) is not None:
            return (True, None)
        return (False, f"Invalid application number, expected e.g. {self.first(mode)}: {record_id!r}")


def build_allocator(settings) -> RecordIdAllocator:
    """Allocator configured from application settings."""
    return RecordIdAllocator(prefix=settings.record_id_prefix, scheme=settings.record_id_scheme)


# Default instance
record_id_allocator = RecordIdAllocator()


def next_record_id(last_id: Optional[str], mode: ModeTag = DEFAULT_INPUT_MODE) -> str:
    """
    Shortcut: successor of ``last_id`` with the default scheme.

    >>> next_record_id("UNILAG-CL-R000009", "ratio")
    'UNILAG-CL-R000010'
    """
    return record_id_allocator.next(last_id, mode)

import re
from typing import Optional

_INTEGER = re.compile(r"[+-]?[0-9]+")


class NumberValidator:
    """Parses the ids and years typed at the interactive menu.

    Returns None instead of raising so the menu can print a friendly message.
    """

    @staticmethod
    def parse_int(raw: Optional[str]) -> Optional[int]:
        if raw is None:
            return None
        s = raw.strip()
        if not _INTEGER.fullmatch(s):
            return None
        return int(s)

    @staticmethod
    def parse_year(raw: Optional[str]) -> Optional[int]:
        return NumberValidator.parse_int(raw)

    @staticmethod
    def parse_book_id(raw: Optional[str]) -> Optional[int]:
        # any integer is accepted; unknown ids are reported by the library
        return NumberValidator.parse_int(raw)

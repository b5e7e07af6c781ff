from typing import Optional

from lms.errors import InvalidInput


class IdValidator:
    """Parses ids typed by the user into integers."""

    @staticmethod
    def parse_id(raw: Optional[str], label: str = "ID") -> int:
        if raw is None:
            raise InvalidInput(f"Invalid {label}")
        s = str(raw).strip()
        # ids are unsigned; reject signs and anything non-numeric
        if not (s.isascii() and s.isdigit()):
            raise InvalidInput(f"Invalid {label}")
        return int(s)


class TextValidator:
    """Basic cleanup for member names."""

    @staticmethod
    def clean_name(text: Optional[str]) -> Optional[str]:
        if text is None:
            return None
        t = " ".join(text.split())
        return t or None

import re
from collections.abc import Callable
from datetime import date

from resolution_worker.logging.logger import Log

DEFAULT_PROGRAM_CODE = "C022"
MIN_YEAR = 2000


def identifier_pattern(program_code: str = DEFAULT_PROGRAM_CODE) -> str:
    """Regex source for one case code: YYYY/<program code>/NNNNNNNN."""
    return rf"\d{{4}}/{re.escape(program_code.upper())}/\d{{8}}"


def is_valid_identifier(
    code: str,
    current_year: int,
    program_code: str = DEFAULT_PROGRAM_CODE,
) -> bool:
    """Check full syntax and that the year lies in [2000, current_year]."""
    if re.fullmatch(identifier_pattern(program_code), code) is None:
        return False
    year = int(code[:4])
    return MIN_YEAR <= year <= current_year


class IdentifierExtractor:
    """Pulls case codes out of normalized resolution text.

    Table rows (code, date, amount) take priority. The bare code pattern is
    only used when no table row matched at all.
    """

    def __init__(
        self,
        program_code: str = DEFAULT_PROGRAM_CODE,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._program_code = program_code.upper()
        self._clock = clock
        # Unanchored: text layers often glue a row number onto the code.
        code = rf"({identifier_pattern(self._program_code)})"
        self._bare = re.compile(code)
        self._table_row = re.compile(
            code + r"\s+(\d{2}/\d{2}/\d{4})\s+[\d.,]+\s*(?:€|EUR)"
        )

    def extract(self, text: str) -> set[str]:
        # Table rows win even when none of them validates; the bare pattern
        # is a fallback for documents without an amounts table, not for
        # tables whose codes are all out of range.
        candidates = [match.group(1) for match in self._table_row.finditer(text)]
        if candidates:
            Log.debug(f"Found {len(candidates)} case codes in table rows")
        else:
            candidates = [match.group(1) for match in self._bare.finditer(text)]
            Log.debug(
                f"No table rows found, {len(candidates)} bare case codes as fallback"
            )

        current_year = self._clock().year
        identifiers = {
            code
            for code in candidates
            if is_valid_identifier(code, current_year, self._program_code)
        }
        Log.debug(f"{len(identifiers)} unique valid case codes")
        return identifiers

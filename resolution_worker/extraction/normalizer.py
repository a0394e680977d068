import re

from resolution_worker.logging.logger import Log

_ANNEX_SECTION = re.compile(r"ANEXO.*?EXPEDIENTES.*?(?=ANEXO|\Z)", re.IGNORECASE | re.DOTALL)
_WHITESPACE = re.compile(r"\s+")
# Signature footers repeat on every page and carry digit runs that look like case codes.
_VERIFICATION_SIGNATURE = re.compile(
    r"C[ÓO]DIGO SEGURO DE VERIFICACI[ÓO]N.*?P[ÁA]GINA\s*\d+\s*/\s*\d+"
)


def isolate_annex(text: str) -> str:
    """Return the case annex section when present, otherwise the whole text."""
    match = _ANNEX_SECTION.search(text)
    if match is None:
        Log.debug("No case annex found, searching the whole text")
        return text
    Log.debug(f"Case annex found ({len(match.group(0))} chars)")
    return match.group(0)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def strip_verification_signatures(text: str) -> str:
    return collapse_whitespace(_VERIFICATION_SIGNATURE.sub(" ", text))


def normalize_text(text: str, isolate: bool = True) -> str:
    """Produce the upper-cased, single-spaced text that classification and
    identifier extraction run against.

    Steps: isolate the case annex (unless ``isolate`` is False), collapse
    whitespace, upper-case, then drop verification-signature blocks.
    """
    section = isolate_annex(text) if isolate else text
    normalized = collapse_whitespace(section).upper()
    return strip_verification_signatures(normalized)

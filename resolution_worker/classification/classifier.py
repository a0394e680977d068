"""Keyword cascade that labels a resolution document by its type."""

from resolution_worker.classification.models import ResolutionType
from resolution_worker.logging.logger import Log

WITHDRAWAL_KEYWORDS = ("DESISTIMIENTO", "DESISTIDO", "RENUNCIA A LA SOLICITUD")
EXPRESS_WITHDRAWAL_KEYWORDS = ("DESISTIMIENTO EXPRESO", "RENUNCIA A LA SOLICITUD")
INADMISSION_KEYWORDS = ("INADMISIÓN", "INADMISION", "INADMITIDO", "INADMITIDA")
CONCESSION_KEYWORDS = ("CONCESIÓN", "CONCESION")


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


class ResolutionClassifier:
    """Ordered cascade: withdrawal, then inadmission, then concession.

    The first family found wins, so a withdrawal that cites an earlier
    concession is still a withdrawal. Express withdrawals are folded into
    WITHDRAWAL unless ``distinguish_express_withdrawal`` is set.
    """

    def __init__(self, distinguish_express_withdrawal: bool = False) -> None:
        self._distinguish_express = distinguish_express_withdrawal

    def classify(self, text: str) -> ResolutionType:
        upper = text.upper()
        if _contains_any(upper, WITHDRAWAL_KEYWORDS):
            if self._distinguish_express and _contains_any(upper, EXPRESS_WITHDRAWAL_KEYWORDS):
                resolution_type = ResolutionType.EXPRESS_WITHDRAWAL
            else:
                resolution_type = ResolutionType.WITHDRAWAL
        elif _contains_any(upper, INADMISSION_KEYWORDS):
            resolution_type = ResolutionType.INADMISSION
        elif _contains_any(upper, CONCESSION_KEYWORDS):
            resolution_type = ResolutionType.CONCESSION
        else:
            Log.debug("No resolution keyword found")
            return ResolutionType.UNRESOLVED
        Log.debug(f"Resolution type determined: {resolution_type.name}")
        return resolution_type

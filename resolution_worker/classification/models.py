from enum import Enum


class ResolutionType(str, Enum):
    """Resolution categories. Values are the labels stored in tipo_resolucion."""

    CONCESSION = "concesion"
    WITHDRAWAL = "desistimiento"
    EXPRESS_WITHDRAWAL = "desistimiento_expreso"
    INADMISSION = "inadmision"
    UNRESOLVED = "unresolved"

    @property
    def folder_name(self) -> str:
        """Archive folder holding documents of this type."""
        folder = _FOLDER_NAMES.get(self)
        if folder is None:
            raise ValueError(f"{self.name} documents are never archived")
        return folder

    @classmethod
    def resolved(cls) -> list["ResolutionType"]:
        return [member for member in cls if member is not cls.UNRESOLVED]


_FOLDER_NAMES: dict[ResolutionType, str] = {
    ResolutionType.CONCESSION: "Resoluciones de Concesión",
    ResolutionType.WITHDRAWAL: "Resoluciones de Desistimiento",
    ResolutionType.EXPRESS_WITHDRAWAL: "Resoluciones de Desistimiento Expreso",
    ResolutionType.INADMISSION: "Resoluciones de Inadmisión",
}

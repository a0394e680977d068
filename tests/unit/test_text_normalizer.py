from resolution_worker.extraction.normalizer import (
    collapse_whitespace,
    isolate_annex,
    normalize_text,
    strip_verification_signatures,
)


class TestIsolateAnnex:
    def test_returns_annex_section_only(self) -> None:
        text = (
            "Resolución de concesión 2020/C022/11111111\n"
            "Anexo I. Relación de expedientes\n2024/C022/00000001\n"
        )
        section = isolate_annex(text)
        assert section.startswith("Anexo I")
        assert "11111111" not in section
        assert "2024/C022/00000001" in section

    def test_stops_at_next_annex(self) -> None:
        text = "ANEXO I EXPEDIENTES 2024/C022/00000001 ANEXO II RECURSOS 2024/C022/00000002"
        section = isolate_annex(text)
        assert "00000001" in section
        assert "00000002" not in section

    def test_returns_full_text_without_annex(self) -> None:
        text = "Resolución sin anexos 2024/C022/00000001"
        assert isolate_annex(text) == text

    def test_annex_without_cases_marker_is_ignored(self) -> None:
        text = "ANEXO I. Normativa aplicable"
        assert isolate_annex(text) == text


class TestCollapseWhitespace:
    def test_collapses_line_breaks_and_runs(self) -> None:
        assert collapse_whitespace("  a\n\n b\t\tc  ") == "a b c"


class TestStripVerificationSignatures:
    def test_removes_signature_block(self) -> None:
        text = (
            "2024/C022/00000001 CÓDIGO SEGURO DE VERIFICACIÓN 2023123456789 "
            "FIRMADO POR X PÁGINA 1/3 2024/C022/00000002"
        )
        assert strip_verification_signatures(text) == "2024/C022/00000001 2024/C022/00000002"

    def test_removes_every_signature_block(self) -> None:
        text = (
            "A CODIGO SEGURO DE VERIFICACION 1 PAGINA1/2 B "
            "CÓDIGO SEGURO DE VERIFICACIÓN 2 PÁGINA 2 / 2 C"
        )
        assert strip_verification_signatures(text) == "A B C"

    def test_leaves_text_without_signature(self) -> None:
        assert strip_verification_signatures("SIN FIRMA") == "SIN FIRMA"


class TestNormalizeText:
    def test_full_pipeline(self) -> None:
        text = (
            "Resolución de concesión\nVisto el expediente 2021/C022/99999999\n"
            "Anexo: relación de expedientes\n"
            "2024/C022/00000123   01/01/2024\n500,00€\n"
            "Código seguro de verificación 2024/C022/88888888 página 1/2\n"
        )
        assert normalize_text(text) == (
            "ANEXO: RELACIÓN DE EXPEDIENTES 2024/C022/00000123 01/01/2024 500,00€"
        )

    def test_without_isolation_keeps_introduction(self) -> None:
        text = "Resolución de concesión\nAnexo expedientes\n2024/C022/00000123"
        assert normalize_text(text, isolate=False) == (
            "RESOLUCIÓN DE CONCESIÓN ANEXO EXPEDIENTES 2024/C022/00000123"
        )

    def test_empty_text(self) -> None:
        assert normalize_text("") == ""

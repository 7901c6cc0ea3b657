"""
One-shot exports of an event's registrations as PDF, XLSX or CSV.

Form answers take precedence over the registrant's profile for name,
phone and city; email always comes from the profile.
"""
import csv
import io
import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.orm import Session

from rcc_portal.models.registrations import Registration
from rcc_portal.services.errors import NotFoundError
from rcc_portal.services.events import get_event
from rcc_portal.services.registrations import list_event_registrations

logger = logging.getLogger(__name__)

HEADERS = [
    "Nome",
    "Email",
    "Telefone",
    "Cidade",
    "Idade",
    "Tel. Resp.",
    "G. Oração",
    "Pouso",
    "Confirmado",
    "Presente",
    "Data Inscrição",
]

HEADER_GREEN = "#16a34a"
STRIPE_GRAY = "#f0f0f0"
A4_PORTRAIT_INCHES = (8.27, 11.69)
ROWS_PER_PAGE = 35
MAX_CELL_CHARS = 24

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv; charset=utf-8",
}


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def content_disposition(self) -> str:
        """Attachment header with an ASCII fallback name and the UTF-8 name (RFC 6266)."""
        fallback = unicodedata.normalize("NFKD", self.filename).encode("ascii", "ignore").decode("ascii")
        fallback = re.sub(r'["\\]', "", fallback)
        encoded = quote(self.filename, safe="")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _yes_no(value: Any) -> str:
    return "Sim" if value else "Não"


def registration_row(registration: Registration) -> list[str]:
    profile = registration.profile
    form = registration.dados_formulario or {}
    idade = form.get("idade")
    return [
        form.get("nome") or (profile.nome if profile else "") or "",
        (profile.email if profile else "") or "",
        form.get("telefone") or (profile.telefone if profile else "") or "",
        form.get("cidade") or (profile.endereco if profile else "") or "",
        "" if idade is None else str(idade),
        form.get("telefone_responsavel") or "",
        form.get("grupo_oracao") or "",
        _yes_no(form.get("precisa_pouso")),
        _yes_no(registration.confirmado),
        _yes_no(registration.presente),
        registration.created_at.strftime("%d/%m/%Y") if registration.created_at else "",
    ]


def export_filename(event_name: str, extension: str) -> str:
    slug = re.sub(r"\s", "_", event_name)
    return f"inscricoes-{slug}.{extension}"


def _truncate(value: str) -> str:
    return value if len(value) <= MAX_CELL_CHARS else value[: MAX_CELL_CHARS - 1] + "…"


def render_pdf(event_name: str, rows: list[list[str]]) -> bytes:
    chunks = [rows[i : i + ROWS_PER_PAGE] for i in range(0, len(rows), ROWS_PER_PAGE)] or [[]]
    page_count = len(chunks)
    output = io.BytesIO()

    with PdfPages(output) as pdf:
        for page_number, chunk in enumerate(chunks, start=1):
            fig = Figure(figsize=A4_PORTRAIT_INCHES)
            if page_number == 1:
                fig.text(0.06, 0.96, f"Inscrições para o Evento: {event_name}", fontsize=14, weight="bold")
                fig.text(0.06, 0.935, f"Total de Inscrições: {len(rows)}", fontsize=8)
            ax = fig.add_axes([0.04, 0.06, 0.92, 0.86])
            ax.axis("off")
            table = ax.table(
                cellText=[[_truncate(cell) for cell in row] for row in chunk] or [[""] * len(HEADERS)],
                colLabels=HEADERS,
                loc="upper center",
                cellLoc="left",
            )
            table.auto_set_font_size(False)
            table.set_fontsize(5.5)
            table.scale(1, 1.4)
            for (row_index, _), cell in table.get_celld().items():
                cell.set_linewidth(0.2)
                if row_index == 0:
                    cell.set_facecolor(HEADER_GREEN)
                    cell.get_text().set_color("white")
                    cell.get_text().set_weight("bold")
                elif row_index % 2 == 0:
                    cell.set_facecolor(STRIPE_GRAY)
            fig.text(0.94, 0.025, f"Página {page_number} de {page_count}", fontsize=7, ha="right")
            pdf.savefig(fig)

    return output.getvalue()


def render_xlsx(event_name: str, rows: list[list[str]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Inscrições"
    ws.append(HEADERS)

    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill("solid", fgColor=HEADER_GREEN.lstrip("#"))
        cell.alignment = Alignment(horizontal="center")

    for row in rows:
        ws.append(row)

    for column in ws.columns:
        longest = max(len(str(cell.value or "")) for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(longest + 2, 50)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def render_csv(event_name: str, rows: list[list[str]]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(HEADERS)
    writer.writerows(rows)
    # BOM so spreadsheet apps pick up UTF-8
    return output.getvalue().encode("utf-8-sig")


RENDERERS: dict[str, Callable[[str, list[list[str]]], bytes]] = {
    "pdf": render_pdf,
    "xlsx": render_xlsx,
    "csv": render_csv,
}


def export_registrations(db: Session, event_id: int, fmt: str = "pdf") -> ExportFile:
    if fmt not in RENDERERS:
        raise ValueError(f"Unsupported export format: {fmt}")

    event = get_event(db, event_id)
    registrations = list_event_registrations(db, event_id)
    if not registrations:
        raise NotFoundError("Nenhuma inscrição encontrada para este evento.")

    rows = [registration_row(r) for r in registrations]
    data = RENDERERS[fmt](event.nome, rows)
    logger.info("Exported %d registrations of event %s as %s", len(rows), event_id, fmt)
    return ExportFile(
        filename=export_filename(event.nome, fmt),
        content_type=CONTENT_TYPES[fmt],
        data=data,
    )

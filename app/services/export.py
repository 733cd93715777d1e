"""Export formatting: delimited text and spreadsheet bytes for donors, donations and reports."""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Literal

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

if TYPE_CHECKING:
    from app.models import Donor
    from app.schemas.stats import DonorStats
    from app.services.donations import DonationRow
    from app.services.stats import MonthlyRow

ExportFormat = Literal["csv", "xlsx"]
ReportType = Literal["overview", "bloodtype", "monthly"]

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

UTF8_BOM = "\ufeff"
MIN_COLUMN_WIDTH = 15

DONOR_HEADERS: tuple[str, ...] = (
    "Número do BI",
    "Nome Completo",
    "Data de Nascimento",
    "Idade",
    "Gênero",
    "Município",
    "Bairro",
    "Contato",
    "Cargo",
    "Departamento",
    "Tipo Sanguíneo",
    "Fator RH",
    "Tem Histórico",
    "Doações Anteriores",
    "Última Doação",
    "Restrições Médicas",
    "Apto para Doar",
    "Disponível para Futuro",
    "Contato Preferido",
    "Observações",
)

DONATION_HEADERS: tuple[str, ...] = (
    "ID da Doação",
    "Número do BI",
    "Nome do Doador",
    "Tipo Sanguíneo",
    "Data da Doação",
    "Hora da Doação",
    "Observações",
)

REPORT_CSV_HEADERS: tuple[str, ...] = ("Tipo", "Item", "Valor")


@dataclass
class Worksheet:
    name: str
    headers: Sequence[str]
    rows: list[list[str]] = field(default_factory=list)
    # Label used in the first column when sheets are flattened into one CSV.
    csv_label: str = ""


def _quote(cell: object) -> str:
    text = "" if cell is None else str(cell)
    return '"' + text.replace('"', '""') + '"'


def generate_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """BOM-prefixed CSV: every field double-quoted, inner quotes doubled, LF between rows."""
    lines = [",".join(_quote(h) for h in headers)]
    lines.extend(",".join(_quote(cell) for cell in row) for row in rows)
    return UTF8_BOM + "\n".join(lines)


def generate_xlsx(worksheets: Sequence[Worksheet]) -> bytes:
    """One sheet per worksheet; bold header row; column width = max(len(header), 15)."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    bold = Font(bold=True)
    for ws in worksheets:
        sheet = workbook.create_sheet(title=ws.name[:31])
        sheet.append(list(ws.headers))
        for cell in sheet[1]:
            cell.font = bold
        for row in ws.rows:
            sheet.append(list(row))
        for index, header in enumerate(ws.headers, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = max(
                len(header), MIN_COLUMN_WIDTH
            )
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_filename(prefix: str, fmt: ExportFormat, today: date | None = None) -> str:
    return f"{prefix}_{(today or date.today()).isoformat()}.{fmt}"


def _yes_no(value: bool) -> str:
    return "Sim" if value else "Não"


def donor_row(donor: Donor) -> list[str]:
    return [
        donor.bi_number,
        donor.full_name,
        donor.birth_date,
        str(donor.age),
        "Masculino" if donor.gender == "M" else "Feminino",
        donor.municipality,
        donor.neighborhood,
        donor.contact,
        donor.position,
        donor.department,
        donor.blood_type,
        "Positivo" if donor.rh_factor == "positive" else "Negativo",
        _yes_no(donor.has_history),
        str(donor.previous_donations),
        donor.last_donation,
        donor.medical_restrictions,
        _yes_no(donor.is_apt_to_donate),
        _yes_no(donor.available_for_future),
        donor.preferred_contact,
        donor.observations,
    ]


def donation_row(row: DonationRow) -> list[str]:
    return [
        row.id,
        row.donor_bi_number,
        row.donor_name,
        row.blood_type,
        row.donation_date,
        row.donation_time,
        row.notes,
    ]


def overview_sheet(stats: DonorStats) -> Worksheet:
    return Worksheet(
        name="Visão Geral",
        headers=("Métrica", "Valor"),
        rows=[
            ["Total de Doadores", str(stats.total_donors)],
            ["Total de Doações", str(stats.total_donations)],
            ["Doadores Ativos", str(stats.active_donors)],
            ["Novos Este Mês", str(stats.new_this_month)],
        ],
        csv_label="Geral",
    )


def blood_type_sheet(stats: DonorStats) -> Worksheet:
    return Worksheet(
        name="Por Tipo Sanguíneo",
        headers=("Tipo Sanguíneo", "Quantidade", "Percentual"),
        rows=[
            [blood_type, str(stat.count), f"{stat.percentage}%"]
            for blood_type, stat in stats.blood_type_stats.items()
        ],
        csv_label="Tipo Sanguíneo",
    )


def monthly_sheet(rows: Sequence[MonthlyRow]) -> Worksheet:
    return Worksheet(
        name="Mensal",
        headers=("Mês", "Novos Doadores", "Doações"),
        rows=[[r.month, str(r.new_donors), str(r.donations)] for r in rows],
        csv_label="Mensal",
    )


def report_csv_rows(worksheets: Sequence[Worksheet]) -> list[list[str]]:
    """
    Flatten report sheets into [Tipo, Item, Valor] rows.

    Two-column sheets keep their value; wider sheets render as "first (rest, ...)",
    e.g. "12 (40%)" for a blood type.
    """
    rows: list[list[str]] = []
    for ws in worksheets:
        for row in ws.rows:
            item, *values = row
            if len(values) == 1:
                value = values[0]
            else:
                value = f"{values[0]} ({', '.join(values[1:])})"
            rows.append([ws.csv_label or ws.name, item, value])
    return rows

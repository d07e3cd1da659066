"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  PromoterPro - Exports CSV                                                   ║
║                                                                              ║
║  3 FORMATS (colonnes EXACTES):                                               ║
║  - complaints: Date, Submitted By, Priority, Customer, Mobile, Issue,        ║
║                Status, Resolution Notes, Archived                            ║
║  - sales:      Date, Unique Code, Promoter, Sales Floor, Customer, Mobile,   ║
║                Email, Customer Origin, Age, Kiddo, Extreme, Individual,      ║
║                Entry Only, Status                                            ║
║  - feedback:   Date, Promoter, Customer, Age, Mobile, Email, Rating (1-5),   ║
║                Comment                                                       ║
║                                                                              ║
║  RÈGLES:                                                                     ║
║  - Filtre par jour inclusif: start 00:00:00.000 -> end 23:59:59.999 (local)  ║
║  - Texte libre TOUJOURS entre guillemets, guillemets internes doublés        ║
║  - Nombres et enums sans guillemets                                          ║
║  - Les plaintes archivées SONT exportées                                     ║
║  - Résultat vide = cas distinct (is_empty), pas une erreur                   ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Tuple

from models import TicketType

logger = logging.getLogger("csv_export")

DELIMITER = ","
QUOTE = '"'

COMPLAINT_COLUMNS = [
    "Date",
    "Submitted By",
    "Priority",
    "Customer",
    "Mobile",
    "Issue",
    "Status",
    "Resolution Notes",
    "Archived",
]

SALE_COLUMNS = [
    "Date",
    "Unique Code",
    "Promoter",
    "Sales Floor",
    "Customer",
    "Mobile",
    "Email",
    "Customer Origin",
    "Age",
    "Kiddo",
    "Extreme",
    "Individual",
    "Entry Only",
    "Status",
]

FEEDBACK_COLUMNS = [
    "Date",
    "Promoter",
    "Customer",
    "Age",
    "Mobile",
    "Email",
    "Rating (1-5)",
    "Comment",
]


@dataclass
class CsvExport:
    filename: str
    content: str
    row_count: int

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0


# ==================== FORMATTING ====================

def quote_text(value: Any) -> str:
    """Free text: always quoted, inner quotes doubled"""
    text = "" if value is None else str(value)
    return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE


def plain(value: Any) -> str:
    """Numbers, enums, phone numbers. Quoted only if the value would break the row."""
    text = "" if value is None else str(value)
    if DELIMITER in text or QUOTE in text or "\n" in text or "\r" in text:
        return quote_text(text)
    return text


def format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def day_range(start: date, end: date) -> Tuple[int, int]:
    """Inclusive local-time bounds in epoch ms"""
    start_ms = int(datetime.combine(start, time.min).timestamp() * 1000)
    end_ms = int(datetime.combine(end, time(23, 59, 59, 999000)).timestamp() * 1000)
    return start_ms, end_ms


def filter_by_day_range(records: List[Dict[str, Any]], start: date, end: date) -> List[Dict[str, Any]]:
    start_ms, end_ms = day_range(start, end)
    return [r for r in records if start_ms <= (r.get("timestamp") or 0) <= end_ms]


def render_csv(columns: List[str], rows: List[List[str]]) -> str:
    output = io.StringIO()
    output.write(DELIMITER.join(columns))
    for row in rows:
        output.write("\n")
        output.write(DELIMITER.join(row))
    return output.getvalue()


# ==================== ROWS ====================

def complaint_row(c: Dict[str, Any]) -> List[str]:
    return [
        format_timestamp(c.get("timestamp") or 0),
        plain(c.get("submittedBy")),
        plain(c.get("priority")),
        quote_text(c.get("customerName")),
        plain(c.get("customerMobile")),
        quote_text(c.get("description")),
        plain(c.get("status")),
        quote_text(c.get("resolutionNotes") or ""),
        "Yes" if c.get("isArchived") else "No",
    ]


def sale_row(s: Dict[str, Any]) -> List[str]:
    customer = s.get("customer") or {}
    items = s.get("items") or {}
    return [
        format_timestamp(s.get("timestamp") or 0),
        quote_text(s.get("uniqueCode") or "-"),
        quote_text(s.get("promoterName")),
        quote_text(s.get("saleLocation") or "General"),
        quote_text(customer.get("name")),
        plain(customer.get("mobile")),
        plain(customer.get("email")),
        quote_text(customer.get("location")),
        plain(customer.get("age")),
        plain(items.get(TicketType.KIDDO.value) or 0),
        plain(items.get(TicketType.EXTREME.value) or 0),
        plain(items.get(TicketType.INDIVIDUAL.value) or 0),
        plain(items.get(TicketType.ENTRY_ONLY.value) or 0),
        plain(s.get("status")),
    ]


def feedback_row(f: Dict[str, Any]) -> List[str]:
    customer = f.get("customer") or {}
    return [
        format_timestamp(f.get("timestamp") or 0),
        quote_text(f.get("promoterName")),
        quote_text(customer.get("name")),
        plain(customer.get("age")),
        plain(customer.get("mobile")),
        plain(customer.get("email")),
        plain(f.get("rating")),
        quote_text(f.get("comment") or ""),
    ]


# ==================== EXPORTS ====================

def _export(
    prefix: str,
    columns: List[str],
    row_builder: Callable[[Dict[str, Any]], List[str]],
    records: List[Dict[str, Any]],
    start: date,
    end: date
) -> CsvExport:
    selected = filter_by_day_range(records, start, end)
    content = render_csv(columns, [row_builder(r) for r in selected])
    filename = f"{prefix}_{start.isoformat()}_to_{end.isoformat()}.csv"

    logger.info(f"[CSV] {filename}: {len(selected)} rows")
    return CsvExport(filename=filename, content=content, row_count=len(selected))


def export_complaints_csv(complaints: List[Dict[str, Any]], start: date, end: date) -> CsvExport:
    """Archived complaints included"""
    return _export("complaints_log", COMPLAINT_COLUMNS, complaint_row, complaints, start, end)


def export_sales_csv(sales: List[Dict[str, Any]], start: date, end: date) -> CsvExport:
    return _export("sales_report", SALE_COLUMNS, sale_row, sales, start, end)


def export_feedback_csv(feedbacks: List[Dict[str, Any]], start: date, end: date) -> CsvExport:
    return _export("customer_feedback", FEEDBACK_COLUMNS, feedback_row, feedbacks, start, end)

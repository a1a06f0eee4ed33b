"""Export service — PDF and CSV generation for priced quotes."""

import csv
import io
import logging
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from quotewise.data.currency import format_price
from quotewise.schemas.itinerary import Itinerary
from quotewise.services.cost_aggregator import CostSummary

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "day", "type", "name", "province", "configuration", "excluded_travelers",
    "native_currency", "native_total", "rate", "adult_cost", "child_cost", "total_cost", "error",
]


class ExportService:
    """Generates PDF and CSV quote breakdowns."""

    def generate_summary_csv(self, summary: CostSummary, itinerary: Itinerary) -> str:
        """One row per item, then traveler totals and the grand total."""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_FIELDS)
        writer.writeheader()

        for item in summary.detailed_items:
            writer.writerow({
                "day": item.day,
                "type": item.type,
                "name": item.name,
                "province": item.province or "",
                "configuration": item.configuration,
                "excluded_travelers": item.excluded_travelers,
                "native_currency": item.native_currency or "",
                "native_total": f"{item.native_total:.2f}",
                "rate": f"{item.rate.final_rate:.6f}" if item.rate else "",
                "adult_cost": f"{item.adult_cost:.2f}",
                "child_cost": f"{item.child_cost:.2f}",
                "total_cost": f"{item.total_cost:.2f}",
                "error": item.error["message"] if item.error else "",
            })

        labels = {t.id: t.label for t in itinerary.travelers}
        for traveler_id, amount in summary.per_person_totals.items():
            writer.writerow({
                "type": "traveler_total",
                "name": labels.get(traveler_id, traveler_id),
                "total_cost": f"{amount:.2f}",
            })
        writer.writerow({"type": "grand_total", "name": summary.currency, "total_cost": f"{summary.grand_total:.2f}"})
        return output.getvalue()

    def generate_summary_pdf(self, summary: CostSummary, itinerary: Itinerary, title: str | None = None) -> bytes:
        """Printable quote: trip info, item breakdown, traveler totals."""
        currency = summary.currency
        trip = itinerary.settings

        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=letter, topMargin=0.5 * inch)
        styles = getSampleStyleSheet()
        elements = []

        elements.append(Paragraph(title or "Itinerary Quote", styles["Title"]))
        elements.append(Spacer(1, 12))

        info = [
            f"<b>Start:</b> {trip.start_date.isoformat()} ({trip.num_days} days)",
            f"<b>Travelers:</b> {len(itinerary.travelers)}",
            f"<b>Currency:</b> {currency}",
            f"<b>Generated:</b> {date.today().isoformat()}",
        ]
        if summary.budget is not None:
            info.append(f"<b>Budget:</b> {format_price(summary.budget, currency)}")
        for line in info:
            elements.append(Paragraph(line, styles["Normal"]))
        elements.append(Spacer(1, 12))

        # Items table
        if summary.detailed_items:
            elements.append(Paragraph("<b>Cost Breakdown</b>", styles["Heading2"]))
            data = [["Day", "Service", "Details", "Total"]]
            for item in summary.detailed_items:
                details = item.error["message"] if item.error else item.configuration
                total = "ERROR" if item.error else format_price(item.total_cost, currency)
                data.append([str(item.day), item.name, Paragraph(escape(details), styles["Normal"]), total])

            table = Table(data, colWidths=[0.5 * inch, 1.8 * inch, 3.2 * inch, 1.2 * inch])
            table.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4F46E5")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("ALIGN", (3, 1), (3, -1), "RIGHT"),
            ]))
            elements.append(table)
            elements.append(Spacer(1, 12))

        # Totals
        elements.append(Paragraph("<b>Totals</b>", styles["Heading2"]))
        labels = {t.id: t.label for t in itinerary.travelers}
        totals = [["Traveler", f"Amount ({currency})"]]
        for traveler_id, amount in summary.per_person_totals.items():
            totals.append([labels.get(traveler_id, traveler_id), format_price(amount, currency)])
        totals.append(["Grand Total", format_price(summary.grand_total, currency)])
        if summary.remaining_budget is not None:
            totals.append(["Remaining Budget", format_price(summary.remaining_budget, currency)])

        table = Table(totals, colWidths=[3 * inch, 3 * inch])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("ALIGN", (1, 1), (1, -1), "RIGHT"),
        ]))
        elements.append(table)

        doc.build(elements)
        logger.debug(f"Rendered quote PDF with {len(summary.detailed_items)} items")
        return buf.getvalue()


export_service = ExportService()

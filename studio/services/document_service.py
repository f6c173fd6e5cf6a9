from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from studio.core.config import Settings, get_settings
from studio.schemas import ReservationRead

from . import exceptions
from .telegram.messages import NOT_ASSIGNED, format_date, format_money, format_time

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Using fallback PDF generation. Please check the document webhook configuration."
MISSING_RESPONSE_MODULE = (
    "Document webhook answered 'Accepted' without a JSON body. "
    'Configure the scenario to respond with {"success": true, "url": "<document url>"}.'
)


@dataclass
class DocumentResult:
    success: bool
    filename: str
    url: Optional[str] = None
    fallback: bool = False
    error: Optional[str] = None


def build_fields(reservation: ReservationRead, artist_name: Optional[str] = None) -> dict[str, Any]:
    """Flat field map understood by the fillable-form webhook."""

    appointment_date = format_date(reservation.appointment_date)
    appointment_time = format_time(reservation.appointment_time)
    notes = reservation.notes or ""
    return {
        "fields": [
            {"name": "first_name", "text": reservation.first_name},
            {"name": "last_name", "text": reservation.last_name},
            {"name": "phone", "text": reservation.phone},
            {"name": "reservation_number", "text": str(reservation.reservation_number)},
            {"name": "artist", "text": artist_name or NOT_ASSIGNED},
            {"name": "price", "text": format_money(reservation.total_price)},
            {"name": "deposit", "text": format_money(reservation.deposit_paid)},
            {"name": "rest", "text": format_money(reservation.remaining_amount)},
            {"name": "appointment_date", "text": appointment_date},
            {"name": "appointment_time", "text": appointment_time},
            {"name": "notes", "text": notes},
        ],
        "FirstName": reservation.first_name,
        "LastName": reservation.last_name,
        "Phone": reservation.phone,
        "Price": f"{reservation.total_price:.2f}",
        "Deposit": f"{reservation.deposit_paid:.2f}",
        "Rest": f"{reservation.remaining_amount:.2f}",
        "AppointmentDate": appointment_date,
        "Time": appointment_time,
        "Note": notes,
    }


def render_print_preview(reservation: ReservationRead, artist_name: Optional[str], studio_name: str) -> str:
    rows = [
        ("Reservation", f"#{reservation.reservation_number}"),
        ("Client", f"{reservation.first_name} {reservation.last_name}"),
        ("Phone", reservation.phone),
        ("Artist", artist_name or NOT_ASSIGNED),
        ("Date", format_date(reservation.appointment_date)),
        ("Time", format_time(reservation.appointment_time)),
        ("Total price", format_money(reservation.total_price)),
        ("Deposit", format_money(reservation.deposit_paid)),
        ("Remaining", format_money(reservation.remaining_amount)),
        ("Status", reservation.payment_label),
        ("Notes", reservation.notes or ""),
    ]
    body = "\n".join(
        f"      <tr><th>{html.escape(label)}</th><td>{html.escape(value)}</td></tr>" for label, value in rows
    )
    title = html.escape(f"{studio_name} - Reservation #{reservation.reservation_number}")
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        '    <meta charset="utf-8">\n'
        f"    <title>{title}</title>\n"
        "    <style>\n"
        "      body { font-family: sans-serif; margin: 2rem; }\n"
        "      table { border-collapse: collapse; width: 100%; }\n"
        "      th, td { text-align: left; padding: 0.4rem; border-bottom: 1px solid #ccc; }\n"
        "    </style>\n"
        "  </head>\n"
        '  <body onload="window.print()">\n'
        f"    <h1>{html.escape(studio_name)}</h1>\n"
        "    <table>\n"
        f"{body}\n"
        "    </table>\n"
        "  </body>\n"
        "</html>\n"
    )


class DocumentService:
    def __init__(self, *, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or get_settings()
        self.transport = transport

    def generate(self, reservation: ReservationRead, artist_name: Optional[str] = None) -> DocumentResult:
        filename = f"reservation-{reservation.reservation_number}.pdf"
        try:
            url = self._request_document(build_fields(reservation, artist_name))
        except exceptions.ServiceError as exc:
            logger.warning(
                "Document generation for reservation #%s fell back to print preview: %s",
                reservation.reservation_number,
                exc,
            )
            return DocumentResult(success=False, filename=filename, fallback=True, error=str(exc))
        return DocumentResult(success=True, filename=filename, url=url)

    def _request_document(self, payload: dict[str, Any]) -> str:
        webhook_url = self.settings.DOCUMENT_WEBHOOK_URL
        if not webhook_url:
            raise exceptions.ConfigurationError("Document webhook URL is not configured")

        try:
            with httpx.Client(transport=self.transport) as client:
                response = client.post(webhook_url, json=payload)
        except httpx.HTTPError as exc:
            raise exceptions.DocumentGenerationError(f"Webhook request failed: {exc}") from exc

        if response.is_error:
            logger.error("Document webhook returned %s: %s", response.status_code, response.text)
            raise exceptions.DocumentGenerationError(
                f"Webhook request failed: {response.status_code} - {response.reason_phrase}"
            )

        try:
            result = response.json()
        except ValueError as exc:
            if response.text.strip() == "Accepted":
                raise exceptions.ConfigurationError(MISSING_RESPONSE_MODULE) from exc
            raise exceptions.DocumentGenerationError(f"Invalid JSON response from webhook: {response.text}") from exc

        if not isinstance(result, dict) or not result.get("url"):
            error = result.get("error") if isinstance(result, dict) else None
            raise exceptions.DocumentGenerationError(error or "PDF generation failed - no PDF URL returned")
        return result["url"]

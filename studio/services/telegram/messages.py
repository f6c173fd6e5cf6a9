from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional

from studio.schemas import ReservationRead

NOT_ASSIGNED = "Not assigned"


def format_money(amount: Decimal | int | float) -> str:
    return f"€{Decimal(amount):.2f}"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def new_reservation_alert(reservation: ReservationRead, artist_name: Optional[str], studio_name: str) -> str:
    lines = [
        "🦂 *New Reservation Created* 🦂",
        "",
        f"📋 *Reservation #{reservation.reservation_number}*",
        "",
        f"👤 *Customer:* {reservation.first_name} {reservation.last_name}",
        f"📞 *Phone:* {reservation.phone}",
        f"📅 *Date:* {format_date(reservation.appointment_date)}",
        f"🕐 *Time:* {format_time(reservation.appointment_time)}",
    ]
    if artist_name:
        lines.append(f"🎨 *Artist:* {artist_name}")
    lines += [
        "",
        f"💰 *Total Price:* {format_money(reservation.total_price)}",
        f"💳 *Deposit:* {format_money(reservation.deposit_paid)}",
        f"💸 *Remaining:* {format_money(reservation.remaining_amount)}",
        "",
        f"🏪 *{studio_name}*",
    ]
    return "\n".join(lines)


def _digest_title(target_date: date, manual: bool) -> str:
    mark = " (Manual)" if manual else ""
    return f"🎨 *Daily Reservations* 🎨\n\n📅 *Date:* {format_date(target_date)}{mark}"


def digest_empty(target_date: date, manual: bool, studio_name: str) -> str:
    return (
        f"{_digest_title(target_date, manual)}\n\n"
        "📋 No reservations scheduled for this date.\n\n"
        f"🏪 *{studio_name}*"
    )


def digest_header(target_date: date, count: int, manual: bool, studio_name: str) -> str:
    return (
        f"{_digest_title(target_date, manual)}\n\n"
        f"📊 *{_plural(count, 'reservation')} scheduled*\n\n"
        f"🏪 *{studio_name}*"
    )


def digest_entry(reservation: ReservationRead, artist_name: Optional[str]) -> str:
    status_icon = {"Fully Paid": "✅", "Deposit Paid": "🟡", "Pending": "🔴"}[reservation.payment_label]
    lines = [
        f"📋 *Reservation #{reservation.reservation_number}*",
        "",
        f"👤 *Client:* {reservation.first_name} {reservation.last_name}",
        f"📞 *Phone:* {reservation.phone}",
        f"🕐 *Time:* {format_time(reservation.appointment_time)}",
        f"🎨 *Artist:* {artist_name or NOT_ASSIGNED}",
        "",
        f"💰 *Total Price:* {format_money(reservation.total_price)}",
        f"💳 *Deposit:* {format_money(reservation.deposit_paid)}",
        f"💸 *Remaining:* {format_money(reservation.remaining_amount)}",
        f"💳 *Status:* {status_icon} {reservation.payment_label}",
    ]
    if reservation.notes:
        lines += ["", f"📝 *Notes:* {reservation.notes}"]
    if reservation.design_images:
        lines += ["", f"🖼️ *{_plural(len(reservation.design_images), 'design image')}*"]
    return "\n".join(lines)


def image_caption(index: int, total: int, reservation_number: int) -> str:
    return f"🖼️ Design {index}/{total} - Reservation #{reservation_number}"


def image_failure(index: int, reservation_number: int) -> str:
    return f"❌ Failed to send design image {index} for reservation #{reservation_number}"

"""Outbound Telegram notifications: the instant new-reservation alert and the daily digest."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Optional

import httpx
from sqlalchemy.orm import Session

from studio.core.config import Settings, get_settings
from studio.schemas import ReservationRead

from . import exceptions
from .reservation_service import ReservationCreated, ReservationService
from .staff_service import StaffService
from .telegram import TelegramBotClient
from .telegram import messages

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


def utc_today() -> date:
    return datetime.now(tz=timezone.utc).date()


class NewReservationNotifier:
    """Post-commit hook announcing a freshly created reservation."""

    def __init__(self, *, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or get_settings()
        self.transport = transport

    def __call__(self, event: ReservationCreated) -> None:
        chat_id = self.settings.TELEGRAM_CHAT_ID
        if not chat_id:
            raise exceptions.ConfigurationError("Telegram chat id is not configured")
        text = messages.new_reservation_alert(event.reservation, event.artist_name, self.settings.STUDIO_NAME)
        with TelegramBotClient(
            token=self.settings.TELEGRAM_BOT_TOKEN,
            api_base_url=self.settings.TELEGRAM_API_BASE_URL,
            transport=self.transport,
        ) as client:
            client.send_message(chat_id, text)
        logger.info("New reservation alert sent for #%s", event.reservation.reservation_number)


@dataclass
class DigestResult:
    """Outcome of one digest run.

    ``messages_sent`` counts deliveries that reached the chat: texts, photos and
    the notices that replace undeliverable photos. ``failed_images`` counts the
    photos that were replaced.
    """

    success: bool
    message: str
    reservations_count: int
    date: date
    manual: bool
    messages_sent: int = 0
    failed_images: int = 0


class DailyDigestService:
    HEADER_DELAY_SECONDS = 1.0
    TEXT_DELAY_SECONDS = 0.5
    PHOTO_DELAY_SECONDS = 0.8
    RESERVATION_DELAY_SECONDS = 2.0

    def __init__(
        self,
        db: Session,
        *,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Sleep = time.sleep,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.transport = transport
        self.sleep = sleep

    def send_digest(self, *, target_date: Optional[date] = None, manual: bool = False) -> DigestResult:
        """Send the reservations of ``target_date`` (default: today, UTC) one message at a time."""

        target_date = target_date or utc_today()
        chat_id = self.settings.TELEGRAM_DAILY_CHAT_ID
        if not chat_id:
            raise exceptions.ConfigurationError("Telegram daily chat id is not configured")

        reservations = [
            ReservationRead.model_validate(row)
            for row in ReservationService(self.db).list_for_date(target_date)
        ]
        artist_names = StaffService(self.db).artist_names()
        studio_name = self.settings.STUDIO_NAME
        label = "Manual" if manual else "Scheduled"
        logger.info("%s digest for %s: %d reservation(s)", label, target_date, len(reservations))

        with TelegramBotClient(
            token=self.settings.TELEGRAM_DAILY_BOT_TOKEN,
            api_base_url=self.settings.TELEGRAM_API_BASE_URL,
            transport=self.transport,
        ) as client:
            if not reservations:
                client.send_message(chat_id, messages.digest_empty(target_date, manual, studio_name))
                return DigestResult(
                    success=True,
                    message="Daily summary sent (no reservations)",
                    reservations_count=0,
                    date=target_date,
                    manual=manual,
                    messages_sent=1,
                )

            client.send_message(chat_id, messages.digest_header(target_date, len(reservations), manual, studio_name))
            sent = 1
            failed_images = 0
            self.sleep(self.HEADER_DELAY_SECONDS)

            for position, reservation in enumerate(reservations):
                artist_name = artist_names.get(reservation.artist_id) if reservation.artist_id else None
                client.send_message(chat_id, messages.digest_entry(reservation, artist_name))
                sent += 1
                self.sleep(self.TEXT_DELAY_SECONDS)

                sent_images, failed = self._send_images(client, chat_id, reservation)
                sent += sent_images
                failed_images += failed

                if position < len(reservations) - 1:
                    self.sleep(self.RESERVATION_DELAY_SECONDS)

        return DigestResult(
            success=True,
            message=f"Daily reservations sent successfully for {messages.format_date(target_date)}",
            reservations_count=len(reservations),
            date=target_date,
            manual=manual,
            messages_sent=sent,
            failed_images=failed_images,
        )

    def _send_images(self, client: TelegramBotClient, chat_id: str, reservation: ReservationRead) -> tuple[int, int]:
        total = len(reservation.design_images)
        sent = 0
        failed = 0
        for index, image in enumerate(reservation.design_images, start=1):
            caption = messages.image_caption(index, total, reservation.reservation_number)
            try:
                client.send_photo(chat_id, image, caption=caption)
            except exceptions.NotificationDeliveryError as exc:
                logger.error(
                    "Design image %d for reservation #%s failed: %s",
                    index,
                    reservation.reservation_number,
                    exc,
                )
                client.send_message(chat_id, messages.image_failure(index, reservation.reservation_number))
                failed += 1
            # Either the photo or its replacement notice went out.
            sent += 1
            self.sleep(self.PHOTO_DELAY_SECONDS)
        return sent, failed

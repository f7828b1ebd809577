"""Guest-facing reservation summary and the messaging deep link that carries it."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from urllib.parse import quote

from ..models import Reservation

_WEEKDAYS_ES = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]
_MONTHS_ES = [
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
]


@dataclass(frozen=True)
class GuestConfirmation:
    message: str
    link: str


def format_long_date(day: date) -> str:
    """'sábado, 24 de octubre de 2026'"""
    return f"{_WEEKDAYS_ES[day.weekday()]}, {day.day} de {_MONTHS_ES[day.month - 1]} de {day.year}"


def format_party(reservation: Reservation) -> str:
    return "Más de 8" if reservation.large_group else str(reservation.party_size)


def format_phone(phone: str, country_code: str) -> str:
    return f"+{country_code}{phone}"


def build_summary(reservation: Reservation, *, country_code: str, venue: str = "La Clave") -> str:
    lines = [
        f"🍽️ *NUEVA RESERVA - {venue}*",
        "",
        f"👤 *Nombre:* {reservation.name}",
        f"📞 *Teléfono:* {format_phone(reservation.phone, country_code)}",
        f"📅 *Fecha:* {format_long_date(reservation.date)}",
        f"🕐 *Hora:* {reservation.time}",
        f"👥 *Personas:* {format_party(reservation)}",
    ]
    if reservation.notes:
        lines.append(f"💬 *Comentarios:* {reservation.notes}")
    lines.extend(["", "_Reserva realizada desde la web_"])
    return "\n".join(lines)


def whatsapp_link(message: str, number: str) -> str:
    return f"https://wa.me/{number}?text={quote(message, safe='')}"


def build_confirmation(reservation: Reservation, *, country_code: str, number: str) -> GuestConfirmation:
    message = build_summary(reservation, country_code=country_code)
    return GuestConfirmation(message=message, link=whatsapp_link(message, number))

"""WhatsApp message texts for clients. Formatting only; sending is left to the caller."""

import re
from datetime import date
from typing import Optional

from backend.app.core.time import utc_today
from backend.app.schemas.client import ClientRead
from backend.app.schemas.payment import PaymentRead
from backend.app.schemas.session import SessionRead

COUNTRY_CODE = "54"
SIGNATURE = "---\n*Personal Trainer App*"
DUE_SOON_DAYS = 3


def format_currency(amount: float) -> str:
    """Format an amount the es-AR way: ``$ 5.000,00``."""
    whole, cents = f"{abs(amount):,.2f}".split(".")
    sign = "-" if amount < 0 else ""
    return f"{sign}$ {whole.replace(',', '.')},{cents}"


def format_date(value: date) -> str:
    return f"{value.day}/{value.month}/{value.year}"


def _greeting(client: ClientRead) -> str:
    return f"🏋️‍♂️ *Hola {client.name}!*"


def _join(*blocks: Optional[str]) -> str:
    return "\n\n".join(block for block in blocks if block)


def format_payment_reminder(payment: PaymentRead, client: ClientRead, today: Optional[date] = None) -> str:
    today = today or utc_today()
    is_overdue = payment.due_date < today

    urgency = None
    if is_overdue:
        days_late = (today - payment.due_date).days
        urgency = f"⚠️ *PAGO VENCIDO* ({days_late} días de atraso)"
    else:
        days_left = (payment.due_date - today).days
        if days_left <= DUE_SOON_DAYS:
            urgency = f"⏰ *Vence en {days_left} días*"

    details = [
        f"💰 *Monto:* {format_currency(payment.amount)}",
        f"📅 *Vencimiento:* {format_date(payment.due_date)}",
    ]
    if payment.payment_method:
        details.append(f"💳 *Método:* {payment.payment_method}")

    closing = "Por favor, regulariza tu pago lo antes posible." if is_overdue else "¡Gracias por tu confianza!"
    return _join(
        _greeting(client),
        urgency,
        f"Te recordamos que tienes un pago {'vencido' if is_overdue else 'pendiente'}:",
        "\n".join(details),
        f"📝 *Notas:* {payment.notes}" if payment.notes else None,
        f"{closing} 🙏",
        SIGNATURE,
    )


def format_session_reminder(session: SessionRead, client: ClientRead) -> str:
    details = "\n".join(
        [
            f"📅 *Fecha:* {format_date(session.session_date)}",
            f"⏰ *Hora:* {session.session_time.strftime('%H:%M')}",
        ]
    )
    return _join(
        _greeting(client),
        "Te recordamos que tienes una sesión programada:",
        details,
        f"📝 *Notas:* {session.notes}" if session.notes else None,
        "¡Nos vemos pronto! 💪",
        SIGNATURE,
    )


def format_custom_message(client: ClientRead, message: str) -> str:
    return _join(_greeting(client), message.strip(), SIGNATURE)


# --- Phone helpers ---


def clean_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def whatsapp_number(phone: str) -> str:
    """Digits only, with the Argentine country code added when missing."""
    digits = clean_phone(phone)
    return digits if digits.startswith(COUNTRY_CODE) else f"{COUNTRY_CODE}{digits}"


def is_valid_phone_number(phone: str) -> bool:
    # 10-11 national digits, up to 13 with country code
    return 10 <= len(clean_phone(phone)) <= 13


def format_phone_number(phone: str) -> str:
    digits = clean_phone(phone)

    if digits.startswith(COUNTRY_CODE):
        national = digits[2:]
        if len(national) == 10:
            return f"+54 {national[:3]} {national[3:6]}-{national[6:]}"
        if len(national) == 11:
            return f"+54 {national[:2]} {national[2:5]}-{national[5:]}"
    elif len(digits) == 10:
        return f"{digits[:3]} {digits[3:6]}-{digits[6:]}"
    elif len(digits) == 11:
        return f"{digits[:2]} {digits[2:5]}-{digits[5:]}"

    return phone

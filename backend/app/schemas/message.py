"""WhatsApp message preview returned to the frontend."""

from pydantic import BaseModel


class WhatsAppMessage(BaseModel):
    to: str
    message: str

"""
Servicio simple de envío de correos (SMTP) para notificar respuestas a clientes.
"""
import html
import smtplib
from email.message import EmailMessage

from helpdesk.core.config import settings


def send_email(to_email: str, subject: str, html_body: str, text_body: str | None = None) -> None:
    if not settings.smtp_configured:
        raise RuntimeError("SMTP no configurado. Define SMTP_HOST/SMTP_USER/SMTP_PASS en .env")

    msg = EmailMessage()
    msg["From"] = f"{settings.smtp_from_name} <{settings.smtp_from_email or settings.smtp_user}>"
    msg["To"] = to_email
    msg["Subject"] = subject
    if text_body:
        msg.set_content(text_body)
    msg.add_alternative(html_body, subtype="html")

    # Conexión TLS por defecto (587)
    if settings.smtp_use_tls:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_pass)
            server.send_message(msg)
    else:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port) as server:
            server.login(settings.smtp_user, settings.smtp_pass)
            server.send_message(msg)


def send_reply_email(to_email: str, original_message: str, reply: str) -> None:
    """Envía al cliente la respuesta del operador junto con su consulta original."""
    subject = "Respuesta a tu consulta"
    body = html.escape(reply).replace("\n", "<br>")
    quoted = html.escape(original_message).replace("\n", "<br>")
    html_body = f"""
    <p>Hola,</p>
    <p>{body}</p>
    <hr>
    <p style="color:#888">Tu consulta:</p>
    <blockquote style="color:#555">{quoted}</blockquote>
    <p>— Equipo de {settings.smtp_from_name}</p>
    """
    text = f"{reply}\n\n---\nTu consulta:\n{original_message}"
    send_email(to_email, subject, html_body, text)

import asyncio, ssl, smtplib
from email.message import EmailMessage
from typing import Optional

from storefront.config import Settings


class SmtpMailer:
    """
    Simple SMTP sender.
    - Port 465 starts with SSL; smtp_use_starttls=True (587) upgrades with STARTTLS.
    - Async friendly: the blocking SMTP session runs in a worker thread.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _build_message(self, to: str, subject: str, body: str,
                       attachment: Optional[bytes], attachment_name: str) -> EmailMessage:
        s = self.settings
        from_addr = s.smtp_from or s.smtp_user
        msg = EmailMessage()
        msg["To"] = to
        msg["From"] = f"{s.smtp_sender_name} <{from_addr}>" if s.smtp_sender_name else from_addr
        msg["Subject"] = subject
        msg.set_content("View this e-mail as HTML.")
        msg.add_alternative(body, subtype="html")
        if attachment is not None:
            msg.add_attachment(attachment, maintype="application", subtype="pdf", filename=attachment_name)
        return msg

    async def send_mail(self, to: str, subject: str, body: str,
                        attachment: Optional[bytes] = None, attachment_name: str = "receipt.pdf") -> None:
        s = self.settings
        from_addr = s.smtp_from or s.smtp_user
        if not (s.smtp_host and s.smtp_port and s.smtp_user and s.smtp_password and from_addr):
            raise RuntimeError("SMTP config incomplete: check host/port/user/password/from")

        msg = self._build_message(to, subject, body, attachment, attachment_name)

        def _send_blocking():
            context = ssl.create_default_context()
            if s.smtp_use_starttls:
                # 587 / STARTTLS
                with smtplib.SMTP(s.smtp_host, s.smtp_port) as server:
                    server.ehlo()
                    server.starttls(context=context)
                    server.ehlo()
                    server.login(s.smtp_user, s.smtp_password)
                    server.send_message(msg)
            else:
                # 465 / SSL
                with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, context=context) as server:
                    server.login(s.smtp_user, s.smtp_password)
                    server.send_message(msg)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _send_blocking)

"""
services/mailer.py

SMTP 메일 발송 서비스.

- OTP 인증 코드 메일 등 시스템 메일 발송에 사용
- SMTP_HOST 가 설정되지 않은 환경(로컬/테스트)에서는 실제 발송 없이 로그만 남김
- 발송 실패는 호출 측으로 예외를 그대로 전달 (OTP 발송 API 가 실패 응답을 반환하도록)

"""

import logging
import smtplib
from email.message import EmailMessage

from app.core.config import Settings

logger = logging.getLogger(__name__)


OTP_TEMPLATE = """\
<p>Hello {name},</p>
<p>Your verification code is <strong>{otp}</strong>.</p>
<p>The code expires in {minutes} minutes. If you did not request it, ignore this email.</p>
<p>Future Programmer Innovators Club</p>
"""


class Mailer:
    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.username = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.sender = settings.MAIL_FROM

    def send(self, *, to: str, subject: str, html: str) -> None:
        if not self.host:
            logger.info("SMTP not configured, skipping email", extra={"to": to, "subject": subject})
            return

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=10)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=10)

        with server:
            if self.port != 465:
                server.starttls()
            if self.username:
                server.login(self.username, self.password or "")
            server.send_message(msg)

        logger.info("Email sent", extra={"to": to, "subject": subject})

    def send_otp(self, *, to: str, name: str, otp: str, expire_seconds: int) -> None:
        html = OTP_TEMPLATE.format(name=name, otp=otp, minutes=max(1, expire_seconds // 60))
        self.send(to=to, subject="Your OTP Code | Future Programmer Innovators Club", html=html)

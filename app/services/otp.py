"""
services/otp.py

이메일 인증용 OTP 코드 발급/검증 서비스.

OTP 코드는 DB가 아닌 Redis 에만 짧은 TTL 로 저장한다.

키 구조:
- otp:<email>           : 발급된 코드 (TTL = OTP_EXPIRE_SECONDS)
- otp:<email>:attempts  : 잘못된 입력 횟수 (TTL = OTP_EXPIRE_SECONDS)

규칙:
- 유효한 코드가 남아 있으면 재발송 불가 (TooManyRequests)
- 잘못된 입력이 OTP_MAX_ATTEMPTS 회에 도달하면 코드 폐기
- 검증 성공 시 코드 / 시도 횟수 키 모두 삭제

사용자 존재 여부, 인증 완료 표시(is_verified)는 라우터(app.routers.otp)에서 처리한다.

"""

import logging
import secrets

from redis import Redis

from app.core.errors import TooManyRequests, Unauthorized
from app.services.mailer import Mailer

logger = logging.getLogger(__name__)

OTP_KEY_PREFIX = "otp"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_otp(length: int) -> str:
    # 첫 자리가 0이 되지 않도록 10^(n-1) ~ 10^n - 1 범위
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


class OtpService:
    def __init__(self, redis: Redis, mailer: Mailer, *, length: int = 6,
                 expire_seconds: int = 300, max_attempts: int = 5):
        self.redis = redis
        self.mailer = mailer
        self.length = length
        self.expire_seconds = expire_seconds
        self.max_attempts = max_attempts

    def _code_key(self, email: str) -> str:
        return f"{OTP_KEY_PREFIX}:{normalize_email(email)}"

    def _attempts_key(self, email: str) -> str:
        return f"{self._code_key(email)}:attempts"

    def send(self, email: str, name: str) -> None:
        email = normalize_email(email)
        code_key = self._code_key(email)

        if self.redis.exists(code_key):
            raise TooManyRequests("OTP already sent. Please wait.")

        otp = generate_otp(self.length)
        self.redis.set(code_key, otp, ex=self.expire_seconds)
        self.redis.delete(self._attempts_key(email))

        # 메일 발송 실패 시 코드를 남겨두면 TTL 동안 재발송이 막히므로 폐기
        try:
            self.mailer.send_otp(to=email, name=name, otp=otp, expire_seconds=self.expire_seconds)
        except Exception:
            self.redis.delete(code_key)
            logger.exception("OTP email failed", extra={"email": email})
            raise
        logger.info("OTP issued", extra={"email": email})

    def verify(self, email: str, otp: str) -> None:
        email = normalize_email(email)
        code_key = self._code_key(email)
        attempts_key = self._attempts_key(email)

        saved = self.redis.get(code_key)
        if not saved:
            raise Unauthorized("OTP expired")

        attempts = int(self.redis.get(attempts_key) or 0)
        if attempts >= self.max_attempts:
            self.redis.delete(code_key, attempts_key)
            raise TooManyRequests("Too many invalid attempts. OTP expired.")

        if saved != otp.strip():
            self.redis.incr(attempts_key)
            self.redis.expire(attempts_key, self.expire_seconds)
            logger.info("OTP mismatch", extra={"email": email, "attempts": attempts + 1})
            raise Unauthorized("Invalid OTP")

        self.redis.delete(code_key, attempts_key)
        logger.info("OTP verified", extra={"email": email})

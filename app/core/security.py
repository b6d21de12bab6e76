"""
security.py

비밀번호 해싱 및 JWT 토큰 생성/검증을 담당하는 보안 유틸리티 모음.

라우터나 비즈니스 로직은 포함하지 않으며,
인증(auth) 라우터와 인증 의존성(deps)에서 공통으로 사용한다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- Access / Refresh Token 생성
- Access / Refresh Token 디코딩 및 타입 검증

설계 원칙:
- Access Token과 Refresh Token은 서로 다른 시크릿으로 서명
- Refresh Token에 version(rtv)을 포함하여 강제 로그아웃/토큰 무효화 지원
- 시간 기반(exp) 만료는 UTC 기준으로 처리

"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Literal

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
JWT 토큰 생성 내부 공통 함수

- sub  : 사용자 식별자(user_id)
- type : access 또는 refresh
- exp  : 만료 시각 (UTC timestamp)
- extra: role(access), rtv(refresh) 등 추가 정보

"""

def _create_token(*, subject: str, token_type: Literal["access", "refresh"],
                  expires_delta: timedelta, secret: str, extra: Optional[dict] = None) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    payload = {
        "sub": subject,
        "type": token_type,
        "exp": int(expire.timestamp()),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)


def create_access_token(subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=subject,
        token_type="access",
        expires_delta=expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        secret=settings.SECRET_KEY,
        extra={"role": role},
    )


def create_refresh_token(subject: str, refresh_token_version: int, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=subject,
        token_type="refresh",
        expires_delta=expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        secret=settings.REFRESH_SECRET_KEY,
        extra={"rtv": refresh_token_version},
    )


# access 토큰의 subject(user_id) 반환, 유효하지 않으면 JWTError
def decode_access_token(token: str) -> str:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Not an access token")
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Missing subject")
    return sub


# refresh 토큰의 (subject, rtv) 반환, 유효하지 않으면 JWTError
def decode_refresh_token(token: str) -> tuple[str, int]:
    payload = jwt.decode(token, settings.REFRESH_SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "refresh":
        raise JWTError("Not a refresh token")
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Missing subject")
    rtv = int(payload.get("rtv", -1))
    return sub, rtv

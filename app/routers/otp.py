"""
otp.py

이메일 인증(OTP) API 모음.

회원 가입 직후 사용자는 is_verified=False 상태이며,
이메일로 받은 OTP 코드를 검증해야 가입 신청서를 제출할 수 있다.

주요 기능:
- OTP 발송 (가입된 미인증 사용자만)
- OTP 검증 → is_verified=True

관련 파일:
- app.services.otp     : Redis 기반 OTP 발급 / 검증
- app.services.mailer  : SMTP 메일 발송

"""

from fastapi import APIRouter, Depends, HTTPException

from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.deps import get_db, get_otp_service
from app.core.errors import Conflict, NotFound
from app.models.user import User
from app.schemas.auth import SendOtpRequest, VerifyOtpRequest
from app.services.otp import OtpService, normalize_email

router = APIRouter(prefix="/otp", tags=["otp"])


def _find_user(db: Session, email: str) -> User:
    user = db.scalar(select(User).where(User.email == normalize_email(email), User.is_deleted.is_(False)))
    if not user:
        raise NotFound("User not found")
    if user.is_verified:
        raise Conflict("Email already verified")
    return user


# OTP 발송 (유효한 코드가 남아 있으면 429)
@router.post("/send")
def send_otp(
    data: SendOtpRequest,
    db: Session = Depends(get_db),
    otp: OtpService = Depends(get_otp_service),
):
    user = _find_user(db, data.email)
    otp.send(user.email, data.name or user.full_name)
    return {
        "message": "OTP sent successfully",
        "data": {"email": user.email},
    }


# OTP 검증 성공 시 이메일 인증 완료 처리
@router.post("/verify")
def verify_otp(
    data: VerifyOtpRequest,
    db: Session = Depends(get_db),
    otp: OtpService = Depends(get_otp_service),
):
    user = _find_user(db, data.email)
    otp.verify(user.email, data.otp)

    try:
        user.is_verified = True
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Email verified successfully",
        "data": {"email": user.email, "is_verified": True},
    }

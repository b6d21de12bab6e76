"""
auth.py

인증(Authentication) API 모음.

이 파일은 회원 가입, 로그인, 토큰 재발급, 로그아웃과 같이
사용자 인증 흐름 전반을 담당한다.
JWT 기반 인증 방식을 사용하며, Access Token + Refresh Token 구조를 따른다.

주요 기능:
- 회원 가입 (GUEST, 이메일 미인증 상태로 생성)
- 로그인 및 토큰 발급
- Refresh Token 기반 Access Token 재발급
- 로그아웃 (Refresh Token 무효화)

설계 원칙:
- Access Token은 응답 바디로 전달, 이후 Authorization Header(Bearer)로 사용
- Refresh Token은 HttpOnly Cookie로 관리
- Refresh Token Version을 이용해 강제 로그아웃 / 토큰 무효화 처리
- GUEST 도 로그인 가능 (이메일 인증 및 가입 신청을 위해)

관련 파일:
- app.core.security        : 비밀번호 해시 / JWT 생성·검증
- app.core.deps            : 인증 의존성(get_current_user)
- app.routers.otp          : 이메일 인증
- app.routers.members      : 가입 신청

"""

import uuid
from jose import JWTError
from fastapi import APIRouter, Depends, HTTPException, status, Response, Request

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.deps import get_db, get_current_user
from app.core.config import settings
from app.core.errors import Conflict
from app.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)

from app.models.user import User, Role
from app.schemas.auth import RegisterRequest, RegisterResponse, LoginRequest, TokenResponse
from app.services.otp import normalize_email

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE_NAME = "refresh_token"


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,        # 로컬 False / HTTPS 운영 True
        samesite=settings.COOKIE_SAMESITE,    # "lax" 추천
        domain=settings.COOKIE_DOMAIN,        # 보통 None
        path="/",
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(key=REFRESH_COOKIE_NAME, path="/", domain=settings.COOKIE_DOMAIN)


"""
회원 가입 API

- 이메일 기준으로 신규 사용자 생성 (소문자 정규화)
- 가입 시 권한은 GUEST, 이메일 인증 전(is_verified=False)
- 이후 /otp/send → /otp/verify 로 이메일 인증 후 가입 신청 가능

"""

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    email = normalize_email(data.email)

    if db.scalar(select(User).where(User.email == email)):
        raise Conflict("Email already registered")

    user = User(
        email=email,
        password_hash=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=Role.GUEST,
        is_active=True,
        is_verified=False,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "User registered successfully",
        "data": RegisterResponse(
            id=user.id,
            email=user.email,
            role=user.role.value,
            is_verified=user.is_verified,
        ).model_dump(mode="json"),
    }


"""
로그인 API

- 이메일 / 비밀번호 인증
- 비활성화된 계정은 로그인 불가
- Access Token은 응답 바디로 반환
- Refresh Token은 HttpOnly Cookie로 설정

"""

@router.post("/login")
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    email = normalize_email(data.email)
    user = db.scalar(select(User).where(User.email == email, User.is_deleted.is_(False)))

    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    access = create_access_token(subject=str(user.id), role=user.role.value)
    refresh = create_refresh_token(subject=str(user.id), refresh_token_version=user.refresh_token_version)
    _set_refresh_cookie(response, refresh)

    return {
        "message": "Logged in successfully",
        "data": {
            "access_token": access,
            "token_type": "bearer",
            "user": {
                "id": str(user.id),
                "email": user.email,
                "role": user.role.value,
                "is_verified": user.is_verified,
            },
        },
    }

"""
Access Token 재발급 API

- Refresh Token 쿠키를 사용해 새로운 Access Token 발급
- Refresh Token Version이 일치하지 않으면 재발급 거부
- 재발급 시 Refresh Token을 회전(rotation)

"""

@router.post("/refresh")
def refresh(request: Request, response: Response, db: Session = Depends(get_db)):
    token = request.cookies.get(REFRESH_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing refresh token")

    try:
        user_id, token_rtv = decode_refresh_token(token)
        user_uuid = uuid.UUID(user_id)
    except (JWTError, ValueError):
        _clear_refresh_cookie(response)
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = db.scalar(select(User).where(User.id == user_uuid, User.is_deleted.is_(False)))
    if not user or not user.is_active:
        _clear_refresh_cookie(response)
        raise HTTPException(status_code=401, detail="User not found")

    if token_rtv != user.refresh_token_version:
        _clear_refresh_cookie(response)
        raise HTTPException(status_code=401, detail="Refresh token revoked")

    try:
        user.refresh_token_version += 1
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    new_access = create_access_token(subject=str(user.id), role=user.role.value)
    new_refresh = create_refresh_token(
        subject=str(user.id),
        refresh_token_version=user.refresh_token_version,
    )
    _set_refresh_cookie(response, new_refresh)

    return {
        "message": "Token refreshed",
        "data": TokenResponse(access_token=new_access).model_dump(),
    }

"""
로그아웃 API

- Refresh Token Version 증가로 기존 토큰 무효화
- 클라이언트의 Refresh Token 쿠키 삭제

"""

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        user.refresh_token_version += 1
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    _clear_refresh_cookie(response)
    response.status_code = status.HTTP_204_NO_CONTENT
    return None

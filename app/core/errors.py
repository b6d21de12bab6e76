"""
errors.py

도메인(비즈니스 규칙) 오류 정의 및 HTTP 응답 매핑.

서비스 계층은 HTTPException 대신 이 파일의 DomainError 하위 타입을 발생시키고,
main.py 에 등록된 핸들러가 이를 상태 코드 + {"detail": message} 로 변환한다.

오류 종류:
- ValidationError   : 필수 입력 누락 / 형식 오류 (400)
- Unauthorized      : 인증 실패, OTP 불일치 등 (401)
- Forbidden         : 권한 / 계정 상태로 인해 허용되지 않는 요청 (403)
- NotFound          : 참조 대상(사용자/신청서/학과 등) 없음 (404)
- Conflict          : 중복 생성 시도 (409)
- AlreadyPending    : 이미 심사 대기 중인 신청서 존재 (409)
- AlreadyApproved   : 이미 승인된 신청서 존재 (409)
- AlreadyReviewed   : 심사가 끝난 신청서에 대한 승인/거절 (409)
- DuplicateMember   : 승인 시점에 이미 Member 레코드 존재 (409)
- TooManyRequests   : OTP 재발송 / 시도 횟수 초과 (429)
- StoreFailure      : DB 트랜잭션 실패, 항상 롤백된 상태 (500)

"""

from fastapi import Request
from fastapi.responses import JSONResponse


class DomainError(Exception):
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid input"


class Unauthorized(DomainError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(DomainError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(DomainError):
    status_code = 404
    default_message = "Not found"


class Conflict(DomainError):
    status_code = 409
    default_message = "Already exists"


class AlreadyPending(Conflict):
    default_message = "Your application is under review"


class AlreadyApproved(Conflict):
    default_message = "Your application is already approved"


class AlreadyReviewed(Conflict):
    default_message = "Application already reviewed"


class DuplicateMember(Conflict):
    default_message = "User is already a member"


class TooManyRequests(DomainError):
    status_code = 429
    default_message = "Too many requests"


class StoreFailure(DomainError):
    status_code = 500
    default_message = "Database error"


# 내부 저장소 정보는 노출하지 않고 message 만 반환
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

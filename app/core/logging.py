"""
logging.py

애플리케이션 로깅 초기화.

- stdout 으로 JSON 한 줄 로그를 출력 (python-json-logger)
- 모든 로그에 service 필드(settings.APP_NAME)를 고정으로 포함
- 레벨은 settings.LOG_LEVEL 기준
- HTTP 요청 로그는 log_requests 미들웨어가 남기므로 uvicorn.access 는 WARNING 이상만 출력
- 각 모듈은 logging.getLogger(__name__) 으로 로거를 얻어 사용

"""

import logging
import sys
import time
import uuid

from fastapi import Request
from pythonjsonlogger import jsonlogger

from app.core.config import Settings

REQUEST_ID_HEADER = "X-Request-ID"

request_logger = logging.getLogger("app.request")


def build_formatter(settings: Settings) -> jsonlogger.JsonFormatter:
    return jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "name": "logger"},
        static_fields={"service": settings.APP_NAME},
    )


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # reload 시 핸들러 중복 방지
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings))
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


"""
요청 단위 로그 미들웨어

- 클라이언트가 보낸 X-Request-ID 를 쓰고, 없으면 새로 발급해 응답 헤더에 돌려준다
- method / path / status / duration_ms 를 한 줄로 남긴다
- 처리 중 예외는 request_id 와 함께 기록한 뒤 그대로 전파

"""

async def log_requests(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    context = {"request_id": request_id, "method": request.method, "path": request.url.path}
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        request_logger.exception("Request failed", extra=context)
        raise

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    request_logger.info(
        "Request handled",
        extra={**context, "status_code": response.status_code, "duration_ms": duration_ms},
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response

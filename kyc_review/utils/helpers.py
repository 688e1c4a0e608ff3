"""
유틸리티 함수 모듈
"""
import re
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional


def utcnow() -> datetime:
    """현재 UTC 시각 (DB 저장용 naive datetime)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value) -> Optional[date]:
    """
    날짜 값 파싱

    Args:
        value: date/datetime 객체 또는 날짜 문자열 (ISO 형식 포함)

    Returns:
        date 객체 또는 None

    Raises:
        ValueError: 인식할 수 없는 형식일 경우
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    # "2020-01-15T00:00:00.000Z" 같은 ISO 타임스탬프는 날짜 부분만 사용
    text = text.split("T", 1)[0]
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"날짜 형식을 인식할 수 없습니다: {value}")


def normalize_text(text: str) -> str:
    """
    텍스트 정규화

    Args:
        text: 원본 텍스트

    Returns:
        정규화된 텍스트
    """
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def mask_personal_info(text: str, mask_char: str = "*") -> str:
    """
    개인정보 마스킹 (로그 출력용)

    Args:
        text: 원본 텍스트
        mask_char: 마스킹 문자

    Returns:
        마스킹된 텍스트
    """
    # 전화번호 마스킹 (9123-4567 -> ****-4567)
    text = re.sub(r'\b(\d{4})-(\d{4})\b', mask_char * 4 + r'-\2', text)

    # 이메일 마스킹 (user@example.com -> use***@example.com)
    text = re.sub(r'(\w{1,3})([\w.+-]*)(@[\w-]+\.[\w.]+)', r'\1' + mask_char * 3 + r'\3', text)

    # 비밀번호 필드 마스킹
    text = re.sub(r'("password"\s*:\s*)"[^"]*"', r'\1"' + mask_char * 8 + '"', text)

    return text


def generate_id(prefix: str) -> str:
    """
    엔티티 ID 생성 (접두사 포함)

    Args:
        prefix: case / doc / sum / user 등

    Returns:
        ID 문자열 (예: case_1a2b3c4d5e6f)
    """
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def generate_case_number(today: Optional[date] = None) -> str:
    """
    사람이 읽을 수 있는 케이스 번호 생성

    Returns:
        KYC-YYYYMMDD-XXXXXX 형식 문자열
    """
    today = today or utcnow().date()
    return f"KYC-{today:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


def sanitize_filename(filename: Optional[str]) -> str:
    """경로 문자를 제거한 파일명"""
    name = Path((filename or "").replace("\\", "/")).name
    name = name.replace("..", "").strip()
    return name

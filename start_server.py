"""
서버 시작 스크립트
"""
import uvicorn
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import settings

if __name__ == "__main__":
    print("="*70)
    print(f"서버 시작 중... http://{settings.api_host}:{settings.api_port}")
    print("="*70)
    try:
        uvicorn.run(
            "kyc_review.api.main:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=settings.environment == "development",
            log_level=settings.log_level.lower()
        )
    except KeyboardInterrupt:
        print("\n서버 종료")

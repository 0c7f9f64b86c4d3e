"""
commentdoc CLI 진입점

프로젝트 루트에서 실행:
  python main.py [command] [options]

또는 설치 후:
  commentdoc [command] [options]
"""

import sys
from pathlib import Path

# src 디렉터리를 Python 경로에 추가
src_root = Path(__file__).parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from commentdoc.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())

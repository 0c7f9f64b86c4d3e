"""
Status Manager 단위 테스트

다음 시나리오를 검증합니다:
1. 단계 시작/종료 메시지 출력
2. 단계별 종료 메시지 (탐색, 파싱, 생성)
3. 예외 발생 시 종료 메시지 생략
4. 진행률 표시 순회
"""

import pytest

from commentdoc.cli import BuildingStatus, FileSearchStatus, ParsingStatus, StatusManager


def test_start_and_end_messages(capsys):
    """시작/종료 메시지 출력 테스트"""
    with FileSearchStatus(1, 3, show_progress=False) as status:
        status.found = 5

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "  [1/3] 소스 파일 탐색 중..."
    assert out[1].startswith("  ✓ 5개의 소스 파일을 찾았습니다. (")
    assert out[1].endswith("초)")
    assert status.elapsed >= 0


def test_file_search_from_cache():
    """캐시에서 로드한 탐색 메시지 테스트"""
    status = FileSearchStatus(1, 3)
    status.found = 2
    status.from_cache = True

    assert status.end_message() == "캐시에서 2개의 소스 파일을 로드했습니다."


def test_parsing_messages():
    """파싱 단계 메시지 테스트"""
    status = ParsingStatus(2, 3)
    status.parsed = 3
    status.topics = 7
    assert status.end_message() == "3개의 파일에서 7개의 토픽을 찾았습니다."

    status.cached = 2
    status.errors = 1
    assert status.end_message() == "5개의 파일에서 7개의 토픽을 찾았습니다 (캐시 2개, 오류 1개)."


def test_building_messages():
    """문서 생성 단계 메시지 테스트"""
    status = BuildingStatus(3, 3)
    status.pages = 2
    status.written = 6
    assert status.end_message() == "2개의 파일 페이지를 포함해 6개의 파일을 생성했습니다."

    status.skipped = True
    assert status.end_message() == "HTML 문서 생성을 건너뛰었습니다."


def test_exception_skips_end_message(capsys):
    """예외 발생 시 종료 메시지 생략 테스트"""
    with pytest.raises(ValueError):
        with ParsingStatus(2, 3, show_progress=False):
            raise ValueError("실패")

    out = capsys.readouterr().out
    assert "[2/3]" in out
    assert "✓" not in out


def test_track_and_progress_bar():
    """진행률 표시 순회 테스트"""
    status = StatusManager(1, 1, show_progress=False)

    assert list(status.track([1, 2, 3])) == [1, 2, 3]

    bar = status.progress_bar(2)
    bar.update(2)
    assert bar.total == 2
    bar.close()


def test_elapsed_before_start():
    """시작 전 경과 시간 테스트"""
    assert StatusManager(1, 1).elapsed == 0.0

"""
Execution Timer 단위 테스트

다음 시나리오를 검증합니다:
1. 구간 시작/종료와 경과 시간
2. 같은 이름의 중복 시작 무시
3. 시작하지 않은 구간 종료 예외
4. 하위 구간 들여쓰기 출력
"""

import pytest

from commentdoc.cli import ExecutionTimer


def test_start_and_end():
    """구간 시작/종료 테스트"""
    timer = ExecutionTimer()

    timer.start("Total")
    assert timer.elapsed("Total") is None

    timer.end("Total")
    assert timer.elapsed("Total") >= 0
    assert timer.elapsed("Missing") is None


def test_duplicate_start_ignored():
    """같은 이름 중복 시작 무시 테스트"""
    timer = ExecutionTimer()

    timer.start("Parsing")
    timer.start("Parsing")
    timer.end("Parsing")
    first = timer.elapsed("Parsing")
    timer.end("Parsing")

    assert len(timer.records) == 1
    assert timer.elapsed("Parsing") == first


def test_end_unknown_timer():
    """시작하지 않은 구간 종료 예외 테스트"""
    with pytest.raises(KeyError):
        ExecutionTimer().end("Nope")


def test_measure_context_manager():
    """with 블록 측정 테스트"""
    timer = ExecutionTimer()

    with pytest.raises(RuntimeError):
        with timer.measure("Building"):
            raise RuntimeError("실패")

    assert timer.elapsed("Building") is not None


def test_statistics_nesting():
    """하위 구간 들여쓰기 출력 테스트"""
    timer = ExecutionTimer()
    with timer.measure("Total"):
        with timer.measure("Parsing"):
            pass
        with timer.measure("Building"):
            pass
    timer.start("Unfinished")

    lines = timer.statistics_to_string().splitlines()

    assert len(lines) == 3
    assert lines[0].startswith("Total ")
    assert lines[1].startswith("- Parsing ")
    assert lines[2].startswith("- Building")
    assert all(line.endswith("s") for line in lines)
    assert len({len(line) for line in lines}) == 1


def test_statistics_empty():
    """측정 기록 없는 출력 테스트"""
    assert ExecutionTimer().statistics_to_string() == ""

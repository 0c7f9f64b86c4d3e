"""
CLI Controller 모듈

argparse를 사용하여 CLI 기본 구조를 구축하고, build, list, prototype, clear 명령어와 각 옵션을 파싱합니다.
"""

import argparse
import hashlib
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from anytree import Node, RenderTree
from tabulate import tabulate

from commentdoc import __version__
from commentdoc.collector import SourceFileCollector
from commentdoc.comment_types import CommentTypeError, CommentTypeManager
from commentdoc.comments import decode
from commentdoc.config import Configuration, ConfigurationError
from commentdoc.config import load_config as load_global_config
from commentdoc.languages import LanguageError, LanguageManager
from commentdoc.links import LinkResolver
from commentdoc.models import ParseResult, SourceFile, Topic
from commentdoc.output import BuildError, HTMLBuilder, PrototypeLayout
from commentdoc.parser import PrototypeParser, SourceParser
from commentdoc.persistence import (
    SOURCE_FILES_FILE,
    TOPICS_FILE,
    DataPersistenceManager,
    PersistenceError,
)

from .execution_timer import ExecutionTimer
from .status_manager import BuildingStatus, FileSearchStatus, ParsingStatus

# 파싱 결과에 영향을 주는 설정 항목 (바뀌면 캐시 키가 달라짐)
CACHE_SENSITIVE_FIELDS = (
    "input_dirs",
    "tab_width",
    "extension_overrides",
    "shebang_overrides",
    "enum_values",
    "documented_only",
    "encodings",
    "languages_file",
    "comment_types_file",
)


class CLIController:
    """
    CLI 명령어를 파싱하고 실행하는 컨트롤러 클래스

    주요 기능:
    1. 명령어 정의: build, list, prototype, clear 명령어 구현
    2. 옵션 파싱: argparse를 사용하여 각 명령의 옵션 정의
    3. 도움말 메시지: 각 명령과 옵션에 대한 명확한 설명 제공
    4. 에러 처리: 잘못된 명령어 및 옵션에 대한 에러 메시지
    5. 진행 상황 표시: 단계별 상태 메시지와 진행률 표시
    6. 로깅: 모든 작업을 로그 파일에 기록
    """

    def __init__(self):
        """CLIController 초기화"""
        self.parser = self._create_parser()
        self.logger = self._setup_logging()
        self.config: Optional[Configuration] = None

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        argparse 파서 생성 및 서브파서 설정

        Returns:
            argparse.ArgumentParser: 설정된 메인 파서
        """
        parser = argparse.ArgumentParser(
            prog="commentdoc",
            description="소스 코드 주석으로 HTML 문서를 생성하는 도구",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
예제:
  %(prog)s build --config commentdoc.json
  %(prog)s build --config commentdoc.json --rebuild
  %(prog)s list --config commentdoc.json --topics
  %(prog)s list --config commentdoc.json --symbol Color.Red
  %(prog)s prototype --language C "int Add (int a, int b = 0);"
  %(prog)s clear --config commentdoc.json --backup
            """,
        )
        parser.add_argument(
            "--version", action="version", version=f"%(prog)s {__version__}"
        )

        subparsers = parser.add_subparsers(
            dest="command",
            title="명령어",
            description="사용 가능한 명령어 목록:",
            metavar="COMMAND",
        )

        # build 명령어 서브파서
        build_parser = subparsers.add_parser(
            "build",
            help="소스 파일을 수집/파싱하여 HTML 문서를 생성합니다",
            description="소스 파일을 수집/파싱하여 HTML 문서를 생성합니다.",
        )
        build_parser.add_argument(
            "--config",
            type=str,
            default="commentdoc.json",
            help="설정 파일 경로 (기본값: commentdoc.json)",
        )
        build_parser.add_argument(
            "--rebuild",
            action="store_true",
            help="캐시를 무시하고 모든 파일을 다시 파싱합니다",
        )
        build_parser.add_argument(
            "--no-html",
            action="store_true",
            help="파싱 결과만 저장하고 HTML 문서는 생성하지 않습니다",
        )
        build_parser.add_argument(
            "--no-progress",
            action="store_true",
            help="진행률 표시줄을 숨깁니다",
        )

        # list 명령어 서브파서
        list_parser = subparsers.add_parser(
            "list",
            help="저장된 파싱 결과를 조회합니다",
            description="저장된 파싱 결과를 조회합니다. 먼저 build 명령어를 실행해야 합니다.",
        )
        list_parser.add_argument(
            "--config",
            type=str,
            default="commentdoc.json",
            help="설정 파일 경로 (기본값: commentdoc.json)",
        )
        list_group = list_parser.add_mutually_exclusive_group()
        list_group.add_argument(
            "--files", action="store_true", help="수집된 소스 파일 목록을 출력합니다"
        )
        list_group.add_argument(
            "--topics", action="store_true", help="모든 토픽 목록을 출력합니다"
        )
        list_group.add_argument(
            "--tree", action="store_true", help="파일/토픽 계층을 트리로 출력합니다"
        )
        list_group.add_argument(
            "--symbol",
            type=str,
            metavar="NAME",
            help="심볼 링크를 해석하여 대상 토픽 정보를 출력합니다",
        )
        list_parser.add_argument(
            "--context",
            type=str,
            default="",
            help="--symbol 해석에 사용할 컨텍스트 심볼 (기본값: 전역)",
        )

        # prototype 명령어 서브파서
        prototype_parser = subparsers.add_parser(
            "prototype",
            help="프로토타입을 파싱하여 정렬된 형태로 출력합니다",
            description="프로토타입을 파싱하여 파라미터 컬럼이 정렬된 형태로 출력합니다.",
        )
        prototype_parser.add_argument(
            "--language",
            type=str,
            required=True,
            help="프로토타입의 언어 이름 (예: C, C#, Pascal)",
        )
        prototype_parser.add_argument(
            "--columns",
            action="store_true",
            help="파라미터 컬럼 분해 결과를 표로 함께 출력합니다",
        )
        prototype_parser.add_argument("text", type=str, help="프로토타입 문자열")

        # clear 명령어 서브파서
        clear_parser = subparsers.add_parser(
            "clear",
            help="저장된 파싱 결과와 캐시를 삭제합니다",
            description="작업 디렉터리의 파싱 결과와 캐시를 삭제합니다.",
        )
        clear_parser.add_argument(
            "--config",
            type=str,
            default="commentdoc.json",
            help="설정 파일 경로 (기본값: commentdoc.json)",
        )
        clear_parser.add_argument(
            "--backup",
            action="store_true",
            help="삭제 전 백업을 생성합니다",
        )

        return parser

    def _setup_logging(self) -> logging.Logger:
        """
        로깅 설정

        Returns:
            logging.Logger: 설정된 로거
        """
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)

        log_file = (
            log_dir / f"commentdoc_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )

        logger = logging.getLogger("commentdoc")
        logger.setLevel(logging.DEBUG)

        # 이전 실행의 핸들러 제거
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter("%(levelname)s - %(message)s")
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        return logger

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        명령줄 인자 파싱

        Args:
            args: 파싱할 인자 리스트 (None이면 sys.argv 사용)

        Returns:
            argparse.Namespace: 파싱된 인자

        Raises:
            SystemExit: 잘못된 인자 또는 명령어가 없을 때
        """
        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            sys.exit(1)

        return parsed_args

    def load_config(self, config_path: str) -> Configuration:
        """
        설정 파일 로드

        Args:
            config_path: 설정 파일 경로

        Returns:
            Configuration: 로드된 설정 객체

        Raises:
            ConfigurationError: 설정 파일 로드 실패 시
        """
        try:
            self.config = load_global_config(config_path)
            self.logger.info(f"설정 파일 로드 성공: {config_path}")
            return self.config
        except ConfigurationError as e:
            self.logger.error(f"설정 파일 로드 실패: {e}")
            raise

    def execute(self, args: Optional[List[str]] = None) -> int:
        """
        CLI 명령어 실행

        Args:
            args: 명령줄 인자 리스트 (None이면 sys.argv 사용)

        Returns:
            int: 종료 코드 (0: 성공, 1: 실패, 2: 인자 오류)
        """
        try:
            parsed_args = self.parse_args(args)
            self.logger.info(f"명령어 실행: {parsed_args.command}")

            if parsed_args.command == "build":
                return self._handle_build(parsed_args)
            elif parsed_args.command == "list":
                return self._handle_list(parsed_args)
            elif parsed_args.command == "prototype":
                return self._handle_prototype(parsed_args)
            elif parsed_args.command == "clear":
                return self._handle_clear(parsed_args)
            else:
                self.logger.error(f"알 수 없는 명령어: {parsed_args.command}")
                return 1

        except SystemExit as e:
            # argparse가 발생시킨 SystemExit (잘못된 인자 등)
            return e.code if e.code is not None else 2
        except KeyboardInterrupt:
            self.logger.warning("사용자에 의해 중단되었습니다")
            return 1
        except Exception as e:
            self.logger.exception(f"명령어 실행 중 오류 발생: {e}")
            return 1

    # ------------------------------------------------------------------
    # 공통
    # ------------------------------------------------------------------

    @staticmethod
    def create_managers(config: Configuration) -> Tuple[LanguageManager, CommentTypeManager]:
        """
        설정으로 언어 관리자와 주석 타입 관리자를 만듭니다.

        Raises:
            LanguageError: 언어 정의 또는 재정의가 잘못된 경우
            CommentTypeError: 주석 타입 정의가 잘못된 경우
        """
        language_manager = LanguageManager(
            languages_file=config.languages_file,
            extension_overrides=config.extension_overrides,
            shebang_overrides=config.shebang_overrides,
            enum_values=config.enum_values,
        )
        comment_type_manager = CommentTypeManager(config.comment_types_file)
        return language_manager, comment_type_manager

    @staticmethod
    def cache_fingerprint(config: Configuration) -> str:
        """파싱 결과에 영향을 주는 설정과 버전으로 캐시 지문을 만듭니다."""
        data = {field: getattr(config, field) for field in CACHE_SENSITIVE_FIELDS}
        data["version"] = __version__
        return hashlib.md5(json.dumps(data, sort_keys=True).encode()).hexdigest()

    def _persistence_manager(self, config: Configuration) -> DataPersistenceManager:
        return DataPersistenceManager(
            config.working_dir, cache_fingerprint=self.cache_fingerprint(config)
        )

    # ------------------------------------------------------------------
    # build
    # ------------------------------------------------------------------

    def _handle_build(self, args: argparse.Namespace) -> int:
        """
        build 명령어 핸들러

        Args:
            args: 파싱된 인자

        Returns:
            int: 종료 코드
        """
        timer = ExecutionTimer()
        timer.start("Total")
        show_progress = not args.no_progress
        try:
            config = self.load_config(args.config)
            language_manager, comment_type_manager = self.create_managers(config)

            self.logger.info("문서 생성 시작...")
            print("문서 생성을 시작합니다...")

            persistence_manager = self._persistence_manager(config)
            if args.rebuild and persistence_manager.cache_manager is not None:
                removed = persistence_manager.cache_manager.clear_cache()
                self.logger.info(f"--rebuild: 캐시 {removed}개 삭제")

            # 1. 소스 파일 수집
            with timer.measure("Finding Source Files"):
                file_status = FileSearchStatus(1, 3, show_progress)
                with file_status:
                    collector = SourceFileCollector(config, language_manager)
                    source_files = sorted(
                        file_status.track(collector.collect()),
                        key=lambda f: str(f.relative_path),
                    )
                    file_status.found = len(source_files)
                persistence_manager.save_to_file(
                    [f.to_dict() for f in source_files], SOURCE_FILES_FILE
                )

            # 2. 파싱
            with timer.measure("Parsing Source Files"):
                parse_status = ParsingStatus(2, 3, show_progress)
                with parse_status:
                    source_parser = SourceParser(
                        language_manager,
                        comment_type_manager,
                        tab_width=config.tab_width,
                        encodings=config.encodings,
                        documented_only=config.documented_only,
                    )
                    results = [
                        self._parse_source_file(source_file, source_parser, persistence_manager, parse_status)
                        for source_file in parse_status.track(source_files, total=len(source_files))
                    ]
                persistence_manager.save_to_file(
                    persistence_manager.add_timestamp(
                        {"version": __version__, "results": [r.to_dict() for r in results]}
                    ),
                    TOPICS_FILE,
                )

            # 3. HTML 생성
            with timer.measure("Building Output"):
                build_status = BuildingStatus(3, 3, show_progress)
                with build_status:
                    if args.no_html:
                        build_status.skipped = True
                    else:
                        builder = HTMLBuilder(
                            Path(config.output_dir),
                            language_manager,
                            comment_type_manager,
                            project_title=config.project_title,
                            highlight_code=config.highlight_code,
                        )
                        with build_status.progress_bar(len(results)) as bar:
                            written = builder.build(results, progress=bar.update)
                        build_status.pages = len(results)
                        build_status.written = len(written)

            timer.end("Total")

            error_count = sum(len(r.errors) for r in results)
            print("\n문서 생성이 완료되었습니다.")
            print(f"  - 소스 파일: {len(source_files)}개")
            print(f"  - 토픽: {parse_status.topics}개")
            print(f"  - 오류: {error_count}개")
            if not args.no_html:
                print(f"  - 출력 디렉터리: {config.output_dir}")
            for result in results:
                for error in result.errors:
                    print(f"  ! {error.file_path}: {error.message}")

            statistics = timer.statistics_to_string()
            self.logger.debug(f"실행 시간:\n{statistics}")
            print(f"\n실행 시간:\n{statistics}", end="")
            self.logger.info("문서 생성 완료")
            return 0

        except (ConfigurationError, LanguageError, CommentTypeError) as e:
            print(f"오류: {e}", file=sys.stderr)
            return 1
        except (PersistenceError, BuildError) as e:
            self.logger.error(f"build 명령어 실행 중 오류: {e}")
            print(f"오류: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            self.logger.exception(f"build 명령어 실행 중 오류: {e}")
            print(f"오류: {e}", file=sys.stderr)
            return 1

    def _parse_source_file(
        self,
        source_file: SourceFile,
        source_parser: SourceParser,
        persistence_manager: DataPersistenceManager,
        status: ParsingStatus,
    ) -> ParseResult:
        """캐시된 결과가 있으면 사용하고, 없으면 파싱 후 캐시에 저장합니다."""
        cached = persistence_manager.get_cached_result(source_file.path)
        if isinstance(cached, ParseResult):
            source_file.language = cached.source_file.language
            cached.source_file = source_file
            status.cached += 1
            status.topics += len(cached.topics)
            self.logger.debug(f"캐시 사용: {source_file.relative_path}")
            return cached

        result = source_parser.parse_file(source_file)
        status.parsed += 1
        status.topics += len(result.topics)
        status.errors += len(result.errors)
        if not result.has_errors:
            persistence_manager.set_cached_result(source_file.path, result)
        return result

    # ------------------------------------------------------------------
    # list
    # ------------------------------------------------------------------

    def _handle_list(self, args: argparse.Namespace) -> int:
        """
        list 명령어 핸들러

        Args:
            args: 파싱된 인자

        Returns:
            int: 종료 코드
        """
        try:
            has_option = args.files or args.topics or args.tree or args.symbol
            if not has_option:
                print(
                    "오류: list 명령어에는 옵션(--files, --topics, --tree, --symbol) 중 하나가 필요합니다.",
                    file=sys.stderr,
                )
                print("도움말을 보려면: commentdoc list --help", file=sys.stderr)
                return 1

            self.logger.info("정보 조회 시작...")
            config = self.load_config(args.config)
            persistence_manager = DataPersistenceManager(config.working_dir, enable_cache=False)

            if args.files:
                self._list_files(persistence_manager)
            elif args.topics:
                self._list_topics(persistence_manager)
            elif args.tree:
                self._list_tree(persistence_manager, config.project_title)
            else:
                if not self._list_symbol(persistence_manager, args.symbol, args.context):
                    return 1

            self.logger.info("정보 조회 완료")
            return 0

        except ConfigurationError as e:
            print(f"오류: {e}", file=sys.stderr)
            return 1
        except PersistenceError as e:
            self.logger.error(f"파싱 결과 로드 실패: {e}")
            print(
                "파싱 결과를 찾을 수 없습니다. 먼저 'build' 명령어를 실행하세요.",
                file=sys.stderr,
            )
            return 1
        except Exception as e:
            self.logger.exception(f"list 명령어 실행 중 오류: {e}")
            print(f"오류: {e}", file=sys.stderr)
            return 1

    @staticmethod
    def load_results(persistence_manager: DataPersistenceManager) -> List[ParseResult]:
        """
        저장된 파싱 결과 로드

        Raises:
            PersistenceError: topics.json 이 없거나 손상된 경우
        """
        data = persistence_manager.load_from_file(TOPICS_FILE)
        try:
            return [ParseResult.from_dict(r) for r in data.get("results", [])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"파싱 결과 형식이 올바르지 않습니다: {e}")

    def _list_files(self, persistence_manager: DataPersistenceManager) -> None:
        """수집된 소스 파일 목록 출력"""
        source_files = persistence_manager.load_from_file(SOURCE_FILES_FILE, SourceFile)
        if not source_files:
            print("수집된 소스 파일이 없습니다.")
            return

        table_data = [
            [
                f.filename,
                str(f.relative_path),
                f.language or "-",
                f"{f.size:,} bytes",
                f.modified_time.strftime("%Y-%m-%d %H:%M:%S"),
            ]
            for f in source_files
        ]
        print("\n수집된 소스 파일 목록:")
        print(
            tabulate(
                table_data,
                headers=["파일명", "경로", "언어", "크기", "수정 시간"],
                tablefmt="grid",
            )
        )
        print(f"\n총 {len(source_files)}개의 파일")

    def _list_topics(self, persistence_manager: DataPersistenceManager) -> None:
        """모든 토픽 목록 출력"""
        results = self.load_results(persistence_manager)
        table_data = []
        for result in results:
            for topic in result.topics:
                table_data.append(
                    [
                        topic.file_path,
                        topic.comment_line_number,
                        topic.comment_type,
                        topic.title,
                        topic.symbol,
                        topic.anchor,
                    ]
                )

        if not table_data:
            print("토픽이 없습니다.")
            return

        print("\n토픽 목록:")
        print(
            tabulate(
                table_data,
                headers=["파일", "줄", "타입", "제목", "심볼", "앵커"],
                tablefmt="grid",
            )
        )
        print(f"\n총 {len(table_data)}개의 토픽")

    @staticmethod
    def build_topic_tree(results: List[ParseResult], title: str = "") -> Node:
        """
        파일 -> 토픽 -> 멤버 토픽 계층 트리를 만듭니다.

        parent_id 가 있는 토픽은 같은 파일의 부모 토픽 아래에 놓입니다.
        """
        root = Node(title or "Documentation")
        for result in results:
            file_node = Node(str(result.source_file.relative_path), parent=root)
            nodes: Dict[int, Node] = {}
            for topic in result.topics:
                parent = nodes.get(topic.parent_id, file_node) if topic.parent_id is not None else file_node
                nodes[topic.topic_id] = Node(
                    f"{topic.title} ({topic.comment_type})", parent=parent, topic=topic
                )
        return root

    def _list_tree(self, persistence_manager: DataPersistenceManager, title: str) -> None:
        """파일/토픽 계층 트리 출력"""
        results = self.load_results(persistence_manager)
        root = self.build_topic_tree(results, title)
        for pre, _, node in RenderTree(root):
            print(f"{pre}{node.name}")

    def _list_symbol(self, persistence_manager: DataPersistenceManager, name: str, context: str) -> bool:
        """심볼 링크 해석 결과 출력 (찾으면 True)"""
        results = self.load_results(persistence_manager)
        topics: List[Topic] = [topic for result in results for topic in result.topics]
        resolved = LinkResolver(topics).resolve(name, context)
        if resolved is None:
            print(f"심볼을 찾을 수 없습니다: {name}")
            return False

        rows = [
            ["제목", resolved.title],
            ["타입", resolved.comment_type],
            ["심볼", resolved.symbol],
            ["위치", f"{resolved.file_path}:{resolved.comment_line_number}"],
            ["앵커", resolved.anchor],
        ]
        if resolved.prototype:
            rows.append(["프로토타입", resolved.prototype])
        if resolved.summary:
            rows.append(["요약", decode(resolved.summary)])
        print(tabulate(rows, tablefmt="grid"))
        return True

    # ------------------------------------------------------------------
    # prototype
    # ------------------------------------------------------------------

    def _handle_prototype(self, args: argparse.Namespace) -> int:
        """
        prototype 명령어 핸들러

        Args:
            args: 파싱된 인자

        Returns:
            int: 종료 코드
        """
        try:
            language = LanguageManager().from_name(args.language)
            if language is None:
                print(f"오류: 알 수 없는 언어입니다: {args.language}", file=sys.stderr)
                return 1

            parsed = PrototypeParser().parse(args.text, language)
            layout = PrototypeLayout.build(parsed)
            print(layout.render_text())

            if args.columns and layout.has_parameters:
                print()
                print(
                    tabulate(
                        layout.rows(),
                        headers=[column.value for column in layout.columns],
                        tablefmt="grid",
                    )
                )
            return 0

        except LanguageError as e:
            print(f"오류: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            self.logger.exception(f"prototype 명령어 실행 중 오류: {e}")
            print(f"오류: {e}", file=sys.stderr)
            return 1

    # ------------------------------------------------------------------
    # clear
    # ------------------------------------------------------------------

    def _handle_clear(self, args: argparse.Namespace) -> int:
        """
        clear 명령어 핸들러

        Args:
            args: 파싱된 인자

        Returns:
            int: 종료 코드
        """
        try:
            config = self.load_config(args.config)

            self.logger.info("데이터 삭제 시작...")
            persistence_manager = DataPersistenceManager(config.working_dir)
            backup_dir = persistence_manager.clear_all(use_backup=args.backup)

            print("모든 데이터가 삭제되었습니다.")
            if backup_dir is not None:
                print(f"백업이 생성되었습니다: {backup_dir}")
            return 0

        except ConfigurationError as e:
            print(f"오류: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            self.logger.exception(f"clear 명령어 실행 중 오류: {e}")
            print(f"오류: {e}", file=sys.stderr)
            return 1

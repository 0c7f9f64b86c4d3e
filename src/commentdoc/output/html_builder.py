"""
HTML Builder 모듈

파싱 결과로 정적 HTML 문서를 만듭니다.

출력 구조:
    <output_dir>/index.html           파일/토픽 메뉴
    <output_dir>/styles.css
    <output_dir>/files/<page>.html    소스 파일별 페이지
    <output_dir>/search_index.json    키워드 -> 토픽 (3글자 접두사별)
    <output_dir>/summary.json         파일별 토픽 요약
"""

import html
import json
import logging
import re
import shutil
from collections import OrderedDict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Template

from commentdoc.comment_types import CommentTypeManager
from commentdoc.comments import decode
from commentdoc.languages import LanguageManager
from commentdoc.links import LinkResolver
from commentdoc.models import ParseResult, Topic
from commentdoc.parser import PrototypeParser
from commentdoc.symbols import SymbolString

from .formatted_text import FormattedText
from .prototype_layout import PrototypeLayout

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
SEARCH_PREFIX_LENGTH = 3


class BuildError(Exception):
    """문서 생성 관련 에러"""

    pass


def render_template(template_path: Path, variables: Dict[str, Any]) -> str:
    """
    Jinja2를 사용하여 템플릿 파일을 렌더링합니다.

    Args:
        template_path: 템플릿 파일 경로
        variables: 치환할 변수 딕셔너리

    Returns:
        str: 렌더링된 문자열
    """
    with open(template_path, "r", encoding="utf-8") as f:
        template_str = f.read()

    template = Template(template_str)
    return template.render(**variables)


def page_name(file_path: str) -> str:
    """소스 파일 상대 경로로 평면 페이지 이름을 만듭니다 (예: "src/a.c" -> "src-a.c.html")."""
    normalized = file_path.replace("\\", "/").strip("/")
    return re.sub(r"[^\w.\-]+", "-", normalized) + ".html"


class HTMLBuilder:
    """
    HTML 문서 생성기

    주요 기능:
    1. 전체 토픽으로 링크 해석기 구성
    2. 파일별 페이지 렌더링 (프로토타입 표, 본문, 열거형 값 앵커)
    3. 메뉴(index.html), 검색 인덱스, 요약 JSON 생성
    """

    def __init__(
        self,
        output_dir: Path,
        language_manager: LanguageManager,
        comment_type_manager: CommentTypeManager,
        project_title: str = "",
        highlight_code: bool = True,
    ):
        """
        HTMLBuilder 초기화

        Args:
            output_dir: 출력 디렉터리
            language_manager: 언어 관리자
            comment_type_manager: 주석 타입 관리자
            project_title: 페이지 제목에 사용할 프로젝트 이름
            highlight_code: 코드 블록 구문 강조 여부
        """
        self.output_dir = Path(output_dir)
        self.language_manager = language_manager
        self.comment_type_manager = comment_type_manager
        self.project_title = project_title or "Documentation"
        self.highlight_code = highlight_code
        self.prototype_parser = PrototypeParser()

    def build(self, results: Iterable[ParseResult], progress=None) -> List[Path]:
        """
        문서를 생성합니다.

        Args:
            results: 파일별 파싱 결과
            progress: 파일 하나를 쓸 때마다 호출할 콜백 (선택)

        Returns:
            List[Path]: 생성된 파일 경로 목록

        Raises:
            BuildError: 출력 디렉터리 또는 파일을 쓸 수 없는 경우
        """
        results = sorted(results, key=lambda r: str(r.source_file.relative_path))
        all_topics = [topic for result in results for topic in result.topics]

        pages = {str(result.source_file.relative_path): page_name(str(result.source_file.relative_path)) for result in results}
        resolver = LinkResolver(all_topics, self.comment_type_manager)
        formatter = FormattedText(
            resolver,
            self.language_manager,
            highlight_code=self.highlight_code,
            href_for=lambda topic: f"{pages.get(topic.file_path, '')}#{topic.anchor}",
        )

        written: List[Path] = []
        try:
            files_dir = self.output_dir / "files"
            files_dir.mkdir(parents=True, exist_ok=True)

            for result in results:
                file_path = str(result.source_file.relative_path)
                target = files_dir / pages[file_path]
                content = render_template(
                    TEMPLATE_DIR / "file_page.html",
                    {
                        "project_title": self.project_title,
                        "file_path": file_path,
                        "topics": self._page_topics(result, formatter),
                        "errors": result.errors,
                    },
                )
                target.write_text(content, encoding="utf-8")
                written.append(target)
                if progress is not None:
                    progress()

            written.append(self._write_index(results, pages, len(all_topics)))
            shutil.copyfile(TEMPLATE_DIR / "styles.css", self.output_dir / "styles.css")
            written.append(self.output_dir / "styles.css")
            written.append(self._write_json("search_index.json", self.search_index(results, pages)))
            written.append(self._write_json("summary.json", self.summary(results, pages)))
        except OSError as e:
            raise BuildError(f"문서 출력 실패: {e}")

        logger.info(f"HTML 문서 생성 완료: {self.output_dir} (파일 {len(written)}개)")
        return written

    # ------------------------------------------------------------------
    # 페이지
    # ------------------------------------------------------------------

    def _page_topics(self, result: ParseResult, formatter: FormattedText) -> List[Dict[str, Any]]:
        language = self.language_manager.from_name(result.source_file.language or "")
        members: Dict[int, Dict[str, str]] = {}
        for topic in result.topics:
            if topic.is_embedded and topic.parent_id is not None:
                members.setdefault(topic.parent_id, {})[topic.title] = topic.anchor

        page_topics = []
        for topic in result.topics:
            if topic.is_embedded:
                continue
            comment_type = self.comment_type_manager.from_name(topic.comment_type)
            topic_language = self.language_manager.from_name(topic.language or "") or language
            page_topics.append(
                {
                    "title": topic.title,
                    "anchor": topic.anchor,
                    "type_name": comment_type.display_name if comment_type else topic.comment_type,
                    "type_id": comment_type.simple_identifier if comment_type else "Topic",
                    "is_child": topic.parent_id is not None,
                    "prototype_html": self.prototype_html(topic, formatter),
                    "body_html": formatter.to_html(
                        topic.body,
                        context=topic.symbol if self._starts_scope(topic) else topic.context,
                        language=topic_language,
                        member_anchors=members.get(topic.topic_id),
                    ),
                }
            )
        return page_topics

    def _starts_scope(self, topic: Topic) -> bool:
        comment_type = self.comment_type_manager.from_name(topic.comment_type)
        return comment_type is not None and comment_type.scope == "start"

    def prototype_html(self, topic: Topic, formatter: Optional[FormattedText] = None) -> str:
        """
        토픽 프로토타입을 HTML 로 변환합니다.

        파라미터가 있으면 컬럼이 정렬된 표, 없으면 구문 강조된 한 줄입니다.
        """
        if not topic.prototype:
            return ""
        language = self.language_manager.from_name(topic.language or "")
        if language is None:
            return f'<div class="PSection PPlainSection">{html.escape(topic.prototype)}</div>'

        layout = PrototypeLayout.build(self.prototype_parser.parse(topic.prototype, language))
        formatter = formatter or FormattedText(highlight_code=self.highlight_code)
        highlight_language = language if self.highlight_code else None

        if not layout.has_parameters:
            text = formatter.highlight_html(layout.before_parameters, highlight_language)
            return f'<div class="PSection PPlainSection">{text}</div>'

        rows = layout.rows()
        lines = ['<table class="PParameterTable">']
        for index, row in enumerate(rows):
            cells = []
            if index == 0:
                before = formatter.highlight_html(layout.before_parameters, highlight_language)
                cells.append(f'<td class="PBeforeParameters" rowspan="{len(rows)}">{before}</td>')
            for column, cell in zip(layout.columns, row):
                cells.append(
                    f'<td class="P{column.value}">{formatter.highlight_html(cell, highlight_language)}</td>'
                )
            if index == len(rows) - 1:
                after = formatter.highlight_html(layout.after_parameters, highlight_language)
                cells.append(f'<td class="PAfterParameters">{after}</td>')
            lines.append("<tr>" + "".join(cells) + "</tr>")
        lines.append("</table>")
        return "".join(lines)

    def _write_index(self, results: List[ParseResult], pages: Dict[str, str], topic_count: int) -> Path:
        files = []
        for result in results:
            file_path = str(result.source_file.relative_path)
            files.append(
                {
                    "file_path": file_path,
                    "page": pages[file_path],
                    "topics": [
                        {
                            "title": topic.title,
                            "anchor": topic.anchor,
                            "summary": decode(topic.summary) if topic.summary else "",
                        }
                        for topic in result.topics
                        if not topic.is_embedded
                    ],
                }
            )

        target = self.output_dir / "index.html"
        target.write_text(
            render_template(
                TEMPLATE_DIR / "index.html",
                {
                    "project_title": self.project_title,
                    "files": files,
                    "topic_count": topic_count,
                    "generated_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                },
            ),
            encoding="utf-8",
        )
        return target

    def _write_json(self, filename: str, data: Any) -> Path:
        target = self.output_dir / filename
        with open(target, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        return target

    # ------------------------------------------------------------------
    # 검색 / 요약
    # ------------------------------------------------------------------

    @staticmethod
    def keywords(topic: Topic) -> List[str]:
        """토픽 제목에서 검색 키워드를 만듭니다 (전체 제목, 마지막 심볼 세그먼트)."""
        keywords = []
        title = " ".join(topic.title.split()).lower()
        if title:
            keywords.append(title)
        last = SymbolString.from_text(topic.title).last_segment.lower()
        if last and last not in keywords:
            keywords.append(last)
        return keywords

    def search_index(self, results: Iterable[ParseResult], pages: Dict[str, str]) -> Dict[str, Dict[str, list]]:
        """
        검색 인덱스를 만듭니다.

        Returns:
            Dict[str, Dict[str, list]]: 접두사(최대 3글자) -> 키워드 -> 토픽 목록
        """
        index: Dict[str, Dict[str, list]] = {}
        for result in results:
            for topic in result.topics:
                entry = {
                    "title": topic.title,
                    "type": topic.comment_type,
                    "symbol": topic.symbol,
                    "href": f"files/{pages.get(topic.file_path, '')}#{topic.anchor}",
                }
                for keyword in self.keywords(topic):
                    prefix = keyword[:SEARCH_PREFIX_LENGTH]
                    index.setdefault(prefix, {}).setdefault(keyword, []).append(entry)

        return OrderedDict(
            (prefix, OrderedDict(sorted(index[prefix].items()))) for prefix in sorted(index)
        )

    @staticmethod
    def summary(results: Iterable[ParseResult], pages: Dict[str, str]) -> List[Dict[str, Any]]:
        """파일별 토픽 요약 목록"""
        summary = []
        for result in results:
            file_path = str(result.source_file.relative_path)
            summary.append(
                {
                    "file": file_path,
                    "page": f"files/{pages.get(file_path, '')}",
                    "language": result.source_file.language,
                    "topics": [
                        {
                            "title": topic.title,
                            "type": topic.comment_type,
                            "anchor": topic.anchor,
                            "summary": decode(topic.summary) if topic.summary else None,
                        }
                        for topic in result.topics
                    ],
                    "errors": [error.to_dict() for error in result.errors],
                }
            )
        return summary

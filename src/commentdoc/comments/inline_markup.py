"""
Inline Markup 모듈

문단 텍스트 한 덩어리를 NDMarkup 으로 변환합니다.

- "*굵게*" -> <b>, "_밑줄_" -> <u>
- "<Symbol>", "<text: target>" -> <link type="naturaldocs">
- "<http://...>", 맨 URL -> <link type="url">
- "<a@b.com>", 맨 이메일 주소 -> <link type="email">
- 그 외 문자는 엔티티로 인코딩
"""

import html
import re
from dataclasses import dataclass
from typing import List, Optional, Union

URL_PROTOCOLS = {
    "http", "https", "ftp", "ftps", "sftp", "file", "news", "gopher",
    "telnet", "ssh", "svn", "git", "irc", "ldap", "rtsp",
}

LINK_SUFFIXES = ("'s", "’s", "'", "’", "s", "es")

_ACCEPTABLE_BEFORE_OPENING = set("([{<\"'/-¿¡*_“‘«")
_ACCEPTABLE_AFTER_CLOSING = set(")]}>\"'.,?!:;/-*_”’»")

_STARTS_WITH_PROTOCOL = re.compile(r"^([a-z0-9.\-+]+):", re.IGNORECASE)

_URL_ANYWHERE = re.compile(
    r"([a-z0-9.\-+]+):"
    r"[a-z0-9_\-=~@#%&+/\\|*;:?.,]+"
    r"[a-z0-9_\-=~@#%&+/\\|*]",
    re.IGNORECASE,
)

_EMAIL_ANYWHERE = re.compile(
    r"(?:mailto:)?([a-z0-9_\-.+]+@(?:[a-z0-9_\-]+\.)+[a-z]{2,})", re.IGNORECASE
)

_IS_EMAIL = re.compile(
    r"^(?:mailto:)?([a-z0-9_\-.+]+@(?:[a-z0-9_\-]+\.)+[a-z]{2,})$", re.IGNORECASE
)


def encode(text: str) -> str:
    """NDMarkup 에 넣기 위해 &, <, >, " 를 엔티티로 바꿉니다."""
    return html.escape(text, quote=False).replace('"', "&quot;")


def decode(text: str) -> str:
    """NDMarkup 조각에서 태그를 제거하고 엔티티를 원래 문자로 되돌립니다."""
    return html.unescape(re.sub(r"<[^>]*>", "", text))


def is_url_protocol(word: str) -> bool:
    return word.lower() in URL_PROTOCOLS


def is_url(text: str) -> bool:
    match = _STARTS_WITH_PROTOCOL.match(text)
    return bool(match) and is_url_protocol(match.group(1)) and " " not in text


def url_link(target: str, text: Optional[str] = None) -> str:
    return f'<link type="url" target="{encode(target)}" text="{encode(text or target)}">'


def email_link(address: str, text: Optional[str] = None) -> str:
    if address.lower().startswith("mailto:"):
        address = address[len("mailto:"):]
    return f'<link type="email" target="{encode(address)}" text="{encode(text or address)}">'


def symbol_link(original_text: str) -> str:
    return f'<link type="naturaldocs" originaltext="{encode(original_text)}">'


@dataclass
class _Element:
    """서식 처리 중 한 덩어리로 취급되는 링크/URL 요소"""

    markup: str


_Unit = Union[str, _Element]


def _link_markup(content: str) -> str:
    """꺾쇠 링크 안쪽 내용으로 알맞은 링크 태그를 만듭니다."""
    condensed = " ".join(content.split())

    if _IS_EMAIL.match(condensed):
        return email_link(condensed)
    if is_url(condensed):
        return url_link(condensed)

    # "text: http://..." 또는 "text at http://..." 형태의 이름 붙은 URL
    for separator in (": ", " at "):
        index = condensed.find(separator)
        if index > 0:
            text, target = condensed[:index].strip(), condensed[index + len(separator):].strip()
            if is_url(target):
                return url_link(target, text)
            if _IS_EMAIL.match(target):
                return email_link(target, text)

    return symbol_link(f"<{content}>")


class InlineFormatter:
    """
    문단 텍스트 인라인 서식 변환기

    주요 기능:
    1. 꺾쇠 링크 후보 탐색 (<-, <=, <<, <> 등 연산자 제외)
    2. URL 및 이메일 주소 인식
    3. 굵게/밑줄 태그 짝 맞추기 (중첩이 올바른 경우만)
    """

    def format(self, text: str) -> str:
        """
        텍스트를 NDMarkup 으로 변환합니다.

        Args:
            text: 한 문단 분량의 일반 텍스트

        Returns:
            str: NDMarkup
        """
        units = self._mark_links(text)
        units = self._mark_addresses(units)
        return self._format_emphasis(units)

    # --- 링크 ---

    def _mark_links(self, text: str) -> List[_Unit]:
        units: List[_Unit] = []
        index = 0
        plain_start = 0

        while index < len(text):
            if text[index] == "<" and self._can_open_link(text, index):
                close = self._find_link_close(text, index)
                if close != -1:
                    units.extend(text[plain_start:index])
                    units.append(_Element(_link_markup(text[index + 1:close])))
                    index = close + 1
                    plain_start = index
                    continue
            index += 1

        units.extend(text[plain_start:])
        return units

    @staticmethod
    def _can_open_link(text: str, index: int) -> bool:
        following = text[index + 1:index + 2]
        previous = text[index - 1] if index > 0 else ""
        if following in ("", "-", "=", "<", ">") or following.isspace() or previous == "<":
            return False

        if previous in ("/", "-"):
            return True

        start = index
        while start > 0 and not text[start - 1].isspace():
            start -= 1
        return all(ch in _ACCEPTABLE_BEFORE_OPENING for ch in text[start:index])

    @staticmethod
    def _can_close_link(text: str, index: int) -> bool:
        previous = text[index - 1]
        following = text[index + 1:index + 2]
        if previous in ("-", "=", ">", "<") or previous.isspace() or following == ">":
            return False

        after = index + 1
        for suffix in sorted(LINK_SUFFIXES, key=len, reverse=True):
            if text[after:after + len(suffix)].lower() == suffix:
                after += len(suffix)
                break

        end = after
        while end < len(text) and not text[end].isspace():
            end += 1
        trailing = text[after:end]
        if not trailing or trailing[0] in ("/", "-"):
            return True
        return all(ch in _ACCEPTABLE_AFTER_CLOSING for ch in trailing)

    def _find_link_close(self, text: str, index: int) -> int:
        position = index + 1
        while position < len(text):
            ch = text[position]
            if ch == "<" and self._can_open_link(text, position):
                return -1
            if ch == ">" and self._can_close_link(text, position):
                return position
            position += 1
        return -1

    # --- URL / 이메일 ---

    @staticmethod
    def _mark_addresses(units: List[_Unit]) -> List[_Unit]:
        result: List[_Unit] = []
        run: List[str] = []

        def flush():
            if not run:
                return
            text = "".join(run)
            run.clear()
            position = 0
            while position < len(text):
                email = _EMAIL_ANYWHERE.search(text, position)
                url = _URL_ANYWHERE.search(text, position)
                while url and not is_url_protocol(url.group(1)):
                    url = _URL_ANYWHERE.search(text, url.start() + 1)

                candidates = [m for m in (email, url) if m]
                if not candidates:
                    break
                match = min(candidates, key=lambda m: m.start())
                # 단어 경계에서만 인정
                if match.start() > 0 and text[match.start() - 1].isalnum():
                    result.extend(text[position:match.start() + 1])
                    position = match.start() + 1
                    continue

                result.extend(text[position:match.start()])
                if match is email:
                    result.append(_Element(email_link(match.group(0))))
                else:
                    result.append(_Element(url_link(match.group(0))))
                position = match.end()
            result.extend(text[position:])

        for unit in units:
            if isinstance(unit, _Element):
                flush()
                result.append(unit)
            else:
                run.append(unit)
        flush()
        return result

    # --- 굵게 / 밑줄 ---

    @staticmethod
    def _is_space(unit: Optional[_Unit]) -> bool:
        return unit is None or (isinstance(unit, str) and unit.isspace())

    def _possible_tag(self, units: List[_Unit], index: int) -> Optional[str]:
        """'open', 'close' 또는 None 을 반환합니다."""
        ch = units[index]
        previous = units[index - 1] if index > 0 else None
        following = units[index + 1] if index + 1 < len(units) else None

        if previous == ch or following == ch or (ch == "*" and following == "="):
            return None

        if not self._is_space(following):
            start = index
            while start > 0 and not self._is_space(units[start - 1]):
                start -= 1
            before = units[start:index]
            if all(isinstance(u, str) and u in _ACCEPTABLE_BEFORE_OPENING for u in before):
                return "open"

        if not self._is_space(previous):
            end = index + 1
            while end < len(units) and not self._is_space(units[end]):
                end += 1
            after = units[index + 1:end]
            if all(isinstance(u, str) and u in _ACCEPTABLE_AFTER_CLOSING for u in after):
                return "close"

        return None

    def _format_emphasis(self, units: List[_Unit]) -> str:
        marks: List[Optional[str]] = [None] * len(units)
        for index, unit in enumerate(units):
            if unit in ("*", "_"):
                marks[index] = self._possible_tag(units, index)

        tags: List[Optional[str]] = [None] * len(units)
        for index, unit in enumerate(units):
            if marks[index] != "open" or tags[index] is not None:
                continue
            for lookahead in range(index + 1, len(units)):
                if tags[lookahead] == "close":
                    break
                if marks[lookahead] == "open" and units[lookahead] == unit and tags[lookahead] is None:
                    break
                if marks[lookahead] == "close" and units[lookahead] == unit and tags[lookahead] is None:
                    tags[index] = "open"
                    tags[lookahead] = "close"
                    break

        output: List[str] = []
        in_underline = 0
        for index, unit in enumerate(units):
            if isinstance(unit, _Element):
                output.append(unit.markup)
                continue
            tag = tags[index]
            if tag:
                name = "b" if unit == "*" else "u"
                output.append(f"<{name}>" if tag == "open" else f"</{name}>")
                if name == "u":
                    in_underline += 1 if tag == "open" else -1
            elif unit == "_" and in_underline:
                output.append(" ")
            else:
                output.append(encode(unit))
        return "".join(output)


_default_formatter = InlineFormatter()


def format_inline(text: str) -> str:
    """InlineFormatter 기본 인스턴스로 텍스트를 변환합니다."""
    return _default_formatter.format(text)

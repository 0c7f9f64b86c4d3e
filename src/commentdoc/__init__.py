"""
commentdoc

소스 코드의 문서 주석(헤더 주석, Javadoc, XML 주석)을 파싱하여 HTML 문서를 생성하는 도구입니다.
"""

__version__ = "0.1.0"

"""
commentdoc CLI 진입점

설치 후:
  commentdoc [command] [options]
"""

from dotenv import load_dotenv

from commentdoc.cli import CLIController


def main() -> int:
    """CLI 메인 함수"""
    load_dotenv(".env")

    controller = CLIController()
    return controller.execute()

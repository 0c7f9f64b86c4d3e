"""
Links 모듈
"""

from .link_interpretations import LinkInterpretation, LinkInterpretations
from .link_resolver import LinkResolver

__all__ = ["LinkInterpretation", "LinkInterpretations", "LinkResolver"]

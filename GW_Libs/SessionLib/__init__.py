"""
SessionLib - Page and document editing sessions

This module holds the tool state, input rate limiting and the page and
document sessions that drive the brush engine.
"""

from GW_Libs.SessionLib.annotation_state import AnnotationState
from GW_Libs.SessionLib.throttle import Throttle
from GW_Libs.SessionLib.page_session import PageEditSession
from GW_Libs.SessionLib.document_session import DocumentSession

__all__ = [
    "AnnotationState",
    "Throttle",
    "PageEditSession",
    "DocumentSession",
]

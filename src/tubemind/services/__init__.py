"""Service modules for tubemind."""

from tubemind.services.analysis import AnalysisService
from tubemind.services.content import ContentService
from tubemind.services.gateway import GatewayResponse, GeminiGateway
from tubemind.services.output import ReportWriter
from tubemind.services.session import SessionController, SessionState, Task

__all__ = [
    "AnalysisService",
    "ContentService",
    "GatewayResponse",
    "GeminiGateway",
    "ReportWriter",
    "SessionController",
    "SessionState",
    "Task",
]

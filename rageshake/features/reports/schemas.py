"""Schemas for assembled logs and the bug report payload."""

from typing import List

from pydantic import BaseModel, Field

DEFAULT_USER_TEXT = "User did not supply any additional text."
UNKNOWN = "UNKNOWN"


class ReportLog(BaseModel):
    """The full log text of one session."""

    id: str = Field(..., description="Session id the lines belong to")
    lines: str = Field(default="", description="Newline-delimited log lines")


class BugReport(BaseModel):
    """Body POSTed to the bug report collector."""

    logs: List[ReportLog] = Field(
        default_factory=list, description="Session logs, oldest session first"
    )
    text: str = Field(default=DEFAULT_USER_TEXT, description="User description")
    version: str = Field(default=UNKNOWN, description="Application version")
    user_agent: str = Field(default=UNKNOWN, description="Runtime description")

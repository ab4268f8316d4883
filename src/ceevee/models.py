from dataclasses import dataclass
from enum import Enum


class ContentType(str, Enum):
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    CODE = "code"
    JSON = "json"
    FILEPATH = "filepath"
    COMMAND = "command"
    MARKDOWN = "markdown"
    DATA = "data"
    TEXT = "text"


@dataclass(frozen=True)
class ClipboardItem:
    id: int
    content: str
    timestamp: int  # seconds since epoch
    source_app: str | None = None

    @property
    def content_type(self) -> ContentType:
        from ceevee.classify import classify

        return classify(self.content)

    @classmethod
    def from_record(cls, record: dict) -> "ClipboardItem":
        """Build an item from a persisted history record."""
        content = record["content"]
        if not isinstance(content, str):
            raise TypeError(f"content must be a string, got {type(content).__name__}")
        return cls(
            id=int(record["id"]),
            content=content,
            timestamp=int(record["timestamp"]),
            source_app=record.get("source_app"),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "timestamp": self.timestamp,
            "source_app": self.source_app,
        }

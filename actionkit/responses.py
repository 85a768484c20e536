"""Native response shapes for the UI-action and tool surfaces."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class UIResponse:
    """Response variant returned to an admin-panel UI.

    Attributes:
        kind: One of ``message``, ``danger``, ``redirect``, ``download``
        text: Banner text for message/danger
        url: Target for redirect/download
        filename: Suggested name for download
    """
    kind: str
    text: str = ""
    url: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def message(cls, text: str) -> "UIResponse":
        return cls(kind="message", text=text)

    @classmethod
    def danger(cls, text: str) -> "UIResponse":
        return cls(kind="danger", text=text)

    @classmethod
    def redirect(cls, url: str) -> "UIResponse":
        return cls(kind="redirect", url=url)

    @classmethod
    def download(cls, filename: str, url: str) -> "UIResponse":
        return cls(kind="download", url=url, filename=filename)

    @property
    def is_danger(self) -> bool:
        return self.kind == "danger"


@dataclass
class ToolResponse:
    """Response variant returned to an agent tool call.

    Attributes:
        kind: One of ``text``, ``error``, ``resource``, ``image``
        text: Text payload (text/error/resource)
        data: Base64 payload for images
        uri: Resource URI
        mime_type: Resource or image MIME type
    """
    kind: str
    text: str = ""
    data: Optional[str] = None
    uri: Optional[str] = None
    mime_type: Optional[str] = None

    @classmethod
    def text_response(cls, text: str) -> "ToolResponse":
        return cls(kind="text", text=text)

    @classmethod
    def json_response(cls, data: Any) -> "ToolResponse":
        return cls(kind="text", text=json.dumps(data, indent=2, default=str))

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(kind="error", text=message)

    @classmethod
    def resource(cls, uri: str, text: str, mime_type: Optional[str] = None) -> "ToolResponse":
        return cls(kind="resource", text=text, uri=uri, mime_type=mime_type)

    @classmethod
    def image(cls, data: str, mime_type: str = "image/png") -> "ToolResponse":
        return cls(kind="image", data=data, mime_type=mime_type)

    @property
    def is_error(self) -> bool:
        return self.kind == "error"

    def to_content(self) -> List[Any]:
        """Convert to MCP content blocks."""
        from mcp.types import EmbeddedResource, ImageContent, TextContent, TextResourceContents

        if self.kind == "image":
            return [ImageContent(type="image", data=self.data or "", mimeType=self.mime_type or "image/png")]
        if self.kind == "resource":
            return [EmbeddedResource(
                type="resource",
                resource=TextResourceContents(uri=self.uri, text=self.text, mimeType=self.mime_type),
            )]
        return [TextContent(type="text", text=self.text)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {"kind": self.kind}
        for key in ("text", "data", "uri", "mime_type"):
            value = getattr(self, key)
            if value:
                result[key] = value
        return result

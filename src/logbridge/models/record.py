"""
Framework log record model.

A record is split into message, level and everything else; the remaining
fields are forwarded untouched.
"""

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


class LogRecord(BaseModel):
    """
    A finalized record as handed to the stream adapter.

    Immutable once built.
    """

    message: str = Field(default="", description="Log message content")
    level: Optional[Union[int, float, str]] = Field(
        default=None,
        description="Framework level as a number or a name",
    )
    fields: Dict[Any, Any] = Field(
        default_factory=dict,
        description="Extra key/value fields, forwarded as-is",
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_mapping(
        cls,
        record: Mapping[str, Any],
        message_keys: Sequence[str] = ("msg", "message", "event"),
        level_keys: Sequence[str] = ("level", "levelname"),
    ) -> "LogRecord":
        """
        Build a record from a framework mapping.

        The first present key of ``message_keys`` becomes the message and the
        first present key of ``level_keys`` the level; both are removed from
        the extra fields.
        """
        fields = dict(record)

        message: Any = ""
        for key in message_keys:
            if key in fields:
                message = fields.pop(key)
                break

        level: Any = None
        for key in level_keys:
            if key in fields:
                level = fields.pop(key)
                break

        if message is None:
            message = ""
        elif not isinstance(message, str):
            message = str(message)

        # Anything that is not a number or a name is left to the level mapper's fallback
        if level is not None and not isinstance(level, (int, float, str)):
            level = str(level)

        return cls(message=message, level=level, fields=fields)

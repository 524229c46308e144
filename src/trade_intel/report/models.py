"""Data models for the report module."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FormattedReport:
    """A report rendered for each output channel.

    Attributes:
        title: One-line headline.
        body: Compact or detailed body, depending on formatter verbosity.
        telegram_markdown: Telegram MarkdownV2 rendition.
        plain_text: Plain-text rendition for terminals and logs.
    """

    title: str
    body: str
    telegram_markdown: str
    plain_text: str

    def to_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "body": self.body,
            "telegram_markdown": self.telegram_markdown,
            "plain_text": self.plain_text,
        }

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal


IntentKind = Literal[
    "create_file",
    "delete_file",
    "open_file",
    "generate_code",
    "edit_code",
    "go_live",
    "unrecognized",
]


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    argument: str = ""
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "argument": self.argument, "reason": self.reason}


def normalize_transcript(raw: str | None) -> str:
    return (raw or "").strip().lower()


def strip_spoken_period(name: str) -> str:
    """Drop the single trailing "." speech-to-text adds for a spoken full stop."""
    return name[:-1] if name.endswith(".") else name


def _file_name(text: str, prefix: str) -> str:
    return strip_spoken_period(text[len(prefix) :].strip())


def _remainder(text: str, prefix: str) -> str:
    return text[len(prefix) :].strip()


def _whole_transcript(text: str, prefix: str) -> str:
    # The trigger word stays in the prompt; the model reads it as context.
    return text


def _no_argument(text: str, prefix: str) -> str:
    return ""


@dataclass(frozen=True)
class IntentRule:
    prefix: str
    kind: IntentKind
    extract: Callable[[str, str], str]


# Order is priority: the first matching prefix wins.
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule("create a file named", "create_file", _file_name),
    IntentRule("delete", "delete_file", _file_name),
    IntentRule("open", "open_file", _remainder),
    IntentRule("generate", "generate_code", _whole_transcript),
    IntentRule("edit", "edit_code", _whole_transcript),
    IntentRule("go live", "go_live", _no_argument),
)


def route_intent(transcript: str | None, *, rules: tuple[IntentRule, ...] = INTENT_RULES) -> Intent:
    text = normalize_transcript(transcript)
    if not text:
        return Intent(kind="unrecognized", argument="", reason="empty")

    for rule in rules:
        if text.startswith(rule.prefix):
            return Intent(
                kind=rule.kind,
                argument=rule.extract(text, rule.prefix),
                reason=f"prefix:{rule.prefix}",
            )

    return Intent(kind="unrecognized", argument=text, reason="default")

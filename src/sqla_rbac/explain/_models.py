"""Data models for explain output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["AccessExplanation", "ContextStep"]


@dataclass(frozen=True, slots=True)
class ContextStep:
    """One step of the context chain and what was found there.

    Attributes:
        context: Rendered context (``"<global>"``, ``"Post"``, ``"Post#42"``).
        matched: Whether a grant exists at exactly this context.
        via: ``"subject"`` for a direct grant, ``"role:<slug>"`` for a grant
            inherited through a role, ``None`` when nothing matched.
    """

    context: str
    matched: bool
    via: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "context": self.context,
            "matched": self.matched,
            "via": self.via,
        }


@dataclass(frozen=True, slots=True)
class AccessExplanation:
    """Why a subject does or does not hold a role or permission.

    Attributes:
        check: ``"has_role"`` or ``"has_permission"``.
        subject_repr: String representation of the subject.
        target: The slug that was checked.
        context: Rendered context the check was made in.
        force_context: Whether the chain walk was disabled.
        target_found: Whether the role or permission resolved at all.
        granted: The overall verdict, identical to the matching check.
        steps: Every context the check was allowed to consult, in order.
    """

    check: str
    subject_repr: str
    target: str
    context: str
    force_context: bool
    target_found: bool
    granted: bool
    steps: list[ContextStep]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "check": self.check,
            "subject_repr": self.subject_repr,
            "target": self.target,
            "context": self.context,
            "force_context": self.force_context,
            "target_found": self.target_found,
            "granted": self.granted,
            "steps": [s.to_dict() for s in self.steps],
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        verdict = "GRANTED" if self.granted else "DENIED"
        lines: list[str] = []
        lines.append(f"{self.check}({self.target!r}): {verdict}")
        lines.append(f"  Subject: {self.subject_repr}")
        forced = " (forced)" if self.force_context else ""
        lines.append(f"  Context: {self.context}{forced}")
        lines.append("")
        if not self.target_found:
            lines.append(f"  TARGET NOT FOUND ({self.target!r} does not resolve in this context)")
        else:
            lines.append("  Chain:")
            for step in self.steps:
                status = "MATCH" if step.matched else "NO MATCH"
                via = f" via {step.via}" if step.via is not None else ""
                lines.append(f"    - {step.context} [{status}]{via}")
        return "\n".join(lines)

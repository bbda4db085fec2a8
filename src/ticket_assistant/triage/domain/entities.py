"""
Triage Domain Entities
======================

Pure Python objects for AI ticket triage: the result, the prompts, the
reply parser and the keyword fallback.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ticket_assistant.config import Priority
from ticket_assistant.tickets.domain import TicketAnnex, normalize_priority


class TriageSource:
    """Where a triage result came from."""
    MODEL = "model"
    FALLBACK = "fallback"


@dataclass
class TriageResult:
    """
    Result of analysing one ticket.
    """
    summary: str
    priority: str
    helpful_notes: str
    related_skills: List[str] = field(default_factory=list)
    source: str = TriageSource.MODEL
    model_used: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.source == TriageSource.FALLBACK

    def to_annex(self) -> TicketAnnex:
        return TicketAnnex(
            summary=self.summary,
            priority=self.priority,
            helpful_notes=self.helpful_notes,
            related_skills=list(self.related_skills)
        )


class TriagePromptBuilder:
    """
    Builds prompts for ticket triage.

    All prompt text lives here.
    """

    SYSTEM_PROMPT = """You are an expert AI assistant that processes technical support tickets.

Your job is to:
1. Summarize the issue.
2. Estimate its priority.
3. Provide helpful notes and resource links for human moderators.
4. List relevant technical skills required.

IMPORTANT:
- Respond with *only* valid raw JSON.
- Do NOT include markdown, code fences, comments, or any extra formatting.
- The format must be a raw JSON object.

Repeat: Do not wrap your output in markdown or code fences."""

    @classmethod
    def get_system_prompt(cls) -> str:
        return cls.SYSTEM_PROMPT

    @classmethod
    def build_prompt(cls, title: str, description: str) -> str:
        """Build the triage prompt from ticket content."""
        return f"""You are a ticket triage agent. Only return a strict JSON object with no extra text, headers, or markdown.

Analyze the following support ticket and provide a JSON object with:

- summary: A short 1-2 sentence summary of the issue.
- priority: One of "low", "medium", or "high".
- helpfulNotes: A detailed technical explanation that a moderator can use to solve this issue. Include useful external links or resources if possible.
- relatedSkills: An array of relevant skills required to solve the issue (e.g., ["React", "MongoDB"]).

Respond ONLY in this JSON format and do not include any other text or markdown in the answer:

{{
"summary": "Short summary of the ticket",
"priority": "high",
"helpfulNotes": "Here are useful tips...",
"relatedSkills": ["React", "Node.js"]
}}

---

Ticket information:

- Title: {title}
- Description: {description}"""


_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ANY_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")


def extract_json_text(raw: str) -> str:
    """
    Body of the first ```json fence, else of the first plain fence,
    else the trimmed reply.
    """
    match = _JSON_FENCE.search(raw) or _ANY_FENCE.search(raw)
    return match.group(1) if match else raw.strip()


def parse_reply(raw: str) -> dict:
    """
    Raises:
        ValueError: The reply holds no JSON object
    """
    if not raw or not raw.strip():
        raise ValueError("Empty reply")

    try:
        data = json.loads(extract_json_text(raw))
    except RecursionError as e:
        raise ValueError("Reply nested too deeply") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class KeywordTriage:
    """
    Deterministic analysis used whenever the model gives no usable answer.
    """

    SKILL_RULES: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
        ("React", re.compile(r"react|frontend|reactjs")),
        ("Node.js", re.compile(r"node|express|backend")),
        ("MongoDB", re.compile(r"mongo|mongodb|mongoose")),
        ("SQL", re.compile(r"sql|postgres|mysql")),
        ("Docker", re.compile(r"docker|k8s|kubernetes")),
    )

    NOTES_PREFIX = "Fallback analysis: "

    @staticmethod
    def first_sentence(title: str, description: str) -> str:
        text = f"{title}. {description or ''}".strip()
        return re.split(r"[.!?]\s", text)[0] or text

    @classmethod
    def skills_for(cls, title: str, description: str) -> List[str]:
        text = f"{title} {description or ''}".lower()
        return [skill for skill, pattern in cls.SKILL_RULES if pattern.search(text)]

    @classmethod
    def analyze(cls, title: str, description: str) -> TriageResult:
        return TriageResult(
            summary=cls.first_sentence(title, description),
            priority=Priority.MEDIUM,
            helpful_notes=cls.NOTES_PREFIX + (description or title),
            related_skills=cls.skills_for(title, description),
            source=TriageSource.FALLBACK
        )


def _clean_skills(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [s.strip() for s in value if isinstance(s, str) and s.strip()]


def _text_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def result_from_reply(
    data: dict,
    title: str,
    description: str,
    model_used: Optional[str] = None
) -> TriageResult:
    """
    Normalise a parsed model reply.

    Unknown priorities become medium, a non-list skills value becomes empty,
    and a missing summary or notes is filled from the keyword analysis.
    """
    fallback = KeywordTriage.analyze(title, description)
    return TriageResult(
        summary=_text_or(data.get("summary"), fallback.summary),
        priority=normalize_priority(data.get("priority")),
        helpful_notes=_text_or(data.get("helpfulNotes"), fallback.helpful_notes),
        related_skills=_clean_skills(data.get("relatedSkills")),
        source=TriageSource.MODEL,
        model_used=model_used
    )

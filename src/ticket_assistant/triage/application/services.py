"""
Triage Application Services
============================

Application services for ticket analysis and assignment.

Orchestrates the model call, reply parsing and the keyword fallback, and
picks the staff member a triaged ticket goes to.
"""

from typing import Any, List, Optional

from ticket_assistant.auth.application import IUserRepository
from ticket_assistant.auth.domain import SkillMatcher
from ticket_assistant.config import UserRole
from ticket_assistant.core import LLMException
from ticket_assistant.infrastructure.llm import ILLMClient
from ticket_assistant.infrastructure.notifications import Notification
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.triage.domain import (
    KeywordTriage,
    TriagePromptBuilder,
    TriageResult,
    parse_reply,
    result_from_reply,
)

logger = get_logger(__name__)


class TriageService:
    """
    Service for AI ticket analysis.

    ``analyze`` never fails: any model or parsing problem yields the
    keyword analysis instead.
    """

    def __init__(
        self,
        llm_client: Optional[ILLMClient],
        temperature: float = 0.3,
        max_tokens: int = 1000
    ):
        self._llm = llm_client
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def model_available(self) -> bool:
        return self._llm is not None

    async def analyze(
        self,
        title: str,
        description: str,
        ticket_id: Optional[str] = None
    ) -> TriageResult:
        """
        Analyze a ticket.

        Args:
            title: Ticket title
            description: Ticket description
            ticket_id: Optional ticket ID for logging

        Returns:
            TriageResult from the model, or from the keyword fallback
        """
        if self._llm is None:
            logger.info("No model configured, using keyword triage", extra={"ticket_id": ticket_id})
            return KeywordTriage.analyze(title, description)

        messages = [
            {"role": "system", "content": TriagePromptBuilder.get_system_prompt()},
            {"role": "user", "content": TriagePromptBuilder.build_prompt(title, description)}
        ]

        try:
            response = await self._llm.chat_completion(
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                operation="triage"
            )
            data = parse_reply(response.content)
        except LLMException as e:
            logger.warning(
                "Model call failed, using keyword triage",
                extra={"ticket_id": ticket_id, "error": str(e)}
            )
            return KeywordTriage.analyze(title, description)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(
                "Model reply was not a JSON object, using keyword triage",
                extra={"ticket_id": ticket_id, "error": str(e)}
            )
            return KeywordTriage.analyze(title, description)

        result = result_from_reply(data, title, description, model_used=response.model)

        logger.info(
            "Ticket analyzed",
            extra={
                "ticket_id": ticket_id,
                "priority": result.priority,
                "related_skills": result.related_skills
            }
        )

        return result


class AssignmentService:
    """
    Chooses who handles a triaged ticket.

    The first moderator (oldest account first) with a skill matching any of
    the ticket's related skills wins; otherwise the first admin.
    """

    def __init__(self, user_repository: IUserRepository):
        self._users = user_repository

    async def choose_assignee(self, related_skills: List[str]) -> Optional[Any]:
        matcher = SkillMatcher(related_skills)

        if not matcher.is_empty:
            for moderator in await self._users.list_by_role(UserRole.MODERATOR):
                if matcher.matches(moderator.skills or []):
                    return moderator

        admins = await self._users.list_by_role(UserRole.ADMIN)
        return admins[0] if admins else None


# ========== Notifications ==========

def assignment_notification(assignee: Any, ticket: Any) -> Notification:
    return Notification(
        recipient=assignee.email,
        subject="Ticket assigned",
        text=f"A new ticket is assigned to you: *{ticket.title}*",
        fields={
            "Priority": ticket.priority or "medium",
            "Skills": ", ".join(ticket.related_skills or []) or "-",
            "Summary": ticket.summary or "-",
            "Notes": ticket.helpful_notes or "-",
        }
    )


def welcome_notification(email: str) -> Notification:
    return Notification(
        recipient=email,
        subject="Welcome to the app",
        text="Hi,\n\nThanks for signing up. We're glad to have you onboard!"
    )

"""
Profile Completeness Gate - Which dating questions still need answers

A field counts as answered when its value is not None, and (for lists) the
list is non-empty, and (for strings) the text is not blank. Zero and False
are real answers.

WizardSession walks the missing questions one at a time, parsing each raw
answer with the question's parser. The finished answers are merged into the
profile by the caller, who is also responsible for persisting them.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from nomadmatch.services.questions import WizardQuestion, parse_answer


class WizardCompleteError(Exception):
    """Raised when advancing a session that has no questions left."""


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if isinstance(value, str):
        return bool(value.strip())
    return True


def missing_fields(
    profile: Mapping[str, Any],
    catalog: Sequence[WizardQuestion]
) -> List[WizardQuestion]:
    """
    Catalog entries whose field is absent from the profile.

    Args:
        profile: Profile mapping (field name -> value)
        catalog: Ordered dating questions

    Returns:
        Missing questions in catalog order
    """
    return [q for q in catalog if not is_present(profile.get(q.field))]


class WizardSession:
    """
    Step-by-step answer collection for the missing questions.

    Attributes:
        questions: Questions to ask, in order
        step: Index of the current question
        answers: Parsed answers keyed by field
        raw_input: Text typed so far for the current question

    Example:
        >>> session = WizardSession(missing_fields(profile, catalog))
        >>> while not session.is_complete:
        ...     session.advance(input(session.current_question.question))
        >>> updated = session.merged_into(profile)
    """

    def __init__(self, questions: Sequence[WizardQuestion]) -> None:
        self.questions: List[WizardQuestion] = list(questions)
        self.step = 0
        self.answers: Dict[str, Any] = {}
        self.raw_input = ""

    @property
    def is_complete(self) -> bool:
        return self.step >= len(self.questions)

    @property
    def current_question(self) -> Optional[WizardQuestion]:
        """Question at the current step, or None once all are answered."""
        if self.is_complete:
            return None
        return self.questions[self.step]

    def set_input(self, text: str) -> None:
        self.raw_input = text

    def advance(self, raw: Optional[str] = None) -> Any:
        """
        Record an answer for the current question and move on.

        Args:
            raw: Answer text; defaults to the buffered raw_input

        Returns:
            The parsed value that was stored

        Raises:
            WizardCompleteError: If every question is already answered
        """
        question = self.current_question
        if question is None:
            raise WizardCompleteError("All wizard questions are already answered")

        text = self.raw_input if raw is None else raw
        value = parse_answer(question.parser, text)
        self.answers[question.field] = value
        self.step += 1
        self.raw_input = ""
        return value

    def merged_into(self, profile: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a copy of the profile updated with the collected answers."""
        merged = dict(profile)
        merged.update(self.answers)
        return merged

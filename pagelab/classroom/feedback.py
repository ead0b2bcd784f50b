"""
Feedback messages shown after a submission.

Success picks an affirmation at random. Failure shows the rule-specific
message when the verdict carries one, otherwise a random encouragement.
"""

import random
from dataclasses import dataclass
from typing import Optional

from .verifier import RULE_CUSTOM, RULE_FORBIDDEN, RULE_REQUIRED, Verdict


SUCCESS_MESSAGES = (
    "Great job! That's correct.",
    "Nailed it!",
    "Excellent work, exercise complete.",
    "Perfect! On to the next one.",
    "Well done, that works.",
    "Correct! You're getting the hang of this.",
)

ENCOURAGEMENT_MESSAGES = (
    "Not quite yet. Keep going!",
    "Almost there, check your code and try again.",
    "Close! Take another look at the instructions.",
    "Don't give up, try a small change and submit again.",
    "Not yet. The hint might help.",
)


@dataclass(frozen=True)
class Feedback:
    passed: bool
    message: str
    detail: Optional[str] = None


def describe_failure(verdict: Verdict) -> Optional[str]:
    """Learner-facing sentence for a rule failure, or None for generic failures."""
    if not verdict.message:
        return None
    if verdict.rule == RULE_REQUIRED:
        entry = verdict.message.split(": ", 1)[-1]
        return f"Your code is missing: {entry}"
    if verdict.rule == RULE_FORBIDDEN:
        entry = verdict.message.split(": ", 1)[-1]
        return f"Your code should not use: {entry}"
    if verdict.rule == RULE_CUSTOM:
        return verdict.message
    return verdict.message


def build_feedback(verdict: Verdict, rng: Optional[random.Random] = None) -> Feedback:
    """Turn a verdict into the message shown to the learner."""
    chooser = rng or random
    if verdict.passed:
        return Feedback(passed=True, message=chooser.choice(SUCCESS_MESSAGES))

    specific = describe_failure(verdict)
    if specific:
        return Feedback(passed=False, message=specific, detail=verdict.message)
    return Feedback(passed=False, message=chooser.choice(ENCOURAGEMENT_MESSAGES))

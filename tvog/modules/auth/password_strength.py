"""Password strength evaluation shown on sign-up."""
import re
from typing import Callable, List, NamedTuple

from tvog.modules.auth.schemas import PasswordRequirementResult, PasswordStrengthResponse


class Requirement(NamedTuple):
    label: str
    test: Callable[[str], bool]


SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')

REQUIREMENTS: List[Requirement] = [
    Requirement("At least 8 characters", lambda p: len(p) >= 8),
    Requirement("Contains uppercase letter", lambda p: re.search(r"[A-Z]", p) is not None),
    Requirement("Contains lowercase letter", lambda p: re.search(r"[a-z]", p) is not None),
    Requirement("Contains number", lambda p: re.search(r"\d", p) is not None),
    Requirement("Contains special character", lambda p: SPECIAL_CHARACTERS.search(p) is not None),
]


def strength_label(strength: float) -> str:
    if strength == 0:
        return "No password"
    if strength < 40:
        return "Weak"
    if strength < 80:
        return "Medium"
    return "Strong"


def evaluate_password(password: str) -> PasswordStrengthResponse:
    """Score a password against REQUIREMENTS; strength is the met share as a percentage."""
    results = [
        PasswordRequirementResult(label=req.label, met=req.test(password))
        for req in REQUIREMENTS
    ]
    met = sum(1 for r in results if r.met)
    strength = met * 100 / len(REQUIREMENTS)
    return PasswordStrengthResponse(
        strength=strength,
        label=strength_label(strength),
        requirements=results,
    )

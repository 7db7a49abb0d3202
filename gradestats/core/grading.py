# gradestats/core/grading.py
from typing import Dict

# Letter boundaries on the 0-100 scale. Each letter is closed at its own
# threshold and open below the next one up.
A_THRESHOLD = 90.0
B_THRESHOLD = 80.0
C_THRESHOLD = 70.0
D_THRESHOLD = 60.0

PASSING_THRESHOLD = 60.0

# Maximum number of entries in a top-students ranking
MAX_TOP_STUDENTS = 5

LETTERS = ("A", "B", "C", "D", "F")


def letter_for(score: float) -> str:
    if score >= A_THRESHOLD:
        return "A"
    if score >= B_THRESHOLD:
        return "B"
    if score >= C_THRESHOLD:
        return "C"
    if score >= D_THRESHOLD:
        return "D"
    return "F"


def is_passing(score: float) -> bool:
    return score >= PASSING_THRESHOLD


def empty_distribution() -> Dict[str, int]:
    return {letter: 0 for letter in LETTERS}

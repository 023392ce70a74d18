"""Keyword-based subject categorization for tasks created without a subject."""

from __future__ import annotations

SUBJECT_CATEGORIES: list[str] = [
    "Mathematics",
    "Science",
    "History",
    "English",
    "Physical Activity",
    "Life Skills",
    "Interest / Passion",
]

# Checked in order; the first subject with a matching keyword wins
SUBJECT_KEYWORDS: dict[str, list[str]] = {
    "Mathematics": [
        "math", "algebra", "calculus", "geometry", "equation", "number",
        "arithmetic", "statistics", "probability", "khan academy",
    ],
    "Science": [
        "science", "biology", "chemistry", "physics", "experiment", "lab",
        "hypothesis", "scientific", "molecule", "atom", "cell",
    ],
    "History": [
        "history", "historical", "civilization", "century", "ancient", "medieval",
        "modern", "war", "revolution", "empire", "president", "kingdom",
    ],
    "English": [
        "english", "essay", "writing", "read", "book", "literature", "grammar",
        "vocabulary", "spelling", "story", "novel", "poem", "author",
    ],
    "Physical Activity": [
        "physical", "exercise", "sport", "run", "swim", "gym", "fitness", "workout",
        "training", "walk", "jog", "bike", "hiking", "yoga", "stretch",
    ],
    "Life Skills": [
        "cooking", "clean", "organize", "budget", "finance", "shop", "laundry",
        "schedule", "plan", "time management", "responsibility", "adulting",
        "chore", "life skill", "driving", "driver", "house",
    ],
    "Interest / Passion": [
        "hobby", "interest", "passion", "creative", "art", "music", "instrument",
        "craft", "project", "design", "coding", "program", "game", "paint",
        "draw", "create", "build",
    ],
}


def categorize_task(title: str, description: str | None = None) -> str | None:
    """Guess a subject from title/description keywords. None when nothing matches."""
    content = f"{title} {description or ''}".lower()

    for subject, keywords in SUBJECT_KEYWORDS.items():
        if any(keyword in content for keyword in keywords):
            return subject

    return None

"""
Prompt templates for the semantic answer judge.
"""

from __future__ import annotations

JUDGE_SYSTEM_PROMPT = """You are a strict but fair English teacher. Decide whether the student's answer is correct.
{idiom_rules}
ACCEPT the answer when:
- It has the SAME MEANING as the expected answer{idiom_exact_note}
- It uses synonyms (e.g. "phone" vs "call", "kid" vs "child"){idiom_synonym_note}
- The word order changed but the meaning is preserved
- It uses British or American spelling (colour/color)
- It has small typos in ORDINARY words (1-2 letters, e.g. "becuase" -> "because")
- Punctuation or capitalization is missing or added
- It uses contractions (I'm = I am, don't = do not)

REJECT the answer when:
- The meaning is DIFFERENT
- Important words that change the meaning are missing
- It is a completely different sentence
- A grammar mistake changes the tense or the grammatical person
- A KEY word is wrong (e.g. "iw" instead of "IQ", "cat" instead of "car")
- A typo produces a different real word (e.g. "form" instead of "from"){idiom_reject_note}

IMPORTANT:
- Typos in KEY words (acronyms, names, technical terms) are WRONG
- Acronyms must be spelled exactly: for "IQ", any other spelling such as "iw" is WRONG
{idiom_important_note}
Reply ONLY with a JSON object:
{{
  "isCorrect": true/false,
  "confidence": "high"/"medium"/"low",
  "reason": "Short explanation in {reason_language}"
}}"""

IDIOM_RULES = """
SPECIAL RULES FOR IDIOMS (CRITICAL - THIS IS AN IDIOM EXERCISE):
The exercise tests one SPECIFIC IDIOM. The student must produce the exact phrase.

- "go bananas" is not "get crazy" or "become crazy"
- "piece of cake" is not "very easy"
- "spill the beans" is not "tell the secret"
- "break a leg" is not "good luck"
- "raining cats and dogs" is not "raining heavily"

For idioms DO NOT ACCEPT:
- Paraphrases or explanations of the meaning instead of the idiom
- Synonyms replacing words of the idiom
- A translation of the meaning instead of the exact phrase

For idioms ACCEPT:
- Small grammatical changes (they will/they'll, is going to/will)
- Upper/lower case differences
- Missing punctuation
- Small typos (1-2 letters) in ordinary words
"""

JUDGE_USER_TEMPLATE = """Exercise type: {exercise_type}{idiom_marker}
{context_line}Expected answer: "{correct_answer}"
Student answer: "{user_answer}"

Is the student's answer correct?"""


def build_system_prompt(is_idiom: bool, reason_language: str) -> str:
    """Render the judge policy, with the idiom override when needed."""
    return JUDGE_SYSTEM_PROMPT.format(
        idiom_rules=IDIOM_RULES if is_idiom else "",
        idiom_exact_note=" (for idioms the exact phrase is required)" if is_idiom else "",
        idiom_synonym_note=" - NOT for the key words of an idiom" if is_idiom else "",
        idiom_reject_note=(
            "\n- It uses a paraphrase or explanation instead of the exact idiom" if is_idiom else ""
        ),
        idiom_important_note=(
            "- For IDIOMS: the exact phrase is mandatory, a paraphrase is WRONG\n" if is_idiom else ""
        ),
        reason_language=reason_language,
    )


def build_user_prompt(
    exercise_type: str,
    correct_answer: str,
    user_answer: str,
    context: str | None,
    is_idiom: bool,
) -> str:
    """Render the per-answer question for the judge."""
    return JUDGE_USER_TEMPLATE.format(
        exercise_type=exercise_type,
        idiom_marker=" (IDIOM - exact phrase required)" if is_idiom else "",
        context_line=f"Context/question: {context}\n" if context else "",
        correct_answer=correct_answer,
        user_answer=user_answer,
    )

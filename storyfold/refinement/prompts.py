"""Prompt templates for the assess and revise steps."""

from dataclasses import dataclass
from typing import Optional

from .models import RefinementPhase


@dataclass
class RefinementPrompt:
    """A prompt pair for one refinement step of one phase."""

    name: str
    phase: RefinementPhase
    system_prompt: str
    user_prompt_template: str
    temperature: float
    description: str = ""


# Shared instructions for the suggestion format
SUGGESTION_FORMAT = """Each suggestion must contain:
- a one-sentence summary of the problem
- a type: consistency / completeness / style / safety / logic / other
- a severity: info / suggestion / should_fix
- optionally, a detail describing how to fix it

Output ONLY a JSON array in exactly this shape, with no other text and no markdown code fences:
[{"id":"1","type":"...","summary":"...","detail":"...","severity":"..."},{"id":"2",...}]

If nothing needs improving, output an empty array []."""


ASSESS_FINAL_SYSTEM = """You are an editor of content for children and young readers.
Assess one round of improvements for the finished piece the user provides and
produce concrete, actionable revision suggestions.

""" + SUGGESTION_FORMAT

ASSESS_FINAL_PROMPT = """Assess the following finished piece and output the suggestion list as a JSON array:

{content}"""

ASSESS_BRIEF_SYSTEM = """You are a content consultant for children's writing.
Assess the writing brief the user provides (target readers, genre, theme and
intent, expected length, style keywords, sensitive-content boundaries) and
produce concrete suggestions that would make it clearer, more complete and
more consistent before outlining starts.

""" + SUGGESTION_FORMAT

ASSESS_BRIEF_PROMPT = """Assess the following writing brief and output the suggestion list as a JSON array:

{content}"""

# Appended to the final-phase assess prompt when review notes exist
REVIEW_CONTEXT_TEMPLATE = """

[Reference: existing review / age-appropriateness notes]
{review_context}"""


REVISE_FINAL_SYSTEM = """You are an editor of content for children and young readers.
The user provides a finished piece and a list of revision suggestions. Revise the
text ONLY according to these suggestions and output the complete revised text.
- Apply every suggestion; do not skip any.
- Keep the original style and structure; change only what the suggestions touch.
- Output the full revised text directly, with no heading or explanation."""

REVISE_BRIEF_SYSTEM = """You are a content consultant for children's writing.
The user provides a writing brief and a list of suggestions. Revise the brief
ONLY according to these suggestions and output the complete revised brief.
- Apply every suggestion; do not skip any.
- Keep the existing itemized structure; change only what the suggestions touch.
- Output the full revised brief directly, with no heading or explanation."""

REVISE_PROMPT = """[Current text]

{content}

[Revision suggestions (apply each one)]

{suggestions}"""


ASSESS_PROMPTS: dict[RefinementPhase, RefinementPrompt] = {
    RefinementPhase.FINAL: RefinementPrompt(
        name="assess_final",
        phase=RefinementPhase.FINAL,
        system_prompt=ASSESS_FINAL_SYSTEM,
        user_prompt_template=ASSESS_FINAL_PROMPT,
        temperature=0.2,
        description="Suggest improvements to the finished piece",
    ),
    RefinementPhase.BRIEF: RefinementPrompt(
        name="assess_brief",
        phase=RefinementPhase.BRIEF,
        system_prompt=ASSESS_BRIEF_SYSTEM,
        user_prompt_template=ASSESS_BRIEF_PROMPT,
        temperature=0.2,
        description="Suggest improvements to the writing brief",
    ),
}

REVISE_PROMPTS: dict[RefinementPhase, RefinementPrompt] = {
    RefinementPhase.FINAL: RefinementPrompt(
        name="revise_final",
        phase=RefinementPhase.FINAL,
        system_prompt=REVISE_FINAL_SYSTEM,
        user_prompt_template=REVISE_PROMPT,
        temperature=0.3,
        description="Apply accepted suggestions to the finished piece",
    ),
    RefinementPhase.BRIEF: RefinementPrompt(
        name="revise_brief",
        phase=RefinementPhase.BRIEF,
        system_prompt=REVISE_BRIEF_SYSTEM,
        user_prompt_template=REVISE_PROMPT,
        temperature=0.3,
        description="Apply accepted suggestions to the writing brief",
    ),
}


def get_assess_prompt(phase: RefinementPhase) -> Optional[RefinementPrompt]:
    """Get the assess prompt for a phase (None if the phase has none)."""
    return ASSESS_PROMPTS.get(phase)


def get_revise_prompt(phase: RefinementPhase) -> Optional[RefinementPrompt]:
    """Get the revise prompt for a phase (None if the phase has none)."""
    return REVISE_PROMPTS.get(phase)

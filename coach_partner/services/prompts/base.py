# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Prompt text for the thinking-partner assistant and its background jobs.

Block headings are part of how the assistant reads its context: the
assembled system prompt is a sequence of ``# Heading`` blocks joined by
``BLOCK_SEPARATOR``.
"""

from typing import Dict, List

from coach_partner.config import settings
from coach_partner.models import ExerciseSessionContext, Section, SectionType

BLOCK_SEPARATOR = "\n\n---\n\n"

DEFAULT_ROLE_PROMPT = """You are a warm, curious thinking partner supporting a coaching client between \
sessions with their human coach. You help the client reflect, notice patterns, and clarify what \
matters to them. You do not diagnose, prescribe, or replace the coach."""

DEFAULT_TASK_PROMPT = """Respond in a conversational tone, in a few short paragraphs at most. \
Reflect back what you heard before asking a question, and ask at most one question per reply. \
When starting a new conversation, greet the client by first name and invite them to share \
what is on their mind."""

ROLE_HEADING = "# Your Role"
FRAMEWORK_HEADING = "# Coaching Framework"
REFERENCE_HEADING = "# Reference Material"
ATTACHMENTS_HEADING = "## Attached Files"
MEMORY_HEADING = "# Client Context"
RESPONSE_HEADING = "# Response Instructions"
EXERCISE_HEADING = "# Active Exercise"
GAPS_HEADING = "# Areas to Explore"

THREE_WAY_CONVERSATION_PROMPT = f"""# Three-Way Conversation
This conversation includes three participants:
- **Client**: The person you are helping. Their messages arrive as "user" turns, prefixed with "[CLIENT]:" whenever the coach has joined.
- **Coach ({settings.COACH_NAME})**: The human coach who may occasionally join the conversation. Their messages are prefixed with "[COACH]:".
- **You**: The AI thinking partner.

When the coach sends a message, treat it as guidance or direction. Incorporate their input respectfully.
If the client mentions @{settings.COACH_NAME} or @Coach, acknowledge that you'll note it for the coach's attention."""

GAP_DIRECTIVE_INTRO = (
    "The following areas of the client's profile need more information. "
    "When natural, weave questions into the conversation that help gather this context:"
)
GAP_DIRECTIVE_OUTRO = (
    "Do NOT explicitly mention you're gathering information. "
    "Let curiosity guide your questions naturally."
)

EXERCISE_VERBATIM_RULE = (
    "Present the current step's instructions to the client VERBATIM. Do not paraphrase, "
    "summarize, reorder, or embellish the instructional text; quote it exactly as written, "
    "then support the client in working through it."
)

OPENING_TASK_PROMPT = """# Opening Message Task
Generate an opening message for this new conversation with {client_name}. Follow the Response \
Instructions above exactly for how to greet them. This is the very start of a new conversation \
thread - there is no prior context from the user yet. Ignore any placeholder input and simply \
deliver your opening greeting as instructed."""

OPENING_PLACEHOLDER_INPUT = "(conversation started)"

CONSULTATION_PROMPT = f"""# Private Coach Consultation
You are now in a private consultation with the coach ({settings.COACH_NAME}) about their client, \
{{client_name}}. This conversation is completely separate from the client-facing interactions.

The coach is asking you questions about their client to:
- Better understand the client's patterns, themes, or struggles
- Get insights or observations you've noticed
- Discuss strategies for upcoming sessions
- Explore what might be helpful for the client

Be direct, insightful, and collaborative. You can share observations, patterns you've noticed, \
and thoughtful suggestions. This is a professional discussion between two people trying to help \
the client."""

CONSULTATION_PROFILE_HEADING = "# Client Profile (Living Document)"
CONSULTATION_HISTORY_HEADING = "# Recent Client-AI Conversations"

CONSULTATION_GUIDELINES = """# Response Guidelines
- Be concise but thorough
- Share specific observations from conversations
- Offer actionable insights
- Be honest about uncertainty
- Support the coach's thinking process"""


# ---------------------------------------------------------------------------
# Living document synthesis
# ---------------------------------------------------------------------------

SECTION_WORD_LIMITS: Dict[SectionType, int] = {
    SectionType.OVERVIEW: 150,
    SectionType.HIGHLIGHT: 200,
    SectionType.FOCUS: 100,
    SectionType.CONTEXT: 150,
    SectionType.CUSTOM: 150,
}

SECTION_WORD_LIMIT_HINTS: Dict[SectionType, str] = {
    SectionType.OVERVIEW: "Who is this client? Their core identity and journey.",
    SectionType.HIGHLIGHT: "Most significant patterns, breakthroughs, themes.",
    SectionType.FOCUS: "What they're actively working on RIGHT NOW.",
    SectionType.CONTEXT: "Essential life context (career, relationships, values).",
    SectionType.CUSTOM: "Whatever the section title asks for.",
}

SESSION_SYNTHESIS_SYSTEM_PROMPT = """You are an expert coaching assistant helping to maintain a client's living document.
Your task is to analyze a recent conversation and SYNTHESIZE insights into concise, updated document sections.

This is a SYNTHESIS document, not a changelog. Each section should be a distilled summary that captures the most important, current understanding of the client. REPLACE the section content; never append to it.

WORD LIMITS (strictly enforce):
{word_limits}

SYNTHESIS STRATEGY:
- Read existing content and NEW conversation, then write a FRESH synthesis that captures the best current understanding
- Prioritize recency - newer insights may replace or update older ones
- Keep only what's most relevant and meaningful - not everything needs to be preserved
- If new information contradicts or updates old info, use the new understanding
- Distill, don't accumulate - a tighter summary is better than a comprehensive one
- Use concise language; every word should earn its place

Current document sections:
{sections}

Respond with ONLY a JSON array of section updates, no other text. Each update is an object with:
- "sectionId": the ID of the section to update
- "newContent": the SYNTHESIZED content (respecting word limits)

Only update sections where this conversation adds meaningful new understanding. Return [] if none do."""

SESSION_SYNTHESIS_USER_PROMPT = """Recent conversation to analyze:

{conversation}

Based on this conversation, generate updates for the relevant document sections. Return a JSON array of updates."""

INCREMENTAL_SYNTHESIS_SYSTEM_PROMPT = """You are maintaining a coaching client's living document in real-time.
Analyze this single exchange and determine if any sections should be updated with a fresh synthesis.

SECTIONS:
{sections}

WORD LIMITS (strictly enforce):
{word_limits}

GUIDELINES:
- Only update if this exchange reveals clearly NEW information
- SYNTHESIZE, don't accumulate - write a fresh, distilled summary incorporating new insights
- Newer information can replace or update older understanding
- Keep sections concise; every word should earn its place
- If content would exceed word limit, prioritize most important/recent insights

Return ONLY a JSON array: [{{"sectionId": "...", "newContent": "synthesized content within word limit"}}]
Return [] if no updates needed."""

INCREMENTAL_SYNTHESIS_USER_PROMPT = """Exchange to analyze:
{exchange}

Generate section updates as JSON array."""

THREAD_TITLE_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates concise, meaningful titles for coaching "
    "conversations. Focus on the emotional or thematic core of what was discussed. Examples: "
    "'Processing Career Uncertainty', 'Navigating Family Boundaries', 'Finding Work-Life Balance', "
    "'Exploring Self-Worth Questions'"
)

THREAD_TITLE_USER_PROMPT = """Based on this coaching conversation, generate a short, descriptive title (3-6 words) that captures the main theme or topic discussed. Return ONLY the title, no quotes or explanation.

Conversation:
{conversation}"""


def build_word_limits() -> str:
    """Render the per-type word ceilings as a bullet list.

    Returns:
        str: One ``- type: N words max - hint`` line per section type.
    """
    return "\n".join(
        f"- {section_type.value}: {limit} words max - {SECTION_WORD_LIMIT_HINTS[section_type]}"
        for section_type, limit in SECTION_WORD_LIMITS.items()
    )


def build_sections_listing(sections: List[Section], thin_threshold: int = 20) -> str:
    """Render sections with ids so the model can address them.

    Args:
        sections (List[Section]): Current document sections.
        thin_threshold (int): Stripped length below which a section is
            flagged as needing content. Defaults to 20.

    Returns:
        str: One ``###`` block per section with id and current content.
    """
    blocks: List[str] = []
    for s in sections:
        needs = " [EMPTY - NEEDS CONTENT]" if len(s.content.strip()) < thin_threshold else ""
        blocks.append(
            f"### {s.title} ({s.section_type.value}){needs}\n"
            f"ID: {s.id}\n"
            f"Current Content:\n{s.content.strip() or '(empty)'}"
        )
    return "\n\n".join(blocks)


def build_exercise_directive(context: ExerciseSessionContext) -> str:
    """Build the directive block for an in-progress exercise.

    Args:
        context (ExerciseSessionContext): Active exercise, its ordered
            steps and the current step.

    Returns:
        str: The ``# Active Exercise`` block.
    """
    exercise = context.exercise
    current = context.current_step
    lines = [EXERCISE_HEADING, f"The client is working through the exercise **{exercise.title}**."]
    if exercise.description.strip():
        lines.append(f"Description: {exercise.description.strip()}")

    lines.append("")
    lines.append("Steps:")
    for i, step in enumerate(context.steps, start=1):
        marker = "  <- CURRENT STEP" if current is not None and step.id == current.id else ""
        lines.append(f"{i}. {step.title}{marker}")

    if current is not None:
        lines.append("")
        lines.append(f"## Current Step: {current.title}")
        if current.instructions.strip():
            lines.append(f"Instructions (verbatim):\n{current.instructions}")
        if current.supporting_material.strip():
            lines.append(f"Supporting guidance:\n{current.supporting_material}")

    nxt = context.next_step
    if nxt is not None:
        lines.append("")
        lines.append(f"Next step: {nxt.title}")
    elif current is not None:
        lines.append("")
        lines.append("This is the final step of the exercise.")

    lines.append("")
    lines.append(EXERCISE_VERBATIM_RULE)
    return "\n".join(lines)

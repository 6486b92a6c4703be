# =============================================================================
# core/prompts.py  —  Prompt templates (what each tool actually asks the AI)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Every tool is "template + arguments → provider".  The templates live here,
#   one builder per tool, each returning a PromptRequest (prompt + optional
#   system preamble).  Builders receive arguments that core/dispatch.py has
#   ALREADY validated and defaulted, so they never check types.
#
# WHY A SEPARATE FILE?
#   Prompt wording changes far more often than dispatch or retry logic.
#   Keeping it apart makes it easy to review and iterate on.
# =============================================================================

from core.models import PromptRequest

TRANSLATE_PREAMBLE = "You are a translation assistant. Return only the translated text."
SUMMARIZE_PREAMBLE = "You are a summarization assistant. Provide concise, accurate summaries."
VERIFY_PREAMBLE = (
    "You are a meticulous reviewer of AI-generated answers. Judge the answer "
    "strictly against the stated criteria and point out concrete problems."
)
THOUGHT_CHAIN_PREAMBLE = (
    "You are a reasoning coach. Break problems into explicit, numbered steps "
    "and make every intermediate conclusion visible."
)
OPTIMIZE_PREAMBLE = (
    "You are an expert prompt engineer. Rewrite prompts so that language "
    "models answer them more reliably."
)

DEPTH_GUIDANCE = {
    "basic": "Use 3-5 short steps.",
    "detailed": "Use 5-8 steps and justify each one.",
    "expert": "Use as many steps as needed, covering edge cases, assumptions and alternatives.",
}


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _criteria_lines(criteria: str) -> str:
    items = [c.strip() for c in criteria.split(",") if c.strip()]
    return "\n".join(f"- {item}" for item in items) or "- overall quality"


def generate_text(prompt: str) -> PromptRequest:
    return PromptRequest(prompt=prompt)


def translate_text(text: str, target_language: str) -> PromptRequest:
    return PromptRequest(
        prompt=f"Translate the following text into {target_language}:\n{text}",
        preamble=TRANSLATE_PREAMBLE,
    )


def summarize_text(text: str, max_length: float) -> PromptRequest:
    return PromptRequest(
        prompt=(
            f"Summarize the following text in no more than "
            f"{_format_number(max_length)} words:\n{text}"
        ),
        preamble=SUMMARIZE_PREAMBLE,
    )


def verify_ai_result(original_prompt: str, ai_result: str, verification_criteria: str) -> PromptRequest:
    """Ask the provider to grade another model's answer."""
    prompt = (
        "Verify the following AI answer.\n\n"
        f"Original prompt:\n{original_prompt}\n\n"
        f"AI answer:\n{ai_result}\n\n"
        f"Evaluate it against these criteria:\n{_criteria_lines(verification_criteria)}\n\n"
        "For each criterion give a score from 1 to 10 and a short justification, "
        "then list any factual errors or omissions and finish with an overall verdict."
    )
    return PromptRequest(prompt=prompt, preamble=VERIFY_PREAMBLE)


def generate_thought_chain(question: str, domain: str, depth: str) -> PromptRequest:
    prompt = (
        f"Domain: {domain}\n"
        f"Question: {question}\n\n"
        f"Produce a step-by-step chain of thought that leads to an answer. "
        f"{DEPTH_GUIDANCE[depth]} End with a one-paragraph conclusion."
    )
    return PromptRequest(prompt=prompt, preamble=THOUGHT_CHAIN_PREAMBLE)


def optimize_prompt(original_prompt: str, goal: str, target_model: str) -> PromptRequest:
    prompt = (
        "Improve the following prompt.\n\n"
        f"Original prompt:\n{original_prompt}\n\n"
        f"Optimization goals:\n{_criteria_lines(goal)}\n"
        f"Target model: {target_model}\n\n"
        "Return the optimized prompt first, then a short list of the changes you made and why."
    )
    return PromptRequest(prompt=prompt, preamble=OPTIMIZE_PREAMBLE)

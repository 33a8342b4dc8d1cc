"""
Prompt builders and config for judge requests using a modular template.

Callers supply system instructions and a template string with placeholders
that are substituted per turn.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

START_OF_GAME = "None (Start of Game)"

DEFAULT_JUDGE_SYSTEM = """You are an expert Korean Word Chain (끝말잇기) player.
Your goal is to play a fun, educational game with the user.

Rules:
1. Validate the user's word:
   - Must be a valid Korean noun.
   - Must exist in standard Korean dictionaries.
   - Must start with the required character (from the previous turn).
   - Apply strict Dueum-beopchik (두음법칙). Example: if the previous word ended in '렬', the user can start with '열' or '렬'.
   - If the user repeats a word already in the history list (provided in the prompt), it is INVALID.

2. Your turn:
   - If the user's word is INVALID: set 'valid' to false and explain why in 'reason'.
   - If the user's word is VALID:
     - Find a Korean noun starting with the last character of the user's word.
     - Do not repeat words from the history.
     - Provide a short 'definition' for your word.
     - Set 'normalizedStartChar' to the character the user must start with next, applying Dueum-beopchik when standard (e.g. '륨' -> '윰'); otherwise the last character of your word.
     - If you cannot find a word, set 'win' to true and admit defeat in 'reason'.

Tone: friendly, encouraging, slightly competitive. Write 'reason' in Korean."""

DEFAULT_TURN_TEMPLATE = """Current Game Context:
- Previous Word (ending char): {REQUIRED_CHAR}
- Used Words History: {HISTORY_JSON}

User Input: "{USER_WORD}"

Analyze the user's input and play your turn."""

DEFAULT_WELCOME_PROMPT = "Write a short, cheerful 1-sentence welcome message in Korean for a Korean Word Chain game user."

RESPONSE_SCHEMA: Dict = {
    "type": "object",
    "properties": {
        "valid": {"type": "boolean", "description": "Whether the user's word was valid."},
        "word": {"type": "string", "description": "The word the AI plays in response. Omit if the user word is invalid or the AI gives up."},
        "definition": {"type": "string", "description": "A short definition of the AI's word."},
        "reason": {"type": "string", "description": "Explanation if invalid, or a friendly chat message if valid."},
        "win": {"type": "boolean", "description": "True if the AI cannot find a word and surrenders."},
        "normalizedStartChar": {
            "type": "string",
            "description": "The last character of the AI's word, normalized for the next turn (e.g. 륨 -> 윰) if applicable. Otherwise the same as the last character.",
        },
    },
    "required": ["valid", "reason"],
}


@dataclass
class PromptConfig:
    """Configuration for shaping judge prompts using a custom template."""

    system_instructions: str = DEFAULT_JUDGE_SYSTEM
    template: str = DEFAULT_TURN_TEMPLATE
    welcome_prompt: str = DEFAULT_WELCOME_PROMPT


def render_custom_prompt(template: str, values: Dict[str, str]) -> str:
    """Replace known placeholders in the template. Unknown tokens are left intact."""
    rendered = template or ""
    for key, val in values.items():
        rendered = rendered.replace(f"{{{key}}}", val)
    return rendered


def required_char_label(prior_word: Optional[str]) -> str:
    """Last character of the previous word, or the start-of-game sentinel."""
    return prior_word[-1] if prior_word else START_OF_GAME


def build_turn_messages(candidate: str, prior_word: Optional[str], history: Sequence[str], prompt_cfg: PromptConfig) -> List[Dict[str, str]]:
    values = {
        "REQUIRED_CHAR": required_char_label(prior_word),
        "HISTORY_JSON": json.dumps(list(history), ensure_ascii=False),
        "USER_WORD": candidate,
    }
    return [
        {"role": "system", "content": prompt_cfg.system_instructions},
        {"role": "user", "content": render_custom_prompt(prompt_cfg.template, values)},
    ]


def build_welcome_messages(prompt_cfg: PromptConfig) -> List[Dict[str, str]]:
    return [{"role": "user", "content": prompt_cfg.welcome_prompt}]

"""Approximate token accounting.

The backend reports no usage, so counts are estimated at four characters per
token. The numbers are a rough proxy for client bookkeeping, not the output
of a real tokenizer.
"""

import math

from ..types import Usage

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate the token count of ``text`` (``ceil(len / 4)``)."""
    return math.ceil(len(text or "") / CHARS_PER_TOKEN)


def estimate_usage(prompt: str, completion: str) -> Usage:
    """Build an OpenAI ``usage`` block for a prompt/completion pair.

    The total is estimated from the combined length, so it can be one less
    than the sum of the two rounded parts.
    """
    prompt = prompt or ""
    completion = completion or ""
    return {
        "prompt_tokens": estimate_tokens(prompt),
        "completion_tokens": estimate_tokens(completion),
        "total_tokens": math.ceil((len(prompt) + len(completion)) / CHARS_PER_TOKEN),
    }

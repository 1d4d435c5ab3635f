"""
Decoder for callback-wrapped provider responses, e.g.

    /*API*/_callbacks____x(["SUCCESS",[["nei",["你","呢","尼"],[],{}]]])
"""
import json
import re
from typing import List

from inputtools.core.errors import MalformedEnvelope, MalformedPayload, ProviderError, UnexpectedShape

SUCCESS_STATUS = "SUCCESS"

CALLBACK_PATTERN = re.compile(r"^(?:/\*API\*/)?[\w$.]*\((.+)\)$", re.DOTALL)
CALLBACK_ALT_PATTERN = re.compile(r"^.*?\((.+)\)$", re.DOTALL)


def extract_payload(text: str) -> str:
    text = (text or "").strip()
    match = CALLBACK_PATTERN.match(text) or CALLBACK_ALT_PATTERN.match(text)
    if not match:
        raise MalformedEnvelope("Invalid callback response format")
    return match.group(1)


def parse_suggestions_response(text: str) -> List[str]:
    """
    Return candidates in provider order, concatenated across suggestion groups.
    Groups that are not `[label, [candidates...], ...]` are skipped.
    """
    payload = extract_payload(text)
    try:
        data = json.loads(payload)
    except ValueError:
        raise MalformedPayload("Failed to parse JSON response")

    if not isinstance(data, list) or len(data) < 2:
        raise UnexpectedShape("Unexpected response format")

    status, groups = data[0], data[1]
    if status != SUCCESS_STATUS:
        raise ProviderError(status)

    suggestions: List[str] = []
    if isinstance(groups, list):
        for group in groups:
            if isinstance(group, list) and len(group) >= 2 and isinstance(group[1], list):
                suggestions.extend(member for member in group[1] if isinstance(member, str))
    return suggestions

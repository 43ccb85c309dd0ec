import json
import logging
import re
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from hiredready.errors import UpstreamFormatError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# only the fence wrapping the whole reply; fences inside string values are content
_LEADING_FENCE_RE = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_TRAILING_FENCE_RE = re.compile(r"\n?```\s*$")
_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(raw_text: str) -> str:
    text = _LEADING_FENCE_RE.sub("", raw_text, count=1)
    return _TRAILING_FENCE_RE.sub("", text, count=1).strip()


def extract_json_span(text: str, opener: str) -> Optional[str]:
    """Return the outermost span from the first ``opener`` to its last closer."""
    start = text.find(opener)
    end = text.rfind(_CLOSERS[opener])
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def _openers(text: str, expect: Optional[str]):
    if expect:
        return [expect]
    found = [o for o in _CLOSERS if text.find(o) != -1]
    return sorted(found, key=text.find)


def parse_json_response(raw_text: str, expect: Optional[str] = None) -> Any:
    """Parse AI output as JSON, tolerating a wrapping fence and prose around the payload.

    ``expect`` is ``"{"`` or ``"["`` when the caller knows the payload shape;
    otherwise each opener is tried in order of appearance.
    """
    if not raw_text or not raw_text.strip():
        raise UpstreamFormatError("AI service returned an empty response")

    for candidate in (raw_text, strip_code_fences(raw_text)):
        try:
            return json.loads(candidate)
        except ValueError:
            pass

    cleaned = strip_code_fences(raw_text)
    spans = [s for s in (extract_json_span(cleaned, o) for o in _openers(cleaned, expect)) if s]
    if not spans:
        logger.warning("No JSON found in AI response: %.200s", raw_text)
        raise UpstreamFormatError("AI service did not return JSON")
    for span in spans:
        try:
            return json.loads(span)
        except ValueError:
            continue
    logger.warning("Unparseable JSON in AI response: %.200s", raw_text)
    raise UpstreamFormatError("AI service returned malformed JSON")


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_model(raw_text: str, model: Type[ModelT]) -> ModelT:
    data = parse_json_response(raw_text, expect="{")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise UpstreamFormatError(f"Unexpected AI response shape ({_describe(exc)})") from exc


def parse_model_list(raw_text: str, model: Type[ModelT]) -> List[ModelT]:
    data = parse_json_response(raw_text, expect="[")
    try:
        return TypeAdapter(List[model]).validate_python(data)
    except ValidationError as exc:
        raise UpstreamFormatError(f"Unexpected AI response shape ({_describe(exc)})") from exc

"""Tools package: completion adapters, retry policy, and text/image helpers."""

from tools.completion_client import CompletionClient, create_completion_client
from tools.llm_client import parse_json_response
from tools.retry import classify_error, with_retry
from tools.image_utils import decode_data_uri, encode_data_uri, normalize_image, placeholder_cover
from tools.text_utils import count_total_chars, split_into_paragraphs, truncate, underscore_whitespace

__all__ = [
    "CompletionClient",
    "create_completion_client",
    "parse_json_response",
    "classify_error",
    "with_retry",
    "decode_data_uri",
    "encode_data_uri",
    "normalize_image",
    "placeholder_cover",
    "count_total_chars",
    "split_into_paragraphs",
    "truncate",
    "underscore_whitespace",
]

# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Token counting and truncation using tiktoken.
"""

import logging
import tiktoken

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "o200k_base"
FALLBACK_ENCODING = "cl100k_base"


class TokenCounter:
    """Token counter using tiktoken, with one cached encoder per model."""

    # Model prefix to encoding mapping (from tiktoken source)
    MODEL_PREFIX_TO_ENCODING = {
        "o1-": "o200k_base",
        "o3-": "o200k_base",
        "o4-mini-": "o200k_base",
        "gpt-5-": "o200k_base",
        "gpt-4.1-": "o200k_base",
        "gpt-4o-": "o200k_base",
        "gpt-4-": "cl100k_base",
        "gpt-3.5-turbo-": "cl100k_base",
        "gpt-oss-": "o200k_harmony",
    }

    def __init__(self):
        self.encoders = {}

    def get_encoder(self, model: str):
        """Get or create encoder for the model."""
        if model in self.encoders:
            return self.encoders[model]

        try:
            self.encoders[model] = tiktoken.encoding_for_model(model)
            return self.encoders[model]
        except KeyError:
            pass

        encoding = next(
            (enc for prefix, enc in self.MODEL_PREFIX_TO_ENCODING.items() if model.startswith(prefix)),
            None,
        )
        if encoding is None:
            logger.warning(f"⚠️  Model {model} not found in prefix mapping, using {DEFAULT_ENCODING} encoding")
            encoding = DEFAULT_ENCODING

        try:
            self.encoders[model] = tiktoken.get_encoding(encoding)
        except Exception as e:
            logger.warning(f"⚠️  Failed to get encoding {encoding} for model {model}: {e}. "
                           f"Falling back to {FALLBACK_ENCODING}")
            self.encoders[model] = tiktoken.get_encoding(FALLBACK_ENCODING)
        return self.encoders[model]

    def count_text_tokens(self, text: str, model: str = "gpt-4o") -> int:
        """Count tokens in plain text."""
        return len(self.get_encoder(model).encode(text))

    def truncate_text(self, text: str, max_tokens: int, model: str = "gpt-4o") -> str:
        """Cut ``text`` down to at most ``max_tokens`` tokens."""
        encoder = self.get_encoder(model)
        tokens = encoder.encode(text)
        if len(tokens) <= max_tokens:
            return text
        logger.debug(f"🔧 Truncating text from {len(tokens)} to {max_tokens} tokens")
        return encoder.decode(tokens[:max_tokens])

# -*- coding: utf-8 -*-
"""
prompt_helpers package
======================

This package groups small, focused helper modules used by ExperimentRunner.
Each file has a single responsibility:
- text_normalizer: canonical form of free-form prompt fragments.
- compose_texts: sentinel-tagged prompt assembly (system / user / context).
- user_prompt_rules: annotation-driven user instructions for Apex sources.
- stream_consumer: fold a streamed completion into text, stopping at the sentinel.
- payload_extractor: cut the OpenAPI document out of raw LLM text.
"""

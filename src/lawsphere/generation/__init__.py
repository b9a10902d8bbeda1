"""
Generation — prompts, chat-model wiring and the answer service.

The chat model only ever sees context produced by
:mod:`lawsphere.retrieval`; when that context is insufficient the model
is not called at all.
"""

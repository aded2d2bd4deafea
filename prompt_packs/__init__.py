"""Prompt pack registry and built-in pack loading."""
from .core import (
    DEFAULT_PACK_ID,
    PackMeta,
    PackExample,
    PromptPack,
    PROMPT_PACKS,
    register_pack,
    get_pack,
    build_prompt,
    load_builtin_packs,
)

load_builtin_packs()

__all__ = [
    "DEFAULT_PACK_ID",
    "PackMeta",
    "PackExample",
    "PromptPack",
    "PROMPT_PACKS",
    "register_pack",
    "get_pack",
    "build_prompt",
    "load_builtin_packs",
]

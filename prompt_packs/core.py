"""Core utilities and registry for prompt packs."""
from __future__ import annotations

from importlib import import_module
import pkgutil
from typing import Dict, Optional

from pydantic import BaseModel, Field

from models import DEFAULT_MODE, DEFAULT_TONE, Mode, PromptBundle, TerminalRequest, Tone

DEFAULT_PACK_ID = "psyopanime"


class PackMeta(BaseModel):
    id: str
    name: str
    description: str
    version: str = "1.0.0"


class PackExample(BaseModel):
    text: str
    mode: Mode = Mode.OPS_BRIEF
    tone: Tone = Tone.CINEMATIC


class PromptPack(BaseModel):
    meta: PackMeta
    persona: str
    tone_rules: Dict[Tone, str]
    mode_templates: Dict[Mode, str]
    example: PackExample = Field(default_factory=lambda: PackExample(text="hello"))

    def tone_rule(self, tone: Tone) -> str:
        return self.tone_rules.get(tone) or self.tone_rules[DEFAULT_TONE]

    def mode_template(self, mode: Mode) -> str:
        return self.mode_templates.get(mode) or self.mode_templates[DEFAULT_MODE]


PROMPT_PACKS: Dict[str, PromptPack] = {}


def register_pack(pack: PromptPack) -> None:
    PROMPT_PACKS[pack.meta.id] = pack


def get_pack(pack_id: Optional[str] = None) -> PromptPack:
    if pack_id and pack_id in PROMPT_PACKS:
        return PROMPT_PACKS[pack_id]
    return PROMPT_PACKS[DEFAULT_PACK_ID]


def build_prompt(
    req: TerminalRequest,
    pack: PromptPack,
    server_persona: Optional[str] = None,
) -> PromptBundle:
    """Assemble persona, tone rule and mode template for one request.

    Persona precedence: caller override, then server override, then the
    pack's own persona. No other input is consulted, so the same request
    and pack always produce the same bundle.
    """
    persona = (
        (req.persona_override or "").strip()
        or (server_persona or "").strip()
        or pack.persona.strip()
    )
    return PromptBundle(
        persona=persona,
        tone_rules=pack.tone_rule(req.tone),
        format_template=pack.mode_template(req.mode),
        user_block=req.text,
    )


_loaded_builtin_packs = False


def load_builtin_packs() -> None:
    global _loaded_builtin_packs
    if _loaded_builtin_packs:
        return

    package_name = f"{__package__}.definitions"
    package = import_module(package_name)

    for module_info in pkgutil.iter_modules(package.__path__):  # type: ignore[attr-defined]
        if module_info.name.startswith("_"):
            continue
        import_module(f"{package_name}.{module_info.name}")

    _loaded_builtin_packs = True


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

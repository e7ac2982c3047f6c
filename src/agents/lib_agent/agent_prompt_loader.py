"""Load agent personas from TOML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import tomli as toml

from configs import settings
from src.agents.lib_agent.message import AgentProfile

PROMPT_SUFFIX = "_prompt.toml"
BUNDLED_PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"


class AgentPromptLoader:
    """Helper to resolve and load the AgentProfile for a given agent slug."""

    def __init__(self, base_dir: Optional[Union[str, Path]] = None) -> None:
        """Initialize loader; falls back to PROMPTS_DIR, then the bundled personas."""
        self.base: Path = Path(base_dir or settings.PROMPTS_DIR or BUNDLED_PROMPTS_DIR).resolve()
        self._cache: Dict[str, AgentProfile] = {}

    def _path_for(self, slug: str) -> Path:
        """Return the TOML file path for the given agent slug."""
        return self.base / f"{slug}{PROMPT_SUFFIX}"

    def _load(self, slug: str) -> Dict[str, Any]:
        """Read and parse the TOML prompt file for an agent."""
        path = self._path_for(slug)
        if not path.exists():
            # o CWD ajuda no diagnóstico de caminhos relativos
            raise FileNotFoundError(
                f"Prompt file not found: {path} (cwd={Path.cwd()})"
            )
        with path.open("rb") as f:
            return toml.load(f)

    def available(self) -> List[str]:
        """Return the slugs of every persona file in the base directory."""
        if not self.base.is_dir():
            return []
        return sorted(p.name[: -len(PROMPT_SUFFIX)] for p in self.base.glob(f"*{PROMPT_SUFFIX}"))

    def get_profile(self, slug: str) -> AgentProfile:
        """Return the persona for the slug, parsed once and cached."""
        if slug not in self._cache:
            data = self._load(slug)
            self._cache[slug] = AgentProfile(
                display_name=data.get("name") or slug,
                description=data.get("description"),
                system_prompt=data.get("system_prompt") or data.get("system"),
                slug=slug,
            )
        return self._cache[slug]

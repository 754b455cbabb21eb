"""
Regime Engine — Activity Classification

Maps a CNAE (Classificação Nacional de Atividades Econômicas) code to one of
the engine's activity categories using the two-digit division prefix.
Unknown divisions fall back to intellectual services, the category with the
highest Simples exposure (Anexo V below the Factor R threshold).
"""

import re
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from regime_engine.models import Activity, ActivityLine


def _divisions(*spans) -> List[int]:
    out: List[int] = []
    for span in spans:
        if isinstance(span, tuple):
            out.extend(range(span[0], span[1] + 1))
        else:
            out.append(span)
    return out


# ─────────────────────────────────────────────
# CNAE Division → Activity
# ─────────────────────────────────────────────
_DIVISIONS_BY_ACTIVITY = {
    Activity.COMMERCE: _divisions((45, 47)),
    Activity.INDUSTRY: _divisions((10, 33)),
    Activity.GENERAL_SERVICE: _divisions(
        (35, 39), (41, 43), (49, 53), 55, 56, (77, 82), (90, 96),
    ),
    Activity.INTELLECTUAL_SERVICE: _divisions(62, 63, (69, 75), 85),
    Activity.HOSPITAL_SERVICE: _divisions(86),
}

CNAE_MAPPING: Dict[str, Activity] = {
    f"{division:02d}": activity
    for activity, divisions in _DIVISIONS_BY_ACTIVITY.items()
    for division in divisions
}

DEFAULT_ACTIVITY = Activity.INTELLECTUAL_SERVICE

CNAE_SUBCLASS_DIGITS = 7

# 2011 / 2046: sociedade anônima forms barred from the Simples (LC 123, art. 3, §4, X)
SIMPLES_BARRED_LEGAL_NATURES = ("2011", "2046")


class SimplesEligibility(BaseModel):
    eligible: bool = True
    reason: Optional[str] = Field(default=None)


def normalize_cnae(code: Union[str, int]) -> str:
    """
    Bare numeric codes lose their leading zero in registry payloads, so ints and
    all-digit strings shorter than a subclass are padded back to seven digits.
    Formatted codes ("0111-3/01") are returned stripped but otherwise as given.
    """
    text = str(code).strip()
    if isinstance(code, int) or (text.isdigit() and len(text) < CNAE_SUBCLASS_DIGITS):
        return text.zfill(CNAE_SUBCLASS_DIGITS)
    return text


def cnae_prefix(code: Union[str, int]) -> str:
    """Two-digit CNAE division."""
    return re.sub(r"\D", "", normalize_cnae(code))[:2]


def map_cnae_to_activity(code: Union[str, int]) -> Activity:
    return CNAE_MAPPING.get(cnae_prefix(code), DEFAULT_ACTIVITY)


def check_simples_eligibility(legal_nature: Union[str, int]) -> SimplesEligibility:
    """
    Informational check on the company's legal nature (natureza jurídica).
    Accepts a bare code ("2046") or the registry's formatted text
    ("204-6 - Sociedade Anônima Aberta").
    """
    digits = re.sub(r"\D", "", str(legal_nature))
    if any(code in digits for code in SIMPLES_BARRED_LEGAL_NATURES):
        return SimplesEligibility(
            eligible=False,
            reason="Natureza Jurídica (S/A) impeditiva para Simples Nacional",
        )
    return SimplesEligibility(eligible=True)


def activity_lines_from_cnaes(
    primary: Optional[Union[str, int]],
    secondaries: Optional[List[Dict[str, Union[str, int]]]] = None,
    primary_label: str = "Atividade Principal",
) -> List[ActivityLine]:
    """
    Build activity lines from a registry record: the primary CNAE carries 100%
    of revenue, secondary CNAEs ({"codigo", "descricao"}) start at 0% until the
    caller assigns them a share.
    """
    lines: List[ActivityLine] = []
    if primary:
        lines.append(ActivityLine(
            activity=map_cnae_to_activity(primary),
            percentage=100.0,
            label=primary_label,
            cnae=normalize_cnae(primary),
        ))
    for item in secondaries or []:
        code = item.get("codigo")
        if not code:
            continue
        lines.append(ActivityLine(
            activity=map_cnae_to_activity(code),
            percentage=0.0,
            label=str(item.get("descricao", "")),
            cnae=normalize_cnae(code),
        ))
    return lines

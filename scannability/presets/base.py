"""
Global Preset

Base for every platform preset and the fallback for unknown sites.
Standard HTML anchors, default weights, and the anti-patterns that apply
everywhere.
"""

from __future__ import annotations

from scannability.preset import (
    DEFAULT_WEIGHTS,
    AnalysisSettings,
    AntiPatternRule,
    Preset,
    PresetMatchers,
)

GLOBAL_ID = "global"


# ============================================================
# ANTI-PATTERNS (checked in order, first match wins)
# ============================================================

GLOBAL_ANTI_PATTERNS: tuple[AntiPatternRule, ...] = (
    # --- Terminal commands ---
    AntiPatternRule(
        pattern=r"(?i)\bcurl\s+-[A-Z]",
        type="command",
        description="curl command",
    ),
    AntiPatternRule(
        pattern=r"(?i)\bwget\s+https?:",
        type="command",
        description="wget command",
    ),
    AntiPatternRule(
        pattern=r"(?i)\bnpm\s+(?:install|run|start|test|build)\b",
        type="command",
        description="npm command",
    ),
    AntiPatternRule(
        pattern=r"(?i)\byarn\s+(?:add|install|run)\b",
        type="command",
        description="yarn command",
    ),
    AntiPatternRule(
        pattern=r"(?i)\bgit\s+(?:clone|pull|push|commit|checkout|merge)\b",
        type="command",
        description="git command",
    ),
    AntiPatternRule(
        pattern=r"(?i)\bdocker\s+(?:run|build|pull|push)\b",
        type="command",
        description="docker command",
    ),

    # --- JSON literals ---
    AntiPatternRule(
        pattern=r'\{"\w+":\s*["{\[\d]',
        type="json",
        description="JSON object",
    ),
    AntiPatternRule(
        pattern=r'\[\s*\{"\w+"',
        type="json",
        description="JSON array",
    ),

    # --- HTTP / API ---
    AntiPatternRule(
        pattern=r"Bearer\s+[a-zA-Z0-9._-]{20,}",
        type="token",
        description="Bearer token",
    ),
    AntiPatternRule(
        pattern=r"[A-Z][a-z]+-[A-Z][a-z]+(?:-[A-Z][a-z]+)?:\s+\S",
        type="header",
        description="HTTP header",
    ),

    # --- Source code ---
    AntiPatternRule(
        pattern=r"\bfunction\s+\w+\s*\(",
        type="code",
        description="Function definition",
    ),
    AntiPatternRule(
        pattern=r"\bconst\s+\w+\s*=\s*[\[{(]",
        type="code",
        description="Variable declaration",
    ),
    AntiPatternRule(
        pattern=r"=>\s*\{",
        type="code",
        description="Arrow function",
    ),
    AntiPatternRule(
        pattern=r"""\bimport\s+.*\s+from\s+['"]""",
        type="code",
        description="Import statement",
    ),
    AntiPatternRule(
        pattern=r"\bexport\s+(?:default\s+)?(?:function|class|const)",
        type="code",
        description="Export statement",
    ),
    AntiPatternRule(
        pattern=r"(?i)\bpip3?\s+install\s+\S",
        type="command",
        description="pip command",
    ),
    AntiPatternRule(
        pattern=r"\bdef\s+\w+\s*\([^)]*\)\s*(?:->\s*[\w\[\], .]+)?:",
        type="code",
        description="Python function definition",
    ),
)


GLOBAL_PRESET = Preset(
    id=GLOBAL_ID,
    name="Default",
    description="Generic web page: standard HTML anchors, no platform extras",
    domain_rules=(),
    matchers=PresetMatchers(),
    analysis=AnalysisSettings(
        anti_patterns=GLOBAL_ANTI_PATTERNS,
        weights=dict(DEFAULT_WEIGHTS),
        suggestions=(),
    ),
)

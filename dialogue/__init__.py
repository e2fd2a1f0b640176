"""
Dialogue Module for the lead qualification engine.

Stage derivation and per-industry question flows.
"""

from .engine import DialogueContext, DialogueFlow, DialoguePolicy, DialogueRule, Stage, stage_for
from .definitions import register_all_flows

__all__ = [
    "DialogueContext",
    "DialogueFlow",
    "DialoguePolicy",
    "DialogueRule",
    "Stage",
    "stage_for",
    "register_all_flows",
]

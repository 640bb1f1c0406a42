"""Reconciliation of snapshots into visual operations, and the Qt surfaces
that apply them."""

from chessmirror.render.ops import (
    ClearCaptureFlag,
    ClearHighlight,
    HideResult,
    MovePiece,
    PlacePiece,
    RemovePiece,
    SetAnnotationArrows,
    SetCaptureFlag,
    SetHighlight,
    SetOrientation,
    ShowResult,
    VisualOp,
)
from chessmirror.render.reconcile import RenderedView, needs_full_replace, next_view, reconcile

__all__ = [
    "ClearCaptureFlag",
    "ClearHighlight",
    "HideResult",
    "MovePiece",
    "PlacePiece",
    "RemovePiece",
    "RenderedView",
    "SetAnnotationArrows",
    "SetCaptureFlag",
    "SetHighlight",
    "SetOrientation",
    "ShowResult",
    "VisualOp",
    "needs_full_replace",
    "next_view",
    "reconcile",
]

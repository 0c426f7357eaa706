"""Conversion of "km/pole" asset labels into linear chainage."""

from __future__ import annotations

import re

POLE_SPACING_M = 60.0

_NON_LABEL = re.compile(r"[^\d/]")


def label_to_chainage(label: str | None) -> float:
    """Return the chainage in metres encoded by an OHE mast label.

    ``"962/10"`` is kilometre 962 plus ten poles of 60 m, i.e. ``962600``.
    A label without a pole part is read as whole kilometres. Anything that
    carries no digits maps to ``0``.
    """

    if not label:
        return 0.0
    clean = _NON_LABEL.sub("", str(label))
    if "/" in clean:
        km_text, _, pole_text = clean.partition("/")
        pole_text = pole_text.split("/")[0]
        km = float(km_text) if km_text else 0.0
        pole = float(pole_text) if pole_text else 0.0
        return km * 1000.0 + pole * POLE_SPACING_M
    if not clean:
        return 0.0
    return float(clean) * 1000.0


__all__ = ["POLE_SPACING_M", "label_to_chainage"]

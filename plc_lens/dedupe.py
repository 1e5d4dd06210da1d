from __future__ import annotations

import json
from typing import Iterable

from plc_lens.models import NormalizedResult


def result_signature(result: NormalizedResult) -> str:
    """
    Deterministic signature over every canonical field.

    Keys are sorted, so the signature does not depend on the order the engine
    emitted them in; values keep their JSON types, so ``5`` and ``"5"`` or a
    missing and an empty reason stay distinct.
    """
    return json.dumps(result.to_dict(), sort_keys=True, separators=(",", ":"))


def dedupe_results(results: Iterable[NormalizedResult]) -> list[NormalizedResult]:
    """
    Drop exact duplicates, keeping the first occurrence of each signature.
    Survivors keep the order in which they first appeared.
    """
    seen: set[str] = set()
    unique: list[NormalizedResult] = []
    for result in results:
        signature = result_signature(result)
        if signature in seen:
            continue
        seen.add(signature)
        unique.append(result)
    return unique

"""Positional reconciliation of a question's option list.

Existing option ids are reused by position, never by label: editing the
label at index i keeps the id at index i, and appended labels get fresh
ids. Reordering labels therefore moves ids to different labels.
"""

from __future__ import annotations

import uuid
from typing import Sequence

from app.models.form import QuestionOption


def new_option_id() -> str:
    return str(uuid.uuid4())


def reconcile(
    existing_options: Sequence[QuestionOption] | None,
    new_labels: Sequence[str] | None,
) -> list[QuestionOption]:
    """Return the option list for `new_labels`, reusing ids of `existing_options`.

    - Index i < len(existing): id of existing[i], value/order updated, active.
    - Index i >= len(existing): newly minted id.
    - Empty or None labels: empty list (existing options are dropped).
    """
    if not new_labels:
        return []
    prior = list(existing_options or [])
    taken = {o.id for o in prior}
    result: list[QuestionOption] = []
    for i, label in enumerate(new_labels):
        if i < len(prior):
            option_id = prior[i].id
        else:
            option_id = new_option_id()
            while option_id in taken:
                option_id = new_option_id()
            taken.add(option_id)
        result.append(QuestionOption(id=option_id, value=label, order=i, is_active=True))
    return result


__all__ = ["reconcile", "new_option_id"]

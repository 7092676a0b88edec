from dataclasses import dataclass
from typing import Optional

from core.errors import ValidationError


@dataclass(frozen=True)
class NumberAllocation:
    assigned_number: Optional[int]  # None => unnumbered draft
    next_counter: int

    @property
    def advances_counter(self) -> bool:
        return self.assigned_number is not None and self.next_counter == self.assigned_number + 1


def allocate_number(current_counter: int, is_draft: bool, candidate_number: Optional[int] = None) -> NumberAllocation:
    """
    Decide the number for a new invoice / credit note and the counter value
    to store once the document is persisted.

    - draft: no number, counter untouched
    - final: candidate (pre-filled from the counter, user-editable);
      the counter moves to candidate + 1 only when candidate >= counter.
      A lower candidate backfills an old number and leaves the counter alone.

    Uniqueness of the number itself is enforced by the store
    (see services.documents), not here.
    """
    if current_counter is None or current_counter < 1:
        current_counter = 1

    if is_draft:
        return NumberAllocation(assigned_number=None, next_counter=current_counter)

    number = current_counter if candidate_number is None else candidate_number
    if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
        raise ValidationError(
            "Please enter a valid document number",
            details={"candidate_number": candidate_number},
        )

    if number >= current_counter:
        return NumberAllocation(assigned_number=number, next_counter=number + 1)
    return NumberAllocation(assigned_number=number, next_counter=current_counter)

"""
expensebot/models/draft.py

Purpose: In-progress expense dialog of a single user

- At most one draft per user, stored under `draft:{user_id}`
- DraftData has one explicit field per dialog step
- advance() only follows edges of the transition graph
"""

from typing import Optional
from pydantic import BaseModel, Field

from expensebot.flow.states import DraftState, INITIAL_STATES, is_valid_transition


class DraftData(BaseModel):
    """
    Values collected so far. Serialized as a flat string mapping;
    unset fields are left out.
    """

    iban: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[str] = None
    description: Optional[str] = None
    file: Optional[str] = None

    class Config:
        validate_assignment = True


class Draft(BaseModel):
    user_id: str
    state: DraftState
    data: DraftData = Field(default_factory=DraftData)

    class Config:
        validate_assignment = True

    @classmethod
    def start(cls, user_id: str, state: DraftState) -> "Draft":
        if state not in INITIAL_STATES:
            raise ValueError(f"A draft cannot start in state {state.value}")
        return cls(user_id=user_id, state=state)

    def advance(self, new_state: DraftState) -> "Draft":
        """Moves to `new_state`, raising ValueError for an edge not in the graph."""
        if not is_valid_transition(self.state, new_state):
            raise ValueError(f"Invalid draft transition: {self.state.value} -> {new_state.value}")
        self.state = new_state
        return self

    def is_complete(self) -> bool:
        data = self.data
        return all(
            value is not None
            for value in (data.iban, data.name, data.amount, data.description, data.file)
        )

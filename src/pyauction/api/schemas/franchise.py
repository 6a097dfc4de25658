from __future__ import annotations

from typing import List

from pydantic import BaseModel

from .athlete import AthleteResponse


class QualificationResponse(BaseModel):
    status: str
    has_required_role: bool
    meets_size: bool


class FranchiseResponse(BaseModel):
    franchise_id: str
    name: str
    color: str
    initial_budget: int
    budget: int
    spent: int
    squad_size: int
    roster: List[AthleteResponse]
    qualification: QualificationResponse

from __future__ import annotations

from pydantic import BaseModel, Field

from models import HypeLevel, HypeState, Moment, OnePlayState, Outcome, PlayCategory


class HypeResponse(BaseModel):
    game_id: str | None = None
    value: float = Field(ge=0, le=100)
    level: HypeLevel
    is_live: bool
    tag: str
    subtext: str
    narrative: str = ""
    bump: bool = False

    @classmethod
    def from_state(cls, game_id: str | None, state: HypeState) -> HypeResponse:
        return cls(
            game_id=game_id,
            value=state.value,
            level=state.level,
            is_live=state.is_live,
            tag=state.tag,
            subtext=state.subtext,
            narrative=state.narrative,
            bump=state.bump,
        )


class MomentResponse(BaseModel):
    id: str
    timestamp: float
    level: HypeLevel
    headline: str
    subtext: str
    reveal_detail: str
    revealed: bool
    at_bat_sequence: int | None = None

    @classmethod
    def from_moment(cls, moment: Moment) -> MomentResponse:
        return cls(**moment.to_record())


class MomentsResponse(BaseModel):
    game_id: str | None = None
    moments: list[MomentResponse]


class OnePlayStateResponse(BaseModel):
    date: str
    game_id: str
    options: list[PlayCategory]
    choice: PlayCategory
    baseline_sequence: int
    decided: bool
    actual_category: PlayCategory | None = None
    outcome: Outcome | None = None
    skipped_count: int = 0
    last_no_contest_category: PlayCategory | None = None


class OptionResponse(BaseModel):
    category: PlayCategory
    label: str


class OnePlayResponse(BaseModel):
    game_id: str | None = None
    state: OnePlayStateResponse | None = None
    options: list[OptionResponse] = Field(default_factory=list)
    badge: str | None = None

    @staticmethod
    def state_model(state: OnePlayState | None) -> OnePlayStateResponse | None:
        return OnePlayStateResponse(**state.to_record()) if state is not None else None


class CommitRequest(BaseModel):
    choice: str


class ForceOutcomeRequest(BaseModel):
    category: str


class WatchResponse(BaseModel):
    game_id: str | None
    polling: bool
    interval_seconds: float

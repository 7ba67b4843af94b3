from typing import Tuple

from pydantic import BaseModel, Field, model_validator


class PlayerModel(BaseModel):
    x: int
    y: int
    alive: bool = True  # only the remote simulation ever knocks a player out

    class Config:
        frozen = True


class ScenarioRequestModel(BaseModel):
    players: Tuple[PlayerModel, ...]
    start_direction: int = Field(ge=0, le=7)
    start_index: int  # 0-based

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_start_index(self):
        if self.players and not 0 <= self.start_index < len(self.players):
            raise ValueError(
                f"start_index {self.start_index} is out of range for {len(self.players)} players"
            )
        return self


class ScenarioResultModel(BaseModel):
    throws: int = Field(ge=0)
    last_player: int  # 0-based index into the request's players

    class Config:
        frozen = True

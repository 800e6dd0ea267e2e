from typing import Dict, Optional

from pydantic_settings import BaseSettings


class MatchSettings(BaseSettings):
    MAP_NAME: str = "S"
    PLAYER_NAME: str = "YOU"
    OPPONENT_NAME: str = "ENEMY"
    STARTING_HEALTH: int = 10
    STARTING_MANA: int = 0
    MANA_PER_TURN: int = 2
    MAX_MANA: int = 10
    REFILL_MODE: str = "increment"  # "increment" or "reset"
    OPENING_HAND_SIZE: int = 4
    MAX_HAND_SIZE: int = 6
    DECK_SIZE: int = 20
    # Front line movement
    STRENGTH_PER_STEP: int = 4
    MAX_FRONT_LINE_STEP: int = 2
    LANE_REACH: int = 1
    TERRAIN_WEIGHTS: Dict[str, float] = {"D": 1.0, "L": 1.0}
    TURN_LIMIT: int = 200
    SEED: Optional[int] = None
    VERBOSE: bool = False

    class Config:
        env_file = ".env"
        env_prefix = "FRONTLINE_"

settings = MatchSettings()

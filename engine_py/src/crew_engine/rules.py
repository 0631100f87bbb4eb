"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_PASSES, DEFAULT_TARGET


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    default_target: int = Field(
        default=DEFAULT_TARGET,
        ge=1,
        description="Mission point budget when the deal carries no target"
    )
    min_players: int = Field(
        default=3,
        ge=3,
        le=5,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=5,
        ge=3,
        le=5,
        description="Maximum number of players allowed"
    )
    passes_per_player: int = Field(
        default=DEFAULT_PASSES,
        ge=0,
        description="Draft passes each player may spend"
    )
    validate_missions: bool = Field(
        default=True,
        description="Whether mission statuses are evaluated after each trick"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below minimum."""
        min_players = info.data.get('min_players', 3)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
